"""/v1/session - connect, inspect, and disconnect the wallet session"""

from fastapi import APIRouter, Depends, Request

from rusd_gateway.api.dependencies import get_orchestrator, get_request_id
from rusd_gateway.api.errors import raise_for_report
from rusd_gateway.api.v1.schemas import SessionResponse, session_view
from rusd_gateway.services.orchestrator import Orchestrator

router = APIRouter()


@router.get("/session", response_model=SessionResponse)
def get_session(orchestrator: Orchestrator = Depends(get_orchestrator)):
    """Current state, formatted balances, exchange rate, and the approval gate"""
    return session_view(orchestrator.session)


@router.post("/session", response_model=SessionResponse)
async def connect(request: Request, orchestrator: Orchestrator = Depends(get_orchestrator)):
    """
    Connect the signer and load balances.

    Also starts the periodic balance refresh for the connected account.
    """
    report = await orchestrator.connect()
    raise_for_report(report, get_request_id(request))
    return session_view(orchestrator.session)


@router.delete("/session", response_model=SessionResponse)
async def disconnect(orchestrator: Orchestrator = Depends(get_orchestrator)):
    await orchestrator.disconnect()
    return session_view(orchestrator.session)
