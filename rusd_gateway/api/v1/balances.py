"""POST /v1/balances/refresh - re-read balances on demand"""

from fastapi import APIRouter, Depends, Request

from rusd_gateway.api.dependencies import get_orchestrator, get_request_id
from rusd_gateway.api.errors import raise_for_report
from rusd_gateway.api.v1.schemas import SessionResponse, session_view
from rusd_gateway.services.orchestrator import Orchestrator

router = APIRouter()


@router.post("/balances/refresh", response_model=SessionResponse)
async def refresh_balances(request: Request, orchestrator: Orchestrator = Depends(get_orchestrator)):
    report = await orchestrator.refresh()
    raise_for_report(report, get_request_id(request))
    return session_view(orchestrator.session)
