"""POST /v1/approve, /v1/mint, /v1/mint/intent, /v1/burn - state-changing actions"""

from fastapi import APIRouter, Depends, Request

from rusd_gateway.api.dependencies import get_orchestrator, get_request_id
from rusd_gateway.api.errors import raise_for_report
from rusd_gateway.api.v1.schemas import ActionResponse, AmountRequest, session_view
from rusd_gateway.domain.models import ActionReport
from rusd_gateway.services.orchestrator import Orchestrator

router = APIRouter()


def _respond(report: ActionReport, request: Request, orchestrator: Orchestrator) -> ActionResponse:
    raise_for_report(report, get_request_id(request))
    return ActionResponse(
        action=report.action,
        succeeded=report.succeeded,
        message=report.message,
        session=session_view(orchestrator.session),
    )


def _set_mint_input(orchestrator: Orchestrator, amount: str) -> None:
    # Inputs belong to the in-flight action while busy
    if not orchestrator.session.busy:
        orchestrator.session.mint_input = amount


@router.post("/approve", response_model=ActionResponse)
async def approve(
    body: AmountRequest,
    request: Request,
    orchestrator: Orchestrator = Depends(get_orchestrator),
):
    """Approve a USDC allowance for the rUSD contract covering `amount`"""
    _set_mint_input(orchestrator, body.amount)
    return _respond(await orchestrator.approve(), request, orchestrator)


@router.post("/mint", response_model=ActionResponse)
async def mint(
    body: AmountRequest,
    request: Request,
    orchestrator: Orchestrator = Depends(get_orchestrator),
):
    _set_mint_input(orchestrator, body.amount)
    return _respond(await orchestrator.mint(), request, orchestrator)


@router.post("/mint/intent", response_model=ActionResponse)
async def mint_intent(
    body: AmountRequest,
    request: Request,
    orchestrator: Orchestrator = Depends(get_orchestrator),
):
    """
    Single entry point for minting.

    Approves first when the current allowance does not cover `amount`; the
    mint itself has to be requested again once the approval is confirmed.
    """
    _set_mint_input(orchestrator, body.amount)
    return _respond(await orchestrator.submit_mint_intent(), request, orchestrator)


@router.post("/burn", response_model=ActionResponse)
async def burn(
    body: AmountRequest,
    request: Request,
    orchestrator: Orchestrator = Depends(get_orchestrator),
):
    if not orchestrator.session.busy:
        orchestrator.session.burn_input = body.amount
    return _respond(await orchestrator.burn(), request, orchestrator)
