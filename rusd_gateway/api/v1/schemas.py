"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from typing import Optional

from rusd_gateway.domain.amounts import exchange_rate, format_amount, shorten
from rusd_gateway.services.session import Session


class AmountRequest(BaseModel):
    """Request body for approve / mint / burn"""

    amount: str = Field(..., max_length=80, description="Decimal amount as typed, e.g. \"12.5\"")


class BalancesSchema(BaseModel):
    """Latest snapshot, formatted at the token's declared precision (null = unknown)"""

    rusd_balance: Optional[str] = None
    usdc_balance: Optional[str] = None
    usdc_allowance: Optional[str] = None
    underlying_usdc: Optional[str] = None
    total_supply: Optional[str] = None
    exchange_rate: str
    taken_at: str


class SessionResponse(BaseModel):
    """Response for GET /v1/session"""

    state: str
    account: str
    account_short: str
    decimals: int
    status: str
    error: str
    needs_approval: bool
    mint_input: str
    burn_input: str
    balances: Optional[BalancesSchema] = None


class ActionResponse(BaseModel):
    """Response for approve / mint / burn"""

    action: str
    succeeded: bool
    message: str
    session: SessionResponse


def _formatted(value: Optional[int], decimals: int) -> Optional[str]:
    return None if value is None else format_amount(value, decimals)


def session_view(session: Session) -> SessionResponse:
    balances = None
    snapshot = session.snapshot
    if snapshot is not None:
        decimals = session.decimals
        balances = BalancesSchema(
            rusd_balance=_formatted(snapshot.issued_balance, decimals),
            usdc_balance=_formatted(snapshot.collateral_balance, decimals),
            usdc_allowance=_formatted(snapshot.collateral_allowance, decimals),
            underlying_usdc=_formatted(snapshot.reserve_balance, decimals),
            total_supply=_formatted(snapshot.total_supply, decimals),
            exchange_rate=exchange_rate(snapshot.reserve_balance, snapshot.total_supply),
            taken_at=snapshot.taken_at.isoformat(),
        )

    return SessionResponse(
        state=session.state.value,
        account=session.account,
        account_short=shorten(session.account),
        decimals=session.decimals,
        status=session.status,
        error=session.error,
        needs_approval=session.needs_approval,
        mint_input=session.mint_input,
        burn_input=session.burn_input,
        balances=balances,
    )
