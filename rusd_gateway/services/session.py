"""Session state owned by the orchestrator"""

from dataclasses import dataclass, field
from typing import Optional
from rusd_gateway.domain.amounts import parse_amount
from rusd_gateway.domain.approval import needs_approval
from rusd_gateway.domain.exceptions import InvalidAmount
from rusd_gateway.domain.models import BalanceSnapshot, SessionState

DEFAULT_DECIMALS = 7


@dataclass
class Session:
    """
    One connected account, its latest balances, and the action inputs.

    `generation` changes on every connect/disconnect so a refresh that
    started under an earlier connection never publishes into this one.
    """

    fallback_decimals: int = DEFAULT_DECIMALS
    account: str = ""
    snapshot: Optional[BalanceSnapshot] = None
    decimals: int = field(init=False)
    busy: bool = False
    status: str = ""
    error: str = ""
    mint_input: str = ""
    burn_input: str = ""
    generation: int = 0

    def __post_init__(self) -> None:
        self.decimals = self.fallback_decimals

    @property
    def state(self) -> SessionState:
        if not self.account:
            return SessionState.DISCONNECTED
        return SessionState.BUSY if self.busy else SessionState.CONNECTED

    @property
    def allowance(self) -> Optional[int]:
        return self.snapshot.collateral_allowance if self.snapshot else None

    @property
    def needs_approval(self) -> bool:
        try:
            amount = parse_amount(self.mint_input, self.decimals)
        except InvalidAmount:
            amount = 0
        return needs_approval(amount, self.allowance)

    def attach(self, account: str) -> None:
        self.generation += 1
        self.account = account
        self.snapshot = None

    def detach(self) -> None:
        self.generation += 1
        self.account = ""
        self.status = ""
        self.snapshot = None

    def publish(self, snapshot: BalanceSnapshot) -> None:
        """Replace the snapshot whole; precision follows the latest declared decimals"""
        self.decimals = snapshot.decimals
        self.snapshot = snapshot
