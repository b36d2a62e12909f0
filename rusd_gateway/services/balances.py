"""Balance aggregation: six concurrent reads published as one snapshot"""

import asyncio
import logging
from typing import List, Optional
from rusd_gateway.domain.exceptions import DomainException, NotConnected, UnknownLedgerError
from rusd_gateway.domain.models import (
    AddressArg,
    AddressValue,
    BalanceSnapshot,
    ContractArg,
    ContractCall,
    IntegerValue,
    NetworkKey,
    ScValue,
)
from rusd_gateway.infrastructure.clients.ledger import LedgerClient
from rusd_gateway.infrastructure.observability.logging import log_refresh_failure
from rusd_gateway.infrastructure.observability.metrics import balance_refresh_counter
from rusd_gateway.services.session import Session

logger = logging.getLogger(__name__)

MAX_DECIMALS = 255


class BalanceAggregator:
    """Reads balances, allowance, reserve, supply, and decimals for the session account"""

    def __init__(
        self,
        session: Session,
        ledger: LedgerClient,
        usdc_contract_id: str,
        rusd_contract_id: str,
        network: NetworkKey,
        refresh_interval: float = 12.0,
    ):
        self.session = session
        self.ledger = ledger
        self.usdc_contract_id = usdc_contract_id
        self.rusd_contract_id = rusd_contract_id
        self.network = network
        self.refresh_interval = refresh_interval
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None

    def _calls(self, account: str) -> List[ContractCall]:
        def call(contract_id: str, method: str, *args: ContractArg) -> ContractCall:
            return ContractCall(contract_id, method, tuple(args), account, self.network)

        owner = AddressArg(account)
        issuer = AddressArg(self.rusd_contract_id)
        return [
            call(self.rusd_contract_id, "balance", owner),
            call(self.usdc_contract_id, "balance", owner),
            call(self.usdc_contract_id, "allowance", owner, issuer),
            call(self.usdc_contract_id, "balance", issuer),
            call(self.rusd_contract_id, "total_supply"),
            call(self.rusd_contract_id, "decimals"),
        ]

    async def refresh(self) -> BalanceSnapshot:
        """
        Read all six values concurrently and publish them as one snapshot.

        All-or-nothing: a single failed read aborts the cycle, the previous
        snapshot stays in place, and the error is recorded on the session.

        Raises:
            NotConnected: No account attached
            DomainException: The failure that aborted the cycle
        """
        async with self._lock:
            account = self.session.account
            generation = self.session.generation
            if not account:
                raise NotConnected()

            try:
                values = await asyncio.gather(
                    *(self.ledger.read_contract_value(call) for call in self._calls(account))
                )
                snapshot = self._assemble(values)
            except DomainException as e:
                self._record_failure(account, e)
                raise
            except Exception as e:
                error = UnknownLedgerError(str(e) or "Failed to refresh balances")
                self._record_failure(account, error)
                raise error from e

            if self.session.generation != generation:
                balance_refresh_counter.labels(outcome="discarded").inc()
                return snapshot

            self.session.publish(snapshot)
            balance_refresh_counter.labels(outcome="published").inc()
            return snapshot

    def _assemble(self, values: List[ScValue]) -> BalanceSnapshot:
        issued, collateral, allowance, reserve, supply, declared = values

        decimals = _integer(declared)
        if decimals is None:
            decimals = self.session.decimals
        elif not 0 <= decimals <= MAX_DECIMALS:
            raise UnknownLedgerError(f"Contract declared invalid decimals: {decimals}")

        return BalanceSnapshot(
            issued_balance=_integer(issued),
            collateral_balance=_integer(collateral),
            collateral_allowance=_integer(allowance),
            reserve_balance=_integer(reserve),
            total_supply=_integer(supply),
            decimals=decimals,
        )

    def _record_failure(self, account: str, error: DomainException) -> None:
        self.session.error = error.message or "Failed to refresh balances"
        balance_refresh_counter.labels(outcome="failed").inc()
        log_refresh_failure(account, error.message)

    # --- periodic refresh ------------------------------------------------

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, interval: float | None = None) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._run(interval or self.refresh_interval))

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.refresh()
            except DomainException as e:
                # already recorded on the session; the next tick tries again
                logger.debug("Periodic refresh skipped: %s", e)


def _integer(value: ScValue) -> Optional[int]:
    if isinstance(value, IntegerValue):
        return value.value
    if isinstance(value, AddressValue):
        raise UnknownLedgerError("Expected an integer, contract returned an address")
    return None
