"""Session orchestration: connect, approve, mint, burn"""

import logging
from typing import Any, Awaitable, Callable, Optional
from rusd_gateway.config import Settings, settings as default_settings
from rusd_gateway.domain.amounts import ensure_i128, parse_amount
from rusd_gateway.domain.approval import expiration_ledger
from rusd_gateway.domain.exceptions import (
    ActionInProgress,
    DomainException,
    InvalidAmount,
    NotConnected,
    TransactionTimeout,
    UnknownLedgerError,
)
from rusd_gateway.domain.models import (
    ActionReport,
    AddressArg,
    ContractCall,
    Failed,
    I128Arg,
    Success,
    TimedOut,
    U32Arg,
)
from rusd_gateway.infrastructure.clients.ledger import LedgerClient
from rusd_gateway.infrastructure.clients.wallet import WalletSigner, signing_callback
from rusd_gateway.infrastructure.observability.metrics import record_action
from rusd_gateway.services.balances import BalanceAggregator
from rusd_gateway.services.session import Session

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    State machine over one session: Disconnected → Connected ⇄ Busy.

    Every state-changing action sets `session.busy` before its first network
    call and clears it on every exit path; a second action while busy is
    rejected. Approval never chains into a mint.
    """

    def __init__(
        self,
        session: Session,
        ledger: LedgerClient,
        signer: WalletSigner,
        aggregator: BalanceAggregator | None = None,
        config: Settings | None = None,
    ):
        self.session = session
        self.ledger = ledger
        self.signer = signer
        self.settings = config or default_settings
        self.aggregator = aggregator or BalanceAggregator(
            session,
            ledger,
            usdc_contract_id=self.settings.usdc_contract_id,
            rusd_contract_id=self.settings.rusd_contract_id,
            network=self.settings.network,
            refresh_interval=self.settings.refresh_interval_seconds,
        )

    # --- connection ------------------------------------------------------

    async def connect(self) -> ActionReport:
        """Connect the signer, load balances, and start periodic refresh"""
        if self.session.account:
            return ActionReport("connect", True, "Wallet connected.")

        self.session.error = ""
        self.session.status = "Connecting wallet..."
        try:
            self.settings.require_complete()
            account = await self.signer.connect(self.settings.network)
        except DomainException as e:
            return self._connect_failed(e)
        except Exception as e:
            logger.exception("Wallet connection failed")
            return self._connect_failed(UnknownLedgerError(str(e) or "Failed to connect wallet"))

        self.session.attach(account)
        self.session.status = "Wallet connected."
        self.aggregator.start()
        await self._refresh_keeping_error("")
        return ActionReport("connect", True, "Wallet connected.")

    def _connect_failed(self, error: DomainException) -> ActionReport:
        self.session.status = ""
        self.session.error = error.message or "Failed to connect wallet"
        return ActionReport("connect", False, self.session.error, error)

    async def disconnect(self) -> None:
        """Stop periodic refresh and drop the account and its snapshot"""
        await self.aggregator.stop()
        self.session.detach()

    async def close(self) -> None:
        await self.aggregator.stop()

    async def refresh(self) -> ActionReport:
        try:
            await self.aggregator.refresh()
        except DomainException as e:
            return ActionReport("refresh", False, e.message, e)
        return ActionReport("refresh", True, "Balances refreshed.")

    # --- actions ---------------------------------------------------------

    async def approve(self) -> ActionReport:
        """Grant the issuer contract an allowance covering the typed mint amount"""
        return await self._run_action(
            "approve",
            self.session.mint_input,
            empty_message="Enter an amount to approve.",
            pending="Submitting approval...",
            done="Approval confirmed.",
            failure="Approval failed.",
            perform=self._approve,
        )

    async def mint(self) -> ActionReport:
        return await self._run_action(
            "mint",
            self.session.mint_input,
            empty_message="Enter a mint amount.",
            pending="Minting rUSD...",
            done="Mint confirmed.",
            failure="Mint failed.",
            perform=self._mint,
            clear_input=self._clear_mint_input,
        )

    async def burn(self) -> ActionReport:
        return await self._run_action(
            "burn",
            self.session.burn_input,
            empty_message="Enter a burn amount.",
            pending="Burning rUSD...",
            done="Burn confirmed.",
            failure="Burn failed.",
            perform=self._burn,
            clear_input=self._clear_burn_input,
        )

    async def submit_mint_intent(self) -> ActionReport:
        """Approve when the allowance does not cover the typed amount, otherwise mint"""
        if self.session.needs_approval:
            return await self.approve()
        return await self.mint()

    async def _approve(self, amount: int) -> Any:
        account = self.session.account
        latest = await self.ledger.get_latest_ledger()
        call = ContractCall(
            contract_id=self.settings.usdc_contract_id,
            method="approve",
            args=(
                AddressArg(account),
                AddressArg(self.settings.rusd_contract_id),
                I128Arg(amount),
                U32Arg(expiration_ledger(latest, self.settings.approval_horizon_ledgers)),
            ),
            source=account,
            network=self.settings.network,
        )
        return await self.ledger.submit_contract_call(call, signing_callback(self.signer, account))

    async def _mint(self, amount: int) -> Any:
        return await self._submit_issuer_call("mint", amount)

    async def _burn(self, amount: int) -> Any:
        return await self._submit_issuer_call("burn", amount)

    async def _submit_issuer_call(self, method: str, amount: int) -> Any:
        account = self.session.account
        call = ContractCall(
            contract_id=self.settings.rusd_contract_id,
            method=method,
            args=(AddressArg(account), I128Arg(amount)),
            source=account,
            network=self.settings.network,
        )
        return await self.ledger.submit_contract_call(call, signing_callback(self.signer, account))

    def _clear_mint_input(self) -> None:
        self.session.mint_input = ""

    def _clear_burn_input(self) -> None:
        self.session.burn_input = ""

    async def _run_action(
        self,
        action: str,
        amount_text: str,
        *,
        empty_message: str,
        pending: str,
        done: str,
        failure: str,
        perform: Callable[[int], Awaitable[Any]],
        clear_input: Optional[Callable[[], None]] = None,
    ) -> ActionReport:
        """
        Run one state-changing action end to end.

        Flow:
        1. Reject while busy or disconnected
        2. Validate configuration and amount locally (no network on failure)
        3. Mark busy, perform the ledger call, map the outcome to a message
        4. Refresh balances regardless of outcome, then clear busy
        """
        if self.session.busy:
            record_action(action, False, rejected=True)
            error: DomainException = ActionInProgress()
            return ActionReport(action, False, error.message, error)
        if not self.session.account:
            record_action(action, False, rejected=True)
            error = NotConnected()
            return ActionReport(action, False, error.message, error)

        try:
            self.settings.require_complete()
            amount = ensure_i128(parse_amount(amount_text, self.session.decimals))
            if amount <= 0:
                raise InvalidAmount(empty_message)
        except DomainException as e:
            record_action(action, False, rejected=True)
            self.session.error = e.message
            return ActionReport(action, False, e.message, e)

        self.session.busy = True
        try:
            self.session.error = ""
            self.session.status = pending
            try:
                result = await perform(amount)
            except DomainException as e:
                report = self._action_failed(action, failure, e)
            except Exception as e:
                logger.exception("Unexpected error during %s", action)
                report = self._action_failed(action, failure, UnknownLedgerError(str(e) or failure))
            else:
                self.session.status = done
                if clear_input is not None:
                    clear_input()
                report = ActionReport(action, True, done, outcome=Success(result))

            record_action(action, report.succeeded)
            await self._refresh_keeping_error(self.session.error)
            return report
        finally:
            self.session.busy = False

    def _action_failed(self, action: str, failure: str, error: DomainException) -> ActionReport:
        message = error.message or failure
        self.session.status = ""
        self.session.error = message
        logger.warning("Action failed", extra={"action": action, "error": message})
        outcome = TimedOut(self.ledger.poll_attempts) if isinstance(error, TransactionTimeout) else Failed(message)
        return ActionReport(action, False, message, error, outcome)

    async def _refresh_keeping_error(self, action_error: str) -> None:
        # A failed refresh never replaces the message of the action that triggered it
        try:
            await self.aggregator.refresh()
        except DomainException:
            if action_error:
                self.session.error = action_error
