"""Soroban contract client: simulated reads, signed writes, and finality polling"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Tuple
from rusd_gateway.config import settings
from rusd_gateway.domain.exceptions import (
    MissingTransactionHash,
    SimulationFailed,
    SubmissionFailed,
    TransactionTimeout,
)
from rusd_gateway.domain.models import ContractCall, Failed, ScValue, Success, TimedOut, TransactionOutcome
from rusd_gateway.infrastructure.observability.logging import log_transaction
from rusd_gateway.infrastructure.observability.metrics import (
    finality_poll_histogram,
    rpc_call_counter,
    transaction_outcome_counter,
)
from rusd_gateway.infrastructure.soroban.envelope import EnvelopeCodec
from rusd_gateway.infrastructure.soroban.gateway import SorobanGateway

# (transaction_wire, network_passphrase) -> signed_transaction_wire
SignCallback = Callable[[str, str], Awaitable[str]]
Sleep = Callable[[float], Awaitable[Any]]


class LedgerClient:
    """Client for invoking token contract methods through the Soroban RPC endpoint"""

    def __init__(
        self,
        gateway: SorobanGateway | None = None,
        codec: EnvelopeCodec | None = None,
        *,
        poll_attempts: int | None = None,
        poll_interval: float | None = None,
        read_timeout: int | None = None,
        write_timeout: int | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.gateway = gateway or SorobanGateway()
        self.codec = codec or EnvelopeCodec()
        self.poll_attempts = poll_attempts if poll_attempts is not None else settings.poll_attempts
        self.poll_interval = poll_interval if poll_interval is not None else settings.poll_interval_seconds
        self.read_timeout = read_timeout or settings.read_timeout_ledger_seconds
        self.write_timeout = write_timeout or settings.write_timeout_ledger_seconds
        self._sleep = sleep

    async def read_contract_value(self, call: ContractCall) -> ScValue:
        """
        Simulate a read-only contract call and decode its return value.

        Never signs and never broadcasts.

        Raises:
            SimulationFailed: When the endpoint reports a simulation error
        """
        account = await self._rpc("get_account", self.gateway.load_account(call.source))
        envelope = self.codec.build(account, call, self.read_timeout)

        simulation = await self._rpc("simulate", self.gateway.simulate(envelope))
        if simulation.error:
            raise SimulationFailed(simulation.error)

        return self.codec.decode(simulation.retval)

    async def submit_contract_call(self, call: ContractCall, sign: SignCallback) -> Any:
        """
        Build, prepare, sign, submit, and wait for a state-changing contract call.

        Flow:
        1. Build with a long validity window to allow for signing latency
        2. Prepare (resource fees + footprint) on the RPC endpoint
        3. Hand the prepared wire form to the signing callback
        4. Submit the signed envelope
        5. Poll the transaction status until terminal or the attempt cap

        Raises:
            SubmissionFailed: Submission error status, or FAILED on-ledger
            MissingTransactionHash: Submission response without a hash
            TransactionTimeout: No terminal status within the poll budget
        """
        start_time = time.time()

        account = await self._rpc("get_account", self.gateway.load_account(call.source))
        envelope = self.codec.build(account, call, self.write_timeout)
        prepared = await self._rpc("prepare", self.gateway.prepare(envelope))

        passphrase = self.codec.passphrase(call.network)
        signed_wire = await sign(self.codec.to_wire(prepared), passphrase)
        signed = self.codec.from_wire(signed_wire, call.network)

        sent = await self._rpc("send", self.gateway.send(signed))
        if sent.status == "ERROR":
            transaction_outcome_counter.labels(method=call.method, outcome="rejected").inc()
            raise SubmissionFailed(sent.error or "Transaction failed")
        if not sent.hash:
            raise MissingTransactionHash()

        outcome, attempts = await self._poll(sent.hash)

        duration_ms = (time.time() - start_time) * 1000
        label = _outcome_label(outcome)
        transaction_outcome_counter.labels(method=call.method, outcome=label).inc()
        log_transaction(call.method, call.contract_id, sent.hash, label, attempts, duration_ms)

        if isinstance(outcome, Success):
            return outcome.result
        if isinstance(outcome, Failed):
            raise SubmissionFailed(outcome.reason)
        raise TransactionTimeout()

    async def await_outcome(self, tx_hash: str) -> TransactionOutcome:
        """Poll a submitted transaction until SUCCESS / FAILED or the attempt cap"""
        outcome, _ = await self._poll(tx_hash)
        return outcome

    async def get_latest_ledger(self) -> int:
        """Most recently closed ledger sequence (0 when the endpoint omits it)"""
        return await self._rpc("get_latest_ledger", self.gateway.get_latest_ledger()) or 0

    async def _poll(self, tx_hash: str) -> Tuple[TransactionOutcome, int]:
        # Fixed interval, fixed cap: a wait-for-result loop, not a retry policy
        for attempt in range(1, self.poll_attempts + 1):
            await self._sleep(self.poll_interval)
            result = await self._rpc("get_transaction", self.gateway.get_transaction(tx_hash))

            if result.status == "SUCCESS":
                finality_poll_histogram.observe(attempt)
                return Success(result), attempt
            if result.status == "FAILED":
                finality_poll_histogram.observe(attempt)
                return Failed(result.result_xdr or "Transaction failed"), attempt

        return TimedOut(self.poll_attempts), self.poll_attempts

    async def _rpc(self, operation: str, pending: Awaitable[Any]) -> Any:
        try:
            result = await pending
        except Exception:
            rpc_call_counter.labels(operation=operation, outcome="error").inc()
            raise
        rpc_call_counter.labels(operation=operation, outcome="ok").inc()
        return result


def _outcome_label(outcome: TransactionOutcome) -> str:
    if isinstance(outcome, Success):
        return "success"
    if isinstance(outcome, Failed):
        return "failed"
    return "timed_out"
