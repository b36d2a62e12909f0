"""Soroban JSON-RPC operations used by the ledger client"""

from dataclasses import dataclass
from typing import Any, Optional
from stellar_sdk import SorobanServerAsync
from stellar_sdk.account import Account
from stellar_sdk.exceptions import PrepareTransactionException
from stellar_sdk.transaction_envelope import TransactionEnvelope

from rusd_gateway.config import settings
from rusd_gateway.domain.exceptions import SimulationFailed
from rusd_gateway.infrastructure.clients.http import HttpxAsyncClient


@dataclass
class SimulationResult:
    """Dry-run result: an error message, or the base64 return value (if any)"""

    error: Optional[str] = None
    retval: Optional[str] = None


@dataclass
class SendResult:
    status: str
    hash: Optional[str] = None
    error: Optional[str] = None


@dataclass
class TransactionStatus:
    status: str
    ledger: Optional[int] = None
    result_xdr: Optional[str] = None
    raw: Any = None


def _status_name(status: Any) -> str:
    return str(getattr(status, "value", status))


class SorobanGateway:
    """Client for the Soroban RPC endpoint (account, simulate, prepare, send, status, latest ledger)"""

    def __init__(
        self,
        rpc_url: str | None = None,
        timeout: float | None = None,
        client: HttpxAsyncClient | None = None,
    ):
        self.rpc_url = rpc_url or settings.rpc_url
        self._server = SorobanServerAsync(self.rpc_url, client=client or HttpxAsyncClient(timeout=timeout))

    async def load_account(self, account_id: str) -> Account:
        return await self._server.load_account(account_id)

    async def simulate(self, envelope: TransactionEnvelope) -> SimulationResult:
        response = await self._server.simulate_transaction(envelope)
        if response.error:
            return SimulationResult(error=response.error)
        if not response.results:
            return SimulationResult()
        return SimulationResult(retval=response.results[0].xdr)

    async def prepare(self, envelope: TransactionEnvelope) -> TransactionEnvelope:
        """
        Attach resource fees and footprint from a simulation.

        Raises:
            SimulationFailed: When the preparing simulation reports an error
        """
        try:
            return await self._server.prepare_transaction(envelope)
        except PrepareTransactionException as e:
            message = getattr(e.simulate_transaction_response, "error", None) or str(e)
            raise SimulationFailed(message) from e

    async def send(self, envelope: TransactionEnvelope) -> SendResult:
        response = await self._server.send_transaction(envelope)
        return SendResult(
            status=_status_name(response.status),
            hash=response.hash or None,
            error=response.error_result_xdr,
        )

    async def get_transaction(self, tx_hash: str) -> TransactionStatus:
        response = await self._server.get_transaction(tx_hash)
        return TransactionStatus(
            status=_status_name(response.status),
            ledger=response.ledger,
            result_xdr=response.result_xdr,
            raw=response,
        )

    async def get_latest_ledger(self) -> int:
        response = await self._server.get_latest_ledger()
        return response.sequence or 0

    async def close(self) -> None:
        await self._server.close()
