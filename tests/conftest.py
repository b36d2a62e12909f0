"""Pytest fixtures for testing"""

import asyncio
import pytest
from typing import Any, Dict
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from rusd_gateway.api.main import create_app
from rusd_gateway.config import Settings
from rusd_gateway.domain.exceptions import ConnectionCanceled, SigningUnsupported
from rusd_gateway.domain.models import AddressArg, ContractCall, IntegerValue, NetworkKey, NullValue
from rusd_gateway.infrastructure.clients.ledger import LedgerClient
from rusd_gateway.services.balances import BalanceAggregator
from rusd_gateway.services.orchestrator import Orchestrator
from rusd_gateway.services.session import Session

ACCOUNT = "GALICEACCOUNT0000000000000000000000000000000000000000000"
USDC = "CUSDCCONTRACT000000000000000000000000000000000000000000"
RUSD = "CRUSDCONTRACT000000000000000000000000000000000000000000"


class FakeCodec:
    """Envelope codec double: envelopes are plain dicts, wire forms are strings"""

    def build(self, account: Any, call: ContractCall, timeout: int) -> Dict[str, Any]:
        return {"account": account, "call": call, "timeout": timeout}

    def passphrase(self, network: NetworkKey) -> str:
        return f"passphrase:{network.value}"

    def to_wire(self, envelope: Dict[str, Any]) -> str:
        return f"wire:{envelope['call'].method}"

    def from_wire(self, wire: str, network: NetworkKey) -> Dict[str, Any]:
        return {"signed": wire, "network": network}

    def decode(self, retval: str | None):
        return NullValue() if retval is None else IntegerValue(int(retval))


class FakeSigner:
    """Signer double that auto-approves, or rejects when told to"""

    def __init__(self, account: str = ACCOUNT, cancel: bool = False, reject: bool = False):
        self.account = account
        self.cancel = cancel
        self.reject = reject
        self.signed: list[tuple[str, str, str]] = []

    async def connect(self, network: NetworkKey) -> str:
        if self.cancel:
            raise ConnectionCanceled("User closed the wallet dialog")
        return self.account

    async def sign(self, transaction_wire: str, network_passphrase: str, account: str) -> str:
        if self.reject:
            raise SigningUnsupported("User rejected the transaction")
        self.signed.append((transaction_wire, network_passphrase, account))
        return f"signed:{transaction_wire}"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        network=NetworkKey.TESTNET,
        rpc_url="https://soroban-testnet.example",
        usdc_contract_id=USDC,
        rusd_contract_id=RUSD,
        poll_attempts=20,
        poll_interval_seconds=1.0,
        refresh_interval_seconds=60.0,
        approval_horizon_ledgers=100_000,
        fallback_decimals=7,
    )


@pytest.fixture
def gateway() -> AsyncMock:
    async def prepare(envelope):
        return {**envelope, "prepared": True}

    gateway = AsyncMock()
    gateway.load_account.return_value = {"id": ACCOUNT, "sequence": 41}
    gateway.prepare.side_effect = prepare
    return gateway


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def ledger_client(gateway: AsyncMock, sleeps: list[float]) -> LedgerClient:
    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return LedgerClient(
        gateway,
        FakeCodec(),
        poll_attempts=20,
        poll_interval=1.0,
        read_timeout=30,
        write_timeout=120,
        sleep=fake_sleep,
    )


@pytest.fixture
def chain() -> Dict[str, Any]:
    """Values returned by the fake ledger's reads, keyed by what they represent"""
    return {
        "rusd": IntegerValue(25_0000000),
        "usdc": IntegerValue(100_0000000),
        "allowance": IntegerValue(50_0000000),
        "reserve": IntegerValue(30_0000000),
        "supply": IntegerValue(25_0000000),
        "decimals": IntegerValue(7),
    }


@pytest.fixture
def ledger(chain: Dict[str, Any]) -> AsyncMock:
    """Ledger client double answering the six balance reads from `chain`"""

    async def read(call: ContractCall):
        if call.method == "balance" and call.args == (AddressArg(RUSD),):
            key = "reserve"
        else:
            key = {
                (RUSD, "balance"): "rusd",
                (USDC, "balance"): "usdc",
                (USDC, "allowance"): "allowance",
                (RUSD, "total_supply"): "supply",
                (RUSD, "decimals"): "decimals",
            }[(call.contract_id, call.method)]
        value = chain[key]
        if isinstance(value, Exception):
            raise value
        return value

    ledger = AsyncMock()
    ledger.poll_attempts = 20
    ledger.read_contract_value.side_effect = read
    ledger.get_latest_ledger.return_value = 1_000
    ledger.submit_contract_call.return_value = {"status": "SUCCESS"}
    return ledger


@pytest.fixture
def session() -> Session:
    return Session(fallback_decimals=7)


@pytest.fixture
def aggregator(session: Session, ledger: AsyncMock) -> BalanceAggregator:
    return BalanceAggregator(session, ledger, USDC, RUSD, NetworkKey.TESTNET, refresh_interval=60.0)


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
async def orchestrator(session, ledger, signer, aggregator, test_settings):
    orchestrator = Orchestrator(session, ledger, signer, aggregator, config=test_settings)
    yield orchestrator
    await orchestrator.close()


@pytest.fixture
async def connected(orchestrator: Orchestrator) -> Orchestrator:
    report = await orchestrator.connect()
    assert report.succeeded
    await asyncio.sleep(0)
    return orchestrator


@pytest.fixture
def client(session, ledger, signer, test_settings):
    """FastAPI test client around an orchestrator with doubled ledger and signer"""
    aggregator = BalanceAggregator(session, ledger, USDC, RUSD, NetworkKey.TESTNET, refresh_interval=60.0)
    orchestrator = Orchestrator(session, ledger, signer, aggregator, config=test_settings)
    with TestClient(create_app(orchestrator)) as test_client:
        yield test_client
