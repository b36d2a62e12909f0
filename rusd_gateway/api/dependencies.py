"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from rusd_gateway.config import Settings, settings
from rusd_gateway.infrastructure.clients.ledger import LedgerClient
from rusd_gateway.infrastructure.clients.wallet import KeypairSigner
from rusd_gateway.infrastructure.soroban.gateway import SorobanGateway
from rusd_gateway.services.orchestrator import Orchestrator
from rusd_gateway.services.session import Session


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def build_orchestrator(config: Settings = settings) -> Orchestrator:
    """Wire the session, ledger client, and keypair signer from configuration"""
    session = Session(fallback_decimals=config.fallback_decimals)
    ledger = LedgerClient(SorobanGateway(config.rpc_url, config.http_timeout_seconds))
    return Orchestrator(session, ledger, KeypairSigner(config.signer_secret), config=config)


async def get_orchestrator(request: Request) -> Orchestrator:
    """Provide the single session orchestrator, created on first use on the event loop"""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        orchestrator = build_orchestrator()
        request.app.state.orchestrator = orchestrator
    return orchestrator
