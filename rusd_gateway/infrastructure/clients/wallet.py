"""Wallet signers: the two operations the session needs from a signing backend"""

import logging
from typing import Protocol
from stellar_sdk import Keypair, TransactionBuilder

from rusd_gateway.config import settings
from rusd_gateway.domain.amounts import shorten
from rusd_gateway.domain.exceptions import ConnectionCanceled, SigningUnsupported
from rusd_gateway.domain.models import NetworkKey
from rusd_gateway.infrastructure.clients.ledger import SignCallback

logger = logging.getLogger(__name__)


class WalletSigner(Protocol):
    """Out-of-process signer; the ledger client only ever sees it through a callback"""

    async def connect(self, network: NetworkKey) -> str:
        ...

    async def sign(self, transaction_wire: str, network_passphrase: str, account: str) -> str:
        ...


class KeypairSigner:
    """Signer backed by a secret seed held by the service"""

    def __init__(self, secret: str | None = None):
        self.secret = secret if secret is not None else settings.signer_secret
        self._keypair: Keypair | None = None

    async def connect(self, network: NetworkKey) -> str:
        """
        Unlock the configured seed and return its account id.

        Raises:
            ConnectionCanceled: No seed configured, or the seed is not valid
        """
        if not self.secret:
            raise ConnectionCanceled("No signer secret configured")
        try:
            self._keypair = Keypair.from_secret(self.secret)
        except ValueError as e:
            raise ConnectionCanceled("Signer secret is not a valid seed") from e

        logger.info("Signer connected", extra={"account": shorten(self._keypair.public_key), "network": network})
        return self._keypair.public_key

    async def sign(self, transaction_wire: str, network_passphrase: str, account: str) -> str:
        """
        Sign a base64 transaction envelope for `account`.

        Raises:
            SigningUnsupported: Account not held by this signer, or unreadable envelope
        """
        if self._keypair is None or self._keypair.public_key != account:
            raise SigningUnsupported(f"Signer does not hold account {shorten(account)}")

        try:
            envelope = TransactionBuilder.from_xdr(transaction_wire, network_passphrase)
        except Exception as e:
            raise SigningUnsupported(f"Cannot read transaction envelope: {e}") from e

        envelope.sign(self._keypair)
        return envelope.to_xdr()


def signing_callback(signer: WalletSigner, account: str) -> SignCallback:
    """Bind a signer to an account as the (wire, passphrase) callback of the write path"""

    async def sign(transaction_wire: str, network_passphrase: str) -> str:
        return await signer.sign(transaction_wire, network_passphrase, account)

    return sign
