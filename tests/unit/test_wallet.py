"""Unit tests for the keypair signer backend"""

import pytest
from stellar_sdk import Account, Keypair, Network, TransactionBuilder
from conftest import FakeSigner
from rusd_gateway.domain.exceptions import ConnectionCanceled, SigningUnsupported
from rusd_gateway.domain.models import NetworkKey
from rusd_gateway.infrastructure.clients.wallet import KeypairSigner, signing_callback

PASSPHRASE = Network.TESTNET_NETWORK_PASSPHRASE


def _unsigned_envelope(public_key: str) -> str:
    return (
        TransactionBuilder(Account(public_key, 1), PASSPHRASE, base_fee=100)
        .append_manage_data_op("rusd", b"gateway")
        .set_timeout(120)
        .build()
        .to_xdr()
    )


async def test_connect_without_secret_is_canceled():
    with pytest.raises(ConnectionCanceled):
        await KeypairSigner(secret="").connect(NetworkKey.TESTNET)


async def test_connect_with_invalid_secret():
    with pytest.raises(ConnectionCanceled):
        await KeypairSigner(secret="not-a-seed").connect(NetworkKey.TESTNET)


async def test_connect_returns_public_key():
    keypair = Keypair.random()

    account = await KeypairSigner(secret=keypair.secret).connect(NetworkKey.TESTNET)

    assert account == keypair.public_key


async def test_sign_adds_signature():
    keypair = Keypair.random()
    signer = KeypairSigner(secret=keypair.secret)
    account = await signer.connect(NetworkKey.TESTNET)

    signed = await signer.sign(_unsigned_envelope(account), PASSPHRASE, account)

    envelope = TransactionBuilder.from_xdr(signed, PASSPHRASE)
    assert len(envelope.signatures) == 1


async def test_sign_refuses_foreign_account():
    signer = KeypairSigner(secret=Keypair.random().secret)
    await signer.connect(NetworkKey.TESTNET)
    other = Keypair.random().public_key

    with pytest.raises(SigningUnsupported):
        await signer.sign(_unsigned_envelope(other), PASSPHRASE, other)


async def test_sign_before_connect():
    keypair = Keypair.random()
    signer = KeypairSigner(secret=keypair.secret)

    with pytest.raises(SigningUnsupported):
        await signer.sign(_unsigned_envelope(keypair.public_key), PASSPHRASE, keypair.public_key)


async def test_sign_malformed_envelope():
    signer = KeypairSigner(secret=Keypair.random().secret)
    account = await signer.connect(NetworkKey.TESTNET)

    with pytest.raises(SigningUnsupported):
        await signer.sign("definitely-not-xdr", PASSPHRASE, account)


async def test_signing_callback_binds_account():
    signer = FakeSigner(account="GBOB")
    sign = signing_callback(signer, "GBOB")

    assert await sign("wire", PASSPHRASE) == "signed:wire"
    assert signer.signed == [("wire", PASSPHRASE, "GBOB")]
