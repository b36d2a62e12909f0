"""Transaction envelopes and value encoding at the stellar-sdk boundary"""

from typing import Iterable, List, Optional
from stellar_sdk import Network, TransactionBuilder, scval, xdr
from stellar_sdk.account import Account
from stellar_sdk.transaction_envelope import TransactionEnvelope

from rusd_gateway.domain.exceptions import UnknownLedgerError
from rusd_gateway.domain.models import (
    AddressArg,
    AddressValue,
    ContractArg,
    ContractCall,
    I128Arg,
    IntegerValue,
    NetworkKey,
    NullValue,
    ScValue,
    U32Arg,
)

BASE_FEE = 100

_PASSPHRASES = {
    NetworkKey.MAINNET: Network.PUBLIC_NETWORK_PASSPHRASE,
    NetworkKey.FUTURENET: Network.FUTURENET_NETWORK_PASSPHRASE,
    NetworkKey.LOCAL: Network.STANDALONE_NETWORK_PASSPHRASE,
    NetworkKey.TESTNET: Network.TESTNET_NETWORK_PASSPHRASE,
}

_INTEGER_DECODERS = {
    xdr.SCValType.SCV_U32: scval.from_uint32,
    xdr.SCValType.SCV_I32: scval.from_int32,
    xdr.SCValType.SCV_U64: scval.from_uint64,
    xdr.SCValType.SCV_I64: scval.from_int64,
    xdr.SCValType.SCV_U128: scval.from_uint128,
    xdr.SCValType.SCV_I128: scval.from_int128,
    xdr.SCValType.SCV_U256: scval.from_uint256,
    xdr.SCValType.SCV_I256: scval.from_int256,
}


def network_passphrase(network: NetworkKey | str) -> str:
    """Passphrase signed into every transaction; unknown networks fall back to testnet"""
    try:
        key = NetworkKey(network)
    except ValueError:
        key = NetworkKey.TESTNET
    return _PASSPHRASES[key]


def encode_arg(arg: ContractArg) -> xdr.SCVal:
    if isinstance(arg, AddressArg):
        return scval.to_address(arg.value)
    if isinstance(arg, I128Arg):
        return scval.to_int128(arg.value)
    if isinstance(arg, U32Arg):
        return scval.to_uint32(arg.value)
    raise TypeError(f"Unsupported contract argument: {arg!r}")


def encode_args(args: Iterable[ContractArg]) -> List[xdr.SCVal]:
    return [encode_arg(arg) for arg in args]


def decode_value(retval_xdr: Optional[str]) -> ScValue:
    """
    Decode a base64 SCVal return value into Integer | Address | Null.

    Raises:
        UnknownLedgerError: For value kinds the gateway never reads (maps, bytes, ...)
    """
    if not retval_xdr:
        return NullValue()

    value = xdr.SCVal.from_xdr(retval_xdr)
    if value.type == xdr.SCValType.SCV_VOID:
        return NullValue()
    if value.type == xdr.SCValType.SCV_ADDRESS:
        return AddressValue(scval.from_address(value).address)

    decoder = _INTEGER_DECODERS.get(value.type)
    if decoder is None:
        raise UnknownLedgerError(f"Unsupported contract value type: {value.type.name}")
    return IntegerValue(int(decoder(value)))


class EnvelopeCodec:
    """Builds single-operation contract invocations and moves them across the wire"""

    def __init__(self, base_fee: int = BASE_FEE):
        self.base_fee = base_fee

    def build(self, account: Account, call: ContractCall, timeout: int) -> TransactionEnvelope:
        return (
            TransactionBuilder(
                source_account=account,
                network_passphrase=network_passphrase(call.network),
                base_fee=self.base_fee,
            )
            .append_invoke_contract_function_op(
                contract_id=call.contract_id,
                function_name=call.method,
                parameters=encode_args(call.args),
            )
            .set_timeout(timeout)
            .build()
        )

    def passphrase(self, network: NetworkKey) -> str:
        return network_passphrase(network)

    def to_wire(self, envelope: TransactionEnvelope) -> str:
        return envelope.to_xdr()

    def from_wire(self, wire: str, network: NetworkKey) -> TransactionEnvelope:
        return TransactionBuilder.from_xdr(wire, network_passphrase(network))

    def decode(self, retval_xdr: Optional[str]) -> ScValue:
        return decode_value(retval_xdr)
