"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Tuple, Union


class NetworkKey(str, Enum):
    """Named networks the gateway can talk to"""

    TESTNET = "testnet"
    FUTURENET = "futurenet"
    MAINNET = "mainnet"
    LOCAL = "local"


class SessionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    BUSY = "busy"


# Contract call arguments (host-level, encoded at the SDK boundary)


@dataclass(frozen=True)
class AddressArg:
    value: str


@dataclass(frozen=True)
class I128Arg:
    value: int


@dataclass(frozen=True)
class U32Arg:
    value: int


ContractArg = Union[AddressArg, I128Arg, U32Arg]


# Contract return values, decoded into a closed set of variants


@dataclass(frozen=True)
class IntegerValue:
    value: int


@dataclass(frozen=True)
class AddressValue:
    value: str


@dataclass(frozen=True)
class NullValue:
    value: None = None


ScValue = Union[IntegerValue, AddressValue, NullValue]


@dataclass(frozen=True)
class ContractCall:
    """One contract invocation in progress"""

    contract_id: str
    method: str
    args: Tuple[ContractArg, ...]
    source: str
    network: NetworkKey


@dataclass(frozen=True)
class BalanceSnapshot:
    """Balances read together at one point in time; replaced whole, never patched"""

    issued_balance: Optional[int]
    collateral_balance: Optional[int]
    collateral_allowance: Optional[int]
    reserve_balance: Optional[int]
    total_supply: Optional[int]
    decimals: int
    taken_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# Terminal outcomes of a submitted transaction


@dataclass(frozen=True)
class Success:
    result: Any


@dataclass(frozen=True)
class Failed:
    reason: str


@dataclass(frozen=True)
class TimedOut:
    attempts: int


TransactionOutcome = Union[Success, Failed, TimedOut]


@dataclass
class ActionReport:
    """User-facing result of one orchestrator action"""

    action: str
    succeeded: bool
    message: str
    error: Optional[Exception] = None
    outcome: Optional[TransactionOutcome] = None
