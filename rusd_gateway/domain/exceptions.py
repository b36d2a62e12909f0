"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    default_message = "Unexpected error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class InvalidAmount(DomainException):
    """Typed amount is not a valid decimal number, or is out of range"""

    default_message = "Invalid amount"


class ConfigurationMissing(DomainException):
    """Required network / RPC / contract values are not configured"""

    default_message = "Missing env values"


class SimulationFailed(DomainException):
    """RPC endpoint reported an error while simulating a contract call"""

    default_message = "Simulation failed"


class SubmissionFailed(DomainException):
    """Transaction was rejected on submission or failed on-ledger"""

    default_message = "Transaction failed"


class MissingTransactionHash(DomainException):
    """Submission response carried no transaction hash to poll"""

    default_message = "Missing transaction hash"


class TransactionTimeout(DomainException):
    """Transaction did not reach a terminal status within the poll budget"""

    default_message = "Transaction timed out"


class ConnectionCanceled(DomainException):
    """Wallet connection was cancelled or is unavailable"""

    default_message = "Wallet connection canceled"


class SigningUnsupported(DomainException):
    """Wallet cannot sign the given transaction"""

    default_message = "Wallet does not support signing"


class UnknownLedgerError(DomainException):
    """Collaborator error that is not otherwise classified"""

    pass


class ActionInProgress(DomainException):
    """Another state-changing action is still in flight"""

    default_message = "Another action is in progress"


class NotConnected(DomainException):
    """Action requires a connected wallet"""

    default_message = "Wallet not connected"
