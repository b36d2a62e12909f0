"""Configuration management using Pydantic Settings"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

from rusd_gateway.domain.exceptions import ConfigurationMissing
from rusd_gateway.domain.models import NetworkKey


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="RUSD_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Ledger
    network: NetworkKey = NetworkKey.TESTNET
    rpc_url: str = ""
    usdc_contract_id: str = ""
    rusd_contract_id: str = ""

    # Signer (server-side keypair backend)
    signer_secret: str | None = None

    # Write path
    poll_attempts: int = 20
    poll_interval_seconds: float = 1.0
    read_timeout_ledger_seconds: int = 30
    write_timeout_ledger_seconds: int = 120
    approval_horizon_ledgers: int = 100_000

    # Balances
    refresh_interval_seconds: float = 12.0
    fallback_decimals: int = 7

    # Service
    service_name: str = "rusd-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0

    def missing_values(self) -> List[str]:
        """Names of the required ledger values that are empty"""
        required = {
            "network": self.network,
            "rpcUrl": self.rpc_url,
            "usdcContractId": self.usdc_contract_id,
            "rusdContractId": self.rusd_contract_id,
        }
        return [key for key, value in required.items() if not value]

    def require_complete(self) -> None:
        """Refuse to proceed before any network call when ledger values are absent"""
        missing = self.missing_values()
        if missing:
            raise ConfigurationMissing(f"Missing env values: {', '.join(missing)}")


settings = Settings()
