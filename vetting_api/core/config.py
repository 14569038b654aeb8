from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

MAINNET_RPC_URL = "https://fullnode.mainnet.sui.io:443"


class Settings(BaseSettings):
    PROJECT_NAME: str = "Vetting Table API"
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    CORS_ORIGINS: list[str] = ["*"]

    SUI_RPC_URL: Optional[str] = None
    SUI_RPC_TIMEOUT: float = 30.0
    SUI_GAS_BUDGET: int = 10_000_000

    PACKAGE_ID: Optional[str] = None
    MASTER_MNEMONIC: Optional[SecretStr] = None
    ORGANIZATION_ID_PREFIX: str = "BRAAV"

    # This configures Pydantic to read variables from the ".env" file
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def rpc_url(self) -> str:
        return self.SUI_RPC_URL or MAINNET_RPC_URL

    @property
    def network(self) -> str:
        """Label reported back to callers of the create endpoint."""
        return self.SUI_RPC_URL or "mainnet"

    @property
    def mnemonic(self) -> Optional[str]:
        if self.MASTER_MNEMONIC is None:
            return None
        return self.MASTER_MNEMONIC.get_secret_value().strip() or None


def get_settings() -> Settings:
    return Settings()
