"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from reward_relay.core.exceptions import ConfigurationError

PLACEHOLDER_KEYS = {
    "",
    "change-me",
    "changeme",
    "your-private-key",
    "your_private_key",
    "your_private_key_here",
}


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False


class ChainSettings(BaseModel):
    # Testnet endpoints, not meant for production use.
    rpc_url: str = "https://testnet-rpc.monad.xyz"
    network_name: str = "Monad Testnet"
    explorer_url: str = "https://testnet.monadexplorer.com"
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    confirmation_timeout_seconds: float = Field(default=120.0, gt=0)
    poll_interval_seconds: float = Field(default=1.0, gt=0)


class TokenSettings(BaseModel):
    contract_address: str = "0x72dA30dB47C0999F2891cD328Fc45cB3FffBFDa3"


class SignerSettings(BaseModel):
    private_key: SecretStr = SecretStr("")


class RateLimitSettings(BaseModel):
    enabled: bool = True
    limit: str = "100/minute"


class ReporterSettings(BaseModel):
    enabled: bool = True
    interval_seconds: float = Field(default=300.0, gt=0)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Reward Relay"
    cors_origins: list[str] = ["*"]

    server: ServerSettings = ServerSettings()
    chain: ChainSettings = ChainSettings()
    token: TokenSettings = TokenSettings()
    signer: SignerSettings = SignerSettings()
    rate_limit: RateLimitSettings = RateLimitSettings()
    reporter: ReporterSettings = ReporterSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def token_address(self) -> str:
        return self.token.contract_address

    @property
    def confirmation_timeout(self) -> float:
        return self.chain.confirmation_timeout_seconds

    def signing_key(self) -> str:
        """Return the wallet private key, refusing empty or placeholder values."""
        key = self.signer.private_key.get_secret_value().strip()
        normalized = key.lower().removeprefix("0x")
        if key.lower() in PLACEHOLDER_KEYS or not normalized.strip("0"):
            raise ConfigurationError(
                "SIGNER__PRIVATE_KEY is not set; refusing to start with a placeholder signing key"
            )
        return key


@lru_cache()
def get_settings() -> Settings:
    return Settings()
