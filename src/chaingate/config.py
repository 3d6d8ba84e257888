import logging

from pydantic_settings import BaseSettings

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s - %(message)s"


class Settings(BaseSettings):
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "chaingate"
    database_url_override: str = ""  # Full SQLAlchemy URL, e.g. sqlite+aiosqlite:///chaingate.db
    redis_url: str = "redis://localhost:6379/0"
    infura_api_key: str = ""
    etherscan_api_key: str = ""
    web_dapp_url: str = "http://localhost:3000"
    receipt_timeout: float = 600.0  # Seconds to wait for a mined receipt
    receipt_poll_interval: float = 2.0
    explorer_rate_per_second: float = 5.0
    explorer_timeout: float = 30.0
    default_user_id: str = "system"
    resume_watches_on_startup: bool = True
    reconcile_interval: float = 60.0  # Seconds between Celery reconciliation passes
    log_level: str = "INFO"
    debug: bool = False

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    def transaction_url(self, tx_id: str) -> str:
        """Link the user opens in the browser UI to review and sign a prepared transaction."""
        return f"{self.web_dapp_url.rstrip('/')}/tx/{tx_id}"

    class Config:
        env_file = ".env"


def configure_logging(level: str = "INFO") -> None:
    """Root logging setup for entrypoints. Always writes to stderr."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for noisy in ("sqlalchemy.engine", "httpx", "web3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


settings = Settings()
