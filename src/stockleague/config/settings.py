"""Application settings and configuration."""

from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory (./data under the working directory)."""
    return Path.cwd() / "data"


class Settings(BaseSettings):
    """
    League configuration loaded from environment variables (STOCKLEAGUE_*).

    An instance is passed explicitly to the components that need it; nothing
    reads configuration from ambient process state at call time.
    """

    model_config = SettingsConfigDict(
        env_prefix="STOCKLEAGUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Stock League"
    app_version: str = "0.1.0"

    # Data directory (JSON partitions and the default SQLite file live here)
    data_dir: Optional[Path] = None

    # Persistence backend: "file" (JSON partitions) or "sql" (records table)
    storage_backend: Literal["file", "sql"] = "file"
    database_url: Optional[str] = None

    log_level: str = "INFO"

    # Market data
    price_provider: Literal["yfinance", "stub"] = "yfinance"
    price_cache_ttl_seconds: int = 300

    # League rules
    cash_symbol: str = "$CASH"
    default_player_password: str = "changeme"
    default_import_date: str = "2024-12-07"
    single_stock_rule: bool = False

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "stockleague.db"
        return f"sqlite:///{db_path}"

