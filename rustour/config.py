"""Configuration module for the RusTour session client."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

DEFAULT_TOKEN_FILE = Path(__file__).parent.parent / "data" / ".rustour_session.json"


@dataclass
class TransportConfig:
    """HTTP transport configuration."""
    timeout_seconds: float = field(default_factory=lambda: float(os.getenv("RUSTOUR_HTTP_TIMEOUT", "30.0")))


@dataclass
class StorageConfig:
    """Token storage configuration."""
    token_file: Path = field(default_factory=lambda: Path(os.getenv("RUSTOUR_TOKEN_FILE", str(DEFAULT_TOKEN_FILE))))
    token_key: str = field(default_factory=lambda: os.getenv("RUSTOUR_TOKEN_KEY", "jwtToken"))


@dataclass
class Config:
    """Main configuration container."""
    transport: TransportConfig = field(default_factory=TransportConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    api_base_url: str = field(default_factory=lambda: os.getenv("RUSTOUR_API_BASE_URL", "http://localhost:5281/api"))

    @property
    def login_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/Auth/login"

    @property
    def register_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/Auth/register"


def load_config() -> Config:
    """Load configuration from environment variables."""
    return Config()
