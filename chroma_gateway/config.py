import os
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

DEFAULT_CHROMA_HOST = "http://localhost:8000"
DEFAULT_CHROMA_PORT = 8000
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"


class Settings(BaseModel):
    """Process configuration, read once at startup and never mutated."""

    model_config = ConfigDict(frozen=True)

    chroma_host: str = DEFAULT_CHROMA_HOST
    openai_api_key: str
    embedding_model: str = DEFAULT_EMBEDDING_MODEL
    api_key: str
    host: str = "0.0.0.0"
    port: int = 3000
    disable_ssl_verification: bool = False
    allow_reset: bool = False
    cors_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    def chroma_endpoint(self) -> Tuple[str, int, bool]:
        """
        Split CHROMA_HOST into (host, port, ssl).

        A full URL supplies all three; anything else is taken as a bare hostname.
        """
        parsed = urlparse(self.chroma_host)
        if parsed.scheme in ("http", "https") and parsed.hostname:
            ssl = parsed.scheme == "https"
            try:
                port = parsed.port
            except ValueError:
                port = None
            if port is None:
                port = 443 if ssl else DEFAULT_CHROMA_PORT
            return parsed.hostname, port, ssl
        return self.chroma_host, DEFAULT_CHROMA_PORT, False


def _required(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ValueError(f"{name} environment variable is required")
    return value


def _origins(raw: Optional[str]) -> Tuple[str, ...]:
    origins: List[str] = [o.strip() for o in (raw or "").split(",") if o.strip()]
    return tuple(origins) or ("*",)


def load_settings() -> Settings:
    """Build Settings from the environment (and a .env file when present)."""
    load_dotenv()

    return Settings(
        chroma_host=os.getenv("CHROMA_HOST", DEFAULT_CHROMA_HOST),
        openai_api_key=_required("OPENAI_API_KEY"),
        embedding_model=os.getenv("EMBEDDING_MODEL", DEFAULT_EMBEDDING_MODEL),
        api_key=_required("API_KEY"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        disable_ssl_verification=_flag(os.getenv("DISABLE_SSL_VERIFICATION")),
        allow_reset=_flag(os.getenv("CHROMA_ALLOW_RESET")),
        cors_origins=_origins(os.getenv("CORS_ORIGINS")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
