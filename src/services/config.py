"""
Loads and handles config from config.yml
Credentials (NEWS_API_KEY, EMAIL_USERNAME, EMAIL_PASSWORD) are loaded from .env for security
"""
import os
from typing import List, Dict, Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel


class ConfigError(Exception):
    """Raised when required configuration is absent at startup."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Missing required configuration: {', '.join(missing)}")


def parse_recipients(value: str) -> List[str]:
    """Split a comma-separated list, trimming entries and dropping empty ones."""
    return [part.strip() for part in value.split(",") if part.strip()]


class SourceConfig(BaseModel):
    """Configuration for a single ingestion source."""
    type: str  # newsapi, hackernews
    enabled: bool = True


class EmailColorsConfig(BaseModel):
    """Configuration for digest email colors."""
    primary: str = "#3498db"
    primary_dark: str = "#2980b9"
    background: str = "#f5f5f5"
    card_bg: str = "#ffffff"
    heading: str = "#2c3e50"
    text_primary: str = "#333333"
    text_secondary: str = "#7f8c8d"
    summary_text: str = "#555555"
    border: str = "#eeeeee"


class Config(BaseModel):
    # Core
    DATABASE_PATH: Optional[str] = None

    # Ollama
    OLLAMA_BASE_URL: Optional[str] = None
    OLLAMA_MODEL: Optional[str] = None
    LLM_TIMEOUT: float = 120.0

    # News sources
    NEWS_API_KEY: Optional[str] = None
    NEWS_QUERY: str = '("artificial intelligence" OR "machine learning" OR "deep learning" OR LLM OR "Generative AI")'
    NEWS_LANGUAGE: str = "en"
    NEWS_PAGE_SIZE: int = 10
    HACKERNEWS_LIMIT: int = 20
    sources: List[SourceConfig] = [SourceConfig(type="newsapi")]

    # Email
    EMAIL_SMTP_HOST: Optional[str] = None
    EMAIL_SMTP_PORT: int = 587
    EMAIL_USERNAME: Optional[str] = None
    EMAIL_PASSWORD: Optional[str] = None
    EMAIL_FROM: Optional[str] = None
    EMAIL_TO: Optional[str] = None
    email_colors: EmailColorsConfig = EmailColorsConfig()

    # Scheduler
    SCHEDULE_HOUR: int = 8
    SCHEDULE_MINUTE: int = 0

    @property
    def recipients(self) -> List[str]:
        return parse_recipients(self.EMAIL_TO or "")


def _get_config_path() -> Optional[str]:
    """Get the path to config.yml, handling different working directories."""
    # Try relative path first
    if os.path.exists('resources/config.yml'):
        return 'resources/config.yml'

    # Try from project root
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    config_path = os.path.join(project_root, 'resources', 'config.yml')
    if os.path.exists(config_path):
        return config_path

    return None


def _setting(data: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Environment variable wins over config.yml."""
    value = os.getenv(key)
    if value not in (None, ""):
        return value
    value = data.get(key)
    return default if value is None else value


def _parse_sources(data: Dict[str, Any]) -> List[SourceConfig]:
    raw = os.getenv("NEWS_SOURCES")
    if raw:
        return [SourceConfig(type=name) for name in parse_recipients(raw)]

    sources = []
    for src in data.get("sources", ["newsapi"]):
        if isinstance(src, str):
            sources.append(SourceConfig(type=src))
        else:
            sources.append(SourceConfig(
                type=src.get("type", ""),
                enabled=src.get("enabled", True),
            ))
    return sources


def get_enabled_sources(config: Config) -> List[SourceConfig]:
    """Get only enabled sources from the config."""
    return [src for src in config.sources if src.enabled]


def missing_required(config: Config) -> List[str]:
    """Return the names of required settings that are absent."""
    required = [
        "DATABASE_PATH",
        "OLLAMA_BASE_URL",
        "OLLAMA_MODEL",
        "EMAIL_SMTP_HOST",
        "EMAIL_USERNAME",
        "EMAIL_PASSWORD",
        "EMAIL_FROM",
    ]
    missing = [key for key in required if not getattr(config, key)]

    if any(src.type.lower() == "newsapi" for src in get_enabled_sources(config)) and not config.NEWS_API_KEY:
        missing.append("NEWS_API_KEY")

    if not config.recipients:
        missing.append("EMAIL_TO")

    if not get_enabled_sources(config):
        missing.append("sources")

    return missing


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from config.yml and credentials from .env.

    Raises:
        ConfigError: if any required setting is absent
    """
    # Load .env for sensitive credentials
    load_dotenv()

    config_path = config_path or _get_config_path()

    data: Dict[str, Any] = {}
    if config_path:
        with open(config_path, 'r') as file:
            data = yaml.safe_load(file) or {}

    config = Config(
        DATABASE_PATH=_setting(data, "DATABASE_PATH", "data/articles.db"),

        OLLAMA_BASE_URL=_setting(data, "OLLAMA_BASE_URL", "http://localhost:11434"),
        OLLAMA_MODEL=_setting(data, "OLLAMA_MODEL", "llama3.1:8b"),
        LLM_TIMEOUT=float(_setting(data, "LLM_TIMEOUT", 120.0)),

        NEWS_API_KEY=os.getenv("NEWS_API_KEY"),
        NEWS_QUERY=_setting(data, "NEWS_QUERY", Config.model_fields["NEWS_QUERY"].default),
        NEWS_LANGUAGE=_setting(data, "NEWS_LANGUAGE", "en"),
        NEWS_PAGE_SIZE=int(_setting(data, "NEWS_PAGE_SIZE", 10)),
        HACKERNEWS_LIMIT=int(_setting(data, "HACKERNEWS_LIMIT", 20)),
        sources=_parse_sources(data),

        EMAIL_SMTP_HOST=_setting(data, "EMAIL_SMTP_HOST"),
        EMAIL_SMTP_PORT=int(_setting(data, "EMAIL_SMTP_PORT", 587)),
        EMAIL_USERNAME=os.getenv("EMAIL_USERNAME"),
        EMAIL_PASSWORD=os.getenv("EMAIL_PASSWORD"),
        EMAIL_FROM=_setting(data, "EMAIL_FROM"),
        EMAIL_TO=_setting(data, "EMAIL_TO"),
        email_colors=EmailColorsConfig(**data.get("email_colors", {})),

        SCHEDULE_HOUR=int(_setting(data, "SCHEDULE_HOUR", 8)),
        SCHEDULE_MINUTE=int(_setting(data, "SCHEDULE_MINUTE", 0)),
    )

    missing = missing_required(config)
    if missing:
        raise ConfigError(missing)

    return config
