"""
Application configuration settings loaded from config.yaml and the environment
"""
import os
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, field_validator


DEFAULT_UPSTREAM_BASE_URL = "https://api.leadbuyer.example"


class UpstreamConfig(BaseModel):
    """Lead buyer API configuration"""
    base_url: str = DEFAULT_UPSTREAM_BASE_URL
    lead_path: str = "/leads"
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    api_key_header: str = "X-API-Key"
    api_secret_header: str = "X-API-Secret"
    timeout: float = 30.0  # Total seconds for the outbound call
    connect_timeout: float = 10.0

    @field_validator("base_url", mode="before")
    @classmethod
    def fallback_base_url(cls, v):
        # An empty env var should not blank out the documented host
        return v or DEFAULT_UPSTREAM_BASE_URL


class RelayConfig(BaseModel):
    """Lead relay behaviour"""
    mask_redirect_url: bool = False  # Wrap accepted redirect URLs in a token
    delay_min_seconds: float = 0.0
    delay_max_seconds: float = 0.0

    @field_validator("delay_max_seconds")
    @classmethod
    def check_delay_range(cls, v, info):
        if v < info.data.get("delay_min_seconds", 0.0):
            raise ValueError("delay_max_seconds must be >= delay_min_seconds")
        return v


class TokenConfig(BaseModel):
    """Redirect token configuration"""
    encryption_key: str
    redirect_base_url: str = "http://localhost:8000"
    destination_url: str = "https://google.com"  # Fixed URL served by the token endpoint

    @field_validator("encryption_key")
    @classmethod
    def require_encryption_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("encryption_key must not be empty")
        return v


class Settings(BaseModel):
    """Application settings"""

    # Project settings
    project_name: str = "Lead Relay API"
    version: str = "1.0.0"
    description: str = "Validates loan leads and relays them to a lead buyer"
    api_prefix: str = "/api"

    upstream: UpstreamConfig = UpstreamConfig()
    relay: RelayConfig = RelayConfig()
    token: TokenConfig

    # Extra CORS origins for routes other than the lead endpoint
    backend_cors_origins: List[str] = []

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, list):
            return v
        return []

    # Logging
    log_level: str = "INFO"


# Environment variable -> (section, key); section None means top level
ENV_OVERRIDES = {
    "UPSTREAM_BASE_URL": ("upstream", "base_url"),
    "UPSTREAM_API_KEY": ("upstream", "api_key"),
    "UPSTREAM_API_SECRET": ("upstream", "api_secret"),
    "ENCRYPTION_KEY": ("token", "encryption_key"),
    "REDIRECT_BASE_URL": ("token", "redirect_base_url"),
    "LOG_LEVEL": (None, "log_level"),
}


def _find_config_file(config_path: Optional[str]) -> Optional[Path]:
    if config_path is None:
        config_path = os.environ.get("LEADRELAY_CONFIG")

    if config_path is not None:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        return config_file

    # Try current directory first
    current_dir = Path.cwd() / "config.yaml"
    if current_dir.exists():
        return current_dir

    # Then project root (assuming we're in src/leadrelay/core/)
    project_root = Path(__file__).parent.parent.parent.parent / "config.yaml"
    if project_root.exists():
        return project_root

    return None


def apply_env_overrides(config_data: Dict[str, Any], environ=None) -> Dict[str, Any]:
    """Overlay environment variables on top of file configuration"""
    environ = os.environ if environ is None else environ
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None:
            continue
        if section is None:
            config_data[key] = value
        else:
            if not isinstance(config_data.get(section), dict):
                config_data[section] = {}
            config_data[section][key] = value
    return config_data


def load_config(config_path: Optional[str] = None, environ=None) -> Settings:
    """
    Load configuration from an optional YAML file plus the environment.

    Args:
        config_path: Path to a config.yaml file. If None, uses $LEADRELAY_CONFIG,
                    then config.yaml in the current directory, then in the
                    project root. A missing file is fine when the environment
                    supplies the required values.
        environ: Mapping used for overrides (defaults to os.environ)

    Returns:
        Settings: Loaded and validated settings

    Raises:
        pydantic.ValidationError: If required values (the encryption key) are missing
    """
    config_data: Dict[str, Any] = {}

    config_file = _find_config_file(config_path)
    if config_file is not None:
        with open(config_file, "r") as f:
            loaded = yaml.safe_load(f)
        if loaded is not None and not isinstance(loaded, dict):
            raise ValueError("Configuration file is invalid")
        config_data = loaded or {}

    return Settings(**apply_env_overrides(config_data, environ))


# Load settings on module import
settings = load_config()
