"""
Central configuration — reads from .env file.

Everything is collected into a single Settings object by load_settings(),
which main.py calls once at startup and then hands to the factories that
need it (provider gateway, web server). The one exception is DATA_DIR,
which database.py reads at import time, so load_settings() must run first.

Provider fallback order is PROVIDER_ORDER (comma-separated, first = primary):
  google      → Gemini via google-genai         (GOOGLE_API_KEY)
  openai      → OpenAI chat completions         (OPENAI_API_KEY)
  anthropic   → Claude messages API             (ANTHROPIC_API_KEY)
  openrouter  → any OpenAI-compatible endpoint  (OPENROUTER_API_KEY)

Per-provider enable/disable (all default to true):
  ENABLE_GOOGLE=true/false
  ENABLE_OPENAI=true/false
  ENABLE_ANTHROPIC=true/false
  ENABLE_OPENROUTER=true/false
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

KNOWN_PROVIDERS = ("google", "openai", "anthropic", "openrouter")

# name: (api key env var, model env var, default model)
_PROVIDER_ENV: dict[str, tuple[str, str, str]] = {
    "google":     ("GOOGLE_API_KEY",     "GEMINI_MODEL",     "gemini-1.5-flash"),
    "openai":     ("OPENAI_API_KEY",     "OPENAI_MODEL",     "gpt-4o-mini"),
    "anthropic":  ("ANTHROPIC_API_KEY",  "ANTHROPIC_MODEL",  "claude-3-haiku-20240307"),
    "openrouter": ("OPENROUTER_API_KEY", "OPENROUTER_MODEL", "openai/gpt-4o-mini"),
}


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials and model for one generation provider."""
    name: str                       # one of KNOWN_PROVIDERS
    model_id: str
    api_key: Optional[str]
    base_url: Optional[str] = None  # only used by openrouter
    enabled: bool = True


@dataclass(frozen=True)
class Settings:
    providers: list[ProviderConfig] = field(default_factory=list)   # priority order
    provider_timeout: float = 30.0
    server_host: str = "0.0.0.0"
    server_port: int = 5000
    data_dir: Path = Path("data")


def _flag(env_key: str, default: bool = True) -> bool:
    """
    Read a boolean toggle from the environment.
    Anything except false/0/no counts as enabled.
    """
    raw = os.getenv(env_key, "true" if default else "false")
    return raw.strip().lower() not in ("false", "0", "no")


def _timeout(env_key: str = "PROVIDER_TIMEOUT", default: float = 30.0) -> float:
    """
    Per-provider timeout in seconds. Blank or unset means the default;
    anything that is not a positive number is a configuration error.
    """
    raw = os.getenv(env_key, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{env_key} must be a number of seconds, got {raw!r}") from None
    if not value > 0:            # also rejects nan
        raise ValueError(f"{env_key} must be greater than 0, got {raw!r}")
    return value


def _provider_order() -> list[str]:
    raw = os.getenv("PROVIDER_ORDER", ",".join(KNOWN_PROVIDERS))
    order: list[str] = []
    for name in raw.split(","):
        name = name.strip().lower()
        if name in KNOWN_PROVIDERS and name not in order:
            order.append(name)
    return order


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build Settings from the environment (and .env if present)."""
    load_dotenv(env_file)

    providers = []
    for name in _provider_order():
        key_var, model_var, default_model = _PROVIDER_ENV[name]
        base_url = None
        if name == "openrouter":
            base_url = os.getenv("OPENROUTER_BASE_URL") or None
        providers.append(ProviderConfig(
            name=name,
            model_id=os.getenv(model_var, default_model),
            api_key=os.getenv(key_var) or None,
            base_url=base_url,
            enabled=_flag(f"ENABLE_{name.upper()}"),
        ))

    return Settings(
        providers=providers,
        provider_timeout=_timeout(),
        server_host=os.getenv("SERVER_HOST", "0.0.0.0"),
        server_port=int(os.getenv("SERVER_PORT", "5000")),
        data_dir=Path(os.getenv("DATA_DIR", "data")),
    )
