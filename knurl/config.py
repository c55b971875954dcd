"""
Client settings, read from KNURL_* environment variables.

The CLI calls python-dotenv's load_dotenv() first, so a .env file in the
working directory can provide any of these.
"""

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "KNURL_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _default_user_agent() -> str:
    from knurl import __version__

    return f"knurl/{__version__}"


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")


class ClientSettings(BaseModel):
    """Settings for the engines and the CLI."""

    model_config = ConfigDict(frozen=True)

    timeout_seconds: float = Field(default=30.0, gt=0)
    follow_redirects: bool = True
    max_redirects: int = Field(default=10, ge=0)
    verify_tls: bool = True
    user_agent: str = Field(default_factory=_default_user_agent)
    log_dir: Path = Path(".knurl")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientSettings":
        """Build settings from KNURL_* variables, falling back to defaults."""
        environ = os.environ if environ is None else environ
        values: dict = {}

        if (raw := environ.get(f"{ENV_PREFIX}TIMEOUT_SECONDS")) is not None:
            values["timeout_seconds"] = float(raw)
        if (raw := environ.get(f"{ENV_PREFIX}FOLLOW_REDIRECTS")) is not None:
            values["follow_redirects"] = _parse_bool("FOLLOW_REDIRECTS", raw)
        if (raw := environ.get(f"{ENV_PREFIX}MAX_REDIRECTS")) is not None:
            values["max_redirects"] = int(raw)
        if (raw := environ.get(f"{ENV_PREFIX}VERIFY_TLS")) is not None:
            values["verify_tls"] = _parse_bool("VERIFY_TLS", raw)
        if (raw := environ.get(f"{ENV_PREFIX}USER_AGENT")) is not None:
            values["user_agent"] = raw
        if (raw := environ.get(f"{ENV_PREFIX}LOG_DIR")) is not None:
            values["log_dir"] = Path(raw)

        return cls(**values)
