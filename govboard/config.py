# govboard: configuration
# Override endpoints via govboard.yaml, GOVBOARD_* environment variables or CLI args.

import os
import logging
import yaml
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).parent.parent / "govboard.yaml"

# Environment variable -> (field, type)
ENV_OVERRIDES = {
    "GOVBOARD_AUDIT_URL": ("audit_service_url", str),
    "GOVBOARD_TOKEN": ("api_token", str),
    "GOVBOARD_TIMEOUT": ("request_timeout", float),
}


@dataclass
class Config:
    """Runtime configuration for the board server and REST clients."""

    # Backends
    audit_service_url: str = "http://localhost:5010"
    api_token: Optional[str] = None
    request_timeout: float = 10.0

    # Board server
    host: str = "127.0.0.1"
    port: int = 3000

    # Toast history kept for /api/notifications
    notification_history: int = 100

    def apply_env(self, environ=None):
        """Let GOVBOARD_* variables win over file values."""
        environ = os.environ if environ is None else environ
        for var, (name, cast) in ENV_OVERRIDES.items():
            raw = environ.get(var)
            if not raw:
                continue
            try:
                setattr(self, name, cast(raw))
            except ValueError:
                logger.warning(f"Ignoring {var}={raw!r}: expected {cast.__name__}")

    @classmethod
    def load(cls, path: Optional[str] = None, environ=None) -> "Config":
        """Load config from YAML file, falling back to defaults."""
        cfg_path = Path(path) if path else CONFIG_PATH
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                cfg = cls(**{k: v for k, v in data.items() if hasattr(cls, k)})
            except Exception as e:
                logger.warning(f"Could not read {cfg_path}: {e}; using defaults")
                cfg = cls()
        else:
            cfg = cls()
        cfg.apply_env(environ)
        return cfg
