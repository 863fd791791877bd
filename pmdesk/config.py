"""Client configuration storage for pmdesk.

Stores user preferences like the API base URL in ~/.pmdesk/config.json.
Set PMDESK_CONFIG_DIR to use another directory.
"""

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from pmdesk.infrastructure.api import DEFAULT_BASE_URL, DEFAULT_TIMEOUT


class ClientConfig(BaseModel):
    """Connection settings for the API."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"


def get_config_dir() -> Path:
    """Get the pmdesk config directory."""
    override = os.environ.get("PMDESK_CONFIG_DIR")
    config_dir = Path(override) if override else Path.home() / ".pmdesk"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_client_config() -> ClientConfig:
    """Load the client configuration, falling back to defaults."""
    config_file = get_config_dir() / "config.json"
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            return ClientConfig(**data)
        except (json.JSONDecodeError, ValidationError, TypeError):
            pass
    return ClientConfig()


def save_client_config(config: ClientConfig) -> None:
    """Save the client configuration."""
    config_file = get_config_dir() / "config.json"
    config_file.write_text(
        json.dumps(config.model_dump(), indent=2),
        encoding="utf-8",
    )


def get_last_project_id() -> Optional[int]:
    """Get the last opened project ID."""
    config_file = get_config_dir() / "last_project.txt"
    if config_file.exists():
        raw = config_file.read_text(encoding="utf-8").strip()
        if raw.isdigit():
            return int(raw)
    return None


def save_last_project_id(project_id: int) -> None:
    """Save the last opened project ID."""
    config_file = get_config_dir() / "last_project.txt"
    config_file.write_text(str(project_id), encoding="utf-8")
