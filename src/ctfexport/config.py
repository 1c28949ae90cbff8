"""Local configuration for ctfexport."""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, ValidationError

from ctfexport.exceptions import ConfigError

DEFAULT_API_URL = "https://api.contentful.com"
DEFAULT_CONFIG_PATH = "~/.ctfexport/config.json"
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_USER_AGENT = "ctfexport/0.1"
DEFAULT_LOCALES = "en-US"

# Number of ids sent per ``sys.id[in]`` entries query.
ENTRY_BATCH_SIZE = 10
CONTENT_TYPE_LIMIT = 1000

CTFEXPORT_API_URL = os.getenv("CTFEXPORT_API_URL", DEFAULT_API_URL).rstrip("/")
CTFEXPORT_CONFIG_PATH = Path(os.getenv("CTFEXPORT_CONFIG_PATH", DEFAULT_CONFIG_PATH)).expanduser()
CTFEXPORT_FETCH_TIMEOUT_S = float(os.getenv("CTFEXPORT_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
CTFEXPORT_FETCH_MAX_RETRIES = int(os.getenv("CTFEXPORT_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
CTFEXPORT_FETCH_BACKOFF_S = float(os.getenv("CTFEXPORT_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
CTFEXPORT_USER_AGENT = os.getenv("CTFEXPORT_USER_AGENT", DEFAULT_USER_AGENT)
# Locale columns written to the workbook; the first one is the primary locale.
CTFEXPORT_LOCALES = [
    locale.strip() for locale in os.getenv("CTFEXPORT_LOCALES", DEFAULT_LOCALES).split(",") if locale.strip()
]


class ExportSettings(BaseModel):
    """Credentials and target of the Contentful space to export from.

    Attributes:
        cma_token: Contentful personal management token.
        space_id: Space to read entries from.
        env_id: Environment within the space.
    """

    cma_token: str = ""
    space_id: str = ""
    env_id: str = "master"


def load_settings(path: Path | None = None, *, require: bool = True) -> ExportSettings:
    """Load settings from the JSON config file, with environment overrides.

    Args:
        path: Config file location. Defaults to ``CTFEXPORT_CONFIG_PATH``.
        require: If True, raise when the token or space id is missing.

    Returns:
        The merged settings.

    Raises:
        ConfigError: If the file is unreadable or required values are missing.
    """
    config_path = path or CTFEXPORT_CONFIG_PATH
    data: dict[str, str] = {}
    if config_path.is_file():
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Unable to read config file {config_path}: {exc}") from exc

    overrides = {
        "cma_token": os.getenv("CONTENTFUL_MANAGEMENT_TOKEN"),
        "space_id": os.getenv("CONTENTFUL_SPACE_ID"),
        "env_id": os.getenv("CONTENTFUL_ENVIRONMENT_ID"),
    }
    data.update({key: value for key, value in overrides.items() if value})

    try:
        settings = ExportSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {config_path}: {exc}") from exc

    if require and not (settings.cma_token and settings.space_id):
        raise ConfigError(
            "Missing Contentful token or space id. Run `ctfexport init` "
            "or set CONTENTFUL_MANAGEMENT_TOKEN and CONTENTFUL_SPACE_ID."
        )
    return settings


def save_settings(settings: ExportSettings, path: Path | None = None) -> Path:
    """Write settings to the JSON config file and return its path."""
    config_path = path or CTFEXPORT_CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")
    return config_path
