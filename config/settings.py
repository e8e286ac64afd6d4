from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


DEFAULT_ENDPOINT = "https://eu.api.ovh.com/1.0"


@dataclass
class ApiSettings:
    endpoint: str = DEFAULT_ENDPOINT
    application_key: str = ""
    consumer_key: str = ""
    timeout: float = 30.0


@dataclass
class LoggingSettings:
    level: str = "INFO"
    syslog: bool = False
    timezone: str = "UTC"


@dataclass
class Settings:
    api: ApiSettings = field(default_factory=ApiSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    default_project_id: Optional[str] = None


def load_settings(path: str | Path) -> Settings:
    """
    Load configuration from a YAML file and return a Settings object.
    """
    cfg_path = Path(path)
    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    api = raw.get("api") or {}
    log = raw.get("logging") or {}

    return Settings(
        api=ApiSettings(
            endpoint=str(api.get("endpoint", DEFAULT_ENDPOINT)).rstrip("/"),
            application_key=api.get("applicationKey", ""),
            consumer_key=api.get("consumerKey", ""),
            timeout=float(api.get("timeout", 30)),
        ),
        logging=LoggingSettings(
            level=str(log.get("level", "INFO")).upper(),
            syslog=bool(log.get("syslog", False)),
            timezone=log.get("timezone", "UTC"),
        ),
        default_project_id=raw.get("defaultProjectId"),
    )
