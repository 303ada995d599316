"""
Service configuration, read from environment variables.

    VFS_VOLUMES       comma-separated volumes to provision (default: all valid volumes)
    VFS_LOG_LEVEL     logging level name (default: INFO)
    VFS_PRINT_ROOT    show the root line in printed trees (default: false)
"""

import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, field_validator

from vfsapi.filesystem.paths import VALID_VOLUME_NAMES, is_valid_volume_name
from vfsapi.filesystem.names import item_name_key

TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime settings for the file system service"""
    volumes: List[str] = list(VALID_VOLUME_NAMES)
    log_level: str = "INFO"
    print_root: bool = False

    @field_validator("volumes")
    @classmethod
    def check_volumes(cls, volumes: List[str]) -> List[str]:
        if not volumes:
            raise ValueError("at least one volume is required")

        seen = set()
        result = []
        for volume in volumes:
            if not is_valid_volume_name(volume):
                raise ValueError(f"'{volume}' is not a valid volume name (expected one of {', '.join(VALID_VOLUME_NAMES)})")
            if item_name_key(volume) in seen:
                raise ValueError(f"volume '{volume}' is listed twice")
            seen.add(item_name_key(volume))
            # Keep the canonical spelling
            result.append(next(v for v in VALID_VOLUME_NAMES if item_name_key(v) == item_name_key(volume)))
        return result

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, log_level: str) -> str:
        log_level = log_level.strip().upper()
        if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level '{log_level}'")
        return log_level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Validated Settings
    """
    if environ is None:
        environ = os.environ

    values = {}

    volumes = environ.get("VFS_VOLUMES")
    if volumes:
        values["volumes"] = [v.strip() for v in volumes.split(",") if v.strip()]

    log_level = environ.get("VFS_LOG_LEVEL")
    if log_level:
        values["log_level"] = log_level

    print_root = environ.get("VFS_PRINT_ROOT")
    if print_root:
        values["print_root"] = print_root.strip().lower() in TRUE_VALUES

    return Settings(**values)
