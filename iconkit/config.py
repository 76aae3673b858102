"""Runtime settings.

Defaults live on the dataclass; `Settings.from_env` lets the command line
override them through `ICONKIT_*` variables.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from iconkit.errors import ConfigError

DEFAULT_ICO_SIZES: Tuple[Tuple[int, int], ...] = (
    (16, 16),
    (24, 24),
    (32, 32),
    (48, 48),
    (64, 64),
    (128, 128),
    (256, 256),
)

ENV_DIR_MODE = "ICONKIT_DIR_MODE"
ENV_LOG_LEVEL = "ICONKIT_LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    """Immutable configuration shared by the services.

    Fields:
        dir_mode: Permission bits for directories created on demand.
        ico_sizes: Frame sizes written into ICO files.
        log_level: Root log level for the command line.
    """
    dir_mode: int = 0o755
    ico_sizes: Tuple[Tuple[int, int], ...] = DEFAULT_ICO_SIZES
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        dir_mode = cls.dir_mode
        raw_mode = env.get(ENV_DIR_MODE)
        if raw_mode:
            try:
                dir_mode = int(raw_mode, 8)
            except ValueError as exc:
                raise ConfigError(f"{ENV_DIR_MODE} must be an octal mode, got {raw_mode!r}") from exc

        log_level = env.get(ENV_LOG_LEVEL, cls.log_level).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"{ENV_LOG_LEVEL} is not a log level: {log_level!r}")

        return cls(dir_mode=dir_mode, log_level=log_level)
