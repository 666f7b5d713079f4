"""
Runtime configuration.

Defaults are usable as is; environment variables prefixed with CHECKERS_ override them (see `Settings.from_env`).
"""

import os
from typing import Optional, Self

from pydantic import BaseModel, field_validator

from src.checkers.layout import is_valid_layout
from src.core.exceptions import InvalidLayoutError
from src.core.shared_types import Color

ENV_PREFIX = "CHECKERS_"

# seconds a move may stay unresolved before input arriving meanwhile is treated as a stalled completion
DEFAULT_MOVE_LOCK_TIMEOUT = 5.0


class Settings(BaseModel):
    database_url: str = "sqlite:///checkers.db"
    first_player: Color = Color.WHITE
    starting_layout: Optional[str] = None
    move_lock_timeout: float = DEFAULT_MOVE_LOCK_TIMEOUT
    strict_invariants: bool = True

    @field_validator("starting_layout")
    @classmethod
    def validate_starting_layout(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not is_valid_layout(value):
            raise InvalidLayoutError(f"Cannot use {value!r} as starting layout.")
        return value

    @field_validator("move_lock_timeout")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("move_lock_timeout must be a positive number of seconds")
        return value

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> Self:
        """
        Build settings from CHECKERS_* variables, e.g. CHECKERS_MOVE_LOCK_TIMEOUT=2.5 .

        An empty value means None for the fields that default to None, and "use the default" for all others.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, Optional[str]] = {}
        for name, field in cls.model_fields.items():
            key = f"{ENV_PREFIX}{name.upper()}"
            if key not in environ:
                continue
            if environ[key]:
                values[name] = environ[key]
            elif field.default is None:
                values[name] = None
        return cls.model_validate(values)
