"""Runtime configuration.

Values come from explicit overrides first, then ``KUPLI_*`` environment
variables, then defaults.
"""

from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from .records.loader import DEFAULT_LINKS_PATH

ENV_PREFIX = "KUPLI_"


class KupliConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    links_path: str = Field(
        default=DEFAULT_LINKS_PATH,
        min_length=1,
        description="Repository-relative path of the link record file.",
    )
    context_lines: NonNegativeInt = Field(
        default=3,
        description="Unchanged lines shown around each diff hunk.",
    )
    log_level: Optional[str] = Field(
        default=None,
        description="Package log level; logging stays disabled when unset.",
    )


def load_config(**overrides: Any) -> KupliConfig:
    """Build the config from ``KUPLI_*`` environment variables and overrides.

    Raises pydantic ``ValidationError`` on invalid values.
    """
    values: dict[str, Any] = {}
    for name in KupliConfig.model_fields:
        raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None and raw.strip():
            values[name] = raw.strip()
    values.update({key: value for key, value in overrides.items() if value is not None})
    return KupliConfig.model_validate(values)
