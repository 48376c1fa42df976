# src/objectstore/config.py
"""
Store configuration.

A store is configured with at most four options:

- ``jsons`` (default True): encode values as JSON text before they leave
  the process. When False only strings may be written to the tiers.
- ``dates`` (default False): revive serialized datetimes on read. Requires
  ``jsons``.
- ``manual`` (default False): keep writes in the local map until
  :meth:`~objectstore.store.Store.persist` is called.
- ``expiry`` (default 600): TTL in seconds for cache tier writes. The
  string ``"max"`` selects the cache tier maximum of 21600 (6 hours).

Raw options are normalized by :func:`resolve_config` into an immutable
:class:`StoreConfig`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_SECONDS = 600
MAX_EXPIRY_SECONDS = 21600
MAX_EXPIRY_SENTINEL = "max"
OPTION_KEYS = ("jsons", "dates", "manual", "expiry")


class StoreConfig(BaseModel):
    """Resolved, immutable store options.

    Attributes:
        jsons: Serialize values as JSON before writing to external tiers.
        dates: Revive serialized datetimes when reading.
        manual: Suppress external writes until ``persist()``.
        expiry: Cache tier TTL in seconds.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    jsons: bool = Field(default=True, strict=True, description="Serialize values as JSON")
    dates: bool = Field(default=False, strict=True, description="Revive serialized dates")
    manual: bool = Field(default=False, strict=True, description="Only write on persist()")
    expiry: int = Field(
        default=DEFAULT_EXPIRY_SECONDS,
        ge=1,
        le=MAX_EXPIRY_SECONDS,
        strict=True,
        description="Cache TTL in seconds",
    )


def resolve_config(raw: Mapping[str, Any] | StoreConfig | None = None) -> StoreConfig:
    """Normalize and validate raw store options.

    Args:
        raw: Option mapping, an already resolved config, or None for the
            defaults. The mapping is not modified.

    Returns:
        The resolved configuration.

    Raises:
        ConfigError: If ``dates`` is set without ``jsons``, an unknown option
            is present, or an option has an invalid value.
    """
    if isinstance(raw, StoreConfig):
        return raw
    if raw is None:
        raw = {"jsons": True}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Store options must be a mapping, got {type(raw).__name__}")

    options = dict(raw)
    if options.get("jsons") is None:
        options["jsons"] = True
    if options.get("dates") is None:
        options["dates"] = False
    options["manual"] = options.get("manual") or False
    options["expiry"] = options.get("expiry") or DEFAULT_EXPIRY_SECONDS
    if options["expiry"] == MAX_EXPIRY_SENTINEL:
        options["expiry"] = MAX_EXPIRY_SECONDS

    if options["dates"] and not options["jsons"]:
        raise ConfigError("dates requires jsons: set jsons=True to use dates=True")
    if len(options) > len(OPTION_KEYS):
        unknown = sorted(str(k) for k in options if k not in OPTION_KEYS)
        raise ConfigError(f"Unknown store option(s): {', '.join(unknown)}")

    try:
        config = StoreConfig(**options)
    except ValidationError as e:
        raise ConfigError(f"Invalid store options: {e}") from e

    logger.debug(
        f"Resolved store config: jsons={config.jsons}, dates={config.dates}, "
        f"manual={config.manual}, expiry={config.expiry}s"
    )
    return config


__all__ = [
    "DEFAULT_EXPIRY_SECONDS",
    "MAX_EXPIRY_SECONDS",
    "MAX_EXPIRY_SENTINEL",
    "OPTION_KEYS",
    "StoreConfig",
    "resolve_config",
]
