"""Router configuration objects."""

from __future__ import annotations

import os
from typing import Any, Mapping

import msgspec
from msgspec import Struct

from .requests import DEFAULT_PLACEHOLDER_HOST

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class RouterConfig(Struct, frozen=True):
    """Typed configuration for a :class:`~shallot.routing.Router`."""

    debug: bool = False
    case_sensitive: bool = False
    placeholder_host: str = DEFAULT_PLACEHOLDER_HOST
    not_found_status: int = 404
    not_found_body: str = "Not Found"
    static_max_age: int | None = None

    @classmethod
    def from_mapping(cls, config: "RouterConfig | Mapping[str, Any]") -> "RouterConfig":
        if isinstance(config, RouterConfig):
            return config
        return msgspec.convert(dict(config), type=cls)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, *, prefix: str = "SHALLOT_") -> "RouterConfig":
        """Build a config from ``SHALLOT_*`` environment variables."""

        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for flag in ("debug", "case_sensitive"):
            raw = env.get(f"{prefix}{flag.upper()}")
            if raw is not None:
                values[flag] = raw.strip().lower() in _TRUTHY
        host = env.get(f"{prefix}PLACEHOLDER_HOST")
        if host:
            values["placeholder_host"] = host
        max_age = env.get(f"{prefix}STATIC_MAX_AGE")
        if max_age:
            values["static_max_age"] = int(max_age)
        return msgspec.convert(values, type=cls)
