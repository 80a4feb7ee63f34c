"""Service configuration and the Redis client built from it."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import redis
import yaml


def _get(data: Mapping[str, Any], key: str, kind: type, default: Any) -> Any:
    """Look a key up without regard to case and check its type."""
    value = next(
        (v for k, v in data.items() if isinstance(k, str) and k.lower() == key.lower()),
        default,
    )
    if value is None and kind is Mapping:
        value = {}
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ValueError(f"{key} must be {kind.__name__}, got {value!r}")
    return value


@dataclass
class RateLimitConfig:
    """Token bucket settings: tokens added per second and bucket size."""

    rate: int = 0
    capacity: int = 0


@dataclass
class RedisConfig:
    """Where the shared Redis lives."""

    host: str = ""
    password: str = ""
    db: int = 0


@dataclass
class Config:
    """Settings for the gateway and the user service."""

    name: str = ""
    host: str = "0.0.0.0"
    port: int = 0
    mode: str = "pro"
    listen_on: str = ""
    user_rpc: dict[str, Any] = field(default_factory=dict)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        if not isinstance(data, Mapping):
            raise ValueError("configuration must be a mapping")
        rate = _get(data, "RateLimit", Mapping, {})
        red = _get(data, "RedisConfig", Mapping, {})
        port = _get(data, "Port", int, 0)
        db = _get(red, "Db", int, 0)
        if not 0 <= port <= 65535:
            raise ValueError(f"Port out of range: {port}")
        if not -128 <= db <= 127:
            raise ValueError(f"RedisConfig.Db out of range: {db}")
        return cls(
            name=_get(data, "Name", str, ""),
            host=_get(data, "Host", str, "0.0.0.0"),
            port=port,
            mode=_get(data, "Mode", str, "pro"),
            listen_on=_get(data, "ListenOn", str, ""),
            user_rpc=dict(_get(data, "UserRPC", Mapping, {})),
            rate_limit=RateLimitConfig(_get(rate, "Rate", int, 0), _get(rate, "Capacity", int, 0)),
            redis=RedisConfig(_get(red, "Host", str, ""), _get(red, "Pass", str, ""), db),
        )


def load_config(path: str | Path) -> Config:
    """Read a YAML (or JSON) configuration file."""
    with open(path, encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    return Config.from_dict({} if data is None else data)


def create_redis(redis_config: RedisConfig) -> redis.Redis:
    """Build a Redis client; ``host`` may carry a ``:port`` suffix."""
    host, sep, port_text = redis_config.host.rpartition(":")
    if not sep:
        host, port_text = redis_config.host, "6379"
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"invalid redis address: {redis_config.host!r}") from None
    return redis.Redis(
        host=host or "localhost",
        port=port,
        password=redis_config.password or None,
        db=redis_config.db,
    )