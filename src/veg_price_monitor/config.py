from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from .http_client import DEFAULT_USER_AGENT
from .models import CategorySource


DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_RETRY_COUNT = 3

_BASE_URL = "https://www.fengzhansy.com/wchyzyg/wap.shtml?method=ztmodel&ztid=gfl00"
# Store branch selection (文华路店); the catalogue is empty without it.
DEFAULT_COOKIE = (
    "shdzarea=%E6%96%87%E5%8D%8E%E8%B7%AF; scsmdid=012; "
    "shdzmdname=%E5%87%A4%E5%B1%95%E8%B6%85%E5%B8%82%E6%96%87%E5%8D%8E%E8%B7%AF%E5%BA%97"
)


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Config:
    url_fv: str = ""
    url_lv: str = ""
    url_rv: str = ""
    url_m: str = ""
    url_c: str = ""
    cookie: str = ""
    user_agent: str = DEFAULT_USER_AGENT
    timeout: int = DEFAULT_TIMEOUT_SECONDS
    # Loaded and reported, but fetches are never retried.
    retry_count: int = DEFAULT_RETRY_COUNT

    def url_for(self, source: CategorySource) -> str:
        return str(getattr(self, source.config_key, "") or "")


def default_config() -> Config:
    return Config(
        url_fv=f"{_BASE_URL}%E7%93%9C%E6%9E%9C%E8%8A%B1%E8%8F%9C%E7%B1%BB",
        url_lv=f"{_BASE_URL}%E5%8F%B6%E8%8F%9C%E7%B1%BB",
        url_rv=f"{_BASE_URL}%E6%A0%B9%E8%8C%8E%E7%B1%BB",
        url_m=f"{_BASE_URL}%E8%8F%8C%E8%8F%87%E7%B1%BB",
        url_c=f"{_BASE_URL}%E8%B0%83%E5%91%B3%E8%8F%9C",
        cookie=DEFAULT_COOKIE,
        user_agent=DEFAULT_USER_AGENT,
        timeout=DEFAULT_TIMEOUT_SECONDS,
        retry_count=DEFAULT_RETRY_COUNT,
    )


def _as_int(value: Any, key: str) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid {key}: {value!r}") from e


def config_from_dict(data: dict[str, Any]) -> Config:
    known = {f.name for f in fields(Config)}
    values = {k: v for k, v in data.items() if k in known}

    for key in ("url_fv", "url_lv", "url_rv", "url_m", "url_c", "cookie", "user_agent"):
        if key in values:
            values[key] = str(values[key] or "").strip()
    timeout = _as_int(values.get("timeout"), "timeout")
    retry_count = _as_int(values.get("retry_count"), "retry_count")

    if not values.get("url_fv"):
        raise ConfigError("missing url_fv")
    if not values.get("cookie"):
        raise ConfigError("missing cookie")

    values["user_agent"] = values.get("user_agent") or DEFAULT_USER_AGENT
    values["timeout"] = timeout if timeout > 0 else DEFAULT_TIMEOUT_SECONDS
    values["retry_count"] = retry_count if retry_count > 0 else DEFAULT_RETRY_COUNT
    return Config(**values)


def apply_env_overrides(cfg: Config) -> Config:
    changes: dict[str, Any] = {}
    cookie = os.getenv("VEG_PRICE_COOKIE", "").strip()
    if cookie:
        changes["cookie"] = cookie
    user_agent = os.getenv("VEG_PRICE_USER_AGENT", "").strip()
    if user_agent:
        changes["user_agent"] = user_agent
    raw_timeout = os.getenv("VEG_PRICE_TIMEOUT", "").strip()
    if raw_timeout:
        timeout = _as_int(raw_timeout, "VEG_PRICE_TIMEOUT")
        if timeout > 0:
            changes["timeout"] = timeout
    return replace(cfg, **changes) if changes else cfg


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read {p}: {e}") from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"cannot parse {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"cannot parse {p}: expected a JSON object")
    return apply_env_overrides(config_from_dict(data))


def get_config(path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    try:
        return load_config(path)
    except ConfigError as e:
        print(f"[config] {e}; using built-in defaults", file=sys.stderr, flush=True)
        return apply_env_overrides(default_config())
