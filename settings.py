import os
from dataclasses import dataclass

import streamlit as st

DEFAULT_API_ORIGIN = "https://nukesul-boood-2ab7.twc1.net"


def _get_cfg(key: str, default: str | None = None) -> str | None:
    try:
        if key in st.secrets:
            return str(st.secrets[key])
    except Exception:
        # No secrets.toml: fall through to env vars
        pass
    v = os.getenv(key)
    if v is None or v == "":
        return default
    return v


def _get_bool(key: str, default: bool = False) -> bool:
    v = _get_cfg(key)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


def _get_ids(key: str) -> frozenset:
    raw = _get_cfg(key, "") or ""
    ids = set()
    for part in raw.split(","):
        part = part.strip()
        if part.isdigit():
            ids.add(int(part))
    return frozenset(ids)


@dataclass(frozen=True)
class Settings:
    api_origin: str = DEFAULT_API_ORIGIN
    api_timeout: float = 30.0
    checkout_url: str = "/checkout"
    storage_backend: str = "session"
    storage_dir: str = ".storefront_storage"
    pizza_subcategory_ids: frozenset = frozenset()
    block_branch_switch_after_order: bool = False
    log_level: str = "INFO"
    timezone: str = "Asia/Bishkek"


def load_settings() -> Settings:
    timeout = _get_cfg("API_TIMEOUT", "30")
    try:
        api_timeout = float(timeout)
    except ValueError:
        raise RuntimeError(f"Bad config: API_TIMEOUT={timeout!r} is not a number.")

    backend = (_get_cfg("STORAGE_BACKEND", "session") or "session").lower()
    if backend not in ("session", "file"):
        raise RuntimeError(f"Bad config: STORAGE_BACKEND must be 'session' or 'file', got {backend!r}.")

    return Settings(
        api_origin=(_get_cfg("API_ORIGIN", DEFAULT_API_ORIGIN) or DEFAULT_API_ORIGIN).rstrip("/"),
        api_timeout=api_timeout,
        checkout_url=_get_cfg("CHECKOUT_URL", "/checkout"),
        storage_backend=backend,
        storage_dir=_get_cfg("STORAGE_DIR", ".storefront_storage"),
        pizza_subcategory_ids=_get_ids("PIZZA_SUBCATEGORY_IDS"),
        block_branch_switch_after_order=_get_bool("BLOCK_BRANCH_SWITCH_AFTER_ORDER", False),
        log_level=(_get_cfg("LOG_LEVEL", "INFO") or "INFO").upper(),
        timezone=_get_cfg("TIMEZONE", "Asia/Bishkek"),
    )
