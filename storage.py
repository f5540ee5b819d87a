"""Key-value persistence standing in for browser local storage.

All values are strings; JSON helpers sit on top.
"""
import json
import logging
import os
import re
import uuid

import streamlit as st

from settings import load_settings

logger = logging.getLogger(__name__)

CART_KEY = "cart"
ORDER_PLACED_KEY = "orderPlaced"
ADMIN_TOKEN_KEY = "adminToken"
EDITING_PRODUCT_KEY = "editingProduct"

# never written to disk
SESSION_ONLY_KEYS = frozenset({ADMIN_TOKEN_KEY})

_CLIENT_ID_RE = re.compile(r"^[0-9a-f]{32}$")


class StorageError(Exception):
    pass


class KeyValueStorage:
    def read(self, key):
        raise NotImplementedError

    def write(self, key, value):
        raise NotImplementedError

    def clear(self, key):
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial=None):
        self.data = dict(initial or {})

    def read(self, key):
        return self.data.get(key)

    def write(self, key, value):
        self.data[key] = str(value)

    def clear(self, key):
        self.data.pop(key, None)


class SessionStateStorage(KeyValueStorage):
    """Lives as long as the Streamlit session (lost on browser reload)."""

    PREFIX = "_ls_"

    def read(self, key):
        return st.session_state.get(self.PREFIX + key)

    def write(self, key, value):
        st.session_state[self.PREFIX + key] = str(value)

    def clear(self, key):
        st.session_state.pop(self.PREFIX + key, None)


class FileStorage(KeyValueStorage):
    """JSON file on disk; survives reloads. Last writer wins."""

    def __init__(self, path):
        self.path = path

    def _load(self):
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except ValueError as e:
                raise StorageError(f"Storage file {self.path} is corrupt") from e
        return data if isinstance(data, dict) else {}

    def _save(self, data):
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp, self.path)

    def read(self, key):
        return self._load().get(key)

    def write(self, key, value):
        data = self._load()
        data[key] = str(value)
        self._save(data)

    def clear(self, key):
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class SplitStorage(KeyValueStorage):
    """Sends `private_keys` to one backend and everything else to another."""

    def __init__(self, shared, private, private_keys=SESSION_ONLY_KEYS):
        self.shared = shared
        self.private = private
        self.private_keys = frozenset(private_keys)

    def _pick(self, key):
        return self.private if key in self.private_keys else self.shared

    def read(self, key):
        return self._pick(key).read(key)

    def write(self, key, value):
        self._pick(key).write(key, value)

    def clear(self, key):
        self._pick(key).clear(key)


def read_json(storage, key, default=None):
    raw = storage.read(key)
    if raw is None or raw == "":
        return default
    try:
        return json.loads(raw)
    except ValueError as e:
        raise StorageError(f"Stored value for {key!r} is not valid JSON") from e


def write_json(storage, key, value):
    storage.write(key, json.dumps(value, ensure_ascii=False))


def is_client_id(value):
    return isinstance(value, str) and bool(_CLIENT_ID_RE.match(value))


def client_file(storage_dir, cid):
    if not is_client_id(cid):
        raise StorageError(f"Bad client id {cid!r}")
    return os.path.join(storage_dir, f"{cid}.json")


def client_id():
    """Per-browser id kept in the page URL (?sid=...), minted on first visit."""
    cid = st.query_params.get("sid")
    if not is_client_id(cid):
        cid = uuid.uuid4().hex
        st.query_params["sid"] = cid
    return cid


def get_storage():
    # One backend instance per session
    if "_storage" not in st.session_state:
        cfg = load_settings()
        if cfg.storage_backend == "file":
            path = client_file(cfg.storage_dir, client_id())
            logger.info("Using file storage at %s", path)
            st.session_state._storage = SplitStorage(FileStorage(path), SessionStateStorage())
        else:
            st.session_state._storage = SessionStateStorage()
    return st.session_state._storage
