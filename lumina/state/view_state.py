import logging

import streamlit as st

logger = logging.getLogger(__name__)

PREFIX = "view"

LOADING = "loading"
READY = "ready"
ERROR = "error"


def _state(state=None):
    return st.session_state if state is None else state


def get_slice(view_name, state=None):
    store = _state(state)
    key = f"{PREFIX}.{view_name}"
    if key not in store:
        store[key] = {"status": LOADING, "key": None, "data": {}, "error": None}
    return store[key]


def load(view_name, load_key, loader, state=None):
    """Run ``loader`` when the view's load key changes and keep the result.

    A slice moves loading -> ready (or error) here; a new load key (date or
    refresh counter change) sends it back to loading.
    """
    payload = get_slice(view_name, state)
    if payload["key"] == load_key and payload["status"] != LOADING:
        return payload
    payload["status"] = LOADING
    payload["key"] = load_key
    try:
        payload["data"] = loader()
    except Exception as exc:
        logger.exception("Loading %s view failed", view_name)
        payload["status"] = ERROR
        payload["error"] = str(exc) or type(exc).__name__
        return payload
    payload["status"] = READY
    payload["error"] = None
    return payload


def get_value(view_name, name, default=None, state=None):
    return get_slice(view_name, state)["data"].get(name, default)


def set_value(view_name, name, value, state=None):
    get_slice(view_name, state)["data"][name] = value


def retry(view_name, state=None):
    payload = get_slice(view_name, state)
    payload["status"] = LOADING
    payload["error"] = None


def clear_slice(view_name, state=None):
    store = _state(state)
    key = f"{PREFIX}.{view_name}"
    if key in store:
        del store[key]


def mark_stale(except_view=None, state=None):
    """Send every loaded view except ``except_view`` back to loading."""
    store = _state(state)
    keep = f"{PREFIX}.{except_view}" if except_view else None
    for key in list(store.keys()):
        if not str(key).startswith(f"{PREFIX}.") or key == keep:
            continue
        payload = store[key]
        payload["status"] = LOADING
        payload["error"] = None
