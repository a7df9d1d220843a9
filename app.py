import logging
import os

import streamlit as st

from lumina.context import AppContext
from lumina.data import data_service, supabase_client
from lumina.data.local_store import LocalStore
from lumina.header import render_header
from lumina.logging_config import configure_logging
from lumina.router import render_router
from lumina.services import ai_service
from lumina.settings import get_settings
from lumina.theme import inject_theme_css
from lumina.views.feedback import render_pending_warning

SECRET_KEYS = (
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "GEMINI_API_KEY",
    "GEMINI_IMAGE_MODEL",
    "GEMINI_TEXT_MODEL",
    "LUMINA_LOCAL_DB_URL",
    "LUMINA_REQUEST_TIMEOUT",
    "LUMINA_LOG_LEVEL",
)
CONTEXT_KEY = "app.ctx"

st.set_page_config(page_title="Lumina", page_icon="✨", layout="wide")

logger = logging.getLogger("lumina.app")


def get_secret(key, default=None):
    env_value = os.getenv(key)
    if env_value:
        return env_value
    try:
        if key in st.secrets:
            return st.secrets[key]
    except Exception:
        # No secrets.toml at all; env vars and .env still apply.
        return default
    return default


@st.cache_resource
def bootstrap():
    settings = get_settings({key: get_secret(key) for key in SECRET_KEYS})
    configure_logging(settings.log_level)
    supabase_client.configure(
        lambda: settings.supabase_url,
        lambda: settings.supabase_anon_key,
        timeout=settings.request_timeout,
    )
    store = LocalStore(settings.local_db_url)
    data_service.configure(supabase_client, store)
    ai_service.configure(get_settings)
    if not settings.backend_configured:
        logger.warning("SUPABASE_URL / SUPABASE_ANON_KEY missing; running on the local cache only")
    if not settings.ai_configured:
        logger.info("No Gemini API key; AI features will use fallbacks")
    return settings, store


settings, store = bootstrap()

if CONTEXT_KEY not in st.session_state:
    st.session_state[CONTEXT_KEY] = AppContext.load(store)
ctx = st.session_state[CONTEXT_KEY]
ctx.payload.update({"store": store, "settings": settings})

inject_theme_css(ctx)
render_header(ctx)
render_pending_warning()
render_router(ctx)
