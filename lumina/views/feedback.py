import logging

import streamlit as st

from lumina.state import view_state

logger = logging.getLogger(__name__)


def handle_result(ctx, result, action, view_name=None):
    """Reconcile views after a mutation.

    A successful write leaves the calling view's optimistic copy in place and
    sends every other view back to loading. A failed write drops the view's
    optimistic copy and bumps the refresh key so the next render re-reads
    authoritative state.
    """
    if result.ok:
        view_state.mark_stale(except_view=view_name)
        if result.degraded:
            st.toast(f"{action}: saved on this device only, backend unavailable.")
        return True
    logger.warning("%s failed: %s", action, result.reason)
    st.session_state["feedback.warning"] = f"{action} failed: {result.reason}"
    if view_name:
        view_state.clear_slice(view_name)
    ctx.trigger_refresh()
    return False


def render_pending_warning():
    message = st.session_state.pop("feedback.warning", None)
    if message:
        st.warning(message)


def render_load_error(view_name, payload):
    st.error(f"Could not load this view: {payload.get('error')}")
    if st.button("Try again", key=f"{view_name}.retry"):
        view_state.retry(view_name)
        st.rerun()
