import logging

import streamlit as st

from lumina.constants import (
    VIEW_DASHBOARD,
    VIEW_DAY,
    VIEW_LABELS,
    VIEW_MONTH,
    VIEW_OPTIONS,
    VIEW_VISION,
    VIEW_WEEK,
    VIEW_YEAR,
)
from lumina.navigation import ACTIVE_VIEW_KEY, sync_from_selector
from lumina.state import view_state
from lumina.views.dashboard_view import render_dashboard
from lumina.views.day_view import render_day_view
from lumina.views.month_view import render_month_view
from lumina.views.vision_board import render_vision_board
from lumina.views.week_view import render_week_view
from lumina.views.year_view import render_year_view

logger = logging.getLogger(__name__)

VIEW_RENDERERS = {
    VIEW_DASHBOARD: render_dashboard,
    VIEW_DAY: render_day_view,
    VIEW_WEEK: render_week_view,
    VIEW_MONTH: render_month_view,
    VIEW_YEAR: render_year_view,
    VIEW_VISION: render_vision_board,
}


def _reset_view(ctx, view):
    view_state.clear_slice(view)
    ctx.trigger_refresh()


def render_router(ctx):
    if st.session_state.get(ACTIVE_VIEW_KEY) not in VIEW_OPTIONS:
        st.session_state[ACTIVE_VIEW_KEY] = ctx.current_view
    st.segmented_control(
        "Workspace",
        VIEW_OPTIONS,
        key=ACTIVE_VIEW_KEY,
        format_func=lambda view: VIEW_LABELS.get(view, view),
        on_change=sync_from_selector,
        args=(ctx,),
        label_visibility="collapsed",
    )

    view = ctx.current_view
    renderer = VIEW_RENDERERS.get(view, render_dashboard)
    try:
        renderer(ctx)
    except Exception as exc:
        # Keep the shell usable when a single view blows up mid-render.
        logger.exception("Rendering view %s failed", view)
        st.error(f"Something went wrong while showing this view: {exc}")
        st.button("Reload view", key=f"router.reset.{view}", on_click=_reset_view, args=(ctx, view))
