from datetime import date

import streamlit as st

from lumina.aggregations import navigate_date
from lumina.state import view_state

ACTIVE_VIEW_KEY = "ui.active_view"


# These run as widget callbacks, before the next script run instantiates the
# view selector, so the selector's state can be rewritten here.


def _enter(ctx, view, day=None):
    ctx.navigate(view, day)
    # A view re-reads its data every time it is opened.
    view_state.retry(view)


def go_to(ctx, view, day=None):
    _enter(ctx, view, day)
    st.session_state[ACTIVE_VIEW_KEY] = view


def shift_date(ctx, direction):
    ctx.current_date = navigate_date(ctx.current_view, ctx.current_date, direction)


def go_today(ctx):
    ctx.current_date = date.today()


def sync_from_selector(ctx):
    selected = st.session_state.get(ACTIVE_VIEW_KEY)
    if selected:
        _enter(ctx, selected)
    else:
        st.session_state[ACTIVE_VIEW_KEY] = ctx.current_view
