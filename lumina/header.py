from datetime import datetime

import streamlit as st

from lumina.aggregations import day_key, view_title
from lumina.constants import DATED_VIEWS
from lumina.data import data_service
from lumina.navigation import go_today, shift_date
from lumina.services.reminders import build_habit_reminder, should_remind

REMINDER_KEY = "reminder.last_sent"


def _toggle_theme(ctx):
    ctx.toggle_theme()
    ctx.save(ctx["store"])


def _dismiss_install(ctx):
    ctx.install_prompted = True
    ctx.save(ctx["store"])


def _answer_notifications(ctx, enabled):
    ctx.notification_prompted = True
    ctx.notifications_enabled = enabled
    ctx.save(ctx["store"])


def _toggle_notifications(ctx):
    ctx.notifications_enabled = bool(st.session_state.get("header.notifications"))
    ctx.save(ctx["store"])


def _render_prompts(ctx):
    if not ctx.install_prompted:
        with st.container(border=True):
            st.markdown("**Keep Lumina one tap away.** Add this page to your home screen from the browser menu.")
            st.button("Got it", key="header.install_ok", on_click=_dismiss_install, args=(ctx,))
    elif not ctx.notification_prompted:
        with st.container(border=True):
            st.markdown("**Habit reminders?** Lumina can nudge you while this tab is open.")
            cols = st.columns(2)
            cols[0].button("Enable", key="header.notify_yes", on_click=_answer_notifications, args=(ctx, True))
            cols[1].button("Not now", key="header.notify_no", on_click=_answer_notifications, args=(ctx, False))


@st.fragment(run_every=60)
def _reminder_tick(ctx):
    if not ctx.notifications_enabled:
        return
    now = datetime.now()
    today_iso = day_key(now.date())
    habits = data_service.get_habits()
    if not should_remind(habits, today_iso, st.session_state.get(REMINDER_KEY), now.hour):
        return
    message = build_habit_reminder(habits, today_iso)
    if message:
        st.toast(message, icon="🔔")
        st.session_state[REMINDER_KEY] = f"{today_iso}:{now.hour}"


def render_header(ctx):
    cols = st.columns([5, 0.6, 0.6, 1, 0.6, 0.6])
    with cols[0]:
        st.markdown(
            f"<div class='page-title'>{view_title(ctx.current_view, ctx.current_date)}</div>",
            unsafe_allow_html=True,
        )
    if ctx.current_view in DATED_VIEWS:
        cols[1].button("‹", key="header.prev", on_click=shift_date, args=(ctx, "prev"), help="Previous")
        cols[2].button("›", key="header.next", on_click=shift_date, args=(ctx, "next"), help="Next")
        cols[3].button("Today", key="header.today", on_click=go_today, args=(ctx,))
    cols[4].button("⟳", key="header.refresh", on_click=ctx.trigger_refresh, help="Reload data")
    cols[5].button(
        "☀️" if ctx.theme == "dark" else "🌙",
        key="header.theme",
        on_click=_toggle_theme,
        args=(ctx,),
        help="Switch theme",
    )

    _render_prompts(ctx)
    if ctx.notification_prompted:
        st.toggle(
            "Habit reminders",
            value=ctx.notifications_enabled,
            key="header.notifications",
            on_change=_toggle_notifications,
            args=(ctx,),
        )
    _reminder_tick(ctx)
