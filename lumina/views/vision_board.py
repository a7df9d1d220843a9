import base64
import binascii
import html

import streamlit as st

from lumina.aggregations import without_item
from lumina.constants import GENERATED_VISION_CATEGORY
from lumina.data import data_service
from lumina.services import ai_service
from lumina.state import view_state
from lumina.views.feedback import handle_result, render_load_error

VIEW_NAME = "vision"


def _generate(ctx):
    prompt = str(st.session_state.get("vision.prompt", "")).strip()
    if not prompt:
        return
    with st.spinner("Visualizing your dream…"):
        image = ai_service.generate_vision_image(prompt)
    if not image:
        st.session_state["feedback.warning"] = "The image could not be generated. Try a different description."
        return
    result = data_service.save_vision_item(image, label=prompt, category=GENERATED_VISION_CATEGORY)
    if handle_result(ctx, result, "Save vision", VIEW_NAME):
        st.session_state["vision.prompt"] = ""
        # Reload from the backend so ordering matches the stored items.
        view_state.clear_slice(VIEW_NAME)


def _delete(ctx, item_id):
    items = view_state.get_value(VIEW_NAME, "items", [])
    view_state.set_value(VIEW_NAME, "items", without_item(items, item_id))
    st.session_state.pop("vision.confirm", None)
    handle_result(ctx, data_service.delete_vision_item(item_id), "Remove vision", VIEW_NAME)


def _suggest():
    goals = st.session_state.get("vision.goals", "")
    with st.spinner("Thinking about habits…"):
        st.session_state["vision.suggestions"] = ai_service.get_planning_suggestions(goals)


def _adopt(ctx, suggestion):
    result = data_service.create_habit(suggestion["habit"])
    if handle_result(ctx, result, "Add habit"):
        st.toast(f"Added habit: {suggestion['habit']}")
        ctx.trigger_refresh()


def image_source(content):
    if content.startswith("data:") and ";base64," in content:
        try:
            return base64.b64decode(content.split(",", 1)[1])
        except (binascii.Error, ValueError):
            return None
    return content


def _render_item(ctx, item):
    source = image_source(item.content)
    if source:
        st.image(source, use_container_width=True)
    else:
        st.caption("Image unavailable")
    created = (item.created_at or "")[:10]
    st.markdown(
        f"<div class='vision-caption'><b>{html.escape(item.category)}</b> · {html.escape(item.label or '')} · {created}</div>",
        unsafe_allow_html=True,
    )
    if st.session_state.get("vision.confirm") == item.id:
        confirm_cols = st.columns(2)
        confirm_cols[0].button("Remove", key=f"vision.confirm.{item.id}", on_click=_delete, args=(ctx, item.id))
        if confirm_cols[1].button("Keep", key=f"vision.keep.{item.id}"):
            st.session_state.pop("vision.confirm", None)
            st.rerun()
    elif st.button("✕ Remove", key=f"vision.delete.{item.id}", type="tertiary"):
        st.session_state["vision.confirm"] = item.id
        st.rerun()


def render_vision_board(ctx):
    payload = view_state.load(VIEW_NAME, ctx.refresh_key, lambda: {"items": data_service.get_vision_items()})
    if payload["status"] == view_state.ERROR:
        render_load_error(VIEW_NAME, payload)
        return

    st.markdown("<div class='section-title'>Vision board</div>", unsafe_allow_html=True)
    with st.form(key="vision.generate_form"):
        st.text_input("Describe a dream", key="vision.prompt", placeholder="A successful tech startup office in Tokyo…")
        st.form_submit_button("Visualize", on_click=_generate, args=(ctx,))

    items = view_state.get_value(VIEW_NAME, "items", [])
    if not items:
        st.info("Your board is empty. Describe a dream above to create the first image.")
    cols = st.columns(3)
    for idx, item in enumerate(items):
        with cols[idx % 3]:
            _render_item(ctx, item)

    st.divider()
    st.markdown("<div class='section-title'>Habits for your goals</div>", unsafe_allow_html=True)
    with st.form(key="vision.goals_form"):
        st.text_area("Goals", key="vision.goals", placeholder="Run a half marathon, read 24 books…", height=80)
        st.form_submit_button("Suggest habits", on_click=_suggest)
    for idx, suggestion in enumerate(st.session_state.get("vision.suggestions") or []):
        row = st.columns([5, 1])
        row[0].markdown(f"**{suggestion['habit']}**  \n{suggestion['description']}")
        row[1].button("Add", key=f"vision.adopt.{idx}", on_click=_adopt, args=(ctx, suggestion))
