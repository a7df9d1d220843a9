from datetime import date

import pytest

from lumina.context import AppContext


def test_preferences_persist_through_store(store):
    ctx = AppContext.load(store)
    assert ctx.theme == "light"
    assert ctx.install_prompted is False

    ctx.toggle_theme()
    ctx.install_prompted = True
    ctx.notifications_enabled = True
    ctx.save(store)

    reloaded = AppContext.load(store)
    assert reloaded.theme == "dark"
    assert reloaded.install_prompted is True
    assert reloaded.notifications_enabled is True
    assert reloaded.notification_prompted is False


def test_unknown_stored_theme_falls_back(store):
    store.set_json("ui.theme", "neon")

    assert AppContext.load(store).theme == "light"


def test_navigate_and_refresh():
    ctx = AppContext()

    ctx.navigate("day", date(2026, 3, 10))
    assert ctx.current_view == "day"
    assert ctx.current_date == date(2026, 3, 10)
    assert ctx.trigger_refresh() == 1

    with pytest.raises(ValueError):
        ctx.navigate("calendar")


def test_payload_access():
    ctx = AppContext(payload={"store": "s"})

    assert ctx["store"] == "s"
    assert ctx.get("settings") is None
