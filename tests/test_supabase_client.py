from unittest.mock import MagicMock

import pytest
import requests

from lumina.data import supabase_client


def make_response(status_code=200, payload=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    response.content = b"" if payload is None else b"x"
    response.json.return_value = payload
    response.text = str(payload)
    return response


@pytest.fixture
def session():
    session = MagicMock()
    supabase_client.configure(
        lambda: "https://demo.supabase.co/",
        lambda: "anon-key",
        timeout=5,
        session=session,
    )
    yield session
    supabase_client.configure(lambda: None, lambda: None, session=supabase_client._build_session())


def test_select_builds_postgrest_query(session):
    session.request.return_value = make_response(payload=[{"id": "1"}])

    rows = supabase_client.select("tasks", filters={"date": "2026-03-11"}, order="date")

    assert rows == [{"id": "1"}]
    method, url = session.request.call_args.args
    kwargs = session.request.call_args.kwargs
    assert method == "GET"
    assert url == "https://demo.supabase.co/rest/v1/tasks"
    assert kwargs["params"] == {"select": "*", "date": "eq.2026-03-11", "order": "date.asc"}
    assert kwargs["headers"]["apikey"] == "anon-key"
    assert kwargs["headers"]["Authorization"] == "Bearer anon-key"
    assert kwargs["timeout"] == 5.0


def test_insert_asks_for_representation(session):
    session.request.return_value = make_response(201, payload=[{"id": "1", "title": "New"}])

    row = supabase_client.insert("tasks", {"id": "1", "title": "New"})

    assert row == {"id": "1", "title": "New"}
    kwargs = session.request.call_args.kwargs
    assert kwargs["json"] == [{"id": "1", "title": "New"}]
    assert kwargs["headers"]["Prefer"] == "return=representation"


def test_upsert_merges_on_conflict_column(session):
    session.request.return_value = make_response(201, payload=[{"date": "2026-03-11"}])

    supabase_client.upsert("reflections", {"date": "2026-03-11"}, on_conflict="date")

    kwargs = session.request.call_args.kwargs
    assert kwargs["params"] == {"on_conflict": "date"}
    assert kwargs["headers"]["Prefer"].startswith("resolution=merge-duplicates")


def test_delete_accepts_empty_body(session):
    session.request.return_value = make_response(204)

    assert supabase_client.delete("tasks", "abc") is None
    assert session.request.call_args.kwargs["params"] == {"id": "eq.abc"}


def test_error_status_raises_backend_error(session):
    session.request.return_value = make_response(400, payload={"message": "bad column"}, reason="Bad Request")

    with pytest.raises(supabase_client.BackendError) as excinfo:
        supabase_client.update("tasks", "abc", {"nope": 1})

    assert excinfo.value.status_code == 400
    assert excinfo.value.detail == {"message": "bad column"}


def test_transport_failure_raises_backend_error(session):
    session.request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(supabase_client.BackendError) as excinfo:
        supabase_client.select("tasks")

    assert excinfo.value.status_code is None


def test_missing_configuration_raises_not_configured(session):
    supabase_client.configure(lambda: "", lambda: "anon-key", session=session)

    with pytest.raises(supabase_client.BackendNotConfigured):
        supabase_client.select("tasks")
    assert not supabase_client.is_configured()
    session.request.assert_not_called()
