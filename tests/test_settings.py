from lumina.settings import Settings, get_settings, reset_settings


def test_api_key_alias_and_flags(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "from-alias")
    monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)

    settings = Settings()

    assert settings.gemini_api_key == "from-alias"
    assert settings.ai_configured
    assert not settings.backend_configured


def test_get_settings_applies_non_empty_overrides(monkeypatch):
    monkeypatch.delenv("LUMINA_REQUEST_TIMEOUT", raising=False)
    reset_settings()
    try:
        settings = get_settings({"SUPABASE_URL": "https://x.supabase.co", "SUPABASE_ANON_KEY": "anon", "LUMINA_REQUEST_TIMEOUT": None})

        assert settings.backend_configured
        assert settings.request_timeout == 10.0
        assert get_settings() is settings
    finally:
        reset_settings()
