from topstories.settings import Settings


def test_cors_origins_accepts_json_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", '["https://a.com", "http://localhost:3000"]')
    assert Settings().cors_origins == ["https://a.com", "http://localhost:3000"]


def test_cors_origins_accepts_comma_separated_string():
    settings = Settings(CORS_ORIGINS="https://a.com, https://b.com,")
    assert settings.cors_origins == ["https://a.com", "https://b.com"]


def test_hn_and_healthcheck_settings_from_env(monkeypatch):
    monkeypatch.setenv("HN_API_BASE_URL", "https://hn.example")
    monkeypatch.setenv("HEALTHCHECK_IO_ID", "1234-abcd")

    settings = Settings()

    assert settings.hn_api_base_url == "https://hn.example"
    assert settings.healthcheck_io_id == "1234-abcd"
    assert settings.healthcheck_base_url == "https://hc-ping.com"
