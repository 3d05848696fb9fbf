from nearbite.core import config


def setup_function(function):
    config.get_settings.cache_clear()


def teardown_function(function):
    config.get_settings.cache_clear()


def test_get_settings_reads_env(monkeypatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "abc123")
    monkeypatch.setenv("KAKAO_REST_API_KEY", "kakao-key")
    monkeypatch.setenv("WORKER_PORT", "9100")
    monkeypatch.setenv("RECO_MAX_PAGES", "5")
    monkeypatch.setenv("RECO_UNSUPPORTED_COUNTRIES", "kp, ir,,")
    monkeypatch.setenv("PAGE_TOKEN_DELAY_MS", "2500")

    settings = config.get_settings()

    assert settings.google_api_key == "abc123"
    assert settings.kakao_api_key == "kakao-key"
    assert settings.worker_port == 9100
    assert settings.max_pages == 5
    assert settings.unsupported_countries == frozenset({"KP", "IR"})
    assert settings.page_token_delay_s == 2.5


def test_provider_timeout_is_clamped(monkeypatch):
    monkeypatch.setenv("PROVIDER_TIMEOUT_MS", "60000")
    assert config.get_settings().provider_timeout_s == 20.0

    config.get_settings.cache_clear()
    monkeypatch.setenv("PROVIDER_TIMEOUT_MS", "10")
    assert config.get_settings().provider_timeout_s == 2.0


def test_default_limit_never_exceeds_max(monkeypatch):
    monkeypatch.setenv("RECO_MAX_LIMIT", "5")
    monkeypatch.setenv("RECO_DEFAULT_LIMIT", "8")

    settings = config.get_settings()

    assert settings.max_limit == 5
    assert settings.default_limit == 5


def test_provider_deadline_is_never_shorter_than_timeout(monkeypatch):
    monkeypatch.setenv("PROVIDER_TIMEOUT_MS", "9000")
    monkeypatch.setenv("PROVIDER_DEADLINE_MS", "3000")
    assert config.get_settings().provider_deadline_s == 9.0

    config.get_settings.cache_clear()
    monkeypatch.setenv("PROVIDER_DEADLINE_MS", "30000")
    assert config.get_settings().provider_deadline_s == 30.0


def test_get_settings_warns_when_missing(monkeypatch, caplog):
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
    monkeypatch.delenv("KAKAO_REST_API_KEY", raising=False)
    monkeypatch.delenv("PROVIDER_TIMEOUT_MS", raising=False)
    monkeypatch.delenv("RECO_MAX_PAGES", raising=False)

    with caplog.at_level("WARNING"):
        settings = config.get_settings()

    assert "GOOGLE_MAPS_API_KEY is not configured" in " ".join(caplog.messages)
    assert "KAKAO_REST_API_KEY is not configured" in " ".join(caplog.messages)
    assert settings.google_api_key == ""
    assert settings.provider_timeout_s == 8.0
    assert settings.max_pages == 3
