import pydantic
import pytest

from di_assistant.config.settings import Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("OPENAI_API_KEY", "HTTP_TIMEOUT", "LOOKUP_TIMEOUT", "VOICE_ENABLED", "DRUG_REFERENCE_RELAY_URL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_settings_defaults(clean_env, tmp_path):
    clean_env.setenv("DI_ASSISTANT_CONFIG_FILE", str(tmp_path / "missing.yaml"))
    clean_env.chdir(tmp_path)

    s = Settings(_env_file=None)

    assert s.http_timeout == 30.0
    assert s.lookup_timeout == 10.0
    assert s.drug_reference_relay_url is None
    assert s.openai_configured is False


def test_yaml_is_overridden_by_environment(clean_env, tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("lookup_timeout: 5\nhttp_timeout: 12\nvoice_enabled: true\n", encoding="utf-8")
    clean_env.setenv("DI_ASSISTANT_CONFIG_FILE", str(cfg))
    clean_env.setenv("HTTP_TIMEOUT", "20")

    s = Settings(_env_file=None)

    assert s.lookup_timeout == 5.0
    assert s.http_timeout == 20.0
    assert s.voice_enabled is True


def test_short_api_key_is_rejected(clean_env):
    with pytest.raises(pydantic.ValidationError):
        Settings(_env_file=None, openai_api_key="short")
