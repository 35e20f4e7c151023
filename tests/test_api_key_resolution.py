from core.config import fal_key, resolve_api_key


def test_resolve_api_key_prefers_explicit(monkeypatch):
    monkeypatch.setenv("FAL_KEY", "env-value")
    assert resolve_api_key(" explicit ", "FAL_KEY") == "explicit"


def test_resolve_api_key_falls_back_to_first_non_empty_env(monkeypatch):
    monkeypatch.setenv("FAL_KEY", "   ")
    monkeypatch.setenv("FAL_API_KEY", "fal-value")
    assert resolve_api_key(None, "FAL_KEY", "FAL_API_KEY") == "fal-value"


def test_resolve_api_key_empty_when_nothing_set(monkeypatch):
    monkeypatch.delenv("FAL_KEY", raising=False)
    assert resolve_api_key(None, "FAL_KEY") == ""


def test_fal_key_reads_explicit_env_mapping(monkeypatch):
    monkeypatch.setenv("FAL_KEY", "process-value")
    assert fal_key({"FAL_KEY": " mapped "}) == "mapped"
    assert fal_key({}) == ""
    assert fal_key() == "process-value"
