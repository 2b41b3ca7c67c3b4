import logging

from memorygames.logging_config import LOG_LEVEL_ENV, configure_logging


def capture_basic_config(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    return calls


def test_default_level_used_without_env(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    calls = capture_basic_config(monkeypatch)
    configure_logging(default_level=logging.WARNING)
    assert calls[0]["level"] == logging.WARNING
    assert "%(name)s" in calls[0]["format"]


def test_env_var_overrides_level(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
    calls = capture_basic_config(monkeypatch)
    configure_logging()
    assert calls[0]["level"] == logging.DEBUG


def test_unknown_level_name_falls_back(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")
    calls = capture_basic_config(monkeypatch)
    configure_logging()
    assert calls[0]["level"] == logging.INFO
