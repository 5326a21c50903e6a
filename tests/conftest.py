"""Shared fixtures for stream interceptor tests."""

import pytest

from stream_interceptor import StreamInterceptor


@pytest.fixture
def interceptor():
    """Provide a fresh interceptor with default settings."""
    return StreamInterceptor()


@pytest.fixture
def no_user_config(monkeypatch, tmp_path):
    """Point config loading at a missing init.py."""
    monkeypatch.setattr(
        "stream_interceptor.config.get_init_script_path", lambda: tmp_path / "init.py"
    )
    return tmp_path / "init.py"
