"""Tests for JwtConfig from environment."""

import os

import pytest

from app.jwt_util.config import JwtConfig


def test_config_requires_secret():
    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        with _env({}):
            JwtConfig.from_environ()


def test_config_blank_secret_is_missing():
    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        with _env({"JWT_SECRET_KEY": "   "}):
            JwtConfig.from_environ()


def test_config_defaults():
    with _env({"JWT_SECRET_KEY": "s" * 32}):
        cfg = JwtConfig.from_environ()
    assert cfg.secret_key == "s" * 32
    assert cfg.algorithm == "HS256"
    assert cfg.issuer == "calendar-api"
    assert cfg.ttl_seconds == 3600
    assert cfg.clock_skew_seconds == 120


def test_config_overrides():
    env = {
        "JWT_SECRET_KEY": "k" * 48,
        "JWT_ALGORITHM": "HS512",
        "JWT_ISSUER": "https://calendar.example.com",
        "JWT_TTL_SECONDS": "600",
        "CLOCK_SKEW_SECONDS": "5",
    }
    with _env(env):
        cfg = JwtConfig.from_environ()
    assert cfg.algorithm == "HS512"
    assert cfg.issuer == "https://calendar.example.com"
    assert cfg.ttl_seconds == 600
    assert cfg.clock_skew_seconds == 5


def test_config_bad_int_falls_back_to_default():
    with _env({"JWT_SECRET_KEY": "s" * 32, "JWT_TTL_SECONDS": "soon"}):
        cfg = JwtConfig.from_environ()
    assert cfg.ttl_seconds == 3600


def _env(env: dict):
    class _Env:
        def __enter__(self):
            self._saved = os.environ.copy()
            os.environ.clear()
            os.environ.update(env)
            return self

        def __exit__(self, *args):
            os.environ.clear()
            os.environ.update(self._saved)
            return False

    return _Env()
