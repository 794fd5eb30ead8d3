"""Tests for Settings."""

import pytest
from pydantic import ValidationError

from dbcopy.config import DEFAULT_WAIT_TIMEOUT, Settings, WaitSettings

ENV_VARS = [
    "DBCOPY_BUCKET",
    "S3_BUCKET_NAME",
    "DBCOPY_REGION",
    "S3_REGION",
    "S3_ENDPOINT_URL",
    "DBCOPY_WAIT_TIMEOUT",
    "DBCOPY_POLL_MIN_DELAY",
    "DBCOPY_POLL_MAX_DELAY",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestFromEnv:
    def test_defaults(self):
        settings = Settings.from_env(bucket="dumps")

        assert settings.store.bucket == "dumps"
        assert settings.store.region is None
        assert settings.wait.timeout == DEFAULT_WAIT_TIMEOUT
        assert settings.wait.poll_min_delay == 5.0
        assert settings.wait.poll_max_delay == 120.0

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("DBCOPY_BUCKET", "env-bucket")
        monkeypatch.setenv("S3_REGION", "eu-west-1")
        monkeypatch.setenv("S3_ENDPOINT_URL", "http://localhost:9000")
        monkeypatch.setenv("DBCOPY_WAIT_TIMEOUT", "90")
        monkeypatch.setenv("DBCOPY_POLL_MIN_DELAY", "1")
        monkeypatch.setenv("DBCOPY_POLL_MAX_DELAY", "10")
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIA")

        settings = Settings.from_env()

        assert settings.store.bucket == "env-bucket"
        assert settings.store.region == "eu-west-1"
        assert settings.store.endpoint_url == "http://localhost:9000"
        assert settings.store.aws_access_key_id == "AKIA"
        assert settings.wait.timeout == 90
        assert settings.wait.poll_min_delay == 1
        assert settings.wait.poll_max_delay == 10

    def test_overrides_beat_environment(self, monkeypatch):
        monkeypatch.setenv("DBCOPY_BUCKET", "env-bucket")
        monkeypatch.setenv("DBCOPY_REGION", "eu-west-1")

        settings = Settings.from_env(bucket="cli-bucket", region="us-west-2", timeout=60)

        assert settings.store.bucket == "cli-bucket"
        assert settings.store.region == "us-west-2"
        assert settings.wait.timeout == 60

    def test_missing_bucket(self):
        with pytest.raises(ValidationError):
            Settings.from_env()

    def test_only_store_and_wait_sections(self):
        assert set(Settings.model_fields) == {"store", "wait"}

    def test_secrets_not_in_repr(self, monkeypatch):
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "hunter2")

        assert "hunter2" not in repr(Settings.from_env(bucket="b"))


class TestWaitSettings:
    @pytest.mark.parametrize("timeout", [0, -5])
    def test_timeout_must_be_positive(self, timeout):
        with pytest.raises(ValidationError):
            WaitSettings(timeout=timeout)

    def test_max_delay_below_min(self):
        with pytest.raises(ValidationError, match="poll_max_delay"):
            WaitSettings(poll_min_delay=10, poll_max_delay=1)
