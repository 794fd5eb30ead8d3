"""
Configuration models for dbcopy.

Values come from explicit CLI options first, then from the environment
(optionally populated from a ``.env`` file by the CLI).
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, model_validator

DEFAULT_WAIT_TIMEOUT = 3600.0


class StoreSettings(BaseModel):
    """Where the job markers and the artifact live."""

    bucket: str = Field(..., min_length=1, description="S3 bucket name.")
    region: Optional[str] = Field(
        default=None,
        description="Bucket region. Discovered from the bucket when unset.",
    )
    endpoint_url: Optional[str] = Field(
        default=None, description="Custom endpoint for S3-compatible stores."
    )
    aws_access_key_id: Optional[str] = Field(default=None, repr=False)
    aws_secret_access_key: Optional[str] = Field(default=None, repr=False)
    aws_session_token: Optional[str] = Field(default=None, repr=False)


class WaitSettings(BaseModel):
    """Timing knobs of the wait engine."""

    timeout: float = Field(
        default=DEFAULT_WAIT_TIMEOUT,
        gt=0,
        description="Seconds each marker watcher waits before giving up.",
    )
    poll_min_delay: float = Field(
        default=5.0, gt=0, description="First delay between existence polls."
    )
    poll_max_delay: float = Field(
        default=120.0, gt=0, description="Upper bound of the poll backoff."
    )
    tick_interval: float = Field(
        default=0.1, gt=0, description="Refresh period of the progress spinner."
    )

    @model_validator(mode="after")
    def _check_delays(self) -> "WaitSettings":
        if self.poll_max_delay < self.poll_min_delay:
            raise ValueError("poll_max_delay must be >= poll_min_delay")
        return self


class Settings(BaseModel):
    store: StoreSettings
    wait: WaitSettings = Field(default_factory=WaitSettings)

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Build settings from ``DBCOPY_*``, ``S3_*`` and ``AWS_*`` variables.

        Keyword overrides that are not ``None`` take precedence over the
        environment: ``bucket``, ``region``, ``endpoint_url`` and
        ``timeout``.
        """

        def pick(name: str, *env_vars: str):
            value = overrides.get(name)
            if value is not None:
                return value
            for var in env_vars:
                env_value = os.getenv(var)
                if env_value:
                    return env_value
            return None

        store = StoreSettings(
            bucket=pick("bucket", "DBCOPY_BUCKET", "S3_BUCKET_NAME") or "",
            region=pick("region", "DBCOPY_REGION", "S3_REGION"),
            endpoint_url=pick("endpoint_url", "S3_ENDPOINT_URL"),
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
            aws_session_token=os.getenv("AWS_SESSION_TOKEN"),
        )

        wait_kwargs: dict = {}
        timeout = pick("timeout", "DBCOPY_WAIT_TIMEOUT")
        if timeout is not None:
            wait_kwargs["timeout"] = timeout
        for field, var in (
            ("poll_min_delay", "DBCOPY_POLL_MIN_DELAY"),
            ("poll_max_delay", "DBCOPY_POLL_MAX_DELAY"),
        ):
            value = os.getenv(var)
            if value:
                wait_kwargs[field] = value

        return cls(
            store=store,
            wait=WaitSettings(**wait_kwargs),
        )
