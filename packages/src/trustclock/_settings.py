"""Library configuration via pydantic-settings.

Configuration is loaded from environment variables and/or ``.env``
files.  Variables use the ``TRUSTCLOCK_`` prefix and ``__`` as the
nesting delimiter, e.g. ``TRUSTCLOCK_SYNC__HOST=example.com``.

The schema covers two concerns:

* **Sync**: which endpoint to ask for the time and how long to wait.
* **Logging**: level, format, optional file sink, rotation.

Nothing here is read implicitly: the application builds a
:class:`Settings` and hands it to :meth:`TrustedClock.from_settings`
and :func:`configure_logging`.

All durations are in **seconds**.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# -------------------------------------------------------------------
# Sub-models (BaseModel, NOT BaseSettings, nested via composition)
# -------------------------------------------------------------------


class SyncSettings(BaseModel):
    """Remote endpoint and timing for trusted-time synchronisation.

    Environment variables (with ``__`` nesting)::

        TRUSTCLOCK_SYNC__HOST=google.com
        TRUSTCLOCK_SYNC__PORT=80
        TRUSTCLOCK_SYNC__TIMEOUT=1.0
        TRUSTCLOCK_SYNC__READ_SIZE=1024
        TRUSTCLOCK_SYNC__RETRY_DELAY=0.05
    """

    host: str = Field(
        default="google.com",
        description=(
            "Hostname whose HTTP Date header is trusted.  Should resolve "
            "to a nearby edge node so the round trip stays short."
        ),
    )
    port: Annotated[int, Field(ge=1, le=65535)] = Field(
        default=80,
        description="Plain-HTTP port of the remote endpoint.",
    )
    timeout: Annotated[float, Field(gt=0)] = Field(
        default=1.0,
        description=(
            "Default budget in seconds for one sync (connect + write + "
            "read), or for the whole retry loop of must_sync."
        ),
    )
    read_size: Annotated[int, Field(ge=64)] = Field(
        default=1024,
        description=(
            "Maximum number of response bytes read.  Enough for the "
            "status line and headers; the body is never needed."
        ),
    )
    retry_delay: Annotated[float, Field(ge=0)] = Field(
        default=0.05,
        description="Pause in seconds between failed must_sync attempts.",
    )


class LoggingSettings(BaseModel):
    """Logging configuration.

    When ``file`` is set, logs are also written to a rotating file
    (size-based rotation, ``backup_count`` generations kept).  When
    ``None``, logs go to stderr only.

    The ``format`` field selects the output format:

    - ``"json"`` (default): structured JSON lines for container
      log aggregators.
    - ``"text"``: human-readable timestamped format for local
      development and direct terminal use.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level.",
    )
    format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format: 'json' lines or human 'text'.",
    )
    file: str | None = Field(
        default=None,
        description="Optional log file path. ``None`` means stderr only.",
    )
    max_file_size_mb: Annotated[int, Field(ge=1)] = Field(
        default=10,
        description=(
            "Maximum log file size in megabytes before rotation. "
            "Only applies when ``file`` is set."
        ),
    )
    backup_count: Annotated[int, Field(ge=0)] = Field(
        default=3,
        description="Number of rotated log files to keep.",
    )


# -------------------------------------------------------------------
# Root settings
# -------------------------------------------------------------------


class Settings(BaseSettings):
    """Root settings for trustclock.

    Example ``.env``::

        TRUSTCLOCK_SYNC__HOST=example.com
        TRUSTCLOCK_SYNC__TIMEOUT=2.5
        TRUSTCLOCK_LOGGING__LEVEL=DEBUG
        TRUSTCLOCK_LOGGING__FORMAT=text
    """

    model_config = SettingsConfigDict(
        env_prefix="TRUSTCLOCK_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    sync: SyncSettings = Field(
        default_factory=SyncSettings,
        description="Remote endpoint and timing settings.",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration.",
    )
