"""Environment-based configuration for dashboard core."""

from pydantic import Field
from pydantic_settings import BaseSettings

from dashboard_core.validation import IDENTIFIER_PATTERN


class Settings(BaseSettings):
    """Dashboard core configuration.

    All settings can be overridden via environment variables with
    DASHBOARD_ prefix. For example:
        DASHBOARD_SERVICE_PREFIX=sglang
        DASHBOARD_HELPER_IMAGE_FALLBACK=ghcr.io/acme/dashboard:1.4
    """

    # External tools
    docker_binary: str = "docker"
    nsenter_binary: str = "nsenter"

    # Host probing
    host_marker_dir: str = "/run/systemd/system"
    self_container: str | None = None  # None -> this machine's hostname
    helper_image_fallback: str = "dashboard:latest"  # empty disables the fallback

    # Service discovery
    service_dir: str = "/etc/systemd/system"
    service_prefix: str = Field(default="vllm", pattern=IDENTIFIER_PATTERN)
    service_suffix: str = ".service"

    # Log defaults
    log_tail: int = Field(default=100, ge=1)
    service_log_lines: int = Field(default=200, ge=1)
    stream_stop_timeout: float = Field(default=5.0, gt=0)

    log_level: str = "INFO"

    model_config = {"env_prefix": "DASHBOARD_"}


settings = Settings()
