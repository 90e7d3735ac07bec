"""Netmaster configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Netmaster settings loaded from environment variables."""

    # Docker network plugin driver names
    net_driver_name: str = "netplugin"
    ipam_driver_name: str = "netplugin"

    # Docker settings
    docker_socket: str = "unix:///var/run/docker.sock"

    # State store (redis://, rediss://, unix:// or memory://)
    state_store_url: str = "redis://localhost:6379/0"
    state_oper_path: str = "/contiv.io/oper/"
    state_watch_prefix: str = "watch:"
    watch_poll_interval: float = 1.0  # seconds

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # text or json

    class Config:
        env_prefix = "NETMASTER_"


settings = Settings()
