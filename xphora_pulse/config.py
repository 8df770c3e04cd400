import os

from .errors import ConfigError


def _int_env(name, default, minimum=None):
    raw = os.getenv(name, str(default))
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if minimum is not None and value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


def _float_env(name, default, minimum=None, positive=False):
    raw = os.getenv(name, str(default))
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if minimum is not None and value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    if positive and value <= 0:
        raise ConfigError(f"{name} must be > 0, got {value}")
    return value


class Config:
    """Reads service configuration from environment variables."""

    def __init__(self):
        self.service_name = os.getenv("SERVICE_NAME", "xphora-pulse")
        self.http_port = _int_env("HTTP_PORT", 8000)
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

        self.buffer_capacity = _int_env("EVENT_BUFFER_CAPACITY", 1000, minimum=1)
        self.collaborator_timeout = _float_env("COLLABORATOR_TIMEOUT", 2.0, positive=True)

        # empty -> the static mock feed is used
        self.upcoming_events_url = os.getenv("UPCOMING_EVENTS_URL", "").strip()

        # comma-separated list like "HSR Layout,Koramangala,Indiranagar"
        raw = os.getenv("DEFAULT_AREAS", "")
        self.default_areas = [a.strip() for a in raw.split(",") if a.strip()]

        self.simulator_target = os.getenv("SIMULATOR_TARGET", "http://localhost:8000")
        self.simulator_interval = _float_env("SIMULATOR_INTERVAL", 5, minimum=0.0)
        self.simulator_batch_size = _int_env("SIMULATOR_BATCH_SIZE", 5, minimum=1)


config = Config()
