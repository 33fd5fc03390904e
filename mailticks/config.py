import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

import yaml

from .exceptions import ConfigurationError
from .models import DetailLevel, Encoding


class EventSink(Enum):
    LOG = "log"
    SPAN = "span"


@dataclass
class SMTPConfig:
    host: str = "localhost"
    port: int = 25
    helo: str = ""
    secure: str = ""
    auto_tls: bool = True
    auth: bool = False
    username: str = ""
    password: str = ""
    keep_alive: bool = False
    auth_type: str = ""
    timeout: int = 300
    encoding: Encoding = Encoding.EIGHT_BIT
    options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.secure not in ["", "tls", "ssl"]:
            raise ValueError(f"Invalid smtp secure mode: {self.secure}")
        # YAML keeps quoted numbers as strings
        for name in ("port", "timeout"):
            value = getattr(self, name)
            try:
                setattr(self, name, int(value))
            except (TypeError, ValueError):
                raise ValueError(f"Invalid smtp {name}: {value!r}") from None
        if isinstance(self.encoding, str):
            self.encoding = Encoding(self.encoding)
        if self.options is None:
            self.options = {}


@dataclass
class OtelConfig:
    endpoint: str = ""
    service_name: str = "mailticks"
    tags: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    timeout: int = 10

    def __post_init__(self):
        if self.tags is None:
            self.tags = {}
        if self.headers is None:
            self.headers = {}
        self.tags = {
            str(name): str(value) for name, value in self.tags.items()
        }


@dataclass
class Config:
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = (
        "INFO"
    )
    detail_level: DetailLevel = DetailLevel.INFO
    event_sink: EventSink = EventSink.LOG
    from_address: str = ""
    from_name: str = ""
    smtp: SMTPConfig = field(default_factory=SMTPConfig)
    otel: OtelConfig = field(default_factory=OtelConfig)

    def __post_init__(self):
        # value checking
        if self.log_level not in [
            "DEBUG",
            "INFO",
            "WARNING",
            "ERROR",
            "CRITICAL",
        ]:
            raise ValueError(f"Invalid log level: {self.log_level}")
        if isinstance(self.detail_level, str):
            if self.detail_level not in [level.value for level in DetailLevel]:
                raise ValueError(f"Invalid detail level: {self.detail_level}")
            self.detail_level = DetailLevel(self.detail_level)
        if isinstance(self.event_sink, str):
            if self.event_sink not in [sink.value for sink in EventSink]:
                raise ValueError(f"Invalid event sink: {self.event_sink}")
            self.event_sink = EventSink(self.event_sink)
        # type checking
        if isinstance(self.smtp, dict):
            self.smtp = SMTPConfig(**self.smtp)
        if isinstance(self.otel, dict):
            self.otel = OtelConfig(**self.otel)


def load_config(config_path: str | None = None) -> Config:
    """Load the configuration from a YAML file.

    Args:
        config_path: Path of the file. Defaults to the ``MAILTICKS_CONFIG``
            environment variable, then ``config.yaml``.

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    config_path = config_path or os.getenv("MAILTICKS_CONFIG", "config.yaml")
    if not os.path.exists(config_path):
        raise ConfigurationError(
            f"Config file not found: {config_path}",
            "Pass --config-path or set MAILTICKS_CONFIG",
        )
    with open(config_path) as f:
        config_data = yaml.safe_load(f) or {}
    if not isinstance(config_data, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a mapping"
        )
    try:
        return Config(**config_data)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Error loading config: {e}") from e
