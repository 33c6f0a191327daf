from typing import Literal, Optional

from pydantic import BaseModel, ValidationError

from config import YamlConfig


class SettingsSchema(BaseModel):
    default_period: Literal["week", "month"] = "week"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    cache_enabled: bool = True
    rate_limit: Optional[int] = None
    rate_window: int = 60
    api_host: str = "127.0.0.1"
    api_port: int = 8000


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))


def load_settings(path: str | None = None) -> SettingsSchema:
    """Read and validate the YAML settings file, falling back to defaults."""
    data = YamlConfig(path).load()
    validate_settings(data)
    return SettingsSchema(**data)
