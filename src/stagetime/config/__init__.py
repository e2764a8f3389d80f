"""Reporter configuration defaults and persistence."""

from .defaults import FormatConfig, PolicyConfig, ReporterConfig
from .store import (
    CONFIG_PATH,
    load_reporter_config,
    reporter_config_from_dict,
    reporter_config_to_dict,
    save_reporter_config,
    validate_reporter_config,
)

__all__ = [
    "CONFIG_PATH",
    "FormatConfig",
    "PolicyConfig",
    "ReporterConfig",
    "load_reporter_config",
    "reporter_config_from_dict",
    "reporter_config_to_dict",
    "save_reporter_config",
    "validate_reporter_config",
]
