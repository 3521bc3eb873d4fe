"""Core types: results, exit codes and configuration."""

from .config import CONFIG_FILENAME, ConfigError, PackageConfig, load_config
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "CONFIG_FILENAME",
    "ConfigError",
    "PackageConfig",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
