"""Core types: results, config, repository detection."""

from .config import Config, ConfigError, load_config, load_config_or_default
from .errors import ErrorCode
from .repo import AppRepo, RepoError, detect_repo
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "Config",
    "ConfigError",
    "load_config",
    "load_config_or_default",
    # errors
    "ErrorCode",
    # repo
    "AppRepo",
    "RepoError",
    "detect_repo",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
