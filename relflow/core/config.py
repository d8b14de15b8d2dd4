"""Typed configuration loading and access.

This module provides dataclasses for the optional ``relflow.toml`` file at the
repository root. Every value has a default, so a repository without the file
still gets a complete configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "BuildConfig",
    "Config",
    "ConfigError",
    "PublishConfig",
    "RepositoryConfig",
    "TranslationConfig",
    "CONFIG_FILE_NAME",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "relflow.toml"

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULT_MAIN_BRANCH = "master"
DEFAULT_REMOTE = "origin"

# Translation service endpoint and component
DEFAULT_TRANSLATION_URL = "https://hosted.weblate.org/api/"
DEFAULT_TRANSLATION_COMPONENT = "app/strings"
DEFAULT_API_KEY_CONFIG = "weblate.key"

DEFAULT_BUILD_CONFIG_FILE = "app/build.gradle"
DEFAULT_BUILD_COMMAND = ("./gradlew", "clean", "build", "test", "assembleRelease")
DEFAULT_LISTING_COMMAND = ("./gradlew", "updateTranslationListing")
DEFAULT_CLEAN_COMMAND = ("./gradlew", "clean")
DEFAULT_ARTIFACTS = ("app/build/outputs/apk/release/*.apk",)

DEFAULT_STAGING_DIR = "build/release-staging"
DEFAULT_PACKAGE_COMMAND = ("gpg", "--armor", "--detach-sign", "{artifact}")
DEFAULT_NOTES_TEMPLATE = ".github/release-notes.md"
DEFAULT_VERSION_PLACEHOLDER = "%VERSION%"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class RepositoryConfig:
    """Branch and remote names."""

    main_branch: str = DEFAULT_MAIN_BRANCH
    remote: str = DEFAULT_REMOTE


@dataclass(frozen=True, slots=True)
class TranslationConfig:
    """Weblate endpoint, component and where the API key lives.

    The API key itself is never stored here: ``api_key_config`` names the git
    config entry that holds it.
    """

    url: str = DEFAULT_TRANSLATION_URL
    component: str = DEFAULT_TRANSLATION_COMPONENT
    api_key_config: str = DEFAULT_API_KEY_CONFIG


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """Build system commands and outputs (paths relative to the repo root)."""

    config_file: str = DEFAULT_BUILD_CONFIG_FILE
    command: tuple[str, ...] = DEFAULT_BUILD_COMMAND
    listing_command: tuple[str, ...] = DEFAULT_LISTING_COMMAND
    clean_command: tuple[str, ...] = DEFAULT_CLEAN_COMMAND
    artifacts: tuple[str, ...] = DEFAULT_ARTIFACTS


@dataclass(frozen=True, slots=True)
class PublishConfig:
    """Staging, per-artifact packaging and release notes settings.

    ``package_command`` is run once per staged artifact with ``{artifact}``
    replaced by the artifact path.
    """

    staging_dir: str = DEFAULT_STAGING_DIR
    package_command: tuple[str, ...] = DEFAULT_PACKAGE_COMMAND
    notes_template: str = DEFAULT_NOTES_TEMPLATE
    version_placeholder: str = DEFAULT_VERSION_PLACEHOLDER


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    translation: TranslationConfig = field(default_factory=TranslationConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: A present key has the wrong type or is empty.
        """
        repository: StrDict = _section(data, "repository")
        translation: StrDict = _section(data, "translation")
        build: StrDict = _section(data, "build")
        publish: StrDict = _section(data, "publish")

        return cls(
            repository=RepositoryConfig(
                main_branch=_str(repository, "repository", "main_branch", DEFAULT_MAIN_BRANCH),
                remote=_str(repository, "repository", "remote", DEFAULT_REMOTE),
            ),
            translation=TranslationConfig(
                url=_str(translation, "translation", "url", DEFAULT_TRANSLATION_URL),
                component=_str(
                    translation, "translation", "component", DEFAULT_TRANSLATION_COMPONENT
                ),
                api_key_config=_str(
                    translation, "translation", "api_key_config", DEFAULT_API_KEY_CONFIG
                ),
            ),
            build=BuildConfig(
                config_file=_str(build, "build", "config_file", DEFAULT_BUILD_CONFIG_FILE),
                command=_str_list(build, "build", "command", DEFAULT_BUILD_COMMAND),
                listing_command=_str_list(
                    build, "build", "listing_command", DEFAULT_LISTING_COMMAND
                ),
                clean_command=_str_list(build, "build", "clean_command", DEFAULT_CLEAN_COMMAND),
                artifacts=_str_list(build, "build", "artifacts", DEFAULT_ARTIFACTS),
            ),
            publish=PublishConfig(
                staging_dir=_str(publish, "publish", "staging_dir", DEFAULT_STAGING_DIR),
                package_command=_str_list(
                    publish, "publish", "package_command", DEFAULT_PACKAGE_COMMAND
                ),
                notes_template=_str(
                    publish, "publish", "notes_template", DEFAULT_NOTES_TEMPLATE
                ),
                version_placeholder=_str(
                    publish, "publish", "version_placeholder", DEFAULT_VERSION_PLACEHOLDER
                ),
            ),
        )


def _section(data: Mapping[str, object], name: str) -> StrDict:
    if name not in data:
        return {}
    table = get_table(data, name)
    if table is None:
        raise ValueError(f"[{name}] must be a table")
    return table


def _str(table: StrDict, section: str, key: str, default: str) -> str:
    if key not in table:
        return default
    value = get_str(table, key)
    if value is None:
        raise ValueError(f"{section}.{key} must be a non-empty string")
    return value


def _str_list(
    table: StrDict, section: str, key: str, default: tuple[str, ...]
) -> tuple[str, ...]:
    if key not in table:
        return default
    value = get_str_list(table, key)
    if not value:
        raise ValueError(f"{section}.{key} must be a non-empty list of strings")
    return value


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to relflow.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        config = Config.from_dict(result.value)
        return Ok(config)
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config from file, or return defaults if the file doesn't exist.

    A file that exists but fails to parse is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
