"""Version fields in the Gradle build configuration.

The build file is read as lines. A *field line* is one whose first token is
``versionCode`` or ``versionName``, followed by whitespace or ``=`` and the
value: a bare integer for the code, a quoted string for the name. Both the
Groovy (``versionCode 142``) and Kotlin (``versionCode = 142``) spellings are
accepted. Writing replaces only the value; indentation, separator, quote
style, trailing comments and every other line are preserved.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.platform.files import atomic_write_text
from relflow.release.errors import ReleaseError

VERSION_CODE_KEY = "versionCode"
VERSION_NAME_KEY = "versionName"

_QUOTES = ("'", '"')


@dataclass(frozen=True, slots=True)
class VersionFields:
    name: str
    code: int


@dataclass(frozen=True, slots=True)
class _FieldLine:
    index: int
    indent: str
    key: str
    separator: str
    value: str
    quote: str
    trailing: str
    newline: str

    def render(self) -> str:
        return (
            f"{self.indent}{self.key}{self.separator}"
            f"{self.quote}{self.value}{self.quote}{self.trailing}{self.newline}"
        )


def _split_newline(line: str) -> tuple[str, str]:
    body = line.rstrip("\r\n")
    return body, line[len(body) :]


def _parse_field_line(index: int, line: str) -> _FieldLine | None:
    body, newline = _split_newline(line)
    rest = body.lstrip()
    indent = body[: len(body) - len(rest)]

    for key in (VERSION_CODE_KEY, VERSION_NAME_KEY):
        if not rest.startswith(key):
            continue
        after = rest[len(key) :]
        value_part = after.lstrip(" \t")
        if value_part.startswith("="):
            value_part = value_part[1:].lstrip(" \t")
        elif value_part == after:
            # No separator: a longer identifier such as versionCodeOffset.
            return None
        separator = after[: len(after) - len(value_part)]

        if value_part[:1] in _QUOTES:
            quote = value_part[0]
            end = value_part.find(quote, 1)
            if end < 0:
                return None
            value = value_part[1:end]
            trailing = value_part[end + 1 :]
        else:
            quote = ""
            token_end = len(value_part)
            for i, ch in enumerate(value_part):
                if ch.isspace():
                    token_end = i
                    break
            value = value_part[:token_end]
            trailing = value_part[token_end:]

        return _FieldLine(
            index=index,
            indent=indent,
            key=key,
            separator=separator,
            value=value,
            quote=quote,
            trailing=trailing,
            newline=newline,
        )
    return None


class BuildConfigFile:
    """Reads and rewrites versionName/versionCode in one build file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def read_version(self) -> Result[VersionFields, ReleaseError]:
        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        _, fields = loaded.value
        return _version_from_fields(fields, path=self.path)

    def write_version(self, *, name: str, code: int) -> Result[bool, ReleaseError]:
        """Rewrite both fields.

        Returns:
            Ok(True) if the file changed, Ok(False) if it already matched.
        """
        loaded = self._load()
        if isinstance(loaded, Err):
            return loaded
        lines, fields = loaded.value

        current = _version_from_fields(fields, path=self.path)
        if isinstance(current, Err):
            return current
        if current.value == VersionFields(name=name, code=code):
            return Ok(False)

        for field in fields.values():
            if field.key == VERSION_CODE_KEY:
                updated = replace(field, value=str(code))
            else:
                updated = replace(field, value=name)
            lines[field.index] = updated.render()

        try:
            atomic_write_text(self.path, "".join(lines), encoding="utf-8")
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="io_failed",
                    message=f"failed to write {self.path.name}: {e}",
                    hint=str(self.path),
                )
            )
        return Ok(True)

    def _load(self) -> Result[tuple[list[str], dict[str, _FieldLine]], ReleaseError]:
        try:
            with self.path.open(encoding="utf-8", newline="") as handle:
                lines = handle.readlines()
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="build_config",
                    message=f"failed to read {self.path.name}: {e}",
                    hint=str(self.path),
                )
            )

        fields: dict[str, _FieldLine] = {}
        for index, line in enumerate(lines):
            field = _parse_field_line(index, line)
            if field is None:
                continue
            if field.key in fields:
                return Err(
                    ReleaseError(
                        kind="build_config",
                        message=f"{field.key} appears more than once in {self.path.name}",
                        hint=f"lines {fields[field.key].index + 1} and {index + 1}",
                    )
                )
            fields[field.key] = field

        return Ok((lines, fields))


def _version_from_fields(
    fields: dict[str, _FieldLine], *, path: Path
) -> Result[VersionFields, ReleaseError]:
    code_field = fields.get(VERSION_CODE_KEY)
    if code_field is None:
        return _missing_field(VERSION_CODE_KEY, path=path)
    name_field = fields.get(VERSION_NAME_KEY)
    if name_field is None:
        return _missing_field(VERSION_NAME_KEY, path=path)

    if code_field.quote or not code_field.value.isdigit():
        return Err(
            ReleaseError(
                kind="build_config",
                message=f"{VERSION_CODE_KEY} is not an integer literal: {code_field.value!r}",
                hint=f"{path.name}:{code_field.index + 1}",
            )
        )
    if not name_field.quote or not name_field.value:
        return Err(
            ReleaseError(
                kind="build_config",
                message=f"{VERSION_NAME_KEY} is not a quoted string: {name_field.value!r}",
                hint=f"{path.name}:{name_field.index + 1}",
            )
        )

    return Ok(VersionFields(name=name_field.value, code=int(code_field.value)))


def _missing_field(key: str, *, path: Path) -> Err[ReleaseError]:
    return Err(
        ReleaseError(
            kind="build_config",
            message=f"missing {key} in {path.name}",
            hint=str(path),
        )
    )
