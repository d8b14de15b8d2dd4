"""Import and subprocess rules for the relflow package."""

from __future__ import annotations

import ast
from pathlib import Path

import pytest


def relflow_root() -> Path:
    return Path(__file__).resolve().parents[2]


def iter_source_files() -> list[Path]:
    root = relflow_root()
    files: list[Path] = []
    for path in sorted(root.rglob("*.py")):
        rel = path.relative_to(root)
        if rel.parts[0] == "test" or "__pycache__" in rel.parts:
            continue
        files.append(path)
    return files


def imported_modules(path: Path) -> list[tuple[str, int]]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    found: list[tuple[str, int]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            found.extend((alias.name, node.lineno) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            found.append((node.module, node.lineno))
    return found


def _matches(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")


def _offenders(*, prefix: str, allow: set[str], only_under: str | None = None) -> list[str]:
    root = relflow_root()
    offenders: list[str] = []
    for path in iter_source_files():
        rel = path.relative_to(root).as_posix()
        if only_under is not None and not rel.startswith(only_under):
            continue
        if rel in allow:
            continue
        for module, line in imported_modules(path):
            if _matches(module, prefix):
                offenders.append(f"{rel}:{line}: imports {module}")
    return offenders


def test_source_files_found() -> None:
    rels = {p.relative_to(relflow_root()).as_posix() for p in iter_source_files()}
    assert "release/controller.py" in rels
    assert not any(r.startswith("test/") for r in rels)


def test_subprocess_only_in_platform_process() -> None:
    offenders = _offenders(prefix="subprocess", allow={"platform/process.py"})
    assert not offenders, "\n".join(offenders)


def test_rich_only_in_console() -> None:
    offenders = _offenders(prefix="rich", allow={"output/console.py"})
    assert not offenders, "\n".join(offenders)


@pytest.mark.parametrize("framework", ["typer", "relflow.cli"])
def test_cli_framework_stays_in_cli(framework: str) -> None:
    offenders = [o for o in _offenders(prefix=framework, allow=set()) if not o.startswith("cli/")]
    assert not offenders, "\n".join(offenders)


def test_controller_depends_on_interfaces_only() -> None:
    allow = {"release/vcs.py", "release/tools.py", "release/gh.py", "release/requirements.py"}
    offenders = _offenders(prefix="relflow.git", allow=allow, only_under="release/")
    offenders += _offenders(prefix="relflow.platform.process", allow=allow, only_under="release/")
    assert not offenders, "\n".join(offenders)


def test_installed_code_never_imports_test_helpers() -> None:
    offenders = _offenders(prefix="relflow.test", allow=set())
    assert not offenders, "\n".join(offenders)
    assert not (relflow_root() / "release" / "testing.py").exists()
