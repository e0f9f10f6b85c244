"""Run every example script and compare its stdout with the inline ``# =>`` comments."""

from __future__ import annotations

import difflib
import os
import re
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
EXAMPLES_ROOT = REPO_ROOT / "examples"
SRC_ROOT = REPO_ROOT / "src"

_EXPECTATION_PATTERN = re.compile(r"^\s*print\(.*\)\s*#\s*=>\s?(?P<expected>.*)$")


def _example_paths() -> list[Path]:
    paths = sorted(EXAMPLES_ROOT.glob("ex_*/01_*.py"))
    if not paths:
        msg = f"No examples found under {EXAMPLES_ROOT}"
        raise AssertionError(msg)
    return paths


def _expected_stdout(path: Path) -> list[str]:
    expected: list[str] = []
    for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        if "print(" not in line:
            continue
        match = _EXPECTATION_PATTERN.match(line)
        if match is None:
            msg = f"{path}:{lineno}: print() must be a single line ending in '# => <output>'."
            raise AssertionError(msg)
        expected.append(match.group("expected").strip())
    return expected


def _run_example(path: Path) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(
        part for part in (str(SRC_ROOT), env.get("PYTHONPATH")) if part
    )
    return subprocess.run(  # noqa: S603
        [sys.executable, str(path)],
        cwd=path.parent,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )


@pytest.mark.parametrize(
    "path",
    [pytest.param(path, id=path.parent.name) for path in _example_paths()],
)
def test_example_stdout_matches_inline_expectations(path: Path) -> None:
    expected = _expected_stdout(path)

    completed = _run_example(path)

    actual = completed.stdout.splitlines()
    if completed.returncode == 0 and not completed.stderr and actual == expected:
        return

    diff = "\n".join(
        difflib.unified_diff(expected, actual, fromfile="expected", tofile="actual", lineterm=""),
    )
    msg = (
        f"Example {path.relative_to(REPO_ROOT)} failed "
        f"(returncode={completed.returncode})\n"
        f"stderr:\n{completed.stderr or '<empty>'}\n"
        f"diff:\n{diff or '<no diff>'}"
    )
    raise AssertionError(msg)
