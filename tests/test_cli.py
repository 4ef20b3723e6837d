"""CLI tests for the tsdef entry point.

Test cases live in cli/*.tests files. Format:

    === test name
    args: --debug --external
    {"name": "Point", "fields": {"x": "f64"}}
    ---
    exit: 0
    stdout: export type Point = { x: number };
    stderr-empty: true
    ---

The first input line holds the arguments; the rest is stdin, unless it
starts with `stdin-bytes:` followed by hex-encoded raw bytes.

Assertion directives:
    exit:             exact exit code
    stdout:           exact stdout (trailing newline stripped)
    stderr:           exact stderr (trailing newline stripped)
    stdout-contains:  stdout must contain substring
    stderr-contains:  stderr must contain substring
    stdout-empty:     stdout must be empty
    stderr-empty:     stderr must be empty
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

CLI_DIR = Path(__file__).parent / "cli"
ROOT_DIR = Path(__file__).parent.parent

Result = subprocess.CompletedProcess[bytes]


def _out(result: Result) -> str:
    return result.stdout.decode(errors="replace")


def _err(result: Result) -> str:
    return result.stderr.decode(errors="replace")


CHECKS: dict[str, Callable[[Result, str], bool]] = {
    "exit": lambda r, v: r.returncode == int(v),
    "stdout": lambda r, v: _out(r).rstrip("\n") == v,
    "stderr": lambda r, v: _err(r).rstrip("\n") == v,
    "stdout-contains": lambda r, v: v in _out(r),
    "stderr-contains": lambda r, v: v in _err(r),
    "stdout-empty": lambda r, v: r.stdout == b"",
    "stderr-empty": lambda r, v: r.stderr == b"",
}


def parse_cli_test_file(path: Path) -> list[tuple[str, list[str], list[str]]]:
    """Split a .tests file into (name, input lines, expected lines)."""
    cases: list[tuple[str, list[str], list[str]]] = []
    name: str | None = None
    sections: list[list[str]] = []
    for line in path.read_text().split("\n"):
        if line.startswith("=== "):
            name = line[4:].strip()
            sections = [[]]
        elif name is None:
            continue
        elif line == "---":
            if len(sections) == 2:
                cases.append((name, sections[0], sections[1]))
                name = None
            else:
                sections.append([])
        else:
            sections[-1].append(line)
    return cases


def build_case(input_lines: list[str], expected_lines: list[str]) -> dict:
    """Turn raw sections into args, stdin bytes and (directive, value) pairs."""
    args: list[str] = []
    body = input_lines
    if body and body[0].startswith("args:"):
        args = body[0][5:].split()
        body = body[1:]
    if body and body[0].startswith("stdin-bytes:"):
        stdin = bytes.fromhex(body[0][12:].strip())
    else:
        stdin = "\n".join(body).encode()
    assertions: list[tuple[str, str]] = []
    for line in expected_lines:
        line = line.strip()
        if not line:
            continue
        directive, _, value = line.partition(":")
        if directive not in CHECKS:
            raise ValueError(f"unknown directive: {directive}")
        assertions.append((directive, value.strip()))
    return {"args": args, "stdin": stdin, "assertions": assertions}


def pytest_generate_tests(metafunc):
    """Parametrize test_cli over all .tests files."""
    if "cli_case" in metafunc.fixturenames:
        params = []
        for test_file in sorted(CLI_DIR.glob("*.tests")):
            for name, input_lines, expected_lines in parse_cli_test_file(test_file):
                case = build_case(input_lines, expected_lines)
                params.append(pytest.param(case, id=f"{test_file.stem}/{name}"))
        metafunc.parametrize("cli_case", params)


def test_cli(cli_case: dict) -> None:
    """Run `python -m tsdef` and check every directive."""
    result = subprocess.run(
        [sys.executable, "-m", "tsdef", *cli_case["args"]],
        input=cli_case["stdin"],
        capture_output=True,
        cwd=ROOT_DIR,
    )
    for directive, value in cli_case["assertions"]:
        assert CHECKS[directive](result, value), (
            f"{directive}: {value!r} failed"
            f"\nexit: {result.returncode}\nstdout: {_out(result)!r}\nstderr: {_err(result)!r}"
        )


def test_output_file(tmp_path: Path) -> None:
    """-o writes the declarations to a file and nothing to stdout."""
    out = tmp_path / "types.d.ts"
    result = subprocess.run(
        [sys.executable, "-m", "tsdef", "-o", str(out)],
        input=b'{"name": "Id", "newtype": "u64"}',
        capture_output=True,
        cwd=ROOT_DIR,
    )
    assert result.returncode == 0, _err(result)
    assert result.stdout == b""
    assert out.read_text() == "export type Id = number;\n"


def test_input_file(tmp_path: Path) -> None:
    src = tmp_path / "model.json"
    src.write_text('[{"name": "A", "tuple": ["u8", "bool"]}, {"name": "B"}]')
    result = subprocess.run(
        [sys.executable, "-m", "tsdef", str(src)],
        capture_output=True,
        cwd=ROOT_DIR,
    )
    assert result.returncode == 0, _err(result)
    assert _out(result) == "export type A = [number, boolean];\nexport type B = {};\n"


def test_invalid_utf8_names_the_file(tmp_path: Path) -> None:
    src = tmp_path / "model.json"
    src.write_bytes(b'{"name": "\xff"}')
    result = subprocess.run(
        [sys.executable, "-m", "tsdef", str(src)],
        capture_output=True,
        cwd=ROOT_DIR,
    )
    assert result.returncode == 1
    assert _err(result).rstrip("\n") == "error: invalid utf-8 in '" + str(src) + "'"
