"""CLI tests for the gots entry point.

Test cases live in cli/*.tests files. Format:

    === test name
    args: tests/dumps/api.json --mutations export
    ---
    exit: 0
    stderr: error: some message
    stdout-contains: export interface User {
    stdout-not-contains: Internal
    stdout-empty: true
    stderr-empty: true
    ---

The args line is split on whitespace and run from the repository root.

Assertion directives in the expected section:
    exit:                 exact exit code
    stderr:               exact stderr content (trailing newline stripped)
    stderr-contains:      stderr must contain substring
    stderr-empty:         stderr must be empty
    stdout-contains:      stdout must contain substring
    stdout-not-contains:  stdout must not contain substring
    stdout-empty:         stdout must be empty
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

from gots import cli
from gots.config import DEFAULT_MUTATIONS

CLI_DIR = Path(__file__).parent / "cli"
DUMPS = Path(__file__).parent / "dumps"
REPO_DIR = Path(__file__).parent.parent


def parse_cli_test_file(path: Path) -> list[tuple[str, dict]]:
    """Parse a .tests file into (name, spec) tuples."""
    lines = path.read_text().split("\n")
    result: list[tuple[str, dict]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            result.append((test_name, _parse_spec(input_lines, expected_lines)))
        else:
            i += 1
    return result


def _parse_spec(input_lines: list[str], expected_lines: list[str]) -> dict:
    spec: dict = {"args": [], "assertions": []}
    if input_lines and input_lines[0].startswith("args:"):
        args_str = input_lines[0][5:].strip()
        spec["args"] = args_str.split() if args_str else []
    for line in expected_lines:
        line = line.strip()
        if not line:
            continue
        key, _, value = line.partition(":")
        value = value.strip()
        if key == "exit":
            spec["assertions"].append(("exit", int(value)))
        elif key in ("stderr", "stderr-contains", "stdout-contains", "stdout-not-contains"):
            spec["assertions"].append((key, value))
        elif key in ("stderr-empty", "stdout-empty"):
            spec["assertions"].append((key, None))
        else:
            raise ValueError("unknown directive " + repr(key))
    return spec


def discover_cli_tests() -> list[tuple[str, dict]]:
    results = []
    for test_file in sorted(CLI_DIR.glob("*.tests")):
        for name, spec in parse_cli_test_file(test_file):
            results.append((f"{test_file.stem}/{name}", spec))
    return results


def run_cli(spec: dict) -> subprocess.CompletedProcess[str]:
    env = dict(os.environ)
    env["PYTHONPATH"] = str(REPO_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run(
        [sys.executable, "-m", "gots.cli", *spec["args"]],
        capture_output=True,
        text=True,
        cwd=REPO_DIR,
        env=env,
    )


def check_assertions(result: subprocess.CompletedProcess[str], assertions: list[tuple]) -> None:
    for kind, value in assertions:
        if kind == "exit":
            assert result.returncode == value, (
                f"expected exit {value}, got {result.returncode}\nstderr: {result.stderr}"
            )
        elif kind == "stderr":
            actual = result.stderr.rstrip("\n")
            assert actual == value, f"expected stderr {value!r}, got {actual!r}"
        elif kind == "stderr-contains":
            assert value in result.stderr, f"expected stderr to contain {value!r}, got {result.stderr!r}"
        elif kind == "stderr-empty":
            assert result.stderr == "", f"expected empty stderr, got {result.stderr!r}"
        elif kind == "stdout-contains":
            assert value in result.stdout, f"expected stdout to contain {value!r}, got:\n{result.stdout}"
        elif kind == "stdout-not-contains":
            assert value not in result.stdout, f"expected stdout without {value!r}, got:\n{result.stdout}"
        elif kind == "stdout-empty":
            assert result.stdout == "", f"expected empty stdout, got {result.stdout[:200]!r}"


def pytest_generate_tests(metafunc):
    """Parametrize test_cli over all .tests files."""
    if "cli_spec" in metafunc.fixturenames:
        tests = discover_cli_tests()
        params = [pytest.param(spec, id=test_id) for test_id, spec in tests]
        metafunc.parametrize("cli_spec", params)


def test_cli(cli_spec: dict) -> None:
    result = run_cli(cli_spec)
    check_assertions(result, cli_spec["assertions"])


# ============================================================
# IN-PROCESS
# ============================================================


def test_parse_args_defaults():
    opts = cli.parse_args(["a.json", "b.json"])
    assert opts.inputs == ["a.json", "b.json"]
    assert opts.references == []
    assert opts.mutations == DEFAULT_MUTATIONS
    assert opts.mutations is not DEFAULT_MUTATIONS
    assert opts.output_file is None


def test_parse_args_repeatable():
    opts = cli.parse_args(
        ["--reference", "r1.json", "in.json", "--reference", "r2.json", "--exclude", "a.B", "--exclude", "a.C"]
    )
    assert opts.inputs == ["in.json"]
    assert opts.references == ["r1.json", "r2.json"]
    assert opts.excluded == ["a.B", "a.C"]


def test_empty_mutation_list():
    opts = cli.parse_args(["--mutations", "", "in.json"])
    assert opts.mutations == []


def test_mutation_list_whitespace():
    opts = cli.parse_args(["--mutations", "export, readonly", "in.json"])
    assert opts.mutations == ["export", "readonly"]


@pytest.mark.parametrize(
    "args,message",
    [
        ([], "error: no input provided"),
        (["-x", "in.json"], "error: unknown flag '-x'"),
        (["in.json", "-o"], "error: -o requires an argument"),
        (["--mutations", "bogus", "in.json"], "error: unknown mutation 'bogus'"),
    ],
)
def test_parse_args_misuse(args: list[str], message: str, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.parse_args(args)
    assert exc.value.code == 2
    assert capsys.readouterr().err.strip() == message


def test_no_mutations(capsys):
    assert cli.main(["--mutations", "", str(DUMPS / "api.json")]) == 0
    out = capsys.readouterr().out
    assert "interface User {" in out
    assert "export" not in out


def test_output_file(tmp_path, capsys):
    target = tmp_path / "types.ts"
    assert cli.main([str(DUMPS / "api.json"), "-o", str(target)]) == 0
    assert capsys.readouterr().out == ""
    text = target.read_text()
    assert text.startswith("// Code generated by 'gots'. DO NOT EDIT.\n\n")
    assert "export interface User {" in text


def test_output_file_unwritable(tmp_path, capsys):
    target = tmp_path / "missing" / "types.ts"
    assert cli.main([str(DUMPS / "api.json"), "-o", str(target)]) == 1
    assert "error: cannot write" in capsys.readouterr().err


def test_load_error_exit_code(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text('{"packages": 1}')
    assert cli.main([str(path)]) == 1
    assert capsys.readouterr().err.strip() == "error: dump must be an object with a 'packages' list"


def test_run_is_deterministic():
    opts = cli.parse_args([str(DUMPS / "api.json"), "--reference", str(DUMPS / "org.json")])
    assert cli.run(opts) == cli.run(opts)
