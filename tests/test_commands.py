import subprocess
import sys

import pytest

from job_watcher import commands
from job_watcher.commands import CommandError, run_command


def test_returns_stdout_lines(monkeypatch):
    seen = {}

    def fake_run(argv, **kwargs):
        seen["argv"] = argv
        seen["kwargs"] = kwargs
        return subprocess.CompletedProcess(argv, 0, stdout="a\nb\n", stderr="")

    monkeypatch.setattr(commands.subprocess, "run", fake_run)

    assert run_command("squeue", ["--noheader"]) == ["a", "b"]
    assert seen["argv"] == ["squeue", "--noheader"]
    assert seen["kwargs"]["check"] is True
    assert seen["kwargs"]["encoding"] == "utf-8"
    assert seen["kwargs"]["errors"] == "replace"


def test_empty_output(monkeypatch):
    monkeypatch.setattr(
        commands.subprocess,
        "run",
        lambda argv, **kw: subprocess.CompletedProcess(argv, 0, stdout="", stderr=""),
    )
    assert run_command("sacct", []) == []


def test_non_zero_exit_raises(monkeypatch):
    def fake_run(argv, **kwargs):
        raise subprocess.CalledProcessError(1, argv, output="", stderr="slurm_load_jobs error: timeout\n")

    monkeypatch.setattr(commands.subprocess, "run", fake_run)

    with pytest.raises(CommandError) as exc_info:
        run_command("squeue", [])

    assert exc_info.value.command == "squeue"
    assert exc_info.value.returncode == 1
    assert "slurm_load_jobs error: timeout" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, subprocess.CalledProcessError)


def test_missing_executable_raises():
    with pytest.raises(CommandError) as exc_info:
        run_command("job-watcher-no-such-command", ["--version"])

    assert exc_info.value.returncode is None
    assert "failed to start" in str(exc_info.value)


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell script")
def test_invalid_utf8_output_is_replaced(tmp_path):
    script = tmp_path / "fake-squeue"
    script.write_text("#!/bin/sh\nprintf 'bad\\377name\\nok\\n'\n")
    script.chmod(0o755)

    lines = run_command(str(script), [])

    assert lines == ["bad\ufffdname", "ok"]
