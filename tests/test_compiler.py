import subprocess
import threading
import time

import pytest

import compiler
from compiler import (
    CompilationError,
    CompilerUnavailableError,
    compile_miru,
    get_compiler,
)

GENERATED = '#include "runtime/print.h"\n\nint main(void) {\n    miru_print_int(42);\n    return 0;\n}\n'


@pytest.fixture(autouse=True)
def fresh_compiler(monkeypatch):
    monkeypatch.delenv("MIRU_COMPILER", raising=False)
    monkeypatch.delenv("MIRU_COMPILE_TIMEOUT", raising=False)
    compiler.reset_compiler()
    yield
    compiler.reset_compiler()


def fake_which(found):
    calls = []

    def which(command):
        calls.append(command)
        return found.get(command)

    return which, calls


def fake_run(stdout="", stderr="", returncode=0, seen=None):
    def run(args, **kwargs):
        if seen is not None:
            with open(args[1], encoding="utf-8") as fh:
                seen.append((args, fh.read(), kwargs))
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)

    return run


def test_get_compiler_resolves_once(monkeypatch):
    which, calls = fake_which({"miruc": "/usr/bin/miruc"})
    monkeypatch.setattr(compiler.shutil, "which", which)

    assert get_compiler() == "/usr/bin/miruc"
    assert get_compiler() == "/usr/bin/miruc"
    assert calls == ["miruc"]


def test_get_compiler_reresolves_when_command_changes(monkeypatch):
    which, calls = fake_which({"miruc": "/usr/bin/miruc", "/opt/miruc": "/opt/miruc"})
    monkeypatch.setattr(compiler.shutil, "which", which)

    assert get_compiler() == "/usr/bin/miruc"
    monkeypatch.setenv("MIRU_COMPILER", "/opt/miruc")
    assert get_compiler() == "/opt/miruc"
    assert calls == ["miruc", "/opt/miruc"]


def test_get_compiler_missing(monkeypatch):
    which, _ = fake_which({})
    monkeypatch.setattr(compiler.shutil, "which", which)

    with pytest.raises(CompilerUnavailableError):
        get_compiler()


def test_concurrent_first_use_initializes_once(monkeypatch):
    calls = []

    def slow_which(command):
        calls.append(command)
        time.sleep(0.05)
        return "/usr/bin/miruc"

    monkeypatch.setattr(compiler.shutil, "which", slow_which)

    results = []
    threads = [threading.Thread(target=lambda: results.append(get_compiler())) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == ["/usr/bin/miruc"] * 8
    assert len(calls) == 1


def test_compile_writes_source_and_returns_stdout(monkeypatch):
    which, _ = fake_which({"miruc": "/usr/bin/miruc"})
    seen = []
    monkeypatch.setattr(compiler.shutil, "which", which)
    monkeypatch.setattr(compiler.subprocess, "run", fake_run(stdout=GENERATED, seen=seen))
    monkeypatch.setenv("MIRU_COMPILE_TIMEOUT", "3")

    assert compile_miru("print(42);") == GENERATED
    (args, source, kwargs), = seen
    assert args[0] == "/usr/bin/miruc"
    assert source == "print(42);"
    assert kwargs["timeout"] == 3.0


def test_compile_empty_source():
    with pytest.raises(ValueError):
        compile_miru("   ")


def test_compile_error_line(monkeypatch):
    which, _ = fake_which({"miruc": "/usr/bin/miruc"})
    monkeypatch.setattr(compiler.shutil, "which", which)
    monkeypatch.setattr(
        compiler.subprocess,
        "run",
        fake_run(stdout="Error: Failed to parse source code\n"),
    )

    with pytest.raises(CompilationError, match="Failed to parse source code"):
        compile_miru("print(;")


def test_compile_nonzero_exit(monkeypatch):
    which, _ = fake_which({"miruc": "/usr/bin/miruc"})
    monkeypatch.setattr(compiler.shutil, "which", which)
    monkeypatch.setattr(
        compiler.subprocess,
        "run",
        fake_run(stderr="Error: Cannot open file x\n", returncode=1),
    )

    with pytest.raises(CompilationError, match="Cannot open file"):
        compile_miru("print(1);")


def test_compile_timeout(monkeypatch):
    which, _ = fake_which({"miruc": "/usr/bin/miruc"})
    monkeypatch.setattr(compiler.shutil, "which", which)

    def run(args, **kwargs):
        raise subprocess.TimeoutExpired(args, kwargs["timeout"])

    monkeypatch.setattr(compiler.subprocess, "run", run)

    with pytest.raises(CompilationError, match="timed out"):
        compile_miru("print(1);")


def test_compile_empty_output(monkeypatch):
    which, _ = fake_which({"miruc": "/usr/bin/miruc"})
    monkeypatch.setattr(compiler.shutil, "which", which)
    monkeypatch.setattr(compiler.subprocess, "run", fake_run(stdout="\n"))

    with pytest.raises(CompilationError):
        compile_miru("print(1);")


def test_invalid_timeout_falls_back(monkeypatch):
    monkeypatch.setenv("MIRU_COMPILE_TIMEOUT", "soon")
    assert compiler._configured_timeout() == compiler.DEFAULT_TIMEOUT
