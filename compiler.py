from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
import threading
from typing import Optional

from dotenv import load_dotenv


class CompilerUnavailableError(Exception):
    """Raised when the Miru compiler binary cannot be found."""


class CompilationError(Exception):
    """Raised when the compiler rejects the source or fails to finish."""


# Load environment variables so MIRU_COMPILER is available when running locally or in production.
load_dotenv()

DEFAULT_COMPILER = "miruc"
DEFAULT_TIMEOUT = 10.0

_compiler_path: Optional[str] = None
_compiler_command: Optional[str] = None
_init_lock = threading.Lock()


def _log_debug(message: str) -> None:
    print(f"[MIRU DEBUG] {message}", flush=True)


def _configured_command() -> str:
    return (os.environ.get("MIRU_COMPILER") or DEFAULT_COMPILER).strip()


def _configured_timeout() -> float:
    raw = os.environ.get("MIRU_COMPILE_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        _log_debug(f"Ignoring invalid MIRU_COMPILE_TIMEOUT={raw!r}")
        return DEFAULT_TIMEOUT


def get_compiler() -> str:
    """Return the resolved compiler path, locating it on first use."""
    global _compiler_path, _compiler_command

    command = _configured_command()
    if _compiler_path is not None and _compiler_command == command:
        return _compiler_path

    with _init_lock:
        # Another caller may have finished while we waited for the lock.
        if _compiler_path is not None and _compiler_command == command:
            _log_debug("Reusing existing compiler handle")
            return _compiler_path

        _log_debug(f"(Re)initializing compiler handle for {command!r}")
        path = shutil.which(command)
        if not path:
            _log_debug(f"Compiler {command!r} not found")
            raise CompilerUnavailableError("Compiler not configured")

        _compiler_path = path
        _compiler_command = command
        return path


def reset_compiler() -> None:
    global _compiler_path, _compiler_command
    with _init_lock:
        _compiler_path = None
        _compiler_command = None


def _error_message(text: str) -> Optional[str]:
    for line in text.splitlines():
        if "Error:" in line:
            return line.strip()
    return None


def compile_miru(source: str) -> str:
    code = source or ""
    if not code.strip():
        raise ValueError("Empty source")

    compiler = get_compiler()
    timeout = _configured_timeout()

    with tempfile.TemporaryDirectory() as workdir:
        source_path = os.path.join(workdir, "main.miru")
        with open(source_path, "w", encoding="utf-8") as fh:
            fh.write(code)

        _log_debug(f"Compiling source_len={len(code)} timeout={timeout}")
        try:
            proc = subprocess.run(
                [compiler, source_path],
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            _log_debug("Compiler timed out")
            raise CompilationError("Compilation timed out") from exc
        except OSError as exc:
            _log_debug(f"Compiler failed to start: {type(exc).__name__}: {exc}")
            raise CompilerUnavailableError(f"Compiler failed to start: {exc}") from exc

    error = _error_message(proc.stdout) or _error_message(proc.stderr)
    if proc.returncode != 0:
        detail = error or proc.stderr.strip() or f"Compiler exited with status {proc.returncode}"
        _log_debug(f"Compilation failed: {detail}")
        raise CompilationError(detail)
    if error:
        _log_debug(f"Compilation reported: {error}")
        raise CompilationError(error)

    generated = proc.stdout
    _log_debug(f"Received generated_len={len(generated)}")
    if not generated.strip():
        raise CompilationError("Error: No output generated")

    return generated
