"""Operating-system helpers: command length limits and running commands."""

from __future__ import annotations

import dataclasses
import io
import os
import subprocess
import sys
from typing import IO, Any, Sequence

_MAX_COMMAND_LENGTH_DARWIN = 260000
_MAX_COMMAND_LENGTH_WINDOWS = 7000
_MAX_COMMAND_LENGTH_LINUX = 130000


def max_cmd_len() -> int:
    """Return a safe upper bound for a command line on this platform."""
    if sys.platform.startswith("win"):
        return _MAX_COMMAND_LENGTH_WINDOWS
    if sys.platform == "darwin":
        return _MAX_COMMAND_LENGTH_DARWIN
    return _MAX_COMMAND_LENGTH_LINUX


class NullReader(io.RawIOBase):
    """A reader that is always at end of file."""

    def readable(self) -> bool:
        return True

    def _ensure_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed file.")

    def readinto(self, buffer: Any) -> int:
        """Fill nothing into the buffer and report end of file."""
        self._ensure_open()
        memoryview(buffer)
        return 0

    def read(self, size: int = -1) -> bytes:
        """Return no bytes: the reader is always at end of file."""
        self._ensure_open()
        if size is None:
            size = -1
        if not isinstance(size, int):
            raise TypeError(f"size must be an integer, not {type(size).__name__}")
        return bytes(0)


def _fileno(stream: Any) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _stdin_source(stream: Any) -> tuple[Any, bytes | None]:
    if stream is None or isinstance(stream, NullReader):
        return subprocess.DEVNULL, None
    if _fileno(stream) is not None:
        return stream, None
    data = stream.read()
    if isinstance(data, str):
        data = data.encode()
    return None, data


def _sink(stream: Any) -> Any:
    if stream is None:
        return subprocess.DEVNULL
    if _fileno(stream) is not None:
        flush = getattr(stream, "flush", None)
        if flush is not None:
            flush()
        return stream
    return subprocess.PIPE


def _write(stream: IO[Any], data: bytes | None) -> None:
    if not data:
        return
    try:
        stream.write(data)
    except TypeError:
        stream.write(data.decode(errors="replace"))


@dataclasses.dataclass(frozen=True)
class Command:
    """Runs system commands with LEFTHOOK=0 so nested hooks are not triggered."""

    exclude_envs: tuple[str, ...] = ()

    def without_envs(self, *args: str) -> "Command":
        """Return a command runner that drops variables starting with the given prefixes."""
        return dataclasses.replace(self, exclude_envs=tuple(args))

    def _environment(self) -> dict[str, str]:
        env = {
            key: value
            for key, value in os.environ.items()
            if not any(f"{key}={value}".startswith(p) for p in self.exclude_envs)
        }
        env["LEFTHOOK"] = "0"
        return env

    def run(
        self,
        command: Sequence[str],
        root: str | os.PathLike[str] | None = None,
        stdin: Any = None,
        stdout: Any = None,
        stderr: Any = None,
    ) -> None:
        """Run the command, raising CalledProcessError on a non-zero exit."""
        if not command:
            raise ValueError("empty command")

        stdin_arg, input_data = _stdin_source(stdin)
        stdout_arg = _sink(stdout)
        stderr_arg = _sink(stderr)

        completed = subprocess.run(
            list(command),
            cwd=os.fspath(root) if root else None,
            env=self._environment(),
            stdin=stdin_arg,
            input=input_data,
            stdout=stdout_arg,
            stderr=stderr_arg,
            check=False,
        )

        if stdout_arg is subprocess.PIPE:
            _write(stdout, completed.stdout)
        if stderr_arg is subprocess.PIPE:
            _write(stderr, completed.stderr)

        if completed.returncode != 0:
            raise subprocess.CalledProcessError(completed.returncode, list(command))