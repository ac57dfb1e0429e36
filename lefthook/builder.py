"""Building multi-line log messages with aligned prefixes."""

from __future__ import annotations

from typing import Any

from lefthook import log
from lefthook.log import Level


class LogBuilder:
    """Collects prefixed lines and logs them at once at a fixed level."""

    def __init__(self, level: Level, prefix: str) -> None:
        self.level = level
        self.prefix = prefix
        self._lines: list[str] = []

    def add(self, prefix: str, data: Any) -> "LogBuilder":
        """Add data under a prefix; continuation lines are aligned under it."""
        if isinstance(data, str):
            lines = data.strip().split("\n")
        elif isinstance(data, list) and all(isinstance(item, str) for item in data):
            lines = data
        else:
            lines = str(data).split("\n")

        for index, raw in enumerate(lines):
            line = raw.strip()
            if not line:
                continue
            if not self._lines:
                self._lines.append(f"{self.prefix}{prefix}{line}\n")
            elif index == 0:
                self._lines.append(f"{' ' * len(self.prefix)}{prefix}{line}\n")
            else:
                self._lines.append(f"{' ' * (len(self.prefix) + len(prefix))}{line}\n")
        return self

    def __str__(self) -> str:
        return "".join(self._lines)

    def log(self) -> None:
        text = str(self)
        if self.level == Level.DEBUG:
            log.debug(text)
        elif self.level == Level.INFO:
            log.info(text)
        elif self.level == Level.ERROR:
            log.error(text)
        elif self.level == Level.WARN:
            log.warn(text)


class _DummyBuilder:
    """A builder for a disabled level: collects and logs nothing."""

    def add(self, prefix: str, data: Any) -> "_DummyBuilder":
        return self

    def __str__(self) -> str:
        return ""

    def log(self) -> None:
        return None


def make_builder(level: Level, prefix: str) -> LogBuilder | _DummyBuilder:
    """Return a builder, or a no-op one if the level is not shown."""
    if not log.is_level_enabled(level):
        return _DummyBuilder()
    return LogBuilder(level, prefix)