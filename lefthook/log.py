"""Console output: levels, colors, borders and the waiting spinner."""

from __future__ import annotations

import contextlib
import dataclasses
import enum
import itertools
import os
import re
import sys
import threading
import unicodedata
from typing import Any, Callable, Iterator, Mapping, TextIO

from lefthook.version import version as _tool_version

_SEPARATOR_WIDTH = 36
_SEPARATOR_MARGIN = 2
_PADDING = 2

_SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
_SPINNER_INTERVAL = 0.1
_SPINNER_TEXT = " waiting"

_DEFAULT_PALETTE: dict[str, str | None] = {
    "red": "#ff6347",
    "green": "#32cd32",
    "yellow": "#fada5e",
    "cyan": "#70C0BA",
    "gray": "#808080",
    "border": "#383838",
}

_palette: dict[str, str | None] = dict(_DEFAULT_PALETTE)

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
_HEX6_RE = re.compile(r"#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})")
_HEX3_RE = re.compile(r"#([0-9a-fA-F])([0-9a-fA-F])([0-9a-fA-F])")


class Level(enum.IntEnum):
    """Verbosity levels; a higher level shows more."""

    ERROR = 0
    WARN = 1
    INFO = 2
    DEBUG = 3


class ColorMode(enum.Enum):
    """Whether output is colored."""

    AUTO = enum.auto()
    ON = enum.auto()
    OFF = enum.auto()


def _isatty(stream: Any) -> bool:
    try:
        return bool(stream.isatty())
    except (AttributeError, OSError, ValueError):
        return False


class _Spinner:
    """A one-line spinner drawn in a background thread while a terminal waits."""

    def __init__(self, stream: Callable[[], TextIO]) -> None:
        self._stream = stream
        self.suffix = _SPINNER_TEXT
        self._lock = threading.Lock()
        self._stop: threading.Event | None = None
        self._thread: threading.Thread | None = None

    @property
    def active(self) -> bool:
        return self._thread is not None

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            stream = self._stream()
            if not _isatty(stream):
                return
            self._stop = threading.Event()
            self._thread = threading.Thread(
                target=self._spin, args=(stream, self._stop), daemon=True
            )
            self._thread.start()

    def stop(self) -> None:
        with self._lock:
            if self._thread is None or self._stop is None:
                return
            self._stop.set()
            self._thread.join()
            stream = self._stream()
            stream.write("\r\x1b[K")
            stream.flush()
            self._thread = None
            self._stop = None

    def _spin(self, stream: TextIO, stop: threading.Event) -> None:
        for frame in itertools.cycle(_SPINNER_FRAMES):
            stream.write(f"\r\x1b[K{frame}{self.suffix}")
            stream.flush()
            if stop.wait(_SPINNER_INTERVAL):
                break


def _join(args: tuple[Any, ...]) -> str:
    return " ".join(str(arg) for arg in args)


class Logger:
    """Writes leveled messages, pausing the spinner while it writes."""

    def __init__(self, out: TextIO | None = None, level: Level = Level.INFO) -> None:
        self.level = level
        self.colors = ColorMode.AUTO
        self.names: list[str] = []
        self._out = out
        self._lock = threading.Lock()
        self.spinner = _Spinner(lambda: self.out)

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    def set_level(self, level: Level) -> None:
        with self._lock:
            self.level = level

    def set_output(self, out: TextIO) -> None:
        with self._lock:
            self._out = out

    def is_level_enabled(self, level: Level) -> bool:
        return self.level >= level

    def log(self, level: Level, *args: Any) -> None:
        if self.is_level_enabled(level):
            self.println(*args)

    def info(self, *args: Any) -> None:
        self.log(Level.INFO, *args)

    def debug(self, *args: Any) -> None:
        self.log(Level.DEBUG, _left_bordered(_join(args), _palette["border"], _PADDING))

    def error(self, *args: Any) -> None:
        self.log(Level.ERROR, _left_bordered(_join(args), _palette["red"], _PADDING))

    def warn(self, *args: Any) -> None:
        self.log(Level.WARN, _left_bordered(_join(args), _palette["yellow"], _PADDING))

    @contextlib.contextmanager
    def _spinner_paused(self) -> Iterator[None]:
        was_active = self.spinner.active
        if was_active:
            self.spinner.stop()
        try:
            yield
        finally:
            if was_active:
                self.spinner.start()

    def println(self, *args: Any) -> None:
        with self._lock, self._spinner_paused():
            print(*args, file=self.out)

    def write(self, text: str) -> None:
        with self._lock, self._spinner_paused():
            self.out.write(text)

    def _write_at(self, level: Level, text: str) -> None:
        if self.is_level_enabled(level):
            self.write(text)

    def _update_suffix(self) -> None:
        if self.names:
            self.spinner.suffix = f"{_SPINNER_TEXT}: {', '.join(self.names)}"
        else:
            self.spinner.suffix = _SPINNER_TEXT

    def set_name(self, name: str) -> None:
        with self._lock, self._spinner_paused():
            self.names.append(name)
            self._update_suffix()

    def unset_name(self, name: str) -> None:
        with self._lock, self._spinner_paused():
            self.names = [n for n in self.names if n != name]
            self._update_suffix()


_std = Logger()


def _color_enabled() -> bool:
    if _std.colors is ColorMode.ON:
        return True
    if _std.colors is ColorMode.OFF:
        return False
    return "NO_COLOR" not in os.environ and _isatty(_std.out)


def _sgr(code: str | None) -> str | None:
    if not code:
        return None
    match = _HEX6_RE.fullmatch(code)
    if match:
        r, g, b = (int(part, 16) for part in match.groups())
        return f"38;2;{r};{g};{b}"
    match = _HEX3_RE.fullmatch(code)
    if match:
        r, g, b = (int(part * 2, 16) for part in match.groups())
        return f"38;2;{r};{g};{b}"
    if code.isdigit() and int(code) <= 255:
        return f"38;5;{int(code)}"
    return None


def _paint(text: str, code: str | None) -> str:
    sgr = _sgr(code)
    if not text or sgr is None or not _color_enabled():
        return text
    return "\n".join(
        f"\x1b[{sgr}m{line}\x1b[0m" if line else line for line in text.split("\n")
    )


def _width(text: str) -> int:
    width = 0
    for ch in _ANSI_RE.sub("", text):
        if unicodedata.combining(ch) or unicodedata.category(ch) in ("Mn", "Cf"):
            continue
        width += 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1
    return width


def _padded_lines(text: str) -> list[str]:
    lines = text.split("\n")
    width = max((_width(line) for line in lines), default=0)
    return [line + " " * (width - _width(line)) for line in lines]


def _left_bordered(text: str, color: str | None, padding: int) -> str:
    border = _paint("│", color)
    return "\n".join(border + " " * padding + line for line in _padded_lines(text))


def _box(left: str, right: str) -> str:
    border = _palette["border"]

    def framed(content: str, opening: bool) -> list[str]:
        inner = [f" {line} " for line in _padded_lines(content)]
        horizontal = "─" * _width(inner[0])
        if opening:
            return (
                [_paint("╭" + horizontal, border)]
                + [_paint("│", border) + line for line in inner]
                + [_paint("╰" + horizontal, border)]
            )
        return (
            [_paint(horizontal + "╮", border)]
            + [line + _paint("│", border) for line in inner]
            + [_paint(horizontal + "╯", border)]
        )

    left_block = framed(left, True)
    right_block = framed(right, False)
    left_width = _width(left_block[0])
    rows = []
    for left_line, right_line in itertools.zip_longest(left_block, right_block):
        rows.append((left_line or " " * left_width) + (right_line or ""))
    return "\n".join(rows)


@dataclasses.dataclass(frozen=True)
class StyleLogger:
    """An info logger that renders text with an optional left border and padding."""

    bordered: bool = False
    border_color: str | None = None
    padding: int = 0

    def with_left_border(self, color: str | None) -> "StyleLogger":
        return dataclasses.replace(self, bordered=True, border_color=color)

    def with_padding(self, padding: int) -> "StyleLogger":
        return dataclasses.replace(self, padding=padding)

    def info(self, text: str) -> None:
        if self.bordered:
            rendered = _left_bordered(text, self.border_color, self.padding)
        else:
            rendered = "\n".join(" " * self.padding + line for line in _padded_lines(text))
        info(rendered)


def styled() -> StyleLogger:
    """Return a plain style logger to be configured."""
    return StyleLogger()


def colors() -> ColorMode:
    return _std.colors


def colorized() -> bool:
    return _std.colors in (ColorMode.AUTO, ColorMode.ON)


def start_spinner() -> None:
    _std.spinner.start()


def stop_spinner() -> None:
    _std.spinner.stop()


def is_level_enabled(level: Level) -> bool:
    """Tell whether the shared logger shows messages of this level."""
    return _std.is_level_enabled(level)


def debug(*args: Any) -> None:
    _std.debug(gray(_join(args).strip()))


def info(*args: Any) -> None:
    _std.info(*args)


def info_pad(text: str) -> None:
    info(_left_bordered(text, _palette["cyan"], 0))


def error(*args: Any) -> None:
    _std.error(red(_join(args)))


def warn(*args: Any) -> None:
    _std.warn(yellow(_join(args)))


def set_level(level: Level) -> None:
    _std.set_level(level)


def set_output(out: TextIO) -> None:
    _std.set_output(out)


def _clear_palette() -> None:
    for name in _palette:
        _palette[name] = None


def _set_color(name: str, code: Any) -> None:
    if isinstance(code, int) and not isinstance(code, bool):
        code = str(code)
    if not isinstance(code, str) or not code:
        return
    _palette[name] = code


def set_colors(colors: Any) -> None:
    """Configure colors from a bool, "on"/"off"/"auto" or a mapping of color codes."""
    if colors is None:
        return
    if isinstance(colors, bool):
        if colors:
            _std.colors = ColorMode.ON
        else:
            _std.colors = ColorMode.OFF
            _clear_palette()
    elif isinstance(colors, str):
        if colors == "on":
            _std.colors = ColorMode.ON
        elif colors == "off":
            _std.colors = ColorMode.OFF
            _clear_palette()
        else:
            _std.colors = ColorMode.AUTO
    elif isinstance(colors, Mapping):
        _std.colors = ColorMode.ON
        for name in ("red", "green", "yellow", "cyan", "gray"):
            _set_color(name, colors.get(name))
        _set_color("border", colors.get("gray"))
    else:
        _std.colors = ColorMode.AUTO


def cyan(text: str) -> str:
    return _paint(text, _palette["cyan"])


def green(text: str) -> str:
    return _paint(text, _palette["green"])


def red(text: str) -> str:
    return _paint(text, _palette["red"])


def yellow(text: str) -> str:
    return _paint(text, _palette["yellow"])


def gray(text: str) -> str:
    return _paint(text, _palette["gray"])


def bold(text: str) -> str:
    if not colorized() or not _color_enabled() or not text:
        return text
    return f"\x1b[1m{text}\x1b[0m"


def log_meta(hook_name: str) -> None:
    """Print the boxed header with the tool version and the hook name."""
    name = "🥊 lefthook " if colorized() else "lefthook "
    info(
        _box(
            cyan(name) + gray(f"v{_tool_version(False)}"),
            gray("hook: ") + bold(hook_name),
        )
    )


def success(indent: int, name: str) -> None:
    mark = "✔️" if colorized() else "✓"
    _std._write_at(Level.INFO, f"{'  ' * indent}{mark} {green(name)}\n")


def failure(indent: int, name: str, fail_text: str) -> None:
    if fail_text:
        fail_text = f": {fail_text}"
    mark = "🥊" if colorized() else "✗"
    _std._write_at(Level.INFO, f"{'  ' * indent}{mark} {red(name)}{red(fail_text)}\n")


def separate(text: str) -> None:
    rule = " " * _SEPARATOR_MARGIN + _paint("─" * _SEPARATOR_WIDTH, _palette["border"])
    info(f"{rule}\n{text}")


def parse_level(level: str) -> Level:
    """Parse a level name; only error, info and debug are accepted."""
    levels = {"error": Level.ERROR, "info": Level.INFO, "debug": Level.DEBUG}
    try:
        return levels[level.lower()]
    except KeyError:
        raise ValueError(f'not a valid Level: "{level}"') from None


def set_name(name: str) -> None:
    _std.set_name(name)


def unset_name(name: str) -> None:
    _std.unset_name(name)