"""Which parts of the output are shown."""

from __future__ import annotations

import enum
from typing import Any


class _Part(enum.IntFlag):
    META = enum.auto()
    SUCCESS = enum.auto()
    FAILURE = enum.auto()
    SUMMARY = enum.auto()
    SKIPS = enum.auto()
    EXECUTION = enum.auto()
    EXECUTION_OUTPUT = enum.auto()
    EXECUTION_INFO = enum.auto()
    EMPTY_SUMMARY = enum.auto()


_NONE = _Part(0)
_ALL = (
    _Part.META
    | _Part.SUCCESS
    | _Part.FAILURE
    | _Part.SUMMARY
    | _Part.SKIPS
    | _Part.EXECUTION
    | _Part.EXECUTION_OUTPUT
    | _Part.EXECUTION_INFO
    | _Part.EMPTY_SUMMARY
)

_ENABLES = {
    "meta": _Part.META,
    "success": _Part.SUCCESS,
    "failure": _Part.FAILURE,
    "summary": _Part.SUMMARY | _Part.SUCCESS | _Part.FAILURE,
    "skips": _Part.SKIPS,
    "execution": _Part.EXECUTION | _Part.EXECUTION_OUTPUT | _Part.EXECUTION_INFO,
    "execution_out": _Part.EXECUTION_OUTPUT | _Part.EXECUTION,
    "execution_info": _Part.EXECUTION_INFO | _Part.EXECUTION,
    "empty_summary": _Part.EMPTY_SUMMARY,
}

_DISABLES = {
    "meta": _Part.META,
    "success": _Part.SUCCESS,
    "failure": _Part.FAILURE,
    "summary": _Part.SUMMARY | _Part.SUCCESS | _Part.FAILURE,
    "skips": _Part.SKIPS,
    "execution": _Part.EXECUTION | _Part.EXECUTION_OUTPUT | _Part.EXECUTION_INFO,
    "execution_out": _Part.EXECUTION_OUTPUT,
    "execution_info": _Part.EXECUTION_INFO,
    "empty_summary": _Part.EMPTY_SUMMARY,
}


def _is_unset(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class LogSettings:
    """Output switches; everything is shown by default."""

    def __init__(self) -> None:
        self._parts = _ALL

    def apply(
        self,
        enable_tags: str = "",
        disable_tags: str = "",
        enable: Any = None,
        disable: Any = None,
    ) -> None:
        """Apply tags from the environment and options from the config.

        Tags take precedence over config options; a boolean enable option
        takes precedence over a boolean disable option.
        """
        no_tags = not enable_tags and not disable_tags

        if no_tags and _is_unset(enable) and _is_unset(disable):
            self._parts = _ALL
            return

        if isinstance(enable, bool) and no_tags:
            self._parts = _ALL if enable else _Part.FAILURE
            return

        if isinstance(disable, bool) and no_tags and disable:
            self._parts = _Part.FAILURE
            return

        if isinstance(enable, (list, tuple)):
            if enable:
                self._parts = _NONE
            for option in enable:
                if isinstance(option, str):
                    self._enable(option)

        if isinstance(disable, (list, tuple)):
            for option in disable:
                if isinstance(option, str):
                    self._disable(option)

        if enable_tags:
            self._parts = _NONE
            for tag in enable_tags.split(","):
                self._enable(tag)

        if disable_tags:
            for tag in disable_tags.split(","):
                self._disable(tag)

    def _enable(self, name: str) -> None:
        self._parts |= _ENABLES.get(name, _NONE)

    def _disable(self, name: str) -> None:
        self._parts &= ~_DISABLES.get(name, _NONE)

    def _shown(self, part: _Part) -> bool:
        return bool(self._parts & part)

    def log_success(self) -> bool:
        return self._shown(_Part.SUCCESS)

    def log_failure(self) -> bool:
        return self._shown(_Part.FAILURE)

    def log_summary(self) -> bool:
        return self._shown(_Part.SUMMARY)

    def log_meta(self) -> bool:
        return self._shown(_Part.META)

    def log_execution(self) -> bool:
        return self._shown(_Part.EXECUTION)

    def log_execution_output(self) -> bool:
        return self._shown(_Part.EXECUTION_OUTPUT)

    def log_execution_info(self) -> bool:
        return self._shown(_Part.EXECUTION_INFO)

    def log_skips(self) -> bool:
        return self._shown(_Part.SKIPS)

    def log_empty_summary(self) -> bool:
        return self._shown(_Part.EMPTY_SUMMARY)