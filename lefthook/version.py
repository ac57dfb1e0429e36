"""Version of the tool and checks of required minimal versions."""

from __future__ import annotations

import os
import re
import sys

_VERSION = "1.11.10"

# Filled in at build time with the commit the release was built from.
_COMMIT = ""

_VERSION_RE = re.compile(
    r"(?P<major>\d+)(?:\.(?P<minor>\d+)(?:\.(?P<patch>\d+))?)?",
    re.ASCII,
)


class InvalidVersionError(ValueError):
    """A version string is not of the form MAJOR[.MINOR[.PATCH]]."""

    def __init__(self, message: str = "invalid version format") -> None:
        super().__init__(message)


class UncoveredVersionError(Exception):
    """A version is lower than the required one."""

    def __init__(self, message: str = "version is lower than required") -> None:
        super().__init__(message)


class InvalidMinVersionError(ValueError):
    """The 'min_version' setting has a wrong format."""

    def __init__(
        self, message: str = "format of 'min_version' setting is incorrect"
    ) -> None:
        super().__init__(message)


def version(verbose: bool = False) -> str:
    """Return the current version, with the build commit when verbose."""
    if verbose:
        return f"{_VERSION} {_COMMIT}"
    return _VERSION


def _parse(value: str) -> tuple[int, int, int]:
    match = _VERSION_RE.fullmatch(value)
    if match is None:
        raise InvalidVersionError()
    return (
        int(match["major"]),
        int(match["minor"] or 0),
        int(match["patch"] or 0),
    )


def check(wanted: str, given: str) -> None:
    """Raise unless the given version is at least the wanted one."""
    given_parts = _parse(given)
    wanted_parts = _parse(wanted)
    if given_parts < wanted_parts:
        raise UncoveredVersionError()


def _executable_path() -> str:
    if sys.argv and sys.argv[0]:
        return os.path.abspath(sys.argv[0])
    return "<unknown>"


def check_covered(target_version: str) -> None:
    """Raise if the current version is lower than target_version.

    An empty target means no requirement.
    """
    if not target_version:
        return None

    try:
        check(target_version, _VERSION)
    except UncoveredVersionError:
        raise UncoveredVersionError(
            f"required lefthook version ({target_version}) is higher than "
            f"current ({_VERSION}) at {_executable_path()}"
        ) from None
    except InvalidVersionError:
        raise InvalidMinVersionError() from None
    return None