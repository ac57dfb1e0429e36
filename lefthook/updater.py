"""Self-update of the installed executable from the latest published release."""

from __future__ import annotations

import dataclasses
import hashlib
import json
import os
import platform
import sys
import urllib.error
import urllib.request
from typing import Any, BinaryIO, TextIO

from lefthook import log
from lefthook.version import version

_TIMEOUT = 120.0
_REPOSITORY = "evilmartians/lefthook"
LATEST_RELEASE_URL = f"https://api.github.com/repos/{_REPOSITORY}/releases/latest"
_CHECKSUMS_FILENAME = "lefthook_checksums.txt"
_CHECKSUM_FIELDS = 2
_MOD_EXECUTABLE = 0o755
_CHUNK = 64 * 1024

_OS_NAMES = {
    "windows": "Windows",
    "darwin": "MacOS",
    "linux": "Linux",
    "freebsd": "Freebsd",
    "openbsd": "Openbsd",
}

_ARCH_NAMES = {
    "amd64": "x86_64",
    "arm64": "arm64",
    "386": "i386",
}

_MACHINE_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "i386": "386",
    "i486": "386",
    "i586": "386",
    "i686": "386",
    "x86": "386",
}


class NoAssetError(LookupError):
    """The release has no asset for this platform."""

    def __init__(
        self,
        message: str = (
            "Couldn't find an asset to download. "
            "Please submit an issue to the lefthook issue tracker"
        ),
    ) -> None:
        super().__init__(message)


class InvalidHashsumError(ValueError):
    """The downloaded file does not match its published SHA256 sum."""

    def __init__(
        self,
        message: str = (
            "SHA256 sums differ, it's not safe to use the downloaded binary.\n"
            "If you have problems upgrading lefthook please submit an issue "
            "to the lefthook issue tracker"
        ),
    ) -> None:
        super().__init__(message)


class UpdateFailedError(RuntimeError):
    """The new executable could not be put in place."""

    def __init__(self, message: str = "Update failed") -> None:
        super().__init__(message)


@dataclasses.dataclass
class UpdateOptions:
    """How to update: without asking, even when up to date, and which file to replace."""

    yes: bool = False
    force: bool = False
    exe_path: str = ""


def _os_key() -> str:
    plat = sys.platform
    if plat.startswith("win"):
        return "windows"
    if plat == "darwin":
        return "darwin"
    if plat.startswith("linux"):
        return "linux"
    if plat.startswith("freebsd"):
        return "freebsd"
    if plat.startswith("openbsd"):
        return "openbsd"
    return plat


def _arch_key() -> str:
    machine = platform.machine().lower()
    return _MACHINE_ALIASES.get(machine, machine)


def wanted_asset_name(latest_version: str) -> str:
    """Return the name of the release asset built for this platform."""
    os_key = _os_key()
    name = (
        f"lefthook_{latest_version}_"
        f"{_OS_NAMES.get(os_key, '')}_{_ARCH_NAMES.get(_arch_key(), '')}"
    )
    if os_key == "windows":
        name += ".exe"
    return name


class _Progress:
    """A byte counter shown on a terminal while downloading."""

    def __init__(self, total: int, description: str, stream: TextIO) -> None:
        self.total = total
        self.description = description
        self.done = 0
        self._stream = stream
        self._visible = _isatty(stream)

    def update(self, count: int) -> None:
        self.done += count
        if not self._visible:
            return
        if self.total > 0:
            percent = min(100, self.done * 100 // self.total)
            line = f"\r{self.description} {percent:3d}% ({self.done}/{self.total} B)"
        else:
            line = f"\r{self.description} {self.done} B"
        self._stream.write(line)
        self._stream.flush()

    def finish(self) -> None:
        if self._visible:
            self._stream.write("\n")
            self._stream.flush()


def _isatty(stream: Any) -> bool:
    try:
        return bool(stream.isatty())
    except (AttributeError, OSError, ValueError):
        return False


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except OSError:
        pass


class Updater:
    """Fetches the latest release and replaces the running executable with it."""

    def __init__(
        self,
        release_url: str = LATEST_RELEASE_URL,
        timeout: float = _TIMEOUT,
        stdin: TextIO | None = None,
    ) -> None:
        self.release_url = release_url
        self.timeout = timeout
        self._stdin = stdin

    def self_update(self, opts: UpdateOptions) -> None:
        """Update the executable at opts.exe_path to the latest release."""
        try:
            release = self._fetch_latest_release()
        except RuntimeError as exc:
            raise RuntimeError(f"latest release fetch failed: {exc}") from exc

        latest_version = str(release.get("tag_name") or "").removeprefix("v")

        if latest_version == version(False) and not opts.force:
            log.info(f"Up to date: {latest_version}")
            return

        wanted = wanted_asset_name(latest_version)
        log.debug(f"Searching assets for {wanted}")

        download_url = ""
        checksum_url = ""
        for asset in release.get("assets") or []:
            name = asset.get("name", "")
            url = asset.get("browser_download_url", "")
            if not download_url and name == wanted:
                download_url = url
                if checksum_url:
                    break
            if not checksum_url and name == _CHECKSUMS_FILENAME:
                checksum_url = url
                if download_url:
                    break

        if not download_url:
            log.warn(f"Couldn't find the right asset to download. Wanted: {wanted}")
            raise NoAssetError()

        if not checksum_url:
            log.warn("Couldn't find checksums")

        if not opts.yes and not self._confirmed(latest_version):
            log.debug("Update rejected")
            return

        exe_path = os.path.realpath(opts.exe_path)
        dest_path = f"{exe_path}.{latest_version}"
        backup_path = f"{exe_path}.bak"

        try:
            if not self._download(wanted, download_url, checksum_url, dest_path):
                raise InvalidHashsumError()

            log.debug(f"mv {exe_path} {backup_path}")
            try:
                os.replace(exe_path, backup_path)
            except OSError as exc:
                raise OSError(f"failed to backup lefthook executable: {exc}") from exc

            log.debug(f"mv {dest_path} {exe_path}")
            try:
                os.replace(dest_path, exe_path)
            except OSError as exc:
                log.error(f"Failed to replace the lefthook executable: {exc}")
                self._restore(backup_path, exe_path)
                raise UpdateFailedError() from exc

            log.debug(f"chmod +x {exe_path}")
            try:
                os.chmod(exe_path, _MOD_EXECUTABLE)
            except OSError as exc:
                log.error(f"Failed to set executable file mode: {exc}")
                self._restore(backup_path, exe_path)
                raise UpdateFailedError() from exc
        finally:
            _remove_quietly(dest_path)
            _remove_quietly(backup_path)

    @staticmethod
    def _restore(backup_path: str, exe_path: str) -> None:
        try:
            os.replace(backup_path, exe_path)
        except OSError as exc:
            raise OSError(f"failed to recover from backup: {exc}") from exc

    def _confirmed(self, latest_version: str) -> bool:
        log.info(
            f"Update {log.cyan('lefthook')} to {log.yellow(latest_version)}? "
            f"{log.gray('[Y/n]')} "
        )
        stream = self._stdin if self._stdin is not None else sys.stdin
        answer = stream.readline().strip()
        return not answer or answer[0] in "yY"

    def _open(self, url: str, headers: dict[str, str] | None = None) -> Any:
        request = urllib.request.Request(url, headers=headers or {}, method="GET")
        return urllib.request.urlopen(request, timeout=self.timeout)

    def _fetch_latest_release(self) -> dict[str, Any]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        try:
            response = self._open(self.release_url, headers)
        except ValueError as exc:
            raise RuntimeError(f"failed to initialize a request: {exc}") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise RuntimeError(f"request failed: {exc}") from exc

        with response:
            try:
                data = json.load(response)
            except (ValueError, UnicodeDecodeError) as exc:
                raise RuntimeError(f"failed to parse the Github response: {exc}") from exc

        if not isinstance(data, dict):
            raise RuntimeError("failed to parse the Github response: not an object")
        return data

    def _download(self, name: str, file_url: str, checksum_url: str, path: str) -> bool:
        log.debug(f"Downloading {file_url} to {path}")

        try:
            handle: BinaryIO = open(path, "wb")
        except OSError as exc:
            raise OSError(f"failed to create destination path ({path}): {exc}") from exc

        with handle:
            try:
                response = self._open(file_url)
            except (ValueError, urllib.error.URLError, OSError) as exc:
                raise RuntimeError(f"download request failed: {exc}") from exc

            with response:
                try:
                    checksum_response = self._open(checksum_url)
                except (ValueError, urllib.error.URLError, OSError) as exc:
                    raise RuntimeError(
                        f"checksum download request failed: {exc}"
                    ) from exc

                with checksum_response:
                    file_length = response.length if response.length is not None else -1
                    sums_length = (
                        checksum_response.length
                        if checksum_response.length is not None
                        else -1
                    )
                    progress = _Progress(file_length + sums_length, name, sys.stderr)

                    hasher = hashlib.sha256()
                    try:
                        while chunk := response.read(_CHUNK):
                            handle.write(chunk)
                            hasher.update(chunk)
                            progress.update(len(chunk))
                    except OSError as exc:
                        raise OSError(f"failed to download the file: {exc}") from exc

                    hashsum = hasher.hexdigest()
                    checksums = checksum_response.read().decode(errors="replace")

        for line in checksums.splitlines():
            fields = line.split()
            if len(fields) < _CHECKSUM_FIELDS:
                continue
            log.debug(f"Checking {fields[0]} {fields[1]}")
            if fields[1] == name:
                if fields[0] != hashsum:
                    return False
                progress.finish()
                log.debug(f"Match {fields[0]} {fields[1]}")
                return True

        log.debug(f"No matches found for {name} {hashsum}")
        return False