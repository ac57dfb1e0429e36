import io
import json
import platform
import sys
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from lefthook.updater import (
    InvalidHashsumError,
    NoAssetError,
    UpdateOptions,
    Updater,
    wanted_asset_name,
)
from lefthook.version import version

ASSET = bytes([65, 54, 24, 32, 43, 67, 21])

BAD_SUMS = """
    67a5740c6c66d986c5708cddd6bd0bc240db29451646fc4c1398b988dcf7cdfe lefthook_1.0.0_MacOS_arm64
    67a5740c6c66d986c5708cddd6bd0bc240db29451646fc4c1398b988dcf7cdfe lefthook_1.0.0_MacOS_x86_64
    67a5740c6c66d986c5708cddd6bd0bc240db29451646fc4c1398b988dcf7cdfe lefthook_1.0.0_Linux_x86_64
    67a5740c6c66d986c5708cddd6bd0bc240db29451646fc4c1398b988dcf7cdfe lefthook_1.0.0_Linux_arm64
    67a5740c6c66d986c5708cddd6bd0bc240db29451646fc4c1398b988dcf7cdfe lefthook_1.0.0_Windows_x86_64.exe
"""

GOOD_SUMS = """
    0e1c97246ba1bc8bde78355ae986589545d3c69bf1264d2d3c1835ec072006f6 lefthook_1.0.0_MacOS_arm64
    0e1c97246ba1bc8bde78355ae986589545d3c69bf1264d2d3c1835ec072006f6 lefthook_1.0.0_MacOS_x86_64
    0e1c97246ba1bc8bde78355ae986589545d3c69bf1264d2d3c1835ec072006f6 lefthook_1.0.0_Linux_x86_64
    0e1c97246ba1bc8bde78355ae986589545d3c69bf1264d2d3c1835ec072006f6 lefthook_1.0.0_Linux_arm64
    0e1c97246ba1bc8bde78355ae986589545d3c69bf1264d2d3c1835ec072006f6 lefthook_1.0.0_Windows_x86_64.exe
"""


@pytest.fixture
def server():
    routes: dict[str, bytes] = {}

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self):
            body = routes.get(self.path)
            if body is None:
                self.send_response(404)
                self.end_headers()
                return
            self.send_response(200)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, *args):
            pass

    httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    base = f"http://127.0.0.1:{httpd.server_address[1]}"
    yield base, routes
    httpd.shutdown()
    httpd.server_close()


def publish(server, tag, asset_name, asset=b"", checksums=""):
    base, routes = server
    routes["/asset"] = asset
    routes["/checksums"] = checksums.encode()
    routes["/release"] = json.dumps(
        {
            "tag_name": tag,
            "assets": [
                {"name": asset_name, "browser_download_url": f"{base}/asset"},
                {
                    "name": "lefthook_checksums.txt",
                    "browser_download_url": f"{base}/checksums",
                },
            ],
        }
    ).encode()
    return f"{base}/release"


@pytest.fixture
def exe(tmp_path):
    path = tmp_path / "lefthook"
    path.write_bytes(b"")
    return path


def test_asset_not_found(server, exe):
    url = publish(server, "v1.0.0", "lefthook_1.0.0_darwin_arm64")
    with pytest.raises(NoAssetError):
        Updater(release_url=url).self_update(
            UpdateOptions(yes=True, force=False, exe_path=str(exe))
        )
    assert exe.read_bytes() == b""


def test_no_need_to_update(server, exe):
    url = publish(server, "v" + version(False), "lefthook_1.0.0_darwin_arm64")
    Updater(release_url=url).self_update(
        UpdateOptions(yes=True, force=False, exe_path=str(exe))
    )
    assert exe.read_bytes() == b""


def test_forced_update_but_asset_not_found(server, exe):
    url = publish(server, "v" + version(False), "lefthook_1.0.0_darwin_arm64")
    with pytest.raises(NoAssetError):
        Updater(release_url=url).self_update(
            UpdateOptions(yes=True, force=True, exe_path=str(exe))
        )


def test_invalid_hashsum(server, exe, tmp_path):
    url = publish(server, "v1.0.0", wanted_asset_name("1.0.0"), ASSET, BAD_SUMS)
    with pytest.raises(InvalidHashsumError):
        Updater(release_url=url).self_update(
            UpdateOptions(yes=True, force=True, exe_path=str(exe))
        )
    assert exe.read_bytes() == b""
    assert sorted(p.name for p in tmp_path.iterdir()) == ["lefthook"]


def test_success(server, exe, tmp_path):
    url = publish(server, "v1.0.0", wanted_asset_name("1.0.0"), ASSET, GOOD_SUMS)
    Updater(release_url=url).self_update(
        UpdateOptions(yes=True, force=True, exe_path=str(exe))
    )
    assert exe.read_bytes() == ASSET
    assert sorted(p.name for p in tmp_path.iterdir()) == ["lefthook"]


def test_rejected_update_keeps_executable(server, exe):
    url = publish(server, "v1.0.0", wanted_asset_name("1.0.0"), ASSET, GOOD_SUMS)
    Updater(release_url=url, stdin=io.StringIO("n\n")).self_update(
        UpdateOptions(yes=False, force=True, exe_path=str(exe))
    )
    assert exe.read_bytes() == b""


def test_accepted_update_replaces_executable(server, exe):
    url = publish(server, "v1.0.0", wanted_asset_name("1.0.0"), ASSET, GOOD_SUMS)
    Updater(release_url=url, stdin=io.StringIO("Y\n")).self_update(
        UpdateOptions(yes=False, force=True, exe_path=str(exe))
    )
    assert exe.read_bytes() == ASSET


def test_bad_release_response(server, exe):
    base, routes = server
    routes["/release"] = b"not json"
    with pytest.raises(RuntimeError, match="latest release fetch failed"):
        Updater(release_url=f"{base}/release").self_update(
            UpdateOptions(yes=True, force=True, exe_path=str(exe))
        )


@pytest.mark.parametrize(
    "plat, machine, expected",
    [
        ("win32", "AMD64", "lefthook_1.2.3_Windows_x86_64.exe"),
        ("linux", "aarch64", "lefthook_1.2.3_Linux_arm64"),
        ("darwin", "x86_64", "lefthook_1.2.3_MacOS_x86_64"),
        ("darwin", "arm64", "lefthook_1.2.3_MacOS_arm64"),
        ("freebsd14", "i686", "lefthook_1.2.3_Freebsd_i386"),
    ],
)
def test_wanted_asset_name(monkeypatch, plat, machine, expected):
    monkeypatch.setattr(sys, "platform", plat)
    monkeypatch.setattr(platform, "machine", lambda: machine)
    assert wanted_asset_name("1.2.3") == expected