"""Tests for ManifestLoader and manifest parsing."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from assetsync.exceptions import ManifestMalformedError, ManifestUnavailableError
from assetsync.models import Asset
from assetsync.services import ManifestLoader, parse_manifest
from assetsync.services.manifest import is_remote

from ._cdn_helpers import FakeCDN

if TYPE_CHECKING:
    from pathlib import Path

ENTRIES = [
    {"path": "bin/java.exe", "hash": "AB" + "0" * 38, "size": 10},
    {"path": "lib/rt.jar", "hash": "cd" + "1" * 38, "size": 20},
]


class TestParseManifest:
    def test_parses_entries_in_order(self) -> None:
        assets = parse_manifest(json.dumps(ENTRIES))
        assert [a.path for a in assets] == ["bin/java.exe", "lib/rt.jar"]
        assert assets[0] == Asset(path="bin/java.exe", hash="ab" + "0" * 38, size=10)

    def test_accepts_assets_wrapper(self) -> None:
        assets = parse_manifest(json.dumps({"assets": ENTRIES}))
        assert len(assets) == 2

    def test_empty_list(self) -> None:
        assert parse_manifest("[]") == []

    def test_invalid_json(self) -> None:
        with pytest.raises(ManifestMalformedError):
            parse_manifest("{not json")

    def test_top_level_must_be_list(self) -> None:
        with pytest.raises(ManifestMalformedError):
            parse_manifest(json.dumps({"path": "a"}))

    @pytest.mark.parametrize(
        "entry",
        [
            {"hash": "ab" * 20, "size": 1},
            {"path": "a", "size": 1},
            {"path": "a", "hash": "ab" * 20},
            {"path": "a", "hash": "ab" * 20, "size": "1"},
            {"path": "a", "hash": "ab" * 20, "size": True},
            {"path": "a", "hash": "ab" * 20, "size": -1},
            {"path": "a", "hash": "../../x", "size": 1},
            {"path": "a", "hash": "zz" * 20, "size": 1},
            "a.txt",
        ],
    )
    def test_rejects_malformed_entries(self, entry: object) -> None:
        with pytest.raises(ManifestMalformedError):
            parse_manifest(json.dumps([entry]))


class TestLocalIndex:
    async def test_loads_local_file(self, tmp_path: Path) -> None:
        index = tmp_path / "index.json"
        index.write_text(json.dumps(ENTRIES))
        async with ManifestLoader() as loader:
            assets = await loader.load(str(index))
        assert len(assets) == 2

    async def test_missing_local_file(self, tmp_path: Path) -> None:
        async with ManifestLoader() as loader:
            with pytest.raises(ManifestUnavailableError):
                await loader.load(str(tmp_path / "missing.json"))

    async def test_malformed_local_file(self, tmp_path: Path) -> None:
        index = tmp_path / "index.json"
        index.write_text("<html>oops</html>")
        async with ManifestLoader() as loader:
            with pytest.raises(ManifestMalformedError):
                await loader.load(str(index))


class TestRemoteIndex:
    async def test_loads_remote_index(self, cdn: FakeCDN) -> None:
        url = cdn.add_document("index.json", ENTRIES)
        async with ManifestLoader() as loader:
            assets = await loader.load(url)
        assert [a.path for a in assets] == ["bin/java.exe", "lib/rt.jar"]

    async def test_remote_error_status(self, cdn: FakeCDN) -> None:
        url = cdn.add_document("index.json", ENTRIES, status=500)
        async with ManifestLoader() as loader:
            with pytest.raises(ManifestUnavailableError) as exc_info:
                await loader.load(url)
        assert exc_info.value.context["status"] == 500

    async def test_remote_malformed_body(self, cdn: FakeCDN) -> None:
        url = cdn.add_document("index.json", b"\x00not json")
        async with ManifestLoader() as loader:
            with pytest.raises(ManifestMalformedError):
                await loader.load(url)

    async def test_unreachable_host(self) -> None:
        async with ManifestLoader() as loader:
            with pytest.raises(ManifestUnavailableError):
                await loader.load("http://127.0.0.1:1/index.json")


def test_is_remote() -> None:
    assert is_remote("https://example.com/index.json")
    assert is_remote("HTTP://example.com/index.json")
    assert not is_remote("/tmp/index.json")
    assert not is_remote("httpdocs/index.json")


def test_non_hex_hash_never_reaches_cdn_url() -> None:
    """A hash carrying path segments is rejected before a URL is built."""
    with pytest.raises(ManifestMalformedError):
        Asset.from_dict({"path": "a", "hash": "../../etc/passwd", "size": 1})
