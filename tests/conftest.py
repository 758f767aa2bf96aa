"""Shared test fixtures for AssetSync."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import pytest
from aiohttp.test_utils import TestServer
from loguru import logger

from assetsync.models import SyncConfig

from ._cdn_helpers import FakeCDN

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


@pytest.fixture(autouse=True)
def _reset_logger():
    """Detach sinks a test installed (CliRunner streams, log files)."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
async def cdn() -> AsyncGenerator[FakeCDN, None]:
    fake = FakeCDN()
    server = TestServer(fake.make_app())
    await server.start_server()
    fake.server = server
    yield fake
    await server.close()


@pytest.fixture
def config(cdn: FakeCDN) -> SyncConfig:
    return SyncConfig(cdn_base_url=cdn.base_url)
