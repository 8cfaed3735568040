"""Shared fixtures: ledger config and a fake node behind httpx.MockTransport."""

import httpx
import pytest
import pytest_asyncio

from fakes import FakeNode
from perception.config import LedgerConfig
from perception.ledger import LedgerQueryClient, LedgerRpc

MODULE_ADDRESS = "0xcafe"


@pytest.fixture
def ledger_config():
    return LedgerConfig(node_url="https://node.test/v1", module_address=MODULE_ADDRESS)


@pytest.fixture
def node():
    return FakeNode()


@pytest_asyncio.fixture
async def rpc(ledger_config, node):
    async with LedgerRpc(ledger_config, transport=httpx.MockTransport(node.handler)) as client:
        yield client


@pytest.fixture
def queries(rpc):
    return LedgerQueryClient(rpc)
