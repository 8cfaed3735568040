"""LedgerQueryClient: decoding and degrade-on-failure."""

import httpx
import pytest

from fakes import market_row
from perception.ledger import QueryState
from perception.ledger.decode import decode_market


@pytest.mark.asyncio
async def test_get_market_decodes_tuple(node, queries):
    node.views["get_market"] = lambda args: market_row(question="BTC > 100k?", settled=True, result=True)
    market = await queries.get_market(7)
    assert market is not None
    assert market.id == 7
    assert market.question == "BTC > 100k?"
    assert market.creator == "0xcreator"
    assert market.resolve_ts == 1_900_000_000
    assert market.total_yes_shares == 10
    assert market.total_no_volume == 50
    assert market.settled and market.outcome is True
    assert market.created_at == 0


@pytest.mark.asyncio
async def test_view_request_shape(node, queries):
    node.views["get_market"] = lambda args: market_row()
    await queries.get_market(3)
    body = node.view_bodies[0]
    assert body["function"] == "0xcafe::perception_market::get_market"
    assert body["type_arguments"] == []
    assert body["arguments"] == ["3"]


@pytest.mark.asyncio
async def test_get_market_empty_result_is_not_found(node, queries):
    node.views["get_market"] = lambda args: []
    result = await queries.get_market_result(99)
    assert result.state is QueryState.NOT_FOUND
    assert result.value is None
    assert await queries.get_market(99) is None


@pytest.mark.asyncio
async def test_get_market_http_error_degrades_to_none(node, queries):
    node.views["get_market"] = lambda args: httpx.Response(400, json={"message": "abort"})
    result = await queries.get_market_result(1)
    assert result.state is QueryState.DEGRADED
    assert result.value is None
    assert "400" in result.error


@pytest.mark.asyncio
async def test_get_market_transport_error_degrades_to_none(node, queries):
    def boom(args):
        raise httpx.ConnectError("connection refused")

    node.views["get_market"] = boom
    assert await queries.get_market(1) is None


@pytest.mark.asyncio
async def test_get_market_malformed_tuple_degrades(node, queries):
    node.views["get_market"] = lambda args: ["only", "two"]
    result = await queries.get_market_result(1)
    assert result.degraded
    assert result.value is None


@pytest.mark.asyncio
async def test_markets_count(node, queries):
    node.views["get_markets_count"] = lambda args: ["4"]
    assert await queries.get_markets_count() == 4


@pytest.mark.asyncio
async def test_markets_count_failure_is_zero(node, queries):
    node.views["get_markets_count"] = lambda args: httpx.Response(500, text="down")
    result = await queries.get_markets_count_result()
    assert result.value == 0
    assert result.degraded


@pytest.mark.asyncio
async def test_markets_count_never_negative(node, queries):
    node.views["get_markets_count"] = lambda args: ["-3"]
    assert await queries.get_markets_count() == 0


@pytest.mark.asyncio
async def test_get_all_markets_skips_failed_indices_in_order(node, queries):
    node.views["get_markets_count"] = lambda args: ["5"]

    def get_market(args):
        idx = int(args[0])
        if idx in (1, 3):
            return httpx.Response(500, json={"message": "boom"})
        return market_row(question=f"q{idx}")

    node.views["get_market"] = get_market
    result = await queries.get_all_markets_result()
    assert [m.id for m in result.value] == [0, 2, 4]
    assert [m.question for m in result.value] == ["q0", "q2", "q4"]
    assert result.degraded
    assert node.calls_to("get_market") == 5


@pytest.mark.asyncio
async def test_get_all_markets_count_three_middle_throws(node, queries):
    node.views["get_markets_count"] = lambda args: ["3"]

    def get_market(args):
        if args[0] == "1":
            raise httpx.ReadTimeout("slow")
        return market_row(question=f"q{args[0]}")

    node.views["get_market"] = get_market
    markets = await queries.get_all_markets()
    assert [m.id for m in markets] == [0, 2]


@pytest.mark.asyncio
async def test_get_all_markets_not_found_is_not_degraded(node, queries):
    node.views["get_markets_count"] = lambda args: ["2"]
    node.views["get_market"] = lambda args: [] if args[0] == "0" else market_row()
    result = await queries.get_all_markets_result()
    assert result.ok
    assert [m.id for m in result.value] == [1]


@pytest.mark.asyncio
async def test_get_all_markets_count_failure_makes_no_market_calls(node, queries):
    node.views["get_markets_count"] = lambda args: httpx.Response(503)
    node.views["get_market"] = lambda args: market_row()
    result = await queries.get_all_markets_result()
    assert result.value == []
    assert result.degraded
    assert node.calls_to("get_market") == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("pct", [0, 1, 37, 50, 99, 100])
async def test_market_price_is_percentage_over_100(node, queries, pct):
    node.views["get_market_price"] = lambda args: [str(pct)]
    assert await queries.get_market_price(0) == pct / 100


@pytest.mark.asyncio
async def test_market_price_failure_defaults_to_half(node, queries):
    def boom(args):
        raise httpx.ConnectError("refused")

    node.views["get_market_price"] = boom
    result = await queries.get_market_price_result(0)
    assert result.value == 0.5
    assert result.degraded
    assert await queries.get_market_price(0) == 0.5


@pytest.mark.asyncio
async def test_market_price_out_of_range_defaults(node, queries):
    node.views["get_market_price"] = lambda args: ["150"]
    assert await queries.get_market_price(0) == 0.5


@pytest.mark.asyncio
async def test_user_position(node, queries):
    node.views["get_user_position"] = lambda args: ["3", "0", "300", "0", "70", True]
    position = await queries.get_user_position("0xuser", 2)
    assert position is not None
    assert position.market_id == 2
    assert position.user == "0xuser"
    assert position.yes_shares == 3
    assert position.yes_cost == 300
    assert position.agreement_percentage == 70
    assert position.prediction_side is True
    assert node.view_calls[-1] == ("get_user_position", ["0xuser", "2"])


@pytest.mark.asyncio
async def test_user_position_absent_and_failure(node, queries):
    node.views["get_user_position"] = lambda args: []
    assert (await queries.get_user_position_result("0xuser", 2)).state is QueryState.NOT_FOUND
    node.views["get_user_position"] = lambda args: httpx.Response(500)
    result = await queries.get_user_position_result("0xuser", 2)
    assert result.degraded and result.value is None


@pytest.mark.asyncio
async def test_missing_module_address_degrades(node):
    from perception.config import LedgerConfig
    from perception.ledger import LedgerQueryClient, LedgerRpc

    config = LedgerConfig(node_url="https://node.test/v1", module_address="")
    async with LedgerRpc(config, transport=httpx.MockTransport(node.handler)) as rpc:
        result = await LedgerQueryClient(rpc).get_market_result(0)
    assert result.degraded
    assert node.view_calls == []


def test_decode_market_accepts_string_booleans():
    row = market_row()
    row[7], row[8] = "true", "false"
    market = decode_market(0, row)
    assert market.settled is True
    assert market.outcome is False
