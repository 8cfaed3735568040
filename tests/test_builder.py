"""TransactionBuilder payload shapes."""

import pytest

from perception.config import LedgerConfig
from perception.errors import ConfigurationError
from perception.transactions import TransactionBuilder


@pytest.fixture
def builder(ledger_config):
    return TransactionBuilder(ledger_config)


def test_create_market(builder):
    payload = builder.create_market("Will it snow?", 1_900_000_000)
    assert payload.function == "0xcafe::perception_market::create_market"
    assert payload.type_arguments == []
    assert payload.arguments == ["Will it snow?", "1900000000"]
    assert payload.name == "create_market"


def test_buy_yes_and_no(builder):
    yes = builder.buy_yes(2, 500, 65)
    no = builder.buy_no(2, 500, 65)
    assert yes.function.endswith("::buy_yes")
    assert no.function.endswith("::buy_no")
    assert yes.arguments == no.arguments == ["2", "500", "65"]
    assert builder.buy(2, False, 500, 65) == no


def test_settle_market_serializes_bool(builder):
    assert builder.settle_market(4, True).arguments == ["4", "true"]
    assert builder.settle_market(4, False).arguments == ["4", "false"]


def test_initialize_has_no_arguments(builder):
    payload = builder.initialize()
    assert payload.function == "0xcafe::perception_market::initialize"
    assert payload.arguments == []


def test_wallet_payload(builder):
    wallet_payload = builder.buy_yes(1, 10, 50).to_wallet_payload()
    assert wallet_payload == {
        "type": "entry_function_payload",
        "function": "0xcafe::perception_market::buy_yes",
        "type_arguments": [],
        "arguments": ["1", "10", "50"],
    }


def test_custom_module_name():
    config = LedgerConfig(module_address="0x1", module_name="marketplace")
    assert TransactionBuilder(config).initialize().function == "0x1::marketplace::initialize"


def test_missing_module_address_raises():
    with pytest.raises(ConfigurationError):
        TransactionBuilder(LedgerConfig()).create_market("q", 1)
