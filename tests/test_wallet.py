"""WalletSessionAdapter and the identity gate."""

import pytest

from fakes import FakeIdentity, FakeWallet
from perception.errors import NotAuthenticatedError, WalletUnavailableError
from perception.wallet import IdentityGate, WalletSessionAdapter, connect_wallet, short_address


@pytest.mark.asyncio
async def test_connect_defaults_to_first_wallet():
    wallet = FakeWallet()
    adapter = WalletSessionAdapter(wallet)
    assert not adapter.connected
    session = await adapter.connect()
    assert wallet.connected_to == "Petra"
    assert session.connected
    assert session.provider_name == "Petra"
    assert adapter.account == wallet.account


@pytest.mark.asyncio
async def test_connect_named_wallet():
    wallet = FakeWallet()
    adapter = WalletSessionAdapter(wallet)
    await adapter.connect("Martian")
    assert adapter.session.provider_name == "Martian"


@pytest.mark.asyncio
async def test_connect_without_wallets():
    adapter = WalletSessionAdapter(FakeWallet(names=()))
    with pytest.raises(WalletUnavailableError):
        await adapter.connect()
    assert not adapter.connected


@pytest.mark.asyncio
async def test_disconnect_resets_session():
    wallet = FakeWallet()
    adapter = WalletSessionAdapter(wallet)
    await adapter.connect()
    await adapter.disconnect()
    assert not adapter.connected
    assert adapter.account is None
    assert wallet.disconnects == 1
    await adapter.disconnect()
    assert wallet.disconnects == 1


@pytest.mark.asyncio
async def test_sign_and_submit_requires_connection():
    wallet = FakeWallet()
    adapter = WalletSessionAdapter(wallet)
    with pytest.raises(NotAuthenticatedError):
        await adapter.sign_and_submit({"function": "x"})
    assert wallet.submitted == []


@pytest.mark.asyncio
async def test_session_is_a_copy():
    adapter = WalletSessionAdapter(FakeWallet())
    await adapter.connect()
    session = adapter.session
    session.connected = False
    assert adapter.connected


def test_short_address():
    assert short_address("0x1234567890abcdef") == "0x1234...cdef"
    assert short_address("0x1") == "0x1"
    assert short_address(None) == ""


@pytest.mark.asyncio
async def test_connect_requires_identity():
    identity = FakeIdentity()
    wallet = FakeWallet()
    gate = IdentityGate(identity)
    adapter = WalletSessionAdapter(wallet)
    with pytest.raises(NotAuthenticatedError):
        await connect_wallet(gate, adapter)
    assert wallet.connected_to is None

    identity.sign_in({"uid": "u1"})
    session = await connect_wallet(gate, adapter)
    assert session.connected
    assert gate.identity == {"uid": "u1"}


def test_identity_gate_tracks_and_unsubscribes():
    identity = FakeIdentity()
    identity.user = {"uid": "u1"}
    gate = IdentityGate(identity)
    assert gate.signed_in
    identity.sign_out()
    assert not gate.signed_in
    gate.close()
    assert identity.callbacks == []
    identity.sign_in({"uid": "u2"})
    assert not gate.signed_in
