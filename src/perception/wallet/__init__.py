"""Wallet session wrapper and the identity gate in front of it."""

from perception.wallet.adapter import WalletProvider, WalletSessionAdapter, short_address
from perception.wallet.identity import IdentityGate, IdentityProvider, connect_wallet

__all__ = [
    "IdentityGate",
    "IdentityProvider",
    "WalletProvider",
    "WalletSessionAdapter",
    "connect_wallet",
    "short_address",
]
