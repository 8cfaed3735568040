"""WalletSession - connection state of the selected wallet."""

from pydantic import BaseModel


class WalletSession(BaseModel):
    connected: bool = False
    account: str | None = None
    provider_name: str = ""
