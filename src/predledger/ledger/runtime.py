"""Runtime collaborators: authenticated caller, clock, value transfer, resolution notices."""

from __future__ import annotations

import time
from typing import Callable, Protocol

import structlog

from predledger.models import Message
from predledger.storage.accounts import AccountBook

log = structlog.get_logger(__name__)


def now_micros() -> int:
    return time.time_ns() // 1000


class Runtime(Protocol):
    """What the ledger needs from its host."""

    escrow_account: str

    def authenticated_signer(self) -> str | None: ...

    def system_time(self) -> int: ...

    def transfer(self, source: str | None, destination: str, amount: int) -> None: ...

    def notify(self, message: Message) -> None: ...


class LocalRuntime:
    """Runtime backed by an AccountBook in the ledger database.

    ``transfer(None, ...)`` debits the current signer. ``notify`` only logs unless a
    listener is given.
    """

    def __init__(
        self,
        accounts: AccountBook,
        signer: str | None = None,
        escrow_account: str = "escrow",
        clock: Callable[[], int] = now_micros,
        listener: Callable[[Message], None] | None = None,
    ) -> None:
        self.accounts = accounts
        self.signer = signer
        self.escrow_account = escrow_account
        self.clock = clock
        self.listener = listener

    def authenticated_signer(self) -> str | None:
        return self.signer

    def system_time(self) -> int:
        return self.clock()

    def transfer(self, source: str | None, destination: str, amount: int) -> None:
        if source is None:
            if self.signer is None:
                raise RuntimeError("transfer from caller requires an authenticated signer")
            source = self.signer
        self.accounts.transfer(source, destination, amount)

    def notify(self, message: Message) -> None:
        log.info("resolution_notice", market_id=message.market_id, winning_outcome_id=message.winning_outcome_id)
        if self.listener is not None:
            self.listener(message)
