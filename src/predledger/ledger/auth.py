"""Authorization gate: caller presence and admin equality."""

from __future__ import annotations

from predledger.errors import Unauthorized
from predledger.ledger.runtime import Runtime
from predledger.storage.state import LedgerState


def require_signer(runtime: Runtime) -> str:
    """Return the authenticated caller or raise Unauthorized."""
    caller = runtime.authenticated_signer()
    if caller is None:
        raise Unauthorized("Unauthorized: operation requires an authenticated caller")
    return caller


def require_admin(state: LedgerState, runtime: Runtime) -> str:
    """Return the caller if it is the stored admin, else raise Unauthorized."""
    caller = require_signer(runtime)
    if state.get_admin() != caller:
        raise Unauthorized()
    return caller
