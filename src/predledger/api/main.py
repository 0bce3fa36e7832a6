"""FastAPI front-end: read queries over ledger state plus a single write endpoint for operations."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Iterator

import duckdb
import structlog
from fastapi import Body, Depends, FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from predledger.api.schemas import (
    AdminResponse,
    BalanceResponse,
    BetsListResponse,
    BetView,
    DepositRequest,
    HealthResponse,
    LeaderboardItem,
    LeaderboardResponse,
    MarketDetailResponse,
    MarketsListResponse,
    OutcomeOdds,
    PayoutPreviewResponse,
)
from predledger.config import Settings, get_settings
from predledger.errors import (
    AuthorizationError,
    FundsError,
    InvalidInputError,
    LedgerError,
    NotFoundError,
    StateConflictError,
    Unauthorized,
)
from predledger.ledger import LedgerContract, LocalRuntime
from predledger.ledger.queries import (
    bet_payout,
    bet_status,
    child_markets,
    filter_markets,
    leaderboard,
    market_odds,
    potential_payout,
)
from predledger.ledger.registry import get_market
from predledger.ledger.runtime import now_micros
from predledger.models import Bet, MarketCategory, MarketStatus, OperationResult, parse_operation
from predledger.storage import AccountBook, LedgerState, get_connection, init_schema

log = structlog.get_logger(__name__)

# Ledger error category -> HTTP status
_STATUS_BY_CATEGORY: list[tuple[type[LedgerError], int]] = [
    (InvalidInputError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (StateConflictError, 409),
    (FundsError, 402),
]


def _status_for(exc: LedgerError) -> int:
    for category, status_code in _STATUS_BY_CATEGORY:
        if isinstance(exc, category):
            return status_code
    return 400


def _error_json(code: str, message: str, status_code: int = 404) -> JSONResponse:
    """Return consistent error JSON: { detail, code }."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": code},
    )


def create_app(settings: Settings | None = None, profile: str | None = None) -> FastAPI:
    """Build the API bound to one ledger database."""
    settings = settings or get_settings(profile)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        conn = get_connection(settings.db_path)
        try:
            init_schema(conn)
        finally:
            conn.close()
        log.info("api_started", db_path=settings.db_path)
        yield

    app = FastAPI(title="Predledger API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.state.settings = settings

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
        return _error_json(exc.code, exc.detail, _status_for(exc))

    @app.exception_handler(duckdb.TransactionException)
    async def conflict_handler(request: Request, exc: duckdb.TransactionException) -> JSONResponse:
        log.warning("transaction_conflict", path=request.url.path, error=str(exc))
        return _error_json("transaction_conflict", "Conflicting concurrent write; retry the operation", 409)

    def get_state() -> Iterator[LedgerState]:
        conn = get_connection(settings.db_path)
        try:
            init_schema(conn)
            yield LedgerState(conn)
        finally:
            conn.close()

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/admin", response_model=AdminResponse)
    def admin(state: LedgerState = Depends(get_state)) -> AdminResponse:
        return AdminResponse(admin=state.get_admin())

    @app.get("/markets", response_model=MarketsListResponse)
    def markets_list(
        category: MarketCategory | None = None,
        status: MarketStatus | None = None,
        limit: int = Query(100, ge=1, le=500),
        offset: int = Query(0, ge=0),
        state: LedgerState = Depends(get_state),
    ) -> MarketsListResponse:
        """List markets in creation order, optionally filtered."""
        all_markets = filter_markets(state.list_markets(), category=category, status=status)
        return MarketsListResponse(markets=all_markets[offset : offset + limit], total=len(all_markets))

    @app.get("/markets/{market_id}", response_model=MarketDetailResponse)
    def market_detail(market_id: str, state: LedgerState = Depends(get_state)) -> MarketDetailResponse:
        market = get_market(state, market_id)
        return MarketDetailResponse(
            market=market,
            odds={k: OutcomeOdds(**v) for k, v in market_odds(market).items()},
            expired=market.is_expired(now_micros()),
            child_market_ids=[m.id for m in child_markets(state, market_id)],
        )

    def _bet_views(state: LedgerState, bets: list[Bet]) -> BetsListResponse:
        views = []
        markets = {}
        for bet in bets:
            if bet.market_id not in markets:
                markets[bet.market_id] = get_market(state, bet.market_id)
            market = markets[bet.market_id]
            views.append(BetView(bet=bet, status=bet_status(bet, market), payout=bet_payout(bet, market)))
        return BetsListResponse(bets=views, total=len(views))

    @app.get("/markets/{market_id}/bets", response_model=BetsListResponse)
    def market_bets(market_id: str, state: LedgerState = Depends(get_state)) -> BetsListResponse:
        get_market(state, market_id)
        return _bet_views(state, state.bets_for_market(market_id))

    @app.get("/markets/{market_id}/payout", response_model=PayoutPreviewResponse)
    def market_payout_preview(
        market_id: str,
        outcome_id: str = Query(...),
        amount: int = Query(..., ge=1),
        state: LedgerState = Depends(get_state),
    ) -> PayoutPreviewResponse:
        market = get_market(state, market_id)
        return PayoutPreviewResponse(
            market_id=market_id,
            outcome_id=outcome_id,
            amount=amount,
            potential_payout=potential_payout(market, outcome_id, amount),
        )

    @app.get("/owners/{owner}/bets", response_model=BetsListResponse)
    def owner_bets(owner: str, state: LedgerState = Depends(get_state)) -> BetsListResponse:
        return _bet_views(state, state.bets_for_owner(owner))

    @app.get("/leaderboard", response_model=LeaderboardResponse)
    def leaderboard_view(
        limit: int = Query(20, ge=1, le=500),
        state: LedgerState = Depends(get_state),
    ) -> LeaderboardResponse:
        entries = leaderboard(state, limit=limit)
        return LeaderboardResponse(entries=[LeaderboardItem(**e.to_dict()) for e in entries])

    @app.get("/accounts/{account}", response_model=BalanceResponse)
    def account_balance(account: str, state: LedgerState = Depends(get_state)) -> BalanceResponse:
        return BalanceResponse(account=account, balance=AccountBook(state.conn).balance(account))

    @app.post("/accounts/{account}/deposit", response_model=BalanceResponse)
    def account_deposit(
        account: str,
        body: DepositRequest,
        x_caller: str | None = Header(None),
        state: LedgerState = Depends(get_state),
    ) -> BalanceResponse:
        """Fund an account. Admin only."""
        if x_caller is None or x_caller != state.get_admin():
            raise Unauthorized()
        with state.transaction():
            balance = AccountBook(state.conn).deposit(account, body.amount)
        return BalanceResponse(account=account, balance=balance)

    @app.post("/operations", response_model=OperationResult)
    def operations(
        payload: dict[str, Any] = Body(...),
        x_caller: str | None = Header(None),
        state: LedgerState = Depends(get_state),
    ) -> OperationResult:
        """Execute one write operation as the caller named in X-Caller."""
        try:
            operation = parse_operation(payload)
        except ValidationError as e:
            raise RequestValidationError(e.errors()) from e
        runtime = LocalRuntime(AccountBook(state.conn), signer=x_caller, escrow_account=settings.escrow_account)
        return LedgerContract(state, runtime).execute_operation(operation)

    return app


def run_api(
    host: str = "127.0.0.1",
    port: int = 8000,
    profile: str | None = None,
    settings: Settings | None = None,
) -> None:
    """Run uvicorn with the ledger API."""
    import uvicorn

    uvicorn.run(create_app(settings, profile=profile), host=host, port=port)
