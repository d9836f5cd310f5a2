from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ...engine.board import Board
from ...engine.game import Game
from ...engine.move import parse_move
from ...engine.perft import perft as perft_nodes
from ...search.service import DEFAULT_DEPTH, SearchService


logger = logging.getLogger(__name__)

MAX_SEARCH_DEPTH = 6


class CreateGameResponse(BaseModel):
    game_id: str
    position: str


class SetPositionRequest(BaseModel):
    position: str = Field(..., description="Encoded board: turn character plus 81 squares")


class MoveRequest(BaseModel):
    move: str = Field(..., description="Move text, e.g. e6-f or f5-8")


class MoveLimitRequest(BaseModel):
    limit: int = Field(..., ge=1)


class SearchRequest(BaseModel):
    depth: Optional[int] = Field(default=None, ge=1, le=MAX_SEARCH_DEPTH)


class PerftRequest(BaseModel):
    position: Optional[str] = None
    depth: int = Field(default=1, ge=0, le=2)


class GameState(BaseModel):
    game_id: str
    position: str
    board: str
    turn: str
    winner: Optional[str]
    repeated: bool
    move_count: int
    legal_moves: list[str]
    last_move: Optional[str]
    move_history: list[str]


def create_app() -> FastAPI:
    app = FastAPI(title="Tablut Engine API", version="0.1.0")

    logging.basicConfig(level=logging.INFO)

    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()
    service = SearchService()

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game() -> CreateGameResponse:
        game_id = store.create(Game.new())
        game = _require_game(store, game_id)
        logger.info("game created", extra={"game_id": game_id})
        return CreateGameResponse(game_id=game_id, position=game.encoded())

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"status": "deleted"}

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _state(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/position", response_model=GameState)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameState:
        _require_game(store, game_id)
        try:
            game = Game.from_encoded(req.position)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"invalid position: {e}")
        store.replace(game_id, game)
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        try:
            move = parse_move(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        try:
            game.apply_move(move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/undo", response_model=GameState)
    async def undo(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        try:
            game.undo_move()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/limit", response_model=GameState)
    async def set_limit(game_id: str, req: MoveLimitRequest) -> GameState:
        game = _require_game(store, game_id)
        try:
            game.set_move_limit(req.limit)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/search")
    async def search(game_id: str, req: SearchRequest) -> Dict[str, Any]:
        game = _require_game(store, game_id)
        res = service.search(game, depth=req.depth or DEFAULT_DEPTH)
        logger.info(
            "search",
            extra={"game_id": game_id, "nodes": res.nodes, "time_ms": res.time_ms},
        )
        return {
            "best_move": res.best_move.to_text() if res.best_move else None,
            "score": res.score,
            "nodes": res.nodes,
            "depth": res.depth,
            "time_ms": res.time_ms,
        }

    @app.post("/api/games/{game_id}/ai-move", response_model=GameState)
    async def ai_move(game_id: str, req: SearchRequest) -> GameState:
        game = _require_game(store, game_id)
        if game.is_over():
            raise HTTPException(status_code=409, detail="game is over")
        res = service.search(game, depth=req.depth or DEFAULT_DEPTH)
        if res.best_move is None:
            raise HTTPException(status_code=409, detail="no legal move")
        game.apply_move(res.best_move)
        return _state(game_id, game)

    @app.post("/api/perft")
    async def perft(req: PerftRequest) -> Dict[str, Any]:
        if req.position is None:
            board = Board.initial()
        else:
            try:
                board = Board.from_encoded(req.position)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=f"invalid position: {e}")
        return {"nodes": perft_nodes(board, req.depth), "depth": req.depth}

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _state(game_id: str, game: Game) -> GameState:
    history = game.move_history_text()
    winner = game.winner()
    return GameState(
        game_id=game_id,
        position=game.encoded(),
        board=game.board.to_text(),
        turn=game.turn().name.lower(),
        winner=winner.name.lower() if winner is not None else None,
        repeated=game.board.repeated_position(),
        move_count=game.board.move_count,
        legal_moves=[m.to_text() for m in game.legal_moves()],
        last_move=history[-1] if history else None,
        move_history=history,
    )


# Default app for non-factory servers
app = create_app()
