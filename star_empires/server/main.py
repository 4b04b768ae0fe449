"""FastAPI server for Star Empires.

Provides HTTP/WebSocket API for human players to play against the automated
opponent.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from .schemas.requests import (
    BattleDecisionRequest,
    BuildRequest,
    CreateGameRequest,
    RetreatRequest,
    SendFleetRequest,
)
from .schemas.responses import (
    CommandResponse,
    CreateGameResponse,
    GameStateResponse,
    ScoreResponse,
    TurnResponse,
)
from .session import GameSession, GameSessionManager

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Global session manager
sessions = GameSessionManager()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown."""
    logger.info("Star Empires server starting...")
    yield
    logger.info("Star Empires server shutting down...")
    await sessions.cleanup_all()


app = FastAPI(
    title="Star Empires API",
    description="Web API for human vs AI gameplay in Star Empires",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_session(game_id: str) -> GameSession:
    session = sessions.get(game_id)
    if not session:
        raise HTTPException(status_code=404, detail="Game not found")
    return session


async def _broadcast_turn(session: GameSession, result: dict) -> None:
    """Push a turn outcome to WebSocket clients."""
    if not result["accepted"]:
        return
    if result["pendingBattle"] is not None:
        await session.broadcast({"type": "BATTLE_PENDING", "battle": result["pendingBattle"]})
        return
    await session.broadcast(
        {
            "type": "TURN_EXECUTED",
            "turn": result["turn"],
            "events": result["events"],
            "state": session.get_state(),
            "winner": result["winner"],
        }
    )
    if result["winner"]:
        await session.broadcast({"type": "GAME_OVER", "winner": result["winner"]})


# ============================================
# API ENDPOINTS
# ============================================


@app.get("/api")
async def api_root():
    """API root endpoint - server health check."""
    return {
        "service": "Star Empires",
        "status": "operational",
        "activeGames": len(sessions.sessions),
    }


@app.post("/api/games", response_model=CreateGameResponse)
async def create_game(request: CreateGameRequest):
    """Create a new game.

    Example:
        POST /api/games
        {"humanFaction": "player", "seed": 42, "mapSize": "compact", "difficulty": "hard"}
    """
    session = sessions.create_session(
        human_faction=request.humanFaction,
        seed=request.seed,
        map_size=request.mapSize,
        difficulty=request.difficulty,
    )
    return CreateGameResponse(
        gameId=session.id,
        humanFaction=request.humanFaction,
        seed=session.seed,
        mapSize=request.mapSize,
        difficulty=request.difficulty,
        state=session.get_state(),
    )


@app.get("/api/games/{game_id}/state", response_model=GameStateResponse)
async def get_game_state(game_id: str):
    """Get current game state and the events of the last turn."""
    session = _get_session(game_id)
    return GameStateResponse(
        gameId=game_id,
        turn=session.world.turn,
        status=session.status,
        winner=session.winner,
        state=session.get_state(),
        events=session.world.events,
    )


@app.get("/api/games/{game_id}/score", response_model=ScoreResponse)
async def get_score(game_id: str):
    session = _get_session(game_id)
    return ScoreResponse(
        gameId=game_id, turn=session.world.turn, scores=session.simulation.scores()
    )


@app.post("/api/games/{game_id}/builds", response_model=CommandResponse)
async def issue_build(game_id: str, request: BuildRequest):
    """Queue a ship at one of the human faction's planets.

    Example:
        POST /api/games/game-abc123/builds
        {"planetId": 0, "kind": "frigate"}
    """
    session = _get_session(game_id)
    accepted, errors = session.run_command(
        lambda: session.simulation.issue_build(request.planetId, request.kind)
    )
    return CommandResponse(accepted=accepted, errors=errors)


@app.delete("/api/games/{game_id}/builds/{planet_id}/{entry_id}", response_model=CommandResponse)
async def cancel_build(game_id: str, planet_id: int, entry_id: str):
    """Cancel a queued ship for a 50% refund."""
    session = _get_session(game_id)
    accepted, errors = session.run_command(
        lambda: session.simulation.cancel_build(planet_id, entry_id)
    )
    return CommandResponse(accepted=accepted, errors=errors)


@app.post("/api/games/{game_id}/fleets", response_model=CommandResponse)
async def send_fleet(game_id: str, request: SendFleetRequest):
    """Send ships from one planet to another.

    Example:
        POST /api/games/game-abc123/fleets
        {"sourceId": 0, "shipIds": ["s-0001", "s-0003"], "destinationId": 4}
    """
    session = _get_session(game_id)
    accepted, errors = session.run_command(
        lambda: session.simulation.send_fleet(
            request.sourceId, request.shipIds, request.destinationId
        )
    )
    return CommandResponse(accepted=accepted, errors=errors)


@app.post("/api/games/{game_id}/turn", response_model=TurnResponse)
async def advance_turn(game_id: str):
    """Advance the game by one turn.

    The turn runs until it completes (the AI then moves and victory is
    checked) or until a battle needs the human faction's decision.
    """
    session = _get_session(game_id)
    if session.world.winner:
        raise HTTPException(
            status_code=400,
            detail=f"Game already ended. Winner: {session.winner}",
        )
    if session.world.awaiting_decision:
        return TurnResponse(accepted=False, errors=["A battle decision is pending"])

    result = session.play(session.simulation.advance_turn)
    logger.info(f"Game {game_id}: turn {session.world.turn} -> {result.get('status')}")
    await _broadcast_turn(session, result)
    return TurnResponse(**result)


@app.post("/api/games/{game_id}/battle", response_model=TurnResponse)
async def submit_battle_decision(game_id: str, request: BattleDecisionRequest):
    """Fight or withdraw the pending battle and resume the turn."""
    session = _get_session(game_id)
    result = session.play(lambda: session.simulation.submit_battle_decision(request.decision))
    if not result["accepted"] and not result["errors"]:
        result["errors"] = ["No battle is awaiting a decision"]
    await _broadcast_turn(session, result)
    return TurnResponse(**result)


@app.post("/api/games/{game_id}/retreat", response_model=TurnResponse)
async def submit_retreat_destination(game_id: str, request: RetreatRequest):
    """Choose where withdrawn ships go and resume the turn."""
    session = _get_session(game_id)
    result = session.play(
        lambda: session.simulation.submit_retreat_destination(request.planetId)
    )
    await _broadcast_turn(session, result)
    return TurnResponse(**result)


@app.delete("/api/games/{game_id}")
async def delete_game(game_id: str):
    """Delete a game session."""
    if sessions.delete(game_id):
        return {"message": f"Game {game_id} deleted"}
    raise HTTPException(status_code=404, detail="Game not found")


# ============================================
# WEBSOCKET ENDPOINT
# ============================================


@app.websocket("/ws/games/{game_id}")
async def websocket_endpoint(websocket: WebSocket, game_id: str):
    """WebSocket connection for real-time game updates.

    Clients receive:
    - CONNECTED: Initial connection confirmation with state
    - BATTLE_PENDING: A battle awaits the human faction's decision
    - TURN_EXECUTED: Turn completed with events
    - GAME_OVER: Game ended
    """
    session = sessions.get(game_id)
    if not session:
        await websocket.close(code=1008, reason="Game not found")
        return

    await websocket.accept()
    session.add_connection(websocket)

    try:
        await websocket.send_json(
            {
                "type": "CONNECTED",
                "gameId": game_id,
                "turn": session.world.turn,
                "state": session.get_state(),
            }
        )

        while True:
            data = await websocket.receive_json()
            if data.get("type") == "PING":
                await websocket.send_json({"type": "PONG"})

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected from game {game_id}")
    except Exception as e:
        logger.error(f"WebSocket error in game {game_id}: {e}", exc_info=True)
    finally:
        session.remove_connection(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
