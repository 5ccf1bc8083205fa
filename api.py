import threading
import uuid
from typing import Optional, Union

from fastapi import FastAPI, HTTPException, Response, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, StrictInt

from quiz.config import QuizConfig, build_engine
from quiz.engine import QuizRound


class StateResponse(BaseModel):
    table: int
    rows: int
    cols: int
    total: int
    values: list[int]
    blank_indexes: list[int]
    cell_states: list[str]
    score: int
    blanks_count: int
    round_completed: bool
    round_complete: bool
    scoring_policy: str
    fixed_blanks_count: Optional[int] = None


class SessionResponse(BaseModel):
    session_id: str
    state: StateResponse


class TableRequest(BaseModel):
    table: Union[int, float, str, None] = Field(..., description="New times-table base. Invalid values fall back to 7.")
    start_round: bool = Field(default=True, description="Start a new round with the new table.")


class BlanksRequest(BaseModel):
    blanks_count: Optional[int] = Field(
        default=None,
        description="Fixed blanks per round, clamped to the grid. Null scales blanks with the score.",
    )


class CheckRequest(BaseModel):
    index: StrictInt = Field(..., description="Cell position, 0-based, row-major")
    value: Union[int, float, str] = Field(..., description="Answer as typed by the player")


class CheckResponse(BaseModel):
    index: int
    correct: bool
    correct_value: int
    just_solved: bool
    scored: bool
    score: int
    round_complete: bool


app = FastAPI(
    title="Times Table Quiz API",
    description="Local adapter that lets a browser UI drive an in-memory times-table quiz engine.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://127.0.0.1:5173", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_SESSIONS: dict[str, dict] = {}
_SESSIONS_LOCK = threading.Lock()


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(config: QuizConfig) -> SessionResponse:
    try:
        engine = build_engine(config)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    session_id = str(uuid.uuid4())
    session = {
        "session_id": session_id,
        "engine": engine,
        "lock": threading.Lock(),
    }
    with _SESSIONS_LOCK:
        _SESSIONS[session_id] = session

    return SessionResponse(session_id=session_id, state=_build_state_response(engine))


@app.get("/sessions/{session_id}", response_model=StateResponse)
def get_session(session_id: str) -> StateResponse:
    session = _get_session(session_id)
    with session["lock"]:
        return _build_state_response(session["engine"])


@app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: str) -> Response:
    with _SESSIONS_LOCK:
        if _SESSIONS.pop(session_id, None) is None:
            raise HTTPException(status_code=404, detail="quiz session not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/sessions/{session_id}/table", response_model=StateResponse)
def set_table(session_id: str, request: TableRequest) -> StateResponse:
    session = _get_session(session_id)
    with session["lock"]:
        engine: QuizRound = session["engine"]
        engine.set_table(request.table, start_round=request.start_round)
        return _build_state_response(engine)


@app.post("/sessions/{session_id}/blanks", response_model=StateResponse)
def set_blanks(session_id: str, request: BlanksRequest) -> StateResponse:
    session = _get_session(session_id)
    with session["lock"]:
        engine: QuizRound = session["engine"]
        engine.set_blanks_count(request.blanks_count)
        return _build_state_response(engine)


@app.post("/sessions/{session_id}/rounds", response_model=StateResponse)
def new_round(session_id: str) -> StateResponse:
    session = _get_session(session_id)
    with session["lock"]:
        engine: QuizRound = session["engine"]
        engine.new_round()
        return _build_state_response(engine)


@app.post("/sessions/{session_id}/check", response_model=CheckResponse)
def check(session_id: str, request: CheckRequest) -> CheckResponse:
    session = _get_session(session_id)
    with session["lock"]:
        engine: QuizRound = session["engine"]
        try:
            result = engine.check(request.index, request.value)
        except IndexError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return CheckResponse(**result.to_dict(), round_complete=engine.is_round_complete())


@app.post("/sessions/{session_id}/complete", response_model=StateResponse)
def complete_round(session_id: str) -> StateResponse:
    session = _get_session(session_id)
    with session["lock"]:
        engine: QuizRound = session["engine"]
        if not engine.is_round_complete():
            raise HTTPException(status_code=400, detail="round still has unsolved blanks")
        engine.complete_round()
        return _build_state_response(engine)


@app.post("/sessions/{session_id}/score/reset", response_model=StateResponse)
def reset_score(session_id: str) -> StateResponse:
    session = _get_session(session_id)
    with session["lock"]:
        engine: QuizRound = session["engine"]
        engine.reset_score()
        return _build_state_response(engine)


def _get_session(session_id: str) -> dict:
    with _SESSIONS_LOCK:
        session = _SESSIONS.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="quiz session not found")
    return session


def _build_state_response(engine: QuizRound) -> StateResponse:
    return StateResponse(**engine.get_state().to_dict())
