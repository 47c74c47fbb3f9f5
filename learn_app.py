"""
Learning web backend — FastAPI.

Serves subjects, runs learning sessions (answer submission, confusion score,
help trigger) and the per-user dashboard.  A WebSocket pushes the elapsed
time of a session once per second for display.

    python3 learn_app.py
    curl http://localhost:8000/api/subjects
"""

import asyncio
import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import BaseModel

import learn_config
from confusion_engine import format_time, help_content
from dashboard import list_subjects, load_dashboard
from data_store import SUBJECTS
from errors import (
    LearningError,
    NotFound,
    SessionCompleted,
    StoreUnavailable,
    ValidationFailure,
)
from learning_model import Subject
from session_lifecycle import SessionLifecycleManager

TICK_SECONDS = 1.0

ERROR_STATUS = {
    NotFound: 404,
    ValidationFailure: 422,
    SessionCompleted: 409,
    StoreUnavailable: 503,
}

logger = logging.getLogger("learn_app")

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI()

_manager: Optional[SessionLifecycleManager] = None


def get_manager() -> SessionLifecycleManager:
    global _manager
    if _manager is None:
        _manager = learn_config.build_manager()
    return _manager


@app.exception_handler(LearningError)
async def learning_error_handler(request: Request, exc: LearningError):
    status = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 500
    )
    if status >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse({"error": str(exc)}, status_code=status)


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class StartSessionRequest(BaseModel):
    subject_id: str
    user_id: str


class AnswerRequest(BaseModel):
    answer: str
    elapsed_seconds: Optional[int] = None


# ---------------------------------------------------------------------------
# REST API
# ---------------------------------------------------------------------------

@app.get("/api/subjects")
def get_subjects(manager: SessionLifecycleManager = Depends(get_manager)):
    subjects = list_subjects(manager.store)
    return JSONResponse([s.model_dump() for s in subjects])


@app.get("/api/subjects/{subject_id}")
def get_subject(subject_id: str, manager: SessionLifecycleManager = Depends(get_manager)):
    row = manager.store.get(SUBJECTS, subject_id)
    if row is None:
        raise NotFound(SUBJECTS, subject_id)
    return JSONResponse(Subject.model_validate(row).model_dump())


@app.post("/api/sessions")
def start_session(
    body: StartSessionRequest, manager: SessionLifecycleManager = Depends(get_manager)
):
    session, subject = manager.start_session(body.subject_id, body.user_id)
    logger.info(f"Session {session.id} started: user={body.user_id} subject={subject.slug}")
    return JSONResponse(
        {"session": session.model_dump(), "subject": subject.model_dump()},
        status_code=201,
    )


@app.get("/api/sessions/{session_id}")
def get_session(session_id: str, manager: SessionLifecycleManager = Depends(get_manager)):
    session, subject = manager.load_session(session_id)
    return JSONResponse({
        "session": session.model_dump(),
        "subject": subject.model_dump(),
        "attempts": [a.model_dump() for a in manager.list_attempts(session_id)],
        "elapsed_seconds": manager.elapsed_seconds(session),
    })


@app.post("/api/sessions/{session_id}/answers")
def submit_answer(
    session_id: str,
    body: AnswerRequest,
    manager: SessionLifecycleManager = Depends(get_manager),
):
    session, subject = manager.load_session(session_id)
    elapsed = body.elapsed_seconds
    if elapsed is None:
        elapsed = manager.elapsed_seconds(session)

    result = manager.submit_answer(session, subject, body.answer, elapsed)
    logger.info(
        f"Session {session_id} attempt {result.attempts}: "
        f"correct={result.is_correct} confusion={result.confusion_score}"
    )

    payload = result.model_dump()
    if result.show_help and not result.is_correct:
        payload["help"] = help_content(subject).model_dump()
    return JSONResponse(payload)


@app.get("/api/dashboard/{user_id}")
def get_dashboard(user_id: str, manager: SessionLifecycleManager = Depends(get_manager)):
    return JSONResponse(load_dashboard(manager.store, user_id).model_dump())


# ---------------------------------------------------------------------------
# WebSocket: elapsed-time ticks
# ---------------------------------------------------------------------------

@app.websocket("/ws/sessions/{session_id}")
async def session_ticks(
    ws: WebSocket,
    session_id: str,
    manager: SessionLifecycleManager = Depends(get_manager),
):
    await ws.accept()
    try:
        session, _ = await asyncio.to_thread(manager.load_session, session_id)
    except LearningError as e:
        await ws.send_json({"type": "error", "content": str(e)})
        await ws.close()
        return

    try:
        while True:
            elapsed = manager.elapsed_seconds(session)
            await ws.send_json({
                "type": "tick",
                "elapsed_seconds": elapsed,
                "display": format_time(elapsed),
            })
            # Any client message just triggers an early tick
            try:
                await asyncio.wait_for(ws.receive_text(), timeout=TICK_SECONDS)
            except asyncio.TimeoutError:
                continue
    except WebSocketDisconnect:
        pass


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)

    if learn_config.SUPABASE_URL and not learn_config.SUPABASE_KEY:
        logger.warning(
            "SUPABASE_URL is set but SUPABASE_KEY is not. "
            f"Falling back to JSON files in {learn_config.DATA_DIR}."
        )

    uvicorn.run(app, host=learn_config.HOST, port=learn_config.PORT)
