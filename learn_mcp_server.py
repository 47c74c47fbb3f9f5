"""
Learning MCP Server.
Exposes tools for listing subjects, running learning sessions and reading the dashboard.
"""

import logging
import os
import sys

# Ensure sibling modules are importable
sys.path.insert(0, os.path.dirname(__file__))

from typing import Optional

from fastmcp import FastMCP

import learn_config
from confusion_engine import help_content
from dashboard import list_subjects as _list_subjects
from dashboard import load_dashboard
from errors import LearningError
from session_lifecycle import SessionLifecycleManager

logger = logging.getLogger("learn_mcp_server")

mcp = FastMCP("ConfusionTutor")

_manager: Optional[SessionLifecycleManager] = None


def _get_manager() -> SessionLifecycleManager:
    global _manager
    if _manager is None:
        _manager = learn_config.build_manager()
    return _manager


@mcp.tool()
def list_subjects() -> dict:
    """List every subject with its question, ordered by name."""
    try:
        subjects = _list_subjects(_get_manager().store)
    except LearningError as e:
        return {"error": str(e)}
    return {"subjects": [s.model_dump() for s in subjects]}


@mcp.tool()
def start_session(subject_id: str, user_id: str) -> dict:
    """
    Start a learning session for a user on a subject.
    Returns the new session and the question to answer.
    """
    try:
        session, subject = _get_manager().start_session(subject_id, user_id)
    except LearningError as e:
        return {"error": str(e)}

    logger.info(f"Session {session.id} started: user={user_id} subject={subject.slug}")
    return {
        "status": "session_started",
        "session_id": session.id,
        "subject_id": subject.id,
        "title": subject.title,
        "question": subject.question,
        "data": subject.data,
    }


@mcp.tool()
def submit_answer(
    session_id: str, answer: str, elapsed_seconds: Optional[int] = None
) -> dict:
    """
    Submit an answer for a session.
    Returns correctness, the confusion score, and help content once the
    learner looks stuck. elapsed_seconds defaults to the time since the
    session started.
    """
    manager = _get_manager()
    try:
        session, subject = manager.load_session(session_id)
        if elapsed_seconds is None:
            elapsed_seconds = manager.elapsed_seconds(session)
        result = manager.submit_answer(session, subject, answer, elapsed_seconds)
    except LearningError as e:
        return {"error": str(e)}

    response = {
        "is_correct": result.is_correct,
        "message": result.message,
        "attempts": result.attempts,
        "confusion_score": result.confusion_score,
        "show_help": result.show_help,
        "is_completed": result.session.is_completed,
    }
    if result.show_help and not result.is_correct:
        response["help"] = help_content(subject).model_dump()
    return response


@mcp.tool()
def get_dashboard(user_id: str) -> dict:
    """Return subjects, the 5 most recent sessions and aggregate stats for a user."""
    try:
        return load_dashboard(_get_manager().store, user_id).model_dump()
    except LearningError as e:
        return {"error": str(e)}


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    mcp.run()
