"""
Session lifecycle manager.
Drives one user's attempt-cycle on one subject: session creation, answer
submission, confusion scoring and the help trigger.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from confusion_engine import (
    compute_confusion,
    feedback_message,
    help_triggered,
    is_correct_answer,
)
from data_store import LEARNING_SESSIONS, SESSION_ATTEMPTS, SUBJECTS, DataStore, utcnow
from errors import NotFound, SessionCompleted, ValidationFailure
from learning_model import LearningSession, SessionAttempt, Subject, SubmissionResult


def _parse_timestamp(value: str) -> datetime:
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


class SessionLifecycleManager:
    def __init__(self, store: DataStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or utcnow

    def _get_subject(self, subject_id: str) -> Subject:
        row = self.store.get(SUBJECTS, subject_id)
        if row is None:
            raise NotFound(SUBJECTS, subject_id)
        return Subject.model_validate(row)

    def start_session(self, subject_id: str, user_id: str) -> tuple[LearningSession, Subject]:
        """
        Create a new session for user_id on subject_id.
        Raises NotFound, without writing anything, if the subject does not resolve.
        """
        subject = self._get_subject(subject_id)
        row = self.store.insert(LEARNING_SESSIONS, {
            "user_id": user_id,
            "subject_id": subject.id,
            "start_time": self.clock().isoformat(),
        })
        return LearningSession.model_validate(row), subject

    def load_session(self, session_id: str) -> tuple[LearningSession, Subject]:
        row = self.store.get(LEARNING_SESSIONS, session_id)
        if row is None:
            raise NotFound(LEARNING_SESSIONS, session_id)
        session = LearningSession.model_validate(row)
        return session, self._get_subject(session.subject_id)

    def list_attempts(self, session_id: str) -> list[SessionAttempt]:
        rows = self.store.select(
            SESSION_ATTEMPTS, filters={"session_id": session_id}, order_by="attempt_number"
        )
        return [SessionAttempt.model_validate(r) for r in rows]

    def elapsed_seconds(self, session: LearningSession) -> int:
        """Whole seconds since the session started."""
        delta = self.clock() - _parse_timestamp(session.start_time)
        return max(0, int(delta.total_seconds()))

    def submit_answer(
        self,
        session: LearningSession,
        subject: Subject,
        raw_answer: str,
        elapsed_seconds: int,
    ) -> SubmissionResult:
        """
        Score one answer and persist it.

        Writes the attempt row, then the updated session row. The two writes
        are not atomic; a failure of either surfaces unchanged.
        """
        if not raw_answer.strip():
            raise ValidationFailure("Answer must not be empty")
        if elapsed_seconds < 0:
            raise ValidationFailure("elapsed_seconds must not be negative")
        if elapsed_seconds < session.time_spent:
            raise ValidationFailure(
                f"elapsed_seconds {elapsed_seconds} is behind the last submission ({session.time_spent})"
            )
        if session.is_completed:
            raise SessionCompleted(session.id)

        attempts = session.attempts + 1
        confusion = compute_confusion(attempts, elapsed_seconds)
        correct = is_correct_answer(raw_answer, subject.correct_answer)

        self.store.insert(SESSION_ATTEMPTS, {
            "session_id": session.id,
            "attempt_number": attempts,
            "user_answer": raw_answer,
            "is_correct": correct,
            "time_from_start": elapsed_seconds,
        })

        changes = {
            "attempts": attempts,
            "time_spent": elapsed_seconds,
            "confusion_score": confusion,
            "is_completed": correct,
            "ai_help_shown": help_triggered(confusion) or session.ai_help_shown,
            "end_time": self.clock().isoformat() if correct else None,
        }
        self.store.update(LEARNING_SESSIONS, session.id, changes)

        return SubmissionResult(
            is_correct=correct,
            confusion_score=confusion,
            show_help=help_triggered(confusion),
            attempts=attempts,
            message=feedback_message(correct),
            session=session.model_copy(update=changes),
        )
