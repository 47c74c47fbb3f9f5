"""
Confusion engine — pure logic, no I/O.
Confusion scoring, answer checking, help triggering and dashboard aggregation.
"""

import math
from urllib.parse import quote

from learning_model import DashboardStats, HelpContent, LearningSession, Subject

CONFUSION_THRESHOLD = 40
ATTEMPT_WEIGHT = 20
TIME_CAP_SECONDS = 60
MAX_CONFUSION = 100

VIDEO_SEARCH_URL = "https://www.youtube.com/results?search_query="

CORRECT_MESSAGE = "Correct! Well done."
INCORRECT_MESSAGE = "Not quite right. Try again."


def compute_confusion(attempts: int, elapsed_seconds: int) -> int:
    """
    Fixed affine score: 20 points per attempt plus one point per second,
    time capped at 60 seconds and the total capped at 100.
    """
    return min(
        MAX_CONFUSION,
        attempts * ATTEMPT_WEIGHT + min(elapsed_seconds, TIME_CAP_SECONDS),
    )


def is_correct_answer(raw_answer: str, correct_answer: str) -> bool:
    """Case-insensitive containment of the correct answer in the trimmed input."""
    return correct_answer.lower() in raw_answer.strip().lower()


def help_triggered(confusion_score: int) -> bool:
    return confusion_score >= CONFUSION_THRESHOLD


def feedback_message(is_correct: bool) -> str:
    return CORRECT_MESSAGE if is_correct else INCORRECT_MESSAGE


def video_search_url(query: str) -> str:
    return VIDEO_SEARCH_URL + quote(query, safe="")


def help_content(subject: Subject) -> HelpContent:
    return HelpContent(
        ai_help_text=subject.ai_help_text,
        video_search_query=subject.video_search_query,
        video_url=video_search_url(subject.video_search_query),
    )


def format_time(seconds: int) -> str:
    """65 -> '1m 5s', 42 -> '42s'."""
    mins, secs = divmod(seconds, 60)
    return f"{mins}m {secs}s" if mins > 0 else f"{secs}s"


def compute_dashboard_stats(sessions: list[LearningSession]) -> DashboardStats:
    """
    Aggregate over the given sessions: total attempts, average confusion
    rounded half-up, and how many sessions were completed.
    """
    if not sessions:
        return DashboardStats()

    total_attempts = sum(s.attempts for s in sessions)
    avg = sum(s.confusion_score for s in sessions) / len(sessions)
    completed = sum(1 for s in sessions if s.is_completed)

    return DashboardStats(
        total_attempts=total_attempts,
        avg_confusion=math.floor(avg + 0.5),
        completed_sessions=completed,
    )
