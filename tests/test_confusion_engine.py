"""Unit tests for confusion_engine.py."""

from confusion_engine import (
    CONFUSION_THRESHOLD,
    compute_confusion,
    compute_dashboard_stats,
    feedback_message,
    format_time,
    help_content,
    help_triggered,
    is_correct_answer,
    video_search_url,
)
from learning_model import LearningSession, Subject


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_session(confusion: int, attempts: int = 1, completed: bool = False) -> LearningSession:
    return LearningSession(
        id="s",
        user_id="u",
        subject_id="sub",
        start_time="2026-10-19T09:00:00+00:00",
        attempts=attempts,
        confusion_score=confusion,
        is_completed=completed,
        end_time="2026-10-19T09:01:00+00:00" if completed else None,
    )


# ---------------------------------------------------------------------------
# compute_confusion
# ---------------------------------------------------------------------------

class TestComputeConfusion:
    def test_first_attempt_quick(self):
        assert compute_confusion(1, 10) == 30

    def test_second_attempt(self):
        assert compute_confusion(2, 25) == 65

    def test_time_contribution_capped_at_sixty(self):
        assert compute_confusion(1, 60) == 80
        assert compute_confusion(1, 600) == 80

    def test_total_capped_at_hundred(self):
        """4 attempts at 60s would be 140 uncapped."""
        assert compute_confusion(4, 60) == 100
        assert compute_confusion(10, 0) == 100

    def test_always_in_range(self):
        for attempts in range(1, 8):
            for elapsed in (0, 1, 30, 59, 60, 61, 3600):
                score = compute_confusion(attempts, elapsed)
                assert 0 <= score <= 100
                assert score == min(100, attempts * 20 + min(elapsed, 60))

    def test_non_decreasing_in_both_inputs(self):
        scores = [compute_confusion(n, t) for n, t in [(1, 5), (2, 9), (3, 40), (4, 70), (5, 90)]]
        assert scores == sorted(scores)


# ---------------------------------------------------------------------------
# is_correct_answer
# ---------------------------------------------------------------------------

class TestIsCorrectAnswer:
    def test_substring_match(self):
        assert is_correct_answer("The Answer is 5", "5") is True

    def test_no_match(self):
        assert is_correct_answer("fiv", "5") is False

    def test_case_insensitive(self):
        assert is_correct_answer("It is 2NF", "2nf") is True
        assert is_correct_answer("stays in the SAME STATE", "same state") is True

    def test_whitespace_trimmed(self):
        assert is_correct_answer("   5   ", "5") is True

    def test_exact_equality_not_required(self):
        assert is_correct_answer("index 5 of the array", "5") is True


# ---------------------------------------------------------------------------
# help trigger and help content
# ---------------------------------------------------------------------------

class TestHelp:
    def test_threshold_boundary(self):
        assert CONFUSION_THRESHOLD == 40
        assert help_triggered(39) is False
        assert help_triggered(40) is True
        assert help_triggered(100) is True

    def test_video_search_url_encodes_query(self):
        url = video_search_url("binary search explained")
        assert url == "https://www.youtube.com/results?search_query=binary%20search%20explained"

    def test_help_content(self):
        subject = Subject(
            id="x",
            name="Physics",
            slug="newtons_laws",
            title="Newton's First Law",
            question="q",
            data="d",
            correct_answer="same state",
            ai_help_text="Inertia.",
            video_search_query="newton first law",
        )
        content = help_content(subject)
        assert content.ai_help_text == "Inertia."
        assert content.video_url.endswith("newton%20first%20law")

    def test_feedback_message(self):
        assert feedback_message(True) == "Correct! Well done."
        assert feedback_message(False) == "Not quite right. Try again."


# ---------------------------------------------------------------------------
# format_time
# ---------------------------------------------------------------------------

class TestFormatTime:
    def test_seconds_only(self):
        assert format_time(0) == "0s"
        assert format_time(42) == "42s"

    def test_minutes_and_seconds(self):
        assert format_time(60) == "1m 0s"
        assert format_time(125) == "2m 5s"


# ---------------------------------------------------------------------------
# compute_dashboard_stats
# ---------------------------------------------------------------------------

class TestDashboardStats:
    def test_no_sessions(self):
        stats = compute_dashboard_stats([])
        assert stats.total_attempts == 0
        assert stats.avg_confusion == 0
        assert stats.completed_sessions == 0

    def test_aggregates(self):
        sessions = [
            make_session(30, attempts=1),
            make_session(65, attempts=2, completed=True),
        ]
        stats = compute_dashboard_stats(sessions)
        assert stats.total_attempts == 3
        assert stats.completed_sessions == 1

    def test_average_rounds_half_up(self):
        """47.5 -> 48 and 22.5 -> 23, where round() would give 22."""
        stats = compute_dashboard_stats([make_session(30), make_session(65)])
        assert stats.avg_confusion == 48
        stats = compute_dashboard_stats([make_session(20), make_session(25)])
        assert stats.avg_confusion == 23
