"""
Learning data models.
Pydantic v2 models for subjects, learning sessions and answer attempts.
"""

from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_FINGERPRINT = "New Learner"


class Subject(BaseModel):
    id: str
    name: str
    slug: str
    title: str
    description: Optional[str] = None
    question: str
    data: str
    correct_answer: str
    ai_help_text: str
    video_search_query: str
    created_at: Optional[str] = None


class Profile(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    learning_fingerprint: str = DEFAULT_FINGERPRINT


class LearningSession(BaseModel):
    id: str
    user_id: str
    subject_id: str
    start_time: str
    end_time: Optional[str] = None  # set iff is_completed
    attempts: int = Field(default=0, ge=0)
    time_spent: int = Field(default=0, ge=0)  # seconds
    confusion_score: int = Field(default=0, ge=0, le=100)
    is_completed: bool = False
    ai_help_shown: bool = False
    created_at: Optional[str] = None


class SessionAttempt(BaseModel):
    id: str
    session_id: str
    attempt_number: int = Field(ge=1)
    user_answer: str
    is_correct: bool = False
    time_from_start: int = Field(default=0, ge=0)
    created_at: Optional[str] = None


class HelpContent(BaseModel):
    ai_help_text: str
    video_search_query: str
    video_url: str


class SubmissionResult(BaseModel):
    is_correct: bool
    confusion_score: int
    show_help: bool
    attempts: int
    message: str
    session: LearningSession


class DashboardStats(BaseModel):
    total_attempts: int = 0
    avg_confusion: int = 0
    completed_sessions: int = 0


class Dashboard(BaseModel):
    user_id: str
    learning_fingerprint: str = DEFAULT_FINGERPRINT
    subjects: list[Subject] = Field(default_factory=list)
    recent_sessions: list[LearningSession] = Field(default_factory=list)
    stats: DashboardStats = Field(default_factory=DashboardStats)
