"""Dashboard read model: subjects, recent sessions and aggregate stats for one user."""

from confusion_engine import compute_dashboard_stats
from data_store import LEARNING_SESSIONS, PROFILES, SUBJECTS, DataStore
from learning_model import DEFAULT_FINGERPRINT, Dashboard, LearningSession, Profile, Subject

RECENT_SESSION_LIMIT = 5


def list_subjects(store: DataStore) -> list[Subject]:
    return [Subject.model_validate(r) for r in store.select(SUBJECTS, order_by="name")]


def recent_sessions(
    store: DataStore, user_id: str, limit: int = RECENT_SESSION_LIMIT
) -> list[LearningSession]:
    rows = store.select(
        LEARNING_SESSIONS,
        filters={"user_id": user_id},
        order_by="created_at",
        descending=True,
        limit=limit,
    )
    return [LearningSession.model_validate(r) for r in rows]


def load_dashboard(store: DataStore, user_id: str) -> Dashboard:
    sessions = recent_sessions(store, user_id)
    profile_row = store.get(PROFILES, user_id)
    fingerprint = (
        Profile.model_validate(profile_row).learning_fingerprint
        if profile_row
        else DEFAULT_FINGERPRINT
    )
    return Dashboard(
        user_id=user_id,
        learning_fingerprint=fingerprint,
        subjects=list_subjects(store),
        recent_sessions=sessions,
        stats=compute_dashboard_stats(sessions),
    )
