"""Default subjects shipped with a fresh database."""

import logging
from typing import Optional

from data_store import SUBJECTS, DataStore

logger = logging.getLogger("subject_catalog")

DEFAULT_SUBJECTS = [
    {
        "name": "Data Structures",
        "slug": "data_structures",
        "title": "Binary Search – Find the Target",
        "description": "Learn how binary search efficiently finds elements in sorted arrays",
        "question": "Find the INDEX of 23 using binary search logic (index starts from 0).",
        "data": "[2, 5, 8, 12, 16, 23, 38, 56, 72, 91]",
        "correct_answer": "5",
        "ai_help_text": (
            "Binary search repeatedly checks the middle element and halves the array "
            "until the target is found. Remember: array indices start at 0, so the "
            "6th element is at index 5."
        ),
        "video_search_query": "binary search explained step by step with example",
    },
    {
        "name": "Physics",
        "slug": "newtons_laws",
        "title": "Newton's First Law of Motion",
        "description": "Understand the fundamental principle of inertia",
        "question": "What happens to an object if no external force acts on it?",
        "data": "Think about motion and rest.",
        "correct_answer": "same state",
        "ai_help_text": (
            "An object remains at rest or in uniform motion unless acted upon by an "
            "external force. This is the law of inertia."
        ),
        "video_search_query": "newton first law of motion intuitive explanation",
    },
    {
        "name": "Database Systems",
        "slug": "dbms",
        "title": "Database Normalization",
        "description": "Master the principles of database design and normal forms",
        "question": "Which normal form removes partial dependency?",
        "data": "Options: 1NF, 2NF, 3NF",
        "correct_answer": "2nf",
        "ai_help_text": (
            "Second Normal Form (2NF) removes partial dependency by ensuring all "
            "non-key attributes depend on the full primary key, not just part of it."
        ),
        "video_search_query": "2nd normal form partial dependency simple explanation",
    },
]


def seed_subjects(store: DataStore, subjects: Optional[list[dict]] = None) -> list[str]:
    """Insert subjects whose slug is not present yet. Returns the inserted slugs."""
    inserted = []
    for subject in subjects if subjects is not None else DEFAULT_SUBJECTS:
        if store.select(SUBJECTS, filters={"slug": subject["slug"]}, limit=1):
            continue
        store.insert(SUBJECTS, dict(subject))
        inserted.append(subject["slug"])
    if inserted:
        logger.info(f"Seeded subjects: {', '.join(inserted)}")
    return inserted
