"""
Runtime configuration shared by the web and MCP surfaces.
Values come from the environment, after loading a local .env file.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from data_store import JsonFileStore, build_store
from session_lifecycle import SessionLifecycleManager
from subject_catalog import seed_subjects

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")
DATA_DIR = Path(os.getenv("LEARN_DATA_DIR", str(Path.home() / ".confuse_learn" / "data")))
SEED_SUBJECTS = os.getenv("LEARN_SEED_SUBJECTS", "1") == "1"
HOST = os.getenv("LEARN_HOST", "127.0.0.1")
PORT = int(os.getenv("LEARN_PORT", "8000"))


def build_manager() -> SessionLifecycleManager:
    store = build_store(SUPABASE_URL, SUPABASE_KEY, DATA_DIR)
    # Supabase gets its subjects from the schema migration
    if SEED_SUBJECTS and isinstance(store, JsonFileStore):
        seed_subjects(store)
    return SessionLifecycleManager(store)
