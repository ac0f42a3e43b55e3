"""tasklist: a small to-do list backend (FastAPI + SQLite) and its async client store."""

__version__ = "0.1.0"
