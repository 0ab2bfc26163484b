"""Conversation persistence on the Supabase backend.

Responsibilities:
    - PostgREST access for the conversations and message_ratings tables
    - Loading a conversation transcript in creation order
    - Best-effort message inserts and rating upserts
"""

from albert_chat.store.backend import BackendError, SupabaseRest
from albert_chat.store.history import HistoryLoader
from albert_chat.store.transcript import TranscriptStore

__all__ = ["BackendError", "HistoryLoader", "SupabaseRest", "TranscriptStore"]
