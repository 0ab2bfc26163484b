"""Authentication against Supabase Auth.

Responsibilities:
    - Password and OAuth (PKCE) sign-in, sign-up, sign-out
    - Session restore and token refresh across page reloads
    - Auth state change notifications
    - One conversation identifier per login event
"""

from albert_chat.auth.client import AuthError, SupabaseAuth
from albert_chat.auth.session import AuthEvent, SessionManager, generate_chat_id

__all__ = ["AuthError", "AuthEvent", "SessionManager", "SupabaseAuth", "generate_chat_id"]
