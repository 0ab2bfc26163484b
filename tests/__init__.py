"""Test package for Albert Chat.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end chat workflows and the HTTP app

Remote services (Supabase Auth, Supabase REST, the assistant webhook) are
replaced by an in-memory fake behind httpx.MockTransport; the clients under
test are the real ones. Uses pytest with pytest-check for soft assertions.
"""
