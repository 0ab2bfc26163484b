"""Albert Chat - authenticated web chat client for a webhook-based assistant.

Combines NiceGUI for the chat interface, FastAPI for the host application,
httpx for every remote call, and Pydantic for data validation.

Components:
    - auth: Supabase sign-in and the per-browser session lifecycle
    - assistant: Webhook message exchange
    - store: Conversation history and rating persistence
    - chat: Transcript state machine driving the view
    - ui: Login and chat pages
    - api: Host application and health endpoint
    - models: Session, message and row schemas
"""

__version__ = "0.1.0"
