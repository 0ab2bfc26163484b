"""Unit tests for individual components in isolation.

Coverage:
    - config: ChatConfig validation
    - chat: Controller state machine, copy feedback, markdown rendering
    - auth: Session lifecycle and conversation identifiers
    - assistant: Webhook exchange and fallback replies
    - store: Message and rating persistence, history loading
"""
