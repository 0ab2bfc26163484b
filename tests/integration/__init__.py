"""Integration tests for components working together as a system.

Coverage:
    - Sign-in, send, persist and reload of a conversation
    - Health endpoint of the host application

All remote services are served by the in-memory fake from conftest.
"""
