"""Integration tests for components working together as a system.

Coverage:
    - Relay endpoint over real HTTP requests (ASGITransport)
    - Chat session driving the endpoint end to end
    - Live Gemini replies (when configured)

Only the Gemini relay is scripted, except in the live tests.
Requires GEMINI_API_KEY for the live tests.
"""
