"""Test package for Data Chat.

Unit tests cover isolated logic with the Gemini and Firestore SDKs mocked;
integration tests drive the FastAPI app and the chat session over HTTP.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end relay and client workflows

Live Gemini tests run only when GEMINI_API_KEY is set.
Leverages pytest with pytest-check for soft assertions.
"""
