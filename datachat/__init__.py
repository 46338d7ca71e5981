"""Data Chat - a persona chat client with a streaming Gemini relay.

Combines FastAPI for HTTP streaming, google-genai for the model,
NiceGUI for the chat interface, Firebase for sign-in and saved chats,
and Pydantic for data validation.

Components:
    - api: HTTP endpoints and streaming responses
    - relay: Gemini chat sessions and persona instruction
    - auth: Firebase sign-in and ID token verification
    - store: Per-user saved chats in Cloud Firestore
    - ui: Web interface for chat interactions
    - models: Message, request and record schemas
"""

__version__ = "0.1.0"
