"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat bubbles with incremental rendering of streamed replies
    - Input form with a one-stream-at-a-time guard
    - Collapsible sidebar of saved chats (select, delete, new)
    - Google sign-in and sign-out

Page state and behaviour live in ChatSession; the page only renders it.
"""
