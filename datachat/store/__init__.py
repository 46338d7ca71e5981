"""Saved chat history in Cloud Firestore.

Responsibilities:
    - Upserting a conversation into the signed-in user's collection
    - Listing, loading and deleting saved chats
    - Live subscription to the user's chat list for the sidebar
"""

from datachat.store.chat_store import ChatStore, get_chat_store, make_title

__all__ = ["ChatStore", "get_chat_store", "make_title"]
