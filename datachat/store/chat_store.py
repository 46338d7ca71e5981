"""Per-user saved chats in Cloud Firestore.

Layout: `users/{uid}/chats/{chatId}` with fields `title`, `messages`
and `timestamp` (creation time, set by the server).

The Firestore client is synchronous; async callers run these methods in a
worker thread.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from firebase_admin import firestore
from google.api_core.exceptions import NotFound

from datachat.auth.firebase import initialize_firebase
from datachat.models.schemas import ChatRecord, Message

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 40
DEFAULT_TITLE = "Untitled"


def make_title(messages: Sequence[Message]) -> str:
    """Derive a sidebar title from the first non-blank user message."""
    for message in messages:
        if message.role == "user" and message.text.strip():
            text = " ".join(message.text.split())
            if len(text) <= TITLE_MAX_LENGTH:
                return text
            return text[: TITLE_MAX_LENGTH - 1].rstrip() + "…"
    return DEFAULT_TITLE


class ChatStore:
    """Reads and writes a user's chat collection."""

    def __init__(self, client: Any | None = None) -> None:
        """Initialize the store.

        Args:
            client: Firestore client. Uses the default Firebase app if not provided.
        """
        self._db = client or firestore.client()

    def _chats(self, uid: str) -> Any:
        return self._db.collection("users").document(uid).collection("chats")

    def _ordered(self, uid: str) -> Any:
        return self._chats(uid).order_by("timestamp", direction=firestore.Query.DESCENDING)

    @staticmethod
    def _to_record(snapshot: Any) -> ChatRecord:
        data = snapshot.to_dict() or {}
        return ChatRecord(
            id=snapshot.id,
            title=data.get("title") or DEFAULT_TITLE,
            messages=data.get("messages") or [],
            timestamp=data.get("timestamp"),
        )

    def save_chat(self, uid: str, chat_id: str | None, messages: Sequence[Message]) -> str:
        """Create or update a saved chat.

        A new document gets a title and a creation timestamp; an existing one
        only has its messages replaced. Updates are attempted directly, and a
        document that has gone missing is created again under the same id.

        Args:
            uid: Owner's user id.
            chat_id: Existing document id, or None to create one.
            messages: Full conversation to store.

        Returns:
            The document id.
        """
        payload = [message.model_dump() for message in messages]

        if chat_id is not None:
            ref = self._chats(uid).document(chat_id)
            try:
                ref.update({"messages": payload})
            except NotFound:
                logger.warning(f"Chat {chat_id} no longer exists, creating it again")
            else:
                logger.debug(f"Updated chat {chat_id} ({len(payload)} messages)")
                return chat_id
        else:
            ref = self._chats(uid).document()

        ref.set(
            {
                "title": make_title(messages),
                "messages": payload,
                "timestamp": firestore.SERVER_TIMESTAMP,
            }
        )
        logger.info(f"Created chat {ref.id} for user {uid}")
        return ref.id

    def get_chat(self, uid: str, chat_id: str) -> ChatRecord | None:
        """Load one saved chat, or None if it does not exist."""
        snapshot = self._chats(uid).document(chat_id).get()
        if not snapshot.exists:
            return None
        return self._to_record(snapshot)

    def list_chats(self, uid: str) -> list[ChatRecord]:
        """Load all of a user's chats, newest first."""
        return [self._to_record(snapshot) for snapshot in self._ordered(uid).stream()]

    def delete_chat(self, uid: str, chat_id: str) -> None:
        """Delete a saved chat. Deleting a missing chat is a no-op."""
        self._chats(uid).document(chat_id).delete()
        logger.info(f"Deleted chat {chat_id} for user {uid}")

    def subscribe(
        self,
        uid: str,
        callback: Callable[[list[ChatRecord]], None],
    ) -> Callable[[], None]:
        """Watch a user's chats, newest first.

        The callback receives the full list on every change. It runs on the
        Firestore listener thread, not the caller's event loop.

        Returns:
            A function that stops the subscription.
        """

        def on_snapshot(snapshots: list[Any], changes: Any, read_time: Any) -> None:
            callback([self._to_record(snapshot) for snapshot in snapshots])

        watch = self._ordered(uid).on_snapshot(on_snapshot)
        return watch.unsubscribe


# Module-level singleton instance
_chat_store: ChatStore | None = None


def get_chat_store() -> ChatStore | None:
    """Get or create the global chat store.

    Returns:
        The ChatStore, or None when Firebase is not configured.
    """
    global _chat_store
    if _chat_store is None:
        app = initialize_firebase()
        if app is None:
            return None
        _chat_store = ChatStore(firestore.client(app))
    return _chat_store
