"""Chat state for one browser tab.

Holds the visible conversation, the streaming flag, the signed-in user and
the sidebar's chat list. The NiceGUI page renders from this state; all the
behaviour lives here so it can be exercised without a browser.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence

import httpx

from datachat.models.schemas import ChatRecord, Message, UserProfile
from datachat.store.chat_store import ChatStore
from datachat.ui.stream_client import stream_generate

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Something went wrong."


class ChatSession:
    """Manages chat state for a user session."""

    def __init__(
        self,
        store: ChatStore | None = None,
        *,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.messages: list[Message] = []
        self.chat_id: str | None = None
        self.is_streaming: bool = False
        self.error: str = ""
        self.user: UserProfile | None = None
        self.chats: list[ChatRecord] = []
        self.chats_version: int = 0
        self._store = store
        self._base_url = base_url
        self._transport = transport
        self._buffer = ""

    @property
    def can_persist(self) -> bool:
        return self._store is not None and self.user is not None

    def submit(self, text: str) -> Message | None:
        """Append a user message, unless the input is blank or a reply is streaming."""
        if self.is_streaming or not text.strip():
            return None
        message = Message.from_text("user", text)
        self.messages.append(message)
        return message

    def apply_chunk(self, text: str) -> None:
        """Append streamed text to the in-progress model message, creating it if needed."""
        self._buffer += text
        last = self.messages[-1] if self.messages else None
        if last is not None and last.role == "model":
            last.parts[0].text = self._buffer
        else:
            self.messages.append(Message.from_text("model", self._buffer))

    async def stream_response(self, on_update: Callable[[], None] | None = None) -> bool:
        """Stream the model's reply to the newest user message.

        Any failure aborts the turn and leaves ERROR_MESSAGE in `error`. Text
        that already arrived stays in the conversation.

        Args:
            on_update: Called after every chunk so the page can redraw.

        Returns:
            True if the reply streamed to completion.
        """
        if self.is_streaming:
            return False
        if not self.messages or self.messages[-1].role != "user":
            return False

        self.is_streaming = True
        try:
            return await self._stream(on_update)
        finally:
            self.is_streaming = False

    async def _stream(self, on_update: Callable[[], None] | None) -> bool:
        self.error = ""
        self._buffer = ""

        def on_chunk(text: str) -> None:
            self.apply_chunk(text)
            if on_update:
                on_update()

        try:
            await stream_generate(
                self.messages,
                on_chunk,
                base_url=self._base_url,
                transport=self._transport,
            )
        except Exception:
            logger.exception("Chat turn failed")
            self.error = ERROR_MESSAGE
            return False
        return True

    async def send(self, text: str, on_update: Callable[[], None] | None = None) -> bool:
        """Run one full turn: submit, save, stream the reply, save again.

        The turn counts as streaming from submission until the last save
        finishes, so nothing else can be submitted, selected or deleted
        while either save is in progress.

        Returns:
            True if a reply streamed to completion.
        """
        if self.submit(text) is None:
            return False

        self.is_streaming = True
        try:
            if on_update:
                on_update()
            await self.persist()
            completed = await self._stream(on_update)
            if completed:
                await self.persist()
        finally:
            self.is_streaming = False
        return completed

    async def persist(self) -> None:
        """Upsert the conversation into the user's saved chats.

        Saving is best effort: a failed write is logged and the chat goes on.
        """
        if not self.can_persist or not self.messages:
            return
        try:
            self.chat_id = await asyncio.to_thread(
                self._store.save_chat,
                self.user.uid,
                self.chat_id,
                list(self.messages),
            )
        except Exception:
            logger.exception(f"Failed to save chat {self.chat_id or '(new)'}")

    def set_chats(self, chats: Sequence[ChatRecord]) -> None:
        """Replace the sidebar list. Safe to call from the store's listener thread."""
        self.chats = list(chats)
        self.chats_version += 1

    def select_chat(self, chat_id: str) -> bool:
        """Show a saved chat in place of the current conversation."""
        if self.is_streaming:
            return False
        record = next((chat for chat in self.chats if chat.id == chat_id), None)
        if record is None:
            return False
        self.load(record)
        return True

    def load(self, record: ChatRecord) -> None:
        self.messages = [message.model_copy(deep=True) for message in record.messages]
        self.chat_id = record.id
        self.error = ""

    async def delete_chat(self, chat_id: str) -> bool:
        """Delete a saved chat and drop it from the sidebar.

        Deleting the chat on screen also starts a new one. Refused while a
        reply streams, since the turn would save the chat again when it ends.

        Returns:
            True if the chat was deleted.

        Raises:
            Exception: Whatever the store raises; the sidebar is left unchanged.
        """
        if self.is_streaming:
            return False

        # Detach first so a turn submitted during the delete cannot save into it
        is_open = self.chat_id == chat_id
        if is_open:
            self.chat_id = None
        if self.can_persist:
            try:
                await asyncio.to_thread(self._store.delete_chat, self.user.uid, chat_id)
            except Exception:
                if is_open and self.chat_id is None:
                    self.chat_id = chat_id
                raise

        self.set_chats([chat for chat in self.chats if chat.id != chat_id])
        if is_open and self.chat_id is None:
            self.new_chat()
        return True

    def new_chat(self) -> bool:
        """Clear the conversation so the next message starts a new saved chat."""
        if self.is_streaming:
            return False
        self.messages = []
        self.chat_id = None
        self.error = ""
        self._buffer = ""
        return True

    def sign_in(self, user: UserProfile) -> None:
        self.user = user

    def sign_out(self) -> None:
        self.user = None
        self.chat_id = None
        self.set_chats([])
