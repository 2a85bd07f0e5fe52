"""Secret mailbox domain service."""

from dataclasses import replace
from typing import Optional

from familypoints.domain.catalog import find_user
from familypoints.domain.entities import AppState, SecretMessage
from familypoints.domain.errors import (
    NotFoundError,
    ValidationError,
    message_not_found,
    not_a_child,
)
from familypoints.utils.clock import new_id, now_ms


def unread_count(state: AppState) -> int:
    """Return the number of unread messages."""
    return sum(1 for m in state.messages if not m.is_read)


def inbox(state: AppState) -> list[SecretMessage]:
    """Return messages with unread ones first, each group newest first."""
    return sorted(state.messages, key=lambda m: (m.is_read, -m.timestamp))


class MailboxService:
    """Service for sending and reading secret messages."""

    def send_message(
        self,
        state: AppState,
        from_child_id: str,
        content: str,
        timestamp: Optional[int] = None,
    ) -> tuple[AppState, SecretMessage]:
        """Leave a message from a child.

        Raises:
            NotFoundError: If the sender doesn't exist
            ValidationError: If the sender is not a child or content is empty
        """
        sender = find_user(state, from_child_id)
        if not sender.is_child:
            raise ValidationError(not_a_child(from_child_id))

        text = (content or "").strip()
        if not text:
            raise ValidationError("Message content must not be empty")

        message = SecretMessage(
            id=new_id(),
            from_child_id=sender.id,
            from_child_name=sender.name,
            content=text,
            timestamp=now_ms() if timestamp is None else timestamp,
        )
        return replace(state, messages=state.messages + (message,)), message

    def mark_read(self, state: AppState, message_id: str) -> AppState:
        """Mark a message as read. Read messages never become unread again."""
        for message in state.messages:
            if message.id == message_id:
                break
        else:
            raise NotFoundError(message_not_found(message_id))

        if message.is_read:
            return state

        return replace(
            state,
            messages=tuple(
                replace(m, is_read=True) if m.id == message_id else m for m in state.messages
            ),
        )
