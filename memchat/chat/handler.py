"""Process one chat message against the user's memories.

Shared by the standalone ``/api/chat`` endpoint and the ``/chat`` route
action so both transports behave identically.
"""

import logging
from typing import Any, Protocol

from memchat.chat.errors import InvalidInput, UpstreamFailure
from memchat.chat.models import ChatMessage, ChatTurn
from memchat.chat.responder import decide_response
from memchat.memory.models import SearchResult

logger = logging.getLogger(__name__)

MAX_RELEVANT_MEMORIES = 3


class MemoryBackend(Protocol):
    async def search(self, query: str, tags: list[str]) -> list[SearchResult]: ...

    async def add_memory(self, content: str, tags: list[str]) -> dict[str, Any]: ...


def validate_fields(user_id: Any, message: Any) -> tuple[str, str]:
    """Return (user_id, message), raising InvalidInput if either is missing."""
    if not isinstance(user_id, str) or not user_id:
        raise InvalidInput("userId is required")
    if not isinstance(message, str) or not message:
        raise InvalidInput("message is required")
    return user_id, message


async def process_message(user_id: Any, message: Any, memory: MemoryBackend) -> ChatTurn:
    """Search, decide, optionally store, and build the turn.

    Raises:
        InvalidInput: userId or message is missing. No service call is made.
        UpstreamFailure: the memory service or anything after validation failed.
    """
    user_id, message = validate_fields(user_id, message)
    tags = [user_id]

    try:
        results = await memory.search(message, tags)
        relevant = [result.text for result in results[:MAX_RELEVANT_MEMORIES]]

        user_message = ChatMessage.user(message)
        decision = decide_response(message, relevant)

        if decision.should_save:
            await memory.add_memory(decision.memory_content, tags)
            logger.info("Stored memory for user %s (%d chars)", user_id, len(decision.memory_content))

        assistant_message = ChatMessage.assistant(decision.reply, memory_created=decision.should_save)
    except Exception as exc:
        logger.exception("Error processing chat message for user %s", user_id)
        raise UpstreamFailure(str(exc)) from exc

    return ChatTurn(
        user_message=user_message,
        assistant_message=assistant_message,
        memories_found=len(relevant),
    )
