"""Keyword heuristics that pick the bot's reply.

Rules are checked in order and the first match wins:

1. "remember" / "save"             -> store the message, confirm.
2. "what do you know" / "recall"   -> list what the search found.
3. any relevant memory found       -> answer from the top memory.
4. "hello" / "hi"                  -> greeting.
5. "test"                          -> test acknowledgement.
6. anything else                   -> echo; long statements are auto-saved.

Matching is a case-insensitive substring test, so "this" counts as "hi".
"""

from collections.abc import Sequence
from dataclasses import dataclass

SAVE_KEYWORDS = ("remember", "save")
RECALL_KEYWORDS = ("what do you know", "recall")
GREETING_KEYWORDS = ("hello", "hi")
TEST_KEYWORDS = ("test",)

MEMORY_PREVIEW_CHARS = 100
AUTO_SAVE_MIN_TOKENS = 6
AUTO_SAVE_PREFIX = "User mentioned: "

SAVED_REPLY = "✅ I've saved that to your memory! I'll remember this for future conversations."
RECALL_HEADER = "🧠 Here's what I remember:\n\n"
NOTHING_STORED_REPLY = (
    "🤔 I don't have any relevant memories stored yet. Try telling me something to remember!"
)
CONTEXT_REPLY = (
    "💭 Based on what I remember about you: {memory}...\n\n"
    'Regarding "{message}": This seems related to our previous conversations. '
    "Would you like me to remember this too?"
)
GREETING_REPLY = (
    "👋 Hello! I'm your memory-enabled chatbot. Try telling me something to remember, "
    "or ask me what I know about you!"
)
TEST_REPLY = (
    "🧪 Great! This is a test of the Supermemory system. I can store and retrieve memories "
    "across our conversation. Tell me something interesting to remember!"
)
ECHO_REPLY = (
    '💬 I see you said: "{message}". I can help you store this as a memory if you\'d like! '
    'Just say "remember this" or ask me "what do you know about me?"'
)
AUTO_SAVED_SUFFIX = "\n\n✨ I automatically saved this as it seems like useful information!"


@dataclass(frozen=True)
class Decision:
    """What to say, and what (if anything) to store."""

    reply: str
    memory_content: str | None = None

    @property
    def should_save(self) -> bool:
        return self.memory_content is not None


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def is_auto_memorable(message: str) -> bool:
    """Long statements (more than five words, no question mark) are worth keeping."""
    return len(message.split()) >= AUTO_SAVE_MIN_TOKENS and "?" not in message


def format_recall(memories: Sequence[str]) -> str:
    listing = "\n\n".join(f"{i}. {memory}" for i, memory in enumerate(memories, start=1))
    return RECALL_HEADER + listing


def decide_response(message: str, relevant_memories: Sequence[str]) -> Decision:
    """Choose the reply for *message* given the memories search returned."""
    lowered = message.lower()

    if _contains_any(lowered, SAVE_KEYWORDS):
        return Decision(reply=SAVED_REPLY, memory_content=message)

    if _contains_any(lowered, RECALL_KEYWORDS):
        if relevant_memories:
            return Decision(reply=format_recall(relevant_memories))
        return Decision(reply=NOTHING_STORED_REPLY)

    if relevant_memories:
        preview = relevant_memories[0][:MEMORY_PREVIEW_CHARS]
        return Decision(reply=CONTEXT_REPLY.format(memory=preview, message=message))

    if _contains_any(lowered, GREETING_KEYWORDS):
        return Decision(reply=GREETING_REPLY)

    if _contains_any(lowered, TEST_KEYWORDS):
        return Decision(reply=TEST_REPLY)

    reply = ECHO_REPLY.format(message=message)
    if is_auto_memorable(message):
        return Decision(reply=reply + AUTO_SAVED_SUFFIX, memory_content=AUTO_SAVE_PREFIX + message)
    return Decision(reply=reply)
