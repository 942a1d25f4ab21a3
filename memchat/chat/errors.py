"""Errors raised while processing a chat message."""


class ChatError(Exception):
    """Base class for chat handler failures."""

    status: int = 500
    public_message: str = "Failed to process message"


class InvalidInput(ChatError):
    """userId or message was missing from the request."""

    status = 400
    public_message = "Missing required fields"


class UpstreamFailure(ChatError):
    """The memory service (or anything after validation) failed."""
