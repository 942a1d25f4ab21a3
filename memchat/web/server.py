"""aiohttp server exposing the chat handler.

Two entry points run the same handler:

- ``/api/chat``: standalone JSON endpoint with permissive CORS.
- ``/chat``: the page route. GET renders the chat page and issues the
  session cookie; POST is the form/JSON action.
"""

from __future__ import annotations

import logging
from typing import Any

from aiohttp import web

from memchat.chat.errors import ChatError, InvalidInput
from memchat.chat.handler import MemoryBackend, process_message
from memchat.config import settings
from memchat.memory.client import SupermemoryClient
from memchat.web.page import render_chat_page
from memchat.web.session import commit_session, ensure_user_id

logger = logging.getLogger(__name__)

MEMORY_KEY = web.AppKey("memory", MemoryBackend)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
ALLOW_ORIGIN = {"Access-Control-Allow-Origin": "*"}


def _error(status: int, message: str, headers: dict[str, str] | None = None) -> web.Response:
    return web.json_response({"error": message}, status=status, headers=headers)


async def _preflight(request: web.Request) -> web.Response:
    """OPTIONS: CORS preflight."""
    return web.Response(status=200, headers=CORS_HEADERS)


async def _method_not_allowed(request: web.Request) -> web.Response:
    return _error(405, "Method not allowed")


async def _read_json_fields(request: web.Request) -> tuple[Any, Any]:
    body = await request.json()
    if not isinstance(body, dict):
        return None, None
    return body.get("userId"), body.get("message")


async def _read_form_fields(request: web.Request) -> tuple[Any, Any]:
    form = await request.post()
    return form.get("userId"), form.get("message")


async def _respond(
    request: web.Request,
    user_id: Any,
    message: Any,
    headers: dict[str, str] | None = None,
) -> web.Response:
    """Run the shared handler and map its outcome to an HTTP response."""
    try:
        turn = await process_message(user_id, message, request.app[MEMORY_KEY])
    except InvalidInput:
        logger.info("Rejected chat request: missing userId or message")
        return _error(InvalidInput.status, InvalidInput.public_message, headers)
    except ChatError as exc:
        return _error(exc.status, exc.public_message, headers)
    return web.json_response(turn.to_wire(), headers=headers)


# -- Standalone endpoint -------------------------------------------------------


async def _handle_api_chat(request: web.Request) -> web.Response:
    """POST /api/chat with a JSON body ``{userId, message}``."""
    try:
        user_id, message = await _read_json_fields(request)
    except ValueError:
        logger.exception("Error in chat API: unreadable JSON body")
        return _error(500, "Failed to process message", ALLOW_ORIGIN)
    return await _respond(request, user_id, message, ALLOW_ORIGIN)


# -- Page route ----------------------------------------------------------------


async def _chat_page(request: web.Request) -> web.Response:
    """GET /chat: assign the session and render the page (or its data as JSON)."""
    user_id, created = ensure_user_id(request)

    if "application/json" in request.headers.get("Accept", ""):
        response = web.json_response({"userId": user_id, "messages": []})
    else:
        response = web.Response(text=render_chat_page(user_id), content_type="text/html")

    commit_session(response, user_id)
    if created:
        logger.info("New chat session started")
    return response


async def _chat_action(request: web.Request) -> web.Response:
    """POST /chat accepting either a JSON body or form fields."""
    try:
        if "application/json" in request.headers.get("Content-Type", ""):
            user_id, message = await _read_json_fields(request)
        else:
            user_id, message = await _read_form_fields(request)
    except ValueError:
        logger.exception("Error in chat action: unreadable request body")
        return _error(500, "Failed to process message")

    return await _respond(request, user_id, message)


async def _redirect_to_chat(request: web.Request) -> web.Response:
    raise web.HTTPFound("/chat")


async def _health(request: web.Request) -> web.Response:
    """GET /health: basic liveness check."""
    return web.json_response({"status": "ok"})


async def _close_memory(app: web.Application) -> None:
    memory = app[MEMORY_KEY]
    aclose = getattr(memory, "aclose", None)
    if aclose is not None:
        await aclose()


def create_app(memory: MemoryBackend | None = None) -> web.Application:
    """Build the aiohttp Application with routes."""
    app = web.Application()
    app[MEMORY_KEY] = memory if memory is not None else SupermemoryClient.get()
    app.on_cleanup.append(_close_memory)

    app.router.add_get("/health", _health)

    app.router.add_route("OPTIONS", "/api/chat", _preflight)
    app.router.add_post("/api/chat", _handle_api_chat)
    app.router.add_route("*", "/api/chat", _method_not_allowed)

    app.router.add_route("OPTIONS", "/chat", _preflight)
    app.router.add_get("/chat", _chat_page, allow_head=False)
    app.router.add_post("/chat", _chat_action)
    app.router.add_route("*", "/chat", _method_not_allowed)

    app.router.add_get("/", _redirect_to_chat)
    return app


class ChatServer:
    """Manages the aiohttp server lifecycle."""

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        memory: MemoryBackend | None = None,
    ) -> None:
        self.host = host or settings.host
        self.port = port or settings.port
        self._memory = memory
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        """Start listening for chat requests."""
        app = create_app(self._memory)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info("Chat server listening on http://%s:%d/chat", self.host, self.port)

    async def stop(self) -> None:
        """Shut down the server gracefully."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Chat server stopped")
