#!/usr/bin/env python3
"""Chat with a running memchat server from the terminal.

    uv run python scripts/chat_cli.py --url http://127.0.0.1:8080 --user-id me
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Allow running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from memchat.chat.surface import ChatSurface
from memchat.web.session import new_user_id


def _print_new(surface: ChatSurface, seen: int) -> int:
    messages = surface.transcript.messages
    for message in messages[seen:]:
        if message.role == "assistant":
            stamp = message.timestamp.astimezone().strftime("%H:%M:%S")
            flag = "  [memory created]" if message.memory_created else ""
            print(f"\nbot ({stamp}){flag}:\n{message.content}\n")
    return len(messages)


async def main(url: str, user_id: str) -> None:
    surface = ChatSurface(user_id=user_id, base_url=url)
    print(f"User ID: {user_id}")
    seen = _print_new(surface, 0)

    while True:
        try:
            text = await asyncio.to_thread(input, "you> ")
        except (EOFError, KeyboardInterrupt):
            print()
            return
        if not await surface.send(text):
            continue
        seen = _print_new(surface, seen)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Terminal client for the memchat server")
    parser.add_argument("--url", default="http://127.0.0.1:8080")
    parser.add_argument("--user-id", default=None, help="Reuse an existing user id")
    args = parser.parse_args()
    asyncio.run(main(args.url, args.user_id or new_user_id()))
