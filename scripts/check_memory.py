#!/usr/bin/env python3
"""Diagnostic script to test Supermemory connectivity and operations.

Run from the project root to isolate memory issues from the web server:

    uv run python scripts/check_memory.py [--tag diagnostic] [--write]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Allow running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from memchat.config import settings
from memchat.memory.client import MemoryServiceError, SupermemoryClient


def banner(msg: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {msg}")
    print(f"{'=' * 60}")


async def main(tag: str, write: bool) -> None:
    banner("Supermemory Diagnostic")

    print(f"\nSUPERMEMORY_API_KEY set: {settings.memory_enabled}")
    if not settings.memory_enabled:
        print("FATAL: SUPERMEMORY_API_KEY is empty. Set it in .env")
        sys.exit(1)
    print(f"SUPERMEMORY_API_KEY prefix: {settings.supermemory_api_key[:6]}...")
    print(f"Base URL: {settings.supermemory_base_url}")

    client = SupermemoryClient()
    try:
        banner("Step 1: Search (read)")
        try:
            results = await client.search("test query", [tag])
            print(f"OK: Search returned {len(results)} results")
            for result in results[:3]:
                print(f"    - {result.text[:80]!r}")
        except MemoryServiceError as exc:
            print(f"FAIL: Search failed: {exc}")

        if write:
            banner("Step 2: Add memory (write)")
            try:
                ack = await client.add_memory("Diagnostic test memory, safe to delete", [tag])
                print(f"OK: Add returned: {ack}")
            except MemoryServiceError as exc:
                print(f"FAIL: Add failed: {exc}")
    finally:
        await client.aclose()

    banner("Done")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--tag", default="diagnostic", help="Container tag to search/write")
    parser.add_argument("--write", action="store_true", help="Also store a test memory")
    args = parser.parse_args()
    asyncio.run(main(args.tag, args.write))
