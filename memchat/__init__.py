"""Memory-backed demo chatbot served over aiohttp."""
