"""Data models for Supermemory search results."""

from pydantic import BaseModel, ConfigDict, Field


class MemoryChunk(BaseModel):
    """A matched slice of a stored memory."""

    model_config = ConfigDict(extra="ignore")

    content: str = ""


class SearchResult(BaseModel):
    """One ranked search hit: a document and its matching chunks."""

    model_config = ConfigDict(extra="ignore")

    chunks: list[MemoryChunk] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """Chunk contents joined one per line."""
        return "\n".join(chunk.content for chunk in self.chunks)
