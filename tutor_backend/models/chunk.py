"""
Chunk domain model.

Represents one retrieval-sized slice of a lesson produced by the chunking engine.

Dependencies: pydantic
System role: Document chunk data structure
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field


class TextChunk(BaseModel):
    """Immutable chunk of source text, ordered within its source."""

    model_config = ConfigDict(frozen=True)

    source_id: str = Field(description="Identifier of the source document (lesson id)")
    index: int = Field(description="Position of the chunk within its source", ge=0)
    text: str = Field(description="Chunk text content")

    @computed_field
    @property
    def char_length(self) -> int:
        return len(self.text)
