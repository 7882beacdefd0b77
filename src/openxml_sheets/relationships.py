"""Relationship parts of an Open Packaging Conventions package."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from openxml_sheets.markup import ChildBinding, ElementSchema, decode_part


class Relationship(BaseModel):
    """A single relationship from a source part to a target."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Relationship id, unique within its part")
    type: str = Field(..., description="Relationship type URI")
    target: str = Field(..., description="Target path relative to the source")
    target_mode: str = Field(
        default="Internal", description="Internal (a part) or External (a URI)"
    )


class Relationships(BaseModel):
    """Ordered relationships declared by one relationships part."""

    relationships: list[Relationship] = Field(default_factory=list)

    def get(self, relation_id: str) -> Relationship | None:
        """Return the first relationship with the given id, if any."""
        for rel in self.relationships:
            if rel.id == relation_id:
                return rel
        return None

    def __len__(self) -> int:
        return len(self.relationships)


RELATIONSHIP_SCHEMA = ElementSchema(
    tag="Relationship",
    attributes={
        "Id": "id",
        "Type": "type",
        "Target": "target",
        "TargetMode": "target_mode",
    },
)

RELATIONSHIPS_SCHEMA = ElementSchema(
    tag="Relationships",
    children=(
        ChildBinding(
            "Relationship", "relationships", RELATIONSHIP_SCHEMA, repeated=True
        ),
    ),
)


def parse_relationships(data: bytes, part_name: str | None = None) -> Relationships:
    """Decode a relationships part.

    Raises:
        DecodeError: If the markup is malformed or not a relationship list.
    """
    return decode_part(data, RELATIONSHIPS_SCHEMA, Relationships, part_name=part_name)
