"""Shared base model for persisted documents."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    """Immutable model serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_document(self) -> dict[str, object]:
        """Return a JSON-compatible dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
