from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model serialized with camelCase keys for storage and export files."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    def to_wire(self) -> dict:
        """Return the JSON-compatible payload using camelCase keys."""

        return self.model_dump(mode="json", by_alias=True)
