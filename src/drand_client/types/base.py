"""Reusable base models for documents exchanged with drand nodes."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class WireModel(BaseModel):
    """
    A base model for JSON documents served by drand nodes.

    Field names follow Python conventions.
    Aliases map them back to the exact keys used on the wire,
    which mix snake case (`genesis_time`) and camel case (`groupHash`).

    Unknown keys are ignored: nodes add fields across releases.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_default=True,
        extra="ignore",
        frozen=True,
    )

    def copy(self: Self, **kwargs: Any) -> Self:
        """Create a copy of the model with the updated fields that are validated."""
        return self.__class__(**(self.model_dump(exclude_unset=True) | kwargs))

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize using the node's field names, omitting absent optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)
