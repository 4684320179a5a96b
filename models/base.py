"""
Base model for all Pandorabots entities

Every entity is an immutable value object received from (or sent to) the
service. Field aliases carry the exact wire names.
"""
from pydantic import BaseModel, ConfigDict


class PBBaseModel(BaseModel):
    """Base model for all service entities with common functionality."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    def __repr__(self):
        fields = ', '.join(f'{k}={v}' for k, v in self.model_dump(exclude_none=True).items())
        return f"{self.__class__.__name__}({fields})"
