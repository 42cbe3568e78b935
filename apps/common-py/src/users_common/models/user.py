"""User document models."""

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    """Body accepted when creating a user.

    Only ``name`` and ``description`` are required; any other field is kept
    as-is since the underlying store is schema-less.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={"example": {"name": "Jane Doe", "description": "Platform engineer"}},
    )

    name: str = Field(..., min_length=1, description="Display name of the user")
    description: str = Field(..., min_length=1, description="Free-form description of the user")


class UserDocument(BaseModel):
    """A stored user document, including its current revision."""

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "id": "3f2b6c0e9a1d4e7f8b5c2a1d0e9f8a7b",
                "revision": '"0000d986-0000-0d00-0000-65f1b2c30000"',
                "name": "Jane Doe",
                "description": "Platform engineer",
                "team": "infra",
            }
        },
    )

    id: str = Field(..., description="Unique identifier, assigned by the store when absent")
    revision: str = Field(..., description="Opaque revision token of this version of the document")
    name: str | None = Field(default=None, description="Display name of the user")
    description: str | None = Field(default=None, description="Free-form description of the user")
