"""Error response model."""

from pydantic import BaseModel, ConfigDict
from users_common.models.outcome import ErrorKind


class ErrorResponse(BaseModel):
    """Body returned with every 4xx/5xx response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "User 3f2b6c0e9a1d4e7f8b5c2a1d0e9f8a7b not found",
                "kind": "not_found",
            }
        }
    )

    error: str
    kind: ErrorKind
