"""User API routes.

Path operations are plain functions so FastAPI runs them in its threadpool;
the document store client blocks on I/O.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status
from fastapi.responses import JSONResponse
from users_common.models.user import UserCreate, UserDocument
from users_common.services.user_service import UserService

from users_api.errors import ERROR_RESPONSES, error_response
from users_api.services import get_user_service

router = APIRouter(prefix="/users", tags=["users"], responses=ERROR_RESPONSES, redirect_slashes=False)

_CREATE_BODY = Body(..., openapi_examples={"user": {"value": {"name": "Jane Doe", "description": "Platform engineer"}}})
_UPDATE_BODY = Body(..., openapi_examples={"rename": {"value": {"name": "Jane Smith"}}})


@router.get("", response_model=list[UserDocument], summary="Get all users")
@router.get("/", response_model=list[UserDocument], include_in_schema=False)
def list_users(service: UserService = Depends(get_user_service)) -> list[UserDocument] | JSONResponse:
    outcome = service.list_users()
    if outcome.error:
        return error_response(outcome.error)
    return outcome.value


@router.post(
    "",
    response_model=UserDocument,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
    openapi_extra={"requestBody": {"content": {"application/json": {"schema": UserCreate.model_json_schema()}}}},
)
@router.post("/", response_model=UserDocument, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_user(
    body: dict[str, Any] = _CREATE_BODY,
    service: UserService = Depends(get_user_service),
) -> UserDocument | JSONResponse:
    outcome = service.create_user(body)
    if outcome.error:
        return error_response(outcome.error)
    return outcome.value


@router.get("/{user_id}", response_model=UserDocument, summary="Get a user by ID")
def get_user(user_id: str, service: UserService = Depends(get_user_service)) -> UserDocument | JSONResponse:
    outcome = service.get_user(user_id)
    if outcome.error:
        return error_response(outcome.error)
    return outcome.value


@router.put("/{user_id}", response_model=UserDocument, summary="Update a user by ID")
def update_user(
    user_id: str,
    body: dict[str, Any] = _UPDATE_BODY,
    service: UserService = Depends(get_user_service),
) -> UserDocument | JSONResponse:
    """Merge the supplied fields into the stored user.

    Fields left out of the body keep their stored values. Fails with 409 when
    the user changes between the read and the write.
    """
    outcome = service.update_user(user_id, body)
    if outcome.error:
        return error_response(outcome.error)
    return outcome.value


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a user by ID")
def delete_user(user_id: str, service: UserService = Depends(get_user_service)) -> Response:
    outcome = service.delete_user(user_id)
    if outcome.error:
        return error_response(outcome.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
