"""
User directory router.

POST   /users            — create (409 on duplicate email)
GET    /users            — list, newest first
GET    /users/{user_id}  — single user
PATCH  /users/{user_id}  — partial update
DELETE /users/{user_id}  — delete
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.schemas.common import ErrorResponse
from app.schemas.user import UserCreate, UserOut, UserUpdate
from app.services import user_service

router = APIRouter(prefix="/users", tags=["users"])

_not_found = {404: {"model": ErrorResponse, "description": "User not found."}}
_conflict = {409: {"model": ErrorResponse, "description": "Email already in use."}}


@router.post(
    "",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    responses=_conflict,
)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    return user_service.create_user(db, payload)


@router.get("", response_model=list[UserOut], summary="List users")
def list_users(db: Session = Depends(get_db)):
    return user_service.list_users(db)


@router.get("/{user_id}", response_model=UserOut, summary="Get user", responses=_not_found)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)


@router.patch(
    "/{user_id}",
    response_model=UserOut,
    summary="Update user",
    responses={**_not_found, **_conflict},
)
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    return user_service.update_user(db, user_id, payload)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
    responses=_not_found,
)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
