"""
User directory service over the `users` table.

Public API
----------
create_user(db, payload)          -> User          (409 on duplicate email)
get_user(db, user_id)             -> User          (404 if missing)
get_user_by_email(db, email)      -> Optional[User]
list_users(db)                    -> list[User]    (newest first)
update_user(db, user_id, changes) -> User
delete_user(db, user_id)          -> None
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateEmailError, UserNotFoundError
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def _commit_unique_email(db: Session, email: str) -> None:
    # concurrent writers can both pass the email pre-check
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateEmailError(email) from exc


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def create_user(db: Session, payload: UserCreate) -> User:
    if get_user_by_email(db, payload.email) is not None:
        raise DuplicateEmailError(payload.email)

    user = User(name=payload.name, email=payload.email, age=payload.age)
    db.add(user)
    _commit_unique_email(db, payload.email)
    db.refresh(user)
    logger.info(f"User created with ID: {user.id}")
    return user


def update_user(db: Session, user_id: int, changes: UserUpdate) -> User:
    user = get_user(db, user_id)
    fields = changes.model_dump(exclude_none=True)

    new_email = fields.get("email")
    if new_email and new_email != user.email:
        existing = get_user_by_email(db, new_email)
        if existing is not None and existing.id != user.id:
            raise DuplicateEmailError(new_email)

    for key, value in fields.items():
        setattr(user, key, value)
    _commit_unique_email(db, user.email)
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int) -> None:
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info(f"User deleted: {user_id}")
