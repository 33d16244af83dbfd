from datetime import datetime
from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from models.users import User
from models.refresh_tokens import RefreshToken
from core.exceptions import ConflictError
from utils.logger import get_logger

logger = get_logger(__name__)


class CredentialStore:
    """
    Persistence for users and refresh tokens.

    Uniqueness of emails and tokens is left to the database constraints;
    a rejected insert surfaces as ConflictError after the session is rolled back.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_email(self, email: str) -> Optional[User]:
        # Emails are matched case-insensitively, rows written before normalization included
        return self.db.query(User).filter(func.lower(User.email) == email.lower().strip()).first()

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).one_or_none()

    def insert_user(self, email: str, hash: str, profile_picture_url: Optional[str] = None) -> int:
        model = User(email=email, hash=hash, profile_picture_url=profile_picture_url)
        self._commit(model, "users")
        logger.debug("User inserted", extra={"user_id": model.id, "email": email})
        return model.id

    def insert_refresh_token(
        self,
        token: str,
        access_token: str,
        user_id: int,
        created_at: datetime,
        expired_at: datetime,
    ) -> RefreshToken:
        model = RefreshToken(
            token=token,
            access_token=access_token,
            user_id=user_id,
            created_at=created_at,
            updated_at=created_at,
            expired_at=expired_at,
        )
        self._commit(model, "refresh_tokens")
        self.db.refresh(model)
        return model

    def get_valid_refresh_token(self, token: str, now: datetime) -> Optional[RefreshToken]:
        model = self.db.query(RefreshToken).filter(
            RefreshToken.token == token,
            RefreshToken.deleted_at.is_(None),
        ).one_or_none()

        if model is None or not model.is_valid(now):
            return None
        return model

    def get_refresh_token(self, token: str) -> Optional[RefreshToken]:
        return self.db.query(RefreshToken).filter(RefreshToken.token == token).one_or_none()

    def soft_delete_refresh_token(self, model: RefreshToken, now: datetime, commit: bool = True) -> bool:
        """
        Marks the token deleted only if it is still live.

        Returns False when another request revoked it first. With commit=False the
        update stays in the open transaction, so a later rollback restores the token.
        """
        updated = self.db.query(RefreshToken).filter(
            RefreshToken.id == model.id,
            RefreshToken.deleted_at.is_(None),
        ).update(
            {RefreshToken.deleted_at: now, RefreshToken.updated_at: now},
            synchronize_session="fetch",
        )

        if commit:
            self.db.commit()
        return updated == 1

    def rollback(self):
        self.db.rollback()

    def _commit(self, model, table: str):
        self.db.add(model)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(
                "Constraint violation on insert",
                extra={"table": table, "error": str(e.orig)}
            )
            raise ConflictError(table, str(e.orig)) from e
