"""User domain service."""

import logging
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.category import CategoryService
from fintrack.domain.entities import User
from fintrack.domain.errors import ValidationError

logger = logging.getLogger(__name__)


class UserService:
    """Registers owners the auth layer has already verified."""

    def __init__(self, db: Database):
        self.db = db
        self.category_service = CategoryService(db)

    def ensure_user(
        self,
        uid: str,
        username: Optional[str] = None,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        """Return the user for uid, creating it on first sight.

        A new user also gets the default category set.
        """
        if not uid or not uid.strip():
            raise ValidationError("User uid is required")

        user = self.db.get_user_by_uid(uid)
        if user is not None:
            return user

        user = self.db.create_user(
            uid=uid, username=username or uid, display_name=display_name, email=email
        )
        self.category_service.seed_default_categories(uid)
        logger.info("registered user %s", uid)
        return user
