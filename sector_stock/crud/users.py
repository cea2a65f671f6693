"""
User lookups for login.
"""
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging
from typing import Optional

from sector_stock.models import User
from sector_stock.crud.base import CRUDBase
from sector_stock.security import verify_password

logger = logging.getLogger(__name__)


class CRUDUser(CRUDBase[User]):
    def __init__(self):
        super().__init__(User)

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        try:
            stmt = select(User).where(User.email == email)
            return db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error getting user by email {email}: {e}")
            raise

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        """Return the active user matching the credentials, or None"""
        user = self.get_by_email(db, email)
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
        if not user.is_active:
            return None
        return user


crud_user = CRUDUser()
