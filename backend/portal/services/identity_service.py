import uuid
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from portal.config import settings
from portal.exceptions import IdentityError
from portal.models.identity import Identity
from portal.utils.security import hash_password, verify_password
from portal.utils.timestamps import utc_now


@dataclass(frozen=True)
class Account:
    uid: str
    login_id: str


class IdentityBridge:
    """Creates and checks login accounts. Nothing is cached locally."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def create_account(self, login_id: str, password: str) -> Account:
        if len(password) < settings.min_password_length:
            raise IdentityError(IdentityError.WEAK_CREDENTIAL)

        login_id = login_id.strip().lower()
        uid = uuid.uuid4().hex
        db = self._session_factory()
        try:
            if db.query(Identity).filter(Identity.login_id == login_id).first():
                raise IdentityError(IdentityError.ALREADY_EXISTS)
            db.add(Identity(
                uid=uid,
                login_id=login_id,
                password_hash=hash_password(password),
                created_at=utc_now(),
            ))
            db.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent create for the same login.
            db.rollback()
            raise IdentityError(IdentityError.ALREADY_EXISTS) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            raise IdentityError(IdentityError.OTHER, str(exc)) from exc
        finally:
            db.close()
        return Account(uid=uid, login_id=login_id)

    def find_by_login(self, login_id: str) -> Account | None:
        db = self._session_factory()
        try:
            row = db.query(Identity).filter(Identity.login_id == login_id.strip().lower()).first()
            return Account(uid=row.uid, login_id=row.login_id) if row else None
        finally:
            db.close()

    def authenticate(self, login_id: str, password: str) -> Account | None:
        db = self._session_factory()
        try:
            row = db.query(Identity).filter(Identity.login_id == login_id.strip().lower()).first()
            if row is None or not verify_password(row.password_hash, password):
                return None
            return Account(uid=row.uid, login_id=row.login_id)
        finally:
            db.close()

    def delete_account(self, uid: str) -> bool:
        db = self._session_factory()
        try:
            deleted = db.query(Identity).filter(Identity.uid == uid).delete()
            db.commit()
            return deleted > 0
        except SQLAlchemyError as exc:
            db.rollback()
            raise IdentityError(IdentityError.OTHER, str(exc)) from exc
        finally:
            db.close()
