import secrets

from fastapi import Header, HTTPException

from portal.config import settings
from portal.database import SessionLocal
from portal.services.change_feed import change_feed
from portal.services.content_store import ContentStore
from portal.services.document_store import DocumentStore
from portal.services.identity_service import IdentityBridge


def get_store() -> DocumentStore:
    return DocumentStore(SessionLocal, feed=change_feed)


def get_identity_bridge() -> IdentityBridge:
    return IdentityBridge(SessionLocal)


def get_content_store() -> ContentStore:
    return ContentStore(
        settings.storage_path,
        f"{settings.base_url}{settings.api_prefix}/files",
    )


async def require_admin(x_admin_token: str | None = Header(None)):
    if settings.admin_token is None:
        return None
    if not x_admin_token or not secrets.compare_digest(x_admin_token, settings.admin_token):
        raise HTTPException(status_code=401, detail="Invalid or missing admin token")
    return x_admin_token
