"""FastAPI dependency injection: wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from walkin.application.interfaces import AttachmentStorage, IdentityExtractor
from walkin.application.services import WalkinRecordService
from walkin.config import get_settings
from walkin.infrastructure.auth.jwt_identity_extractor import JwtIdentityExtractor
from walkin.infrastructure.database.repositories import SQLAlchemyWalkinRecordRepository
from walkin.infrastructure.database.session import get_db_session
from walkin.infrastructure.storage.local_attachment_storage import LocalAttachmentStorage


@lru_cache
def get_identity_extractor() -> IdentityExtractor:
    """Process-wide extractor; stateless apart from its configuration."""
    settings = get_settings()
    return JwtIdentityExtractor(
        secret=settings.jwt_secret,
        algorithms=settings.jwt_algorithms,
        verify_signature=settings.token_verify_signature,
    )


def get_attachment_storage() -> AttachmentStorage:
    return LocalAttachmentStorage(media_root=get_settings().media_root)


async def get_walkin_record_service(
    session: AsyncSession = Depends(get_db_session),
    identity_extractor: IdentityExtractor = Depends(get_identity_extractor),
    attachment_storage: AttachmentStorage = Depends(get_attachment_storage),
) -> AsyncGenerator[WalkinRecordService, None]:
    """Provides a WalkinRecordService with its repository, extractor and storage wired up."""
    settings = get_settings()
    repository = SQLAlchemyWalkinRecordRepository(session)
    yield WalkinRecordService(
        repository,
        identity_extractor,
        attachment_storage,
        update_style=settings.record_update_style,
        default_page_size=settings.default_page_size,
    )
