"""FastAPI dependencies for authentication and service wiring.

Provides bearer-token authentication, the admin guard and factories that
build the domain services on top of the request's database session.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from collabportal.core.config import get_settings
from collabportal.core.logging import get_logger
from collabportal.domain.entities import UserRole
from collabportal.domain.services import (
    ChatService,
    ContentNormalizer,
    InvitationService,
    NotificationService,
    PasswordResetService,
    ProposalService,
    ResponseService,
    TagService,
    UserService,
    VisibilityService,
)
from collabportal.infrastructure.auth import (
    InvalidTokenError,
    LocalAuthProvider,
    TokenExpiredError,
    jwt_service,
)
from collabportal.infrastructure.persistence.database import get_db_session
from collabportal.infrastructure.persistence.repositories import (
    ChatRepository,
    InvitationRepository,
    NotificationRepository,
    PasswordResetRepository,
    ProposalRepository,
    ResponseRepository,
    TagRepository,
    UserRepository,
    VisibilityRepository,
)
from collabportal.infrastructure.services.email_service import EmailService, get_email_service
from collabportal.infrastructure.storage import StorageProvider, get_storage_provider

logger = get_logger(__name__)

Session = Annotated[AsyncSession, Depends(get_db_session)]


@dataclass
class CurrentUser:
    """Represents the current authenticated user context.

    Extracted from a valid JWT access token.
    """

    user_id: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentUser:
    """Extract and validate the current user from the Authorization header.

    Args:
        authorization: The Authorization header value (e.g., "Bearer <token>").

    Returns:
        CurrentUser: The authenticated user's context.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired.
    """
    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise _unauthorized("Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise _unauthorized("Could not validate credentials")

    try:
        payload = jwt_service.validate_access_token(parts[1])
        return CurrentUser(
            user_id=payload["user_id"],
            email=payload["email"],
            role=payload["role"],
        )
    except TokenExpiredError:
        logger.info("Authentication failed: token expired")
        raise _unauthorized("Token has expired")
    except InvalidTokenError as e:
        logger.info("Authentication failed: invalid token", error=str(e))
        raise _unauthorized(f"Invalid token: {e}")
    except KeyError as e:
        logger.warning("Authentication failed: missing claim in token", missing_claim=str(e))
        raise _unauthorized(f"Missing claim: {e}")


# Type alias for dependency injection
AuthenticatedUser = Annotated[CurrentUser, Depends(get_current_user)]


async def require_admin(current_user: AuthenticatedUser) -> CurrentUser:
    """Ensure the current user is an admin.

    Raises:
        HTTPException: 403 if the user's role is not ``admin``.
    """
    if not current_user.is_admin:
        logger.info("Admin access denied", user_id=current_user.user_id, role=current_user.role)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


AdminUser = Annotated[CurrentUser, Depends(require_admin)]


def get_notification_service(session: Session) -> NotificationService:
    return NotificationService(session, NotificationRepository(session), UserRepository(session))


def get_visibility_service(session: Session) -> VisibilityService:
    return VisibilityService(
        VisibilityRepository(session), TagRepository(session), ProposalRepository(session)
    )


def get_chat_service(session: Session) -> ChatService:
    return ChatService(session, ChatRepository(session))


def get_tag_service(session: Session) -> TagService:
    return TagService(session, TagRepository(session), UserRepository(session))


def get_invitation_service(
    session: Session,
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> InvitationService:
    return InvitationService(
        session=session,
        invitation_repo=InvitationRepository(session),
        user_repo=UserRepository(session),
        tag_repo=TagRepository(session),
        auth_provider=LocalAuthProvider(session),
        email_service=email_service,
    )


def get_password_reset_service(
    session: Session,
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> PasswordResetService:
    return PasswordResetService(
        session=session,
        user_repo=UserRepository(session),
        reset_repo=PasswordResetRepository(session),
        auth_provider=LocalAuthProvider(session),
        email_service=email_service,
    )


def get_proposal_service(
    session: Session,
    email_service: Annotated[EmailService, Depends(get_email_service)],
    storage: Annotated[StorageProvider, Depends(get_storage_provider)],
) -> ProposalService:
    settings = get_settings()
    return ProposalService(
        session=session,
        proposal_repo=ProposalRepository(session),
        user_repo=UserRepository(session),
        visibility_service=get_visibility_service(session),
        normalizer=ContentNormalizer(storage, settings.rich_text_bucket, settings.max_image_size),
        notification_service=get_notification_service(session),
        email_service=email_service,
        settings=settings,
    )


def get_response_service(session: Session) -> ResponseService:
    return ResponseService(
        session=session,
        response_repo=ResponseRepository(session),
        proposal_repo=ProposalRepository(session),
        user_repo=UserRepository(session),
        visibility_service=get_visibility_service(session),
        chat_service=get_chat_service(session),
        notification_service=get_notification_service(session),
    )


def get_user_service(session: Session) -> UserService:
    return UserService(
        session=session,
        user_repo=UserRepository(session),
        auth_provider=LocalAuthProvider(session),
        settings=get_settings(),
    )


InvitationServiceDep = Annotated[InvitationService, Depends(get_invitation_service)]
PasswordResetServiceDep = Annotated[PasswordResetService, Depends(get_password_reset_service)]
ProposalServiceDep = Annotated[ProposalService, Depends(get_proposal_service)]
ResponseServiceDep = Annotated[ResponseService, Depends(get_response_service)]
TagServiceDep = Annotated[TagService, Depends(get_tag_service)]
ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
StorageDep = Annotated[StorageProvider, Depends(get_storage_provider)]
