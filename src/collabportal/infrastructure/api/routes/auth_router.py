"""Authentication API routes."""

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from collabportal.core.logging import get_logger
from collabportal.domain.services.invitation_service import normalize_email
from collabportal.infrastructure.api.dependencies import (
    AuthenticatedUser,
    Session,
    StorageDep,
    UserServiceDep,
)
from collabportal.infrastructure.api.schemas import (
    AuthResponse,
    LoginRequest,
    UpdateProfileRequest,
    UserResponse,
)
from collabportal.infrastructure.auth import LocalAuthProvider, jwt_service
from collabportal.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid credentials"}},
)
async def login(request: LoginRequest, session: Session) -> AuthResponse:
    """Exchange email and password for an access token.

    The token carries the role stored on the user's profile.
    """
    email = normalize_email(request.email)
    auth_user = await LocalAuthProvider(session).authenticate(email, request.password)
    if auth_user is None:
        logger.info("Login failed: invalid credentials", email=email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    user = await UserRepository(session).get_by_id(auth_user.id)
    if user is None:
        logger.warning("Login failed: no profile for account", user_id=auth_user.id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    await session.commit()

    token = jwt_service.create_access_token(user_id=user.id, email=user.email, role=user.role)
    logger.info("User logged in", user_id=user.id, role=user.role)
    return AuthResponse(
        access_token=token,
        expires_in=jwt_service.get_expires_in(),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: AuthenticatedUser, session: Session) -> UserResponse:
    """Return the profile of the authenticated user."""
    user = await UserRepository(session).get_by_id(current_user.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.model_validate(user)


@router.put("/me", response_model=UserResponse)
async def update_me(
    body: UpdateProfileRequest, current_user: AuthenticatedUser, service: UserServiceDep
) -> UserResponse:
    """Edit the signed-in user's profile and, optionally, their password."""
    if body.new_password is not None or body.current_password is not None:
        await service.change_password(
            current_user.user_id, body.current_password or "", body.new_password or ""
        )
    if body.full_name is not None or body.phone_number is not None:
        user = await service.update_profile(
            current_user.user_id, full_name=body.full_name, phone_number=body.phone_number
        )
    else:
        user = await service.get(current_user.user_id)
    return UserResponse.model_validate(user)


@router.post("/me/avatar", response_model=UserResponse)
async def upload_avatar(
    current_user: AuthenticatedUser,
    service: UserServiceDep,
    storage: StorageDep,
    file: UploadFile = File(..., description="Avatar image"),
) -> UserResponse:
    """Upload a new avatar for the signed-in user."""
    content = await file.read()
    user = await service.upload_avatar(
        storage,
        current_user.user_id,
        file.filename or "",
        content,
        file.content_type or "application/octet-stream",
    )
    return UserResponse.model_validate(user)
