"""Password reset API routes. All endpoints are public."""

from fastapi import APIRouter

from collabportal.domain.services.password_reset_service import REQUEST_ACCEPTED_MESSAGE
from collabportal.infrastructure.api.dependencies import PasswordResetServiceDep
from collabportal.infrastructure.api.schemas import (
    PasswordResetRequest,
    ResetPasswordRequest,
    TokenCheckRequest,
    UserResponse,
)

router = APIRouter()


@router.post("/request-password-reset")
async def request_password_reset(body: PasswordResetRequest, service: PasswordResetServiceDep) -> dict:
    """Email a reset link.

    Answers the same way whether or not the email has an account.
    """
    await service.request_reset(body.email or "")
    return {"success": True, "message": REQUEST_ACCEPTED_MESSAGE}


@router.post("/validate-password-reset")
async def validate_password_reset(body: TokenCheckRequest, service: PasswordResetServiceDep) -> dict:
    """Check a reset link before showing the new-password form."""
    if not body.email or not body.token:
        return {"valid": False, "message": "Email and token are required"}
    validation = await service.validate(body.email, body.token)
    result = {"valid": validation.valid, "message": validation.message}
    if validation.valid:
        result["token"] = {
            "email": validation.token.email,
            "expires_at": validation.token.expires_at.isoformat(),
        }
    return result


@router.post("/reset-password-with-token")
async def reset_password_with_token(body: ResetPasswordRequest, service: PasswordResetServiceDep) -> dict:
    """Set a new password with a reset token."""
    user = await service.reset(body.email or "", body.token or "", body.new_password or "")
    return {
        "success": True,
        "message": "Password has been reset successfully",
        "user": UserResponse.model_validate(user).model_dump(mode="json"),
    }
