"""Invitation API routes.

Admins issue, list and delete invitations. The invitee-facing endpoints
(verifying a link, completing registration, tag-scoped signup) are public:
the invitation token is the credential.
"""

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse

from collabportal.core.logging import get_logger
from collabportal.domain.entities import InvitationRejection
from collabportal.infrastructure.api.dependencies import AdminUser, InvitationServiceDep
from collabportal.infrastructure.api.schemas import (
    BulkInviteRequest,
    CreateUserRequest,
    DeleteInvitationRequest,
    InvitationResponse,
    InviteUserRequest,
    SignupWithInviteRequest,
    TokenCheckRequest,
    UserResponse,
)

logger = get_logger(__name__)

router = APIRouter()
public_router = APIRouter()


def _origin(request: Request) -> str | None:
    return request.headers.get("origin")


@router.post("/invite-user")
async def invite_user(
    body: InviteUserRequest,
    request: Request,
    current_user: AdminUser,
    service: InvitationServiceDep,
) -> dict:
    """Invite one user, or refresh the pending invitation for that email."""
    result = await service.invite(
        body.email or "",
        handle_name=body.handle_name,
        tag_id=body.tag_id,
        origin=_origin(request),
    )
    logger.info("Invitation issued by admin", admin_id=current_user.user_id, email=result.email)
    return {
        "success": True,
        "message": "Invitation sent successfully"
        if result.email_sent
        else "Invitation created but the email could not be sent",
        "data": {
            "invitation_id": result.invitation_id,
            "registration_url": result.registration_url,
            "email": result.email,
            "handle_name": result.handle_name,
            "token": result.token,
            "email_sent": result.email_sent,
        },
    }


@router.post("/bulk-invite")
async def bulk_invite(
    body: BulkInviteRequest,
    request: Request,
    current_user: AdminUser,
    service: InvitationServiceDep,
) -> dict:
    """Invite many users under one tag. One failure never aborts the batch."""
    result = await service.bulk_invite(body.emails, body.tag_id, origin=_origin(request))
    return {
        "success": True,
        "message": result.message,
        "results": result.results,
        "summary": {
            "total": len(result.results),
            "successful": result.successful,
            "failed": result.failed,
        },
    }


@router.post("/create-user")
async def create_user(body: CreateUserRequest, service: InvitationServiceDep) -> dict:
    """Complete registration from an invitation link."""
    user = await service.redeem(
        email=body.email or "",
        password=body.password or "",
        full_name=body.full_name,
        token=body.token or "",
        phone_number=body.phone_number,
    )
    return {
        "success": True,
        "user": {
            "id": user.id,
            "email": user.email,
            "full_name": user.full_name,
            "phone_number": user.phone_number,
        },
    }


@router.get("/verify-invitation", response_model=None)
async def verify_invitation(
    service: InvitationServiceDep,
    email: str = Query(""),
    token: str = Query(""),
) -> dict | JSONResponse:
    """Check an invitation link before showing the registration form."""
    validation = await service.validate(email, token)
    if not validation.valid:
        code = (
            status.HTTP_404_NOT_FOUND
            if validation.reason == InvitationRejection.NOT_FOUND
            else status.HTTP_400_BAD_REQUEST
        )
        return JSONResponse(
            status_code=code,
            content={"valid": False, "message": validation.message},
        )
    return {
        "valid": True,
        "message": validation.message,
        "invitation": InvitationResponse.model_validate(validation.invitation).model_dump(mode="json"),
    }


@router.delete("/delete-invitation")
async def delete_invitation(
    body: DeleteInvitationRequest,
    current_user: AdminUser,
    service: InvitationServiceDep,
) -> dict:
    """Hard-delete an invitation."""
    await service.delete(body.invitation_id)
    logger.info(
        "Invitation deleted by admin",
        admin_id=current_user.user_id,
        invitation_id=body.invitation_id,
    )
    return {"success": True, "message": "Invitation deleted successfully"}


@router.get("/pending-invitations")
async def pending_invitations(current_user: AdminUser, service: InvitationServiceDep) -> dict:
    """List pending invitations, newest first."""
    invitations = await service.list_pending()
    return {
        "success": True,
        "invitations": [
            InvitationResponse.model_validate(i).model_dump(mode="json") for i in invitations
        ],
    }


@public_router.post("/validate-invite")
async def validate_invite(body: TokenCheckRequest, service: InvitationServiceDep) -> dict:
    """Validate a signup link. Always answers 200 with ``valid`` set."""
    if not body.email or not body.token:
        return {"valid": False, "message": "Email and token are required"}
    validation = await service.validate(body.email, body.token)
    result = {"valid": validation.valid, "message": validation.message}
    if validation.valid:
        result["invitation"] = InvitationResponse.model_validate(validation.invitation).model_dump(
            mode="json"
        )
    return result


@public_router.post("/signup-with-invite")
async def signup_with_invite(body: SignupWithInviteRequest, service: InvitationServiceDep) -> dict:
    """Register through a tag-scoped invitation link."""
    result = await service.signup_with_invite(
        email=body.email or "",
        password=body.password or "",
        full_name=body.full_name or "",
        token=body.invite_token or "",
        tag_id=body.tag_id or "",
    )
    return {
        "success": True,
        "message": "Account created successfully",
        "user": {
            "id": result.user.id,
            "email": result.user.email,
            "full_name": result.user.full_name,
        },
        "userData": UserResponse.model_validate(result.profile).model_dump(mode="json")
        if result.profile is not None
        else None,
        "tag": {"id": result.tag.id, "name": result.tag.name, "color": result.tag.color},
    }
