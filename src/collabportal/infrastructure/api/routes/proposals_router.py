"""Proposal API routes.

``admin_router`` holds the authoring endpoints; ``router`` is what a
signed-in user sees: the proposals visible to them and the accept and
decline actions.
"""

from dataclasses import asdict

from fastapi import APIRouter, File, UploadFile, status

from collabportal.core.logging import get_logger
from collabportal.infrastructure.api.dependencies import (
    AdminUser,
    AuthenticatedUser,
    ProposalServiceDep,
    ResponseServiceDep,
    StorageDep,
)
from collabportal.infrastructure.api.schemas import (
    AcceptRequest,
    DeclineRequest,
    ProposalRequest,
    ProposalResponse,
    ResponseDetail,
    SendEmailRequest,
)

logger = get_logger(__name__)

admin_router = APIRouter()
router = APIRouter()


@admin_router.get("/proposals", response_model=list[ProposalResponse])
async def list_proposals(current_user: AdminUser, service: ProposalServiceDep) -> list[ProposalResponse]:
    """List all proposals, newest first."""
    return [ProposalResponse.from_model(p) for p in await service.list_all()]


@admin_router.post(
    "/proposals",
    response_model=ProposalResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_proposal(
    body: ProposalRequest, current_user: AdminUser, service: ProposalServiceDep
) -> ProposalResponse:
    """Create a proposal and notify its audience."""
    proposal = await service.create(body.to_draft(), current_user.user_id)
    return ProposalResponse.from_model(proposal, await service.audience(proposal.id))


@admin_router.post("/proposals/logo")
async def upload_logo(
    current_user: AdminUser,
    service: ProposalServiceDep,
    storage: StorageDep,
    file: UploadFile = File(..., description="Company logo image"),
) -> dict:
    """Upload a company logo and return its public URL."""
    content = await file.read()
    url = await service.upload_logo(
        storage, file.filename or "", content, file.content_type or "application/octet-stream"
    )
    return {"url": url}


@admin_router.get("/proposals/{proposal_id}", response_model=ProposalResponse)
async def get_proposal(
    proposal_id: str, current_user: AdminUser, service: ProposalServiceDep
) -> ProposalResponse:
    """Get a proposal with its audience."""
    proposal = await service.get(proposal_id)
    return ProposalResponse.from_model(proposal, await service.audience(proposal.id))


@admin_router.put("/proposals/{proposal_id}", response_model=ProposalResponse)
async def update_proposal(
    proposal_id: str,
    body: ProposalRequest,
    current_user: AdminUser,
    service: ProposalServiceDep,
) -> ProposalResponse:
    """Edit a proposal and replace its audience."""
    proposal = await service.update(proposal_id, body.to_draft())
    return ProposalResponse.from_model(proposal, await service.audience(proposal.id))


@admin_router.delete("/proposals/{proposal_id}")
async def delete_proposal(
    proposal_id: str, current_user: AdminUser, service: ProposalServiceDep
) -> dict:
    """Delete a proposal with everything hanging off it."""
    await service.delete(proposal_id)
    logger.info("Proposal deleted by admin", admin_id=current_user.user_id, proposal_id=proposal_id)
    return {"success": True, "message": "Proposal deleted successfully"}


@admin_router.post("/proposals/{proposal_id}/send-email")
async def send_proposal_email(
    proposal_id: str,
    body: SendEmailRequest,
    current_user: AdminUser,
    service: ProposalServiceDep,
) -> dict:
    """Send the announcement email to the audience, or to chosen users."""
    proposal = await service.get(proposal_id)
    results = await service.send_available_emails(proposal, body.user_ids)
    sent = sum(1 for r in results if r.success)
    return {
        "success": True,
        "message": f"Sent {sent} of {len(results)} emails",
        "results": [asdict(r) for r in results],
    }


@router.get("", response_model=list[ProposalResponse])
async def list_my_proposals(
    current_user: AuthenticatedUser, service: ProposalServiceDep
) -> list[ProposalResponse]:
    """List the proposals visible to the current user."""
    return [ProposalResponse.from_model(p) for p in await service.list_for_user(current_user.user_id)]


@router.get("/{proposal_id}", response_model=ProposalResponse)
async def get_my_proposal(
    proposal_id: str, current_user: AuthenticatedUser, service: ProposalServiceDep
) -> ProposalResponse:
    """Get a proposal visible to the current user."""
    return ProposalResponse.from_model(await service.get_for_user(proposal_id, current_user.user_id))


@router.post(
    "/{proposal_id}/accept",
    response_model=ResponseDetail,
    status_code=status.HTTP_201_CREATED,
)
async def accept_proposal(
    proposal_id: str,
    body: AcceptRequest,
    current_user: AuthenticatedUser,
    service: ResponseServiceDep,
) -> ResponseDetail:
    """Accept a proposal with a quote, publish date and platforms."""
    response = await service.accept(
        proposal_id,
        current_user.user_id,
        quote=body.quote,
        proposed_publish_date=body.proposed_publish_date,
        platforms=body.platforms,
        payment_method=body.payment_method,
        message=body.message,
        disclaimer_accepted=body.disclaimer_accepted,
    )
    return ResponseDetail.model_validate(response)


@router.post(
    "/{proposal_id}/decline",
    response_model=ResponseDetail,
    status_code=status.HTTP_201_CREATED,
)
async def decline_proposal(
    proposal_id: str,
    body: DeclineRequest,
    current_user: AuthenticatedUser,
    service: ResponseServiceDep,
) -> ResponseDetail:
    """Decline a proposal with a reason."""
    response = await service.decline(proposal_id, current_user.user_id, body.reason or "")
    return ResponseDetail.model_validate(response)
