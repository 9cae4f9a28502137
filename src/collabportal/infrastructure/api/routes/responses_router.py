"""Response API routes.

Users read and revise their own responses; admins review them and mark
campaigns completed.
"""

from fastapi import APIRouter, Query

from collabportal.infrastructure.api.dependencies import (
    AdminUser,
    AuthenticatedUser,
    ResponseServiceDep,
)
from collabportal.infrastructure.api.schemas import (
    ResponseDetail,
    ResponseViewResponse,
    ResubmitRequest,
    ReviewRequest,
)

router = APIRouter()
admin_router = APIRouter()


@router.get("", response_model=list[ResponseViewResponse])
async def list_my_responses(
    current_user: AuthenticatedUser, service: ResponseServiceDep
) -> list[ResponseViewResponse]:
    """List the current user's responses with their review state."""
    views = await service.list_for_user(current_user.user_id)
    return [ResponseViewResponse.model_validate(v) for v in views]


@router.get("/{response_id}", response_model=ResponseViewResponse)
async def get_my_response(
    response_id: str, current_user: AuthenticatedUser, service: ResponseServiceDep
) -> ResponseViewResponse:
    """Get one of the current user's responses."""
    return ResponseViewResponse.model_validate(
        await service.get_view(response_id, user_id=current_user.user_id)
    )


@router.put("/{response_id}", response_model=ResponseDetail)
async def resubmit_response(
    response_id: str,
    body: ResubmitRequest,
    current_user: AuthenticatedUser,
    service: ResponseServiceDep,
) -> ResponseDetail:
    """Change a response while the admin review allows it."""
    response = await service.resubmit(
        response_id,
        current_user.user_id,
        accept=body.accept,
        quote=body.quote,
        proposed_publish_date=body.proposed_publish_date,
        platforms=body.platforms,
        payment_method=body.payment_method,
        message=body.message,
        reason=body.reason,
        disclaimer_accepted=body.disclaimer_accepted,
    )
    return ResponseDetail.model_validate(response)


@admin_router.get("", response_model=list[ResponseViewResponse])
async def list_responses(
    current_user: AdminUser,
    service: ResponseServiceDep,
    proposal_id: str | None = Query(None, description="Only responses to this proposal"),
) -> list[ResponseViewResponse]:
    """List all responses."""
    views = await service.list_for_admin(proposal_id)
    return [ResponseViewResponse.model_validate(v) for v in views]


@admin_router.get("/{response_id}", response_model=ResponseViewResponse)
async def get_response(
    response_id: str, current_user: AdminUser, service: ResponseServiceDep
) -> ResponseViewResponse:
    """Get any response."""
    return ResponseViewResponse.model_validate(await service.get_view(response_id))


@admin_router.post("/{response_id}/review", response_model=ResponseViewResponse)
async def review_response(
    response_id: str,
    body: ReviewRequest,
    current_user: AdminUser,
    service: ResponseServiceDep,
) -> ResponseViewResponse:
    """Approve or reject a response, optionally asking the user for changes."""
    view = await service.review(
        response_id,
        current_user.user_id,
        body.status,
        message=body.message,
        request_update=body.request_update,
    )
    return ResponseViewResponse.model_validate(view)


@admin_router.post("/{response_id}/complete", response_model=ResponseViewResponse)
async def complete_response(
    response_id: str, current_user: AdminUser, service: ResponseServiceDep
) -> ResponseViewResponse:
    """Mark the campaign behind a response completed."""
    return ResponseViewResponse.model_validate(await service.complete(response_id))
