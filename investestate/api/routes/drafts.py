"""Draft Routes: save and resume the investment wizard per project.

Invariants:
    - Drafts are scoped to the session user; one draft per (user, project)
    - GET always answers 200 with a status; the draft is null when discarded or absent
"""

from fastapi import APIRouter, Depends, Response, status

from investestate.api.deps import get_current_user, get_draft_service
from investestate.core.records import UserRecord
from investestate.schemas.draft import DraftBody, DraftResponse, DraftSave
from investestate.services.drafts import DraftService

router = APIRouter(prefix="/api/drafts", tags=["drafts"])


@router.get("/{project_id}", response_model=DraftResponse)
async def load_draft(
    project_id: str,
    user: UserRecord = Depends(get_current_user),
    drafts: DraftService = Depends(get_draft_service),
):
    """Load and reconcile the draft against the live catalog."""
    result = await drafts.load(user.id, project_id)
    body = None
    if result.draft is not None and not result.status.discarded:
        body = DraftBody.model_validate(result.draft)
    return DraftResponse(status=result.status, draft=body)


@router.put("/{project_id}", response_model=DraftBody)
async def save_draft(
    project_id: str,
    body: DraftSave,
    user: UserRecord = Depends(get_current_user),
    drafts: DraftService = Depends(get_draft_service),
):
    draft = await drafts.save(
        user.id, project_id, body.model_id, body.slots, body.quantity, body.step,
    )
    return DraftBody.model_validate(draft)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_draft(
    project_id: str,
    user: UserRecord = Depends(get_current_user),
    drafts: DraftService = Depends(get_draft_service),
):
    await drafts.discard(user.id, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
