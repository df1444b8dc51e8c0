"""Comment endpoints. Posting a comment reclassifies its company."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from datadesk.core.deps import (
    get_current_session,
    get_db,
    require_capability,
    require_csrf_header,
)
from datadesk.core.permissions import Action
from datadesk.schemas.auth import UserSession
from datadesk.schemas.comment import CommentCreate, CommentRead
from datadesk.services import categorization_service

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.get("/today", response_model=list[CommentRead])
def list_todays_comments(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """The current user's comments dated today (UTC)."""
    return categorization_service.list_todays_comments(db, session.user_id)


@router.get("/company/{company_id}", response_model=list[CommentRead])
def list_company_comments(
    company_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return categorization_service.list_comments_for_company(db, company_id)


@router.post(
    "",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_csrf_header)],
)
def create_comment(
    data: CommentCreate,
    session: UserSession = Depends(require_capability(Action.COMMENT_CREATE)),
    db: Session = Depends(get_db),
):
    """Add a comment; the company moves to the comment's category."""
    return categorization_service.add_comment(
        db,
        company_id=data.company_id,
        user_id=session.user_id,
        content=data.content,
        category=data.category,
        comment_date=data.comment_date,
    )
