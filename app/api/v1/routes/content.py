import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.middleware import get_current_user
from app.models.content import PostStatus
from app.models.user import User
from app.services.content_service import ContentPostResponse, ContentService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_content_service() -> ContentService:
    """Dependency to get content service instance"""
    return ContentService()


class CreatePostRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    platforms: list[str] = Field(min_length=1)
    scheduled_at: Optional[datetime] = None
    template_id: Optional[int] = None


class UpdatePostRequest(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    platforms: Optional[list[str]] = None
    scheduled_at: Optional[datetime] = None
    status: Optional[PostStatus] = None


@router.get("", response_model=list[ContentPostResponse])
async def list_posts(
    month: Optional[datetime] = Query(default=None, description="Any instant within the calendar month to show"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    content_service: ContentService = Depends(get_content_service)
):
    """List the current user's posts for the calendar"""
    try:
        return content_service.list_posts(db, current_user, month)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"list_posts: Failure - {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("", response_model=ContentPostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: CreatePostRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    content_service: ContentService = Depends(get_content_service)
):
    """Create a draft post"""
    try:
        return content_service.create_post(
            db,
            current_user,
            title=request.title,
            content=request.content,
            platforms=request.platforms,
            scheduled_at=request.scheduled_at,
            template_id=request.template_id
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"create_post: Failure - {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.patch("/{post_id}", response_model=ContentPostResponse)
async def update_post(
    post_id: int,
    request: UpdatePostRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    content_service: ContentService = Depends(get_content_service)
):
    """Update fields of one of the current user's posts"""
    try:
        changes = request.model_dump(exclude_unset=True)
        return content_service.update_post(db, current_user, post_id, changes)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"update_post: Failure - {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    content_service: ContentService = Depends(get_content_service)
):
    """Delete one of the current user's posts"""
    try:
        content_service.delete_post(db, current_user, post_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"delete_post: Failure - {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
