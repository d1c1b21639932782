import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.middleware import get_current_user
from app.models.user import User
from app.services.content_service import ContentTemplateResponse, TemplateService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_template_service() -> TemplateService:
    """Dependency to get template service instance"""
    return TemplateService()


class CreateTemplateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    category: Optional[str] = Field(default=None, max_length=100)  # promotional, educational, engagement
    platforms: list[str] = Field(min_length=1)


@router.get("", response_model=list[ContentTemplateResponse])
async def list_templates(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    template_service: TemplateService = Depends(get_template_service)
):
    """List the current user's templates, newest first"""
    try:
        return template_service.list_templates(db, current_user)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"list_templates: Failure - {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("", response_model=ContentTemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    request: CreateTemplateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    template_service: TemplateService = Depends(get_template_service)
):
    """Save a reusable post template"""
    try:
        return template_service.create_template(
            db,
            current_user,
            name=request.name,
            content=request.content,
            platforms=request.platforms,
            category=request.category
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"create_template: Failure - {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    template_service: TemplateService = Depends(get_template_service)
):
    """Delete one of the current user's templates"""
    try:
        template_service.delete_template(db, current_user, template_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"delete_template: Failure - {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
