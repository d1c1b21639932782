import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator
from sqlalchemy import desc
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationFailedError
from app.core.gateway import PersistenceGateway
from app.models.content import ContentPost, ContentTemplate, PostStatus
from app.models.user import User

logger = logging.getLogger(__name__)


def join_platforms(platforms: list[str]) -> str:
    """Store platforms as a comma-separated list"""
    cleaned = [p.strip().lower() for p in platforms if p and p.strip()]
    if not cleaned:
        raise ValidationFailedError("At least one platform is required")
    return ",".join(dict.fromkeys(cleaned))


def split_platforms(platforms: str) -> list[str]:
    return [p for p in (platforms or "").split(",") if p]


def month_bounds(month: datetime) -> tuple[datetime, datetime]:
    """First instant of the month containing ``month`` and of the next month"""
    start = datetime(month.year, month.month, 1)
    if month.month == 12:
        end = datetime(month.year + 1, 1, 1)
    else:
        end = datetime(month.year, month.month + 1, 1)
    return start, end


class ContentPostResponse(BaseModel):
    id: int
    title: str
    content: str
    platforms: list[str]
    scheduled_at: Optional[datetime] = None
    status: PostStatus
    template_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('platforms', mode='before')
    @classmethod
    def parse_platforms(cls, v):
        if isinstance(v, str):
            return split_platforms(v)
        return v

    class Config:
        from_attributes = True


class ContentTemplateResponse(BaseModel):
    id: int
    name: str
    content: str
    category: Optional[str] = None
    platforms: list[str]
    created_at: Optional[datetime] = None

    @field_validator('platforms', mode='before')
    @classmethod
    def parse_platforms(cls, v):
        if isinstance(v, str):
            return split_platforms(v)
        return v

    class Config:
        from_attributes = True


class ContentService:
    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def get_post(self, db: Session, post_id: int, user: User) -> ContentPost:
        """Get a post by ID, ensuring user owns it"""
        post = PersistenceGateway(db).find_by_id(ContentPost, post_id)
        if post is None or post.user_id != user.id:
            raise NotFoundError(f"Post not found: {post_id}")
        return post

    def list_posts(self, db: Session, user: User, month: Optional[datetime] = None) -> list[ContentPost]:
        """List the user's posts, latest scheduled first, optionally for one calendar month"""
        self.logger.info(f"list_posts: Entry - user: {user.id}, month: {month}")

        try:
            if month is None:
                posts = PersistenceGateway(db).list_by_user(ContentPost, user.id, order_by="scheduled_at")
            else:
                start, end = month_bounds(month)
                posts = db.query(ContentPost).filter(
                    ContentPost.user_id == user.id,
                    ContentPost.scheduled_at >= start,
                    ContentPost.scheduled_at < end
                ).order_by(desc(ContentPost.scheduled_at), desc(ContentPost.id)).all()

            self.logger.info(f"list_posts: Success - user: {user.id}, count: {len(posts)}")
            return posts
        except Exception as e:
            self.logger.error(f"list_posts: Failure - {e}")
            raise

    def create_post(
        self,
        db: Session,
        user: User,
        title: str,
        content: str,
        platforms: list[str],
        scheduled_at: Optional[datetime] = None,
        template_id: Optional[int] = None
    ) -> ContentPost:
        self.logger.info(f"create_post: Entry - user: {user.id}")

        try:
            if not title.strip() or not content.strip():
                raise ValidationFailedError("Title and content are required")

            gateway = PersistenceGateway(db)
            if template_id is not None:
                template = gateway.find_by_id(ContentTemplate, template_id)
                if template is None or template.user_id != user.id:
                    raise NotFoundError(f"Template not found: {template_id}")

            post = gateway.insert(
                ContentPost,
                user_id=user.id,
                title=title.strip(),
                content=content,
                platforms=join_platforms(platforms),
                scheduled_at=scheduled_at,
                template_id=template_id,
                status=PostStatus.DRAFT
            )
            db.commit()
            db.refresh(post)

            self.logger.info(f"create_post: Success - post: {post.id}")
            return post
        except Exception as e:
            db.rollback()
            self.logger.error(f"create_post: Failure - {e}")
            raise

    def update_post(self, db: Session, user: User, post_id: int, changes: dict) -> ContentPost:
        """Apply a partial update to one of the user's posts"""
        self.logger.info(f"update_post: Entry - user: {user.id}, post: {post_id}, fields: {sorted(changes)}")

        try:
            post = self.get_post(db, post_id, user)

            patch = dict(changes)
            for field in ('title', 'content', 'platforms', 'status'):
                if field in patch and patch[field] is None:
                    raise ValidationFailedError(f"{field} must not be null")
            if 'title' in patch and not (patch['title'] or '').strip():
                raise ValidationFailedError("Title must not be empty")
            if 'content' in patch and not (patch['content'] or '').strip():
                raise ValidationFailedError("Content must not be empty")
            if 'platforms' in patch:
                patch['platforms'] = join_platforms(patch['platforms'] or [])

            if patch:
                patch['updated_at'] = datetime.utcnow()
                PersistenceGateway(db).update(ContentPost, post_id, patch)
            db.commit()
            db.refresh(post)

            self.logger.info(f"update_post: Success - post: {post_id}")
            return post
        except Exception as e:
            db.rollback()
            self.logger.error(f"update_post: Failure - {e}")
            raise

    def delete_post(self, db: Session, user: User, post_id: int) -> None:
        self.logger.info(f"delete_post: Entry - user: {user.id}, post: {post_id}")

        try:
            post = self.get_post(db, post_id, user)
            db.delete(post)
            db.commit()
            self.logger.info(f"delete_post: Success - post: {post_id}")
        except Exception as e:
            db.rollback()
            self.logger.error(f"delete_post: Failure - {e}")
            raise


class TemplateService:
    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def list_templates(self, db: Session, user: User) -> list[ContentTemplate]:
        self.logger.info(f"list_templates: Entry - user: {user.id}")
        templates = PersistenceGateway(db).list_by_user(ContentTemplate, user.id)
        self.logger.info(f"list_templates: Success - user: {user.id}, count: {len(templates)}")
        return templates

    def create_template(
        self,
        db: Session,
        user: User,
        name: str,
        content: str,
        platforms: list[str],
        category: Optional[str] = None
    ) -> ContentTemplate:
        self.logger.info(f"create_template: Entry - user: {user.id}")

        try:
            if not name.strip() or not content.strip():
                raise ValidationFailedError("Name and content are required")

            template = PersistenceGateway(db).insert(
                ContentTemplate,
                user_id=user.id,
                name=name.strip(),
                content=content,
                category=category,
                platforms=join_platforms(platforms)
            )
            db.commit()
            db.refresh(template)

            self.logger.info(f"create_template: Success - template: {template.id}")
            return template
        except Exception as e:
            db.rollback()
            self.logger.error(f"create_template: Failure - {e}")
            raise

    def delete_template(self, db: Session, user: User, template_id: int) -> None:
        self.logger.info(f"delete_template: Entry - user: {user.id}, template: {template_id}")

        try:
            template = PersistenceGateway(db).find_by_id(ContentTemplate, template_id)
            if template is None or template.user_id != user.id:
                raise NotFoundError(f"Template not found: {template_id}")

            db.query(ContentPost).filter(
                ContentPost.template_id == template_id
            ).update({'template_id': None}, synchronize_session="fetch")
            db.delete(template)
            db.commit()
            self.logger.info(f"delete_template: Success - template: {template_id}")
        except Exception as e:
            db.rollback()
            self.logger.error(f"delete_template: Failure - {e}")
            raise
