from app.models.user import User, UserRole
from app.models.subscription import Subscription, SubscriptionStatus, Plan
from app.models.payment_request import PaymentRequest, PaymentStatus
from app.models.content import ContentPost, ContentTemplate, PostStatus
from app.models.team import Team, TeamMember, TeamRole

__all__ = ["User", "UserRole", "Subscription", "SubscriptionStatus", "Plan", "PaymentRequest", "PaymentStatus", "ContentPost", "ContentTemplate", "PostStatus", "Team", "TeamMember", "TeamRole"]
