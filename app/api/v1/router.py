from fastapi import APIRouter
from app.api.v1.routes import auth, payments, subscriptions, content, templates

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(subscriptions.router, prefix="/subscriptions", tags=["subscriptions"])
api_router.include_router(content.router, prefix="/content", tags=["content"])
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
