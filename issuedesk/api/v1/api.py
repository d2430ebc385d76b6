from fastapi import APIRouter
from issuedesk.api.v1.endpoints import (
    auth, health, users, user_admin,
    projects, issues, service_sheets, change_requests,
    meeting_summaries, documents, scopes, dashboard,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(user_admin.router, prefix="/user-admin", tags=["admin"])

# Resource endpoints
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(issues.router, prefix="/issues", tags=["issues"])
api_router.include_router(service_sheets.router, prefix="/service-sheets", tags=["service-sheets"])
api_router.include_router(change_requests.router, prefix="/change-requests", tags=["change-requests"])
api_router.include_router(meeting_summaries.router, prefix="/meeting-summaries", tags=["meeting-summaries"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(scopes.router, prefix="/scopes", tags=["scopes"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
