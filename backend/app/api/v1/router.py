from fastapi import APIRouter
from app.api.v1.endpoints import auth, users, templates, layouts, projects, favorites, uploads, ai, health

api_router = APIRouter()

# Deep health check endpoints (/health/live, /health/ready)
api_router.include_router(health.router)


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check endpoint for load balancer"""
    return {"status": "healthy", "service": "pagecraft-backend"}


api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(templates.router, prefix="/templates", tags=["Templates"])
api_router.include_router(layouts.router, prefix="/layouts", tags=["Layouts"])
api_router.include_router(projects.router, prefix="/projects", tags=["Projects"])
api_router.include_router(favorites.router, prefix="/favorites", tags=["Favorites"])
api_router.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])
api_router.include_router(ai.router, prefix="/ai", tags=["AI Assistant"])
