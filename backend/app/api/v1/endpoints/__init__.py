# API endpoints
from . import auth, users, templates, layouts, projects, favorites, uploads, ai, health

__all__ = ["auth", "users", "templates", "layouts", "projects", "favorites", "uploads", "ai", "health"]
