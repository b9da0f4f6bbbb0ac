"""HTTP routes package."""

from explorer.routes.browse_routes import router as browse_router

__all__ = ["browse_router"]
