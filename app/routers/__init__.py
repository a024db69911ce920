"""
API route handlers for the Realty CMS.
Every router here is mounted under the API version prefix.
"""

from . import catalog
from .auth import router as auth_router
from .users import router as users_router
from .agents import router as agents_router
from .properties import router as properties_router
from .images import router as images_router
from .inquiries import router as inquiries_router
from .tours import router as tours_router
from .blog import router as blog_router
from .comments import router as comments_router
from .media import router as media_router
from .messages import router as messages_router
from .reviews import router as reviews_router
from .teams import router as teams_router
from .seo import router as seo_router
from .dashboard import router as dashboard_router
from .monitoring import router as monitoring_router

api_routers = [
    auth_router,
    users_router,
    catalog.admin_router,
    catalog.public_router,
    agents_router,
    properties_router,
    images_router,
    inquiries_router,
    tours_router,
    blog_router,
    comments_router,
    media_router,
    messages_router,
    reviews_router,
    teams_router,
    seo_router,
    dashboard_router,
]

__all__ = ["api_routers", "monitoring_router"]
