"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
import logging

from app.config import settings
from app.database import check_database_connection, close_db_connection
from app.routers import api_routers, monitoring_router
from app.services.error_handler import ErrorHandlerService
from app.middleware.validation import ValidationMiddleware
from app.middleware.performance import PerformanceMonitoringMiddleware, performance_metrics

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    if not await check_database_connection():
        logger.error("Failed to connect to database on startup")

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Real estate listings with a blog and content management backend.

    ## Features

    * **Listings**: Properties with types, locations, amenities, images and agents
    * **Search**: Filter available properties by type, location, price and rooms
    * **Leads**: Inquiries, tour requests, favorites and messages to agents
    * **Blog**: Posts, categories, tags, media library and moderated comments
    * **Reviews**: Ratings on properties and posts
    * **Teams**: Owned teams with members and email invitations
    * **Access control**: Roles and permissions checked on every admin endpoint

    ## Authentication

    Use `/api/v1/auth/login` to obtain a JWT access token and send it as
    `Authorization: Bearer <token>`.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Registration, login, tokens and profile"},
        {"name": "Users and Roles", "description": "User accounts, roles and permissions"},
        {"name": "Properties", "description": "Listing search and management"},
        {"name": "Property Images", "description": "Listing image uploads"},
        {"name": "Favorites", "description": "Saved listings"},
        {"name": "Property Types", "description": "Property type catalog"},
        {"name": "Locations", "description": "Location catalog"},
        {"name": "Amenities", "description": "Amenity catalog"},
        {"name": "Agents", "description": "Agent profiles"},
        {"name": "Inquiries", "description": "Property inquiries and the contact form"},
        {"name": "Tours", "description": "Property tour requests"},
        {"name": "Messages", "description": "Messages to agents, inbox and replies"},
        {"name": "Blog", "description": "Posts, categories and tags"},
        {"name": "Comments", "description": "Post comments and moderation"},
        {"name": "Media", "description": "Media library"},
        {"name": "Reviews", "description": "Ratings on properties and posts"},
        {"name": "Teams", "description": "Teams, members and invitations"},
        {"name": "SEO", "description": "SEO settings"},
        {"name": "Dashboard", "description": "Admin dashboard and home page content"},
        {"name": "Health", "description": "Health checks and performance metrics"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    PerformanceMonitoringMiddleware,
    metrics=performance_metrics,
    enable_detailed_logging=settings.debug,
)

app.add_middleware(
    ValidationMiddleware,
    max_request_size=settings.max_file_size * 2,
    enable_request_logging=not settings.is_testing,
    enable_rate_limiting=settings.is_production,
)

# Added last so it wraps the others and decorates every response
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Processing-Time", "X-CPU-Time"],
)

ErrorHandlerService.register(app)

for router in api_routers:
    app.include_router(router, prefix=settings.api_v1_prefix)
app.include_router(monitoring_router)

app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
