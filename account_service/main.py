"""
Account Service - FastAPI Application
Login, signup and profile management backed by Supabase
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from contextlib import asynccontextmanager

from shared.utils.logger import setup_logging

from account_service import __version__
from account_service.config import get_settings
from account_service.routes import auth, pages, profile
from account_service.utils import supabase_client as clients
from account_service.utils.errors import AuthenticationError

logger = logging.getLogger(__name__)

# Paths that never touch the session
SESSION_EXEMPT_PREFIXES = ("/health", "/docs", "/redoc", "/openapi.json")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup; missing Supabase settings abort here
    settings = get_settings()
    setup_logging(
        config_path=settings.log_config_path,
        log_level=settings.log_level,
        log_format=settings.log_format,
        environment=settings.environment
    )
    logger.info("Account Service starting up...")
    settings.log_config()

    yield

    # Shutdown
    logger.info("Account Service shutting down...")
    clients.supabase_clients.reset()


# Create FastAPI application
app = FastAPI(
    title="Account Service",
    description="Login, signup and profile management backed by Supabase",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def refresh_session(request: Request, call_next):
    """
    Bind a cookie-backed Supabase client to the request

    Reading the user refreshes an expiring session; the verified user is
    reused by the request's dependencies and any cookies the auth client
    wrote are copied onto the response.
    """
    if request.url.path.startswith(SESSION_EXEMPT_PREFIXES):
        return await call_next(request)

    storage = clients.CookieSessionStorage(request.cookies)
    client = clients.create_server_client(storage)
    request.state.supabase_storage = storage
    request.state.supabase = client

    if storage.get_item(clients.DEFAULT_STORAGE_KEY):
        try:
            # Kept for the rest of this request only
            request.state.auth_user_response = client.auth.get_user()
        except Exception as e:
            logger.warning(f"Session refresh failed: {e}")

    response = await call_next(request)
    storage.apply(response)
    return response


# Global exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Custom HTTP exception handler"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "message": exc.detail,
            "status_code": exc.status_code
        }
    )


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request, exc):
    """Unauthenticated access to a protected route"""
    return JSONResponse(
        status_code=401,
        content={
            "error": True,
            "message": exc.message,
            "status_code": 401
        }
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    """Service health check"""
    return {
        "status": "healthy",
        "service": "account-service",
        "version": __version__
    }


# Include routers
app.include_router(pages.router, tags=["Pages"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(profile.router, prefix="/profile", tags=["Profile"])
