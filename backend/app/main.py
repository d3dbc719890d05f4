from contextlib import asynccontextmanager
from datetime import timedelta
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.core.config import Settings, get_settings
from app.core.errors import register_exception_handlers
from app.core.logging_config import setup_logging
from app.core.security import PasswordHasher, TokenCodec
from app.db.session import Database
from app.services.email import SmtpMailer
from app.services.resume_store import LocalResumeStore

# Import all models so SQLAlchemy can discover them for table creation
from app.models import Application, Job, User  # noqa: F401

# Import API router
from app.api.api import api_router

logger = logging.getLogger("auth")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and its process-wide collaborators.

    A missing SECRET_KEY fails here, at construction, never on a request.
    """
    settings = settings or get_settings()

    database = Database(settings.DATABASE_URL, echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create database tables on startup, release the pool on shutdown."""
        setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
        database.create_all()
        logger.info("%s started", settings.APP_NAME)
        yield
        database.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Job portal accounts, referrals and onboarding",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.password_hasher = PasswordHasher(settings.BCRYPT_ROUNDS)
    app.state.token_codec = TokenCodec(
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    app.state.mailer = SmtpMailer(settings)
    app.state.resume_store = LocalResumeStore(
        settings.RESUME_UPLOAD_DIR, settings.RESUME_PUBLIC_PREFIX
    )

    # CORS Middleware - allowlist from env (comma-separated)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Stored resumes are served back under the path the store returns
    app.mount(
        app.state.resume_store.public_prefix,
        StaticFiles(directory=settings.RESUME_UPLOAD_DIR),
        name="resumes",
    )

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint."""
        return {"message": f"Welcome to {settings.APP_NAME} API"}

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
