from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medgram.core.config import Settings, get_settings
from medgram.core.database import Database
from medgram.core.exceptions import register_exception_handlers
from medgram.core.logger import configure_logging, logger, register_logger
from medgram.core.security import build_password_context
from medgram.api.auth import router as auth_router
from medgram.api.feed import router as feed_router
from medgram.api.posts import router as posts_router
from medgram.api.upload import router as upload_router
from medgram.utils.storage import MediaUploadCoordinator


@asynccontextmanager
async def lifespan(app: FastAPI):
    database: Database = app.state.database
    logger.info("startup", project=app.state.settings.PROJECT_NAME)
    await database.create_tables()
    logger.info("database_initialized")

    yield

    logger.info("shutdown")
    await database.dispose()


def create_app(
    settings: Optional[Settings] = None,
    media: Optional[MediaUploadCoordinator] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_DIR if settings.LOG_TO_FILE else None, debug=settings.DEBUG)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # -------------------------------------
    # Process-wide collaborators
    # -------------------------------------
    app.state.settings = settings
    app.state.database = Database.from_settings(settings)
    app.state.pwd_context = build_password_context(settings.BCRYPT_ROUNDS)
    app.state.media = media or MediaUploadCoordinator(settings)

    # -------------------------------------
    # CORS
    # -------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_logger(app)
    register_exception_handlers(app)

    # -------------------------------------
    # Routing
    # -------------------------------------
    app.include_router(auth_router)
    app.include_router(feed_router)
    app.include_router(posts_router)
    app.include_router(upload_router)

    @app.get("/health", tags=["health"])
    async def health_check():
        return {"status": "ok"}

    return app


app = create_app()
