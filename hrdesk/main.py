"""HR Desk - FastAPI entrypoint."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pymongo.errors import ServerSelectionTimeoutError

from hrdesk.api import attendance, auth, leaves, tasks, users
from hrdesk.config import Settings, settings as default_settings
from hrdesk.db import db_shutdown, init_db
from hrdesk.errors import register_exception_handlers
from hrdesk.seed import seed_admin
from hrdesk.services.mailer import Mailer
from hrdesk.services.tokens import TokenService

logger = logging.getLogger(__name__)


def create_app(settings: Settings = default_settings, database=None) -> FastAPI:
    """Build the API. ``database`` replaces the configured MongoDB database."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await init_db(database)
            await seed_admin(settings)
        except ServerSelectionTimeoutError as e:
            logger.error("MongoDB is not running at %s", settings.mongodb_url)
            raise RuntimeError("MongoDB connection failed. Start MongoDB and check MONGODB_URL.") from e
        yield
        await db_shutdown()

    app = FastAPI(
        title=settings.app_name,
        description="Employees, attendance, tasks and leave",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tokens = TokenService.from_settings(settings)
    app.state.mailer = Mailer(settings)

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(attendance.router, prefix="/api/attendance", tags=["Attendance"])
    app.include_router(tasks.router, prefix="/api/task", tags=["Tasks"])
    app.include_router(leaves.router, prefix="/api/leave", tags=["Leave"])

    # Serve static files (reset password page, etc.)
    static_dir = Path(__file__).resolve().parent.parent / "static"
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    @app.get("/health")
    def health():
        return {"status": "ok", "app": settings.app_name}

    return app


app = create_app()
