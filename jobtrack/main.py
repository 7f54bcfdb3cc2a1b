"""
JobTrack web application.

Record job applications, follow them through the hiring pipeline, and read
the analytics dashboard. Run with `uvicorn jobtrack.main:app`.
"""
import logging
import os
import subprocess
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import inspect
from starlette.middleware.sessions import SessionMiddleware

from . import __version__
from .auth import router as auth_router
from .config import settings
from .database import engine, init_db, session_scope
from .rate_limit import limiter
from .routers import analytics, applications, backup, pages, skills
from .routers import settings as settings_api
from .services.skills import seed_default_skills

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-7s %(name)s: %(message)s"
)
logger = logging.getLogger("jobtrack")

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "; ".join([
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net",
        "style-src 'self' 'unsafe-inline'",
        "img-src 'self' data:",
        "connect-src 'self'",
    ]),
}


def prepare_database():
    """
    Bring the database schema up to date.

    A brand-new database gets every table from the models and is stamped at
    the latest migration. One that already has tables is migrated.
    """
    if "users" in inspect(engine).get_table_names():
        logger.info("Applying pending migrations")
        subprocess.run(["alembic", "upgrade", "head"], check=True)
    else:
        logger.info("Empty database, creating tables")
        init_db()
        subprocess.run(["alembic", "stamp", "head"], check=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    os.makedirs("data", exist_ok=True)
    prepare_database()
    with session_scope() as db:
        seed_default_skills(db)
    logger.info("JobTrack %s started (single-user mode: %s)", __version__, settings.auth.single_user_mode)
    yield
    logger.info("JobTrack stopped")


app = FastAPI(
    title="JobTrack",
    description="Track job applications and see how the search is going.",
    version=__version__,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.middleware("http")
async def add_security_headers(request, call_next):
    response = await call_next(request)
    response.headers.update(SECURITY_HEADERS)
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.allowed_origins.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# Holds the OAuth state and the post-sign-in path between redirects
app.add_middleware(SessionMiddleware, secret_key=settings.auth.secret_key)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["analytics"])
app.include_router(skills.router, prefix="/api/skills", tags=["skills"])
app.include_router(settings_api.router, prefix="/api/settings", tags=["settings"])
app.include_router(backup.router, prefix="/api", tags=["backup"])
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(pages.router)


@app.get("/api/health", tags=["system"])
def health():
    return {"status": "ok", "version": __version__, "time": datetime.utcnow().isoformat()}
