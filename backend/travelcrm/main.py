"""Travel CRM API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to {"message": str}
    - CORS configured from settings (not hardcoded); credentials allowed so
      the session cookie crosses the UI origin
    - Startup order: logging -> database -> schema (SQLite only) -> purge dead
      sessions -> seed default admin

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - PostgreSQL schema is owned by Alembic; SQLite databases are created in
      place for local runs
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from travelcrm.config import Settings, get_settings
from travelcrm.db.base import Base
from travelcrm.infrastructure.database import DatabaseSessionManager, init_db
from travelcrm.infrastructure.observability import setup_logging
from travelcrm.services.admin_repository import AdminRepository
from travelcrm.services.audit_logger import AuditLogger
from travelcrm.services.bootstrap_seeder import seed_default_admin
from travelcrm.services.credential_store import CredentialStore
from travelcrm.services.session_authenticator import SessionAuthenticator
from travelcrm.api.error_handlers import register_error_handlers
from travelcrm.api.routes import admins, audit_logs, auth, clients, health, interactions
import travelcrm.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


async def prepare_store(manager: DatabaseSessionManager, settings: Settings) -> None:
    """Create SQLite tables, drop dead sessions and seed the first admin."""
    if settings.database_url.startswith("sqlite"):
        async with manager.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async with manager.session() as db:
        sessions = SessionAuthenticator(db, ttl=settings.session_ttl)
        purged = await sessions.purge_expired()
        if purged:
            logger.info(f"Purged {purged} expired or revoked session(s)")

        credentials = CredentialStore(db, rounds=settings.bcrypt_rounds)
        await seed_default_admin(
            AdminRepository(db, credentials, sessions),
            AuditLogger(db),
            username=settings.default_admin_username,
            password=settings.default_admin_password,
            full_name=settings.default_admin_full_name,
            email=settings.default_admin_email,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.database_echo,
    )
    await prepare_store(manager, settings)
    logger.info("Travel CRM API started")
    yield
    logger.info("Travel CRM API shutting down")
    await manager.dispose()


app = FastAPI(title="Travel CRM API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(admins.router)
app.include_router(clients.router)
app.include_router(interactions.router)
app.include_router(audit_logs.router)

register_error_handlers(app)
