"""
Startup initialization for the helpdesk service
Creates the schema and the initial technician account
"""
import logging

from helpdesk.core.config import DEFAULT_SECRET_KEY, Settings
from helpdesk.db.session import Database
from helpdesk.services.identity import IdentityService

logger = logging.getLogger(__name__)


def ensure_schema(database: Database) -> None:
    """Ensure required tables exist"""
    logger.info("🔧 Initializing database tables...")
    database.create_tables()
    logger.info("   ✅ Tables created/verified")


def seed_admin(database: Database, settings: Settings) -> bool:
    """Create the configured technician account when missing"""
    if not settings.SEED_ADMIN:
        logger.info("🔧 Skipping admin account creation (SEED_ADMIN disabled)")
        return False

    session = database.session_factory()
    try:
        created = IdentityService(session, settings).ensure_admin()
    finally:
        session.close()

    if created:
        logger.info(f"   ✅ Admin account created (username: {settings.ADMIN_USERNAME})")
    else:
        logger.info(f"   ℹ️  Admin account '{settings.ADMIN_USERNAME}' already exists")
    return created


def startup_initialization(database: Database, settings: Settings) -> None:
    """Run every startup step in order"""
    logger.info(f"🚀 Starting {settings.APP_NAME} ({settings.ENVIRONMENT})")
    ensure_schema(database)
    seed_admin(database, settings)
    if settings.SECRET_KEY == DEFAULT_SECRET_KEY:
        logger.warning("⚠️  SECRET_KEY is the built-in default; set it in the environment")
