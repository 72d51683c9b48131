"""Seed the default admin user if not present."""
import logging

from hrdesk.api.deps import get_password_hash
from hrdesk.config import Settings
from hrdesk.models.user import User, UserRole

logger = logging.getLogger(__name__)

ADMIN_FIRST_NAME = "HR"
ADMIN_LAST_NAME = "Admin"


async def seed_admin(settings: Settings):
    if not settings.admin_password:
        logger.warning("ADMIN_PASSWORD not set. Skipping default admin creation.")
        return
    existing = await User.find_one(User.email == settings.admin_email)
    if existing:
        return
    await User(
        email=settings.admin_email,
        hashed_password=get_password_hash(settings.admin_password),
        role=UserRole.ADMIN,
        first_name=ADMIN_FIRST_NAME,
        last_name=ADMIN_LAST_NAME,
    ).insert()
    logger.info("Created default admin %s", settings.admin_email)
