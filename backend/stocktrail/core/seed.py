import logging

from sqlalchemy.orm import Session

from stocktrail.core.config import settings
from stocktrail.core.security import hash_password
from stocktrail.models.user import User, ROLE_MANAGER, ROLE_VIEWER

logger = logging.getLogger(__name__)


def seed_users_if_empty(db: Session) -> int:
    existing = db.query(User).count()
    if existing > 0:
        return 0

    # credentials come from settings / env, see core/config.py
    manager = User(
        username=settings.admin_username,
        name="Manager",
        role=ROLE_MANAGER,
        password_hash=hash_password(settings.admin_password),
    )
    viewer = User(
        username=settings.viewer_username,
        name="Viewer",
        role=ROLE_VIEWER,
        password_hash=hash_password(settings.viewer_password),
    )

    db.add_all([manager, viewer])
    db.commit()

    logger.info("Seeded default users: %s, %s", manager.username, viewer.username)
    return 2
