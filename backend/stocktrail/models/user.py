from sqlalchemy import Column, Integer, String

from stocktrail.core.database import Base

ROLE_MANAGER = "manager"
ROLE_VIEWER = "viewer"


class User(Base):
    """Credential store entry; its username is what lands in changed_by."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    username = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)

    # managers write, viewers read
    role = Column(String, nullable=False, default=ROLE_VIEWER)

    password_hash = Column(String, nullable=False)
