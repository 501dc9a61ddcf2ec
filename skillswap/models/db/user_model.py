from sqlalchemy import Column, String, Uuid

from skillswap.database import Base


class UserModel(Base):
    """Read-only view of the users table.

    The table belongs to the profile service; only the columns projected into
    message views are mapped here.
    """

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True)
    name = Column(String(100))
    avatar = Column(String(500))
    role = Column(String(20))
