from sqlalchemy import Column, String, Uuid

from skillswap.database import Base


class SwapRequestModel(Base):
    """Read-only view of the swap_requests table owned by the swap workflow."""

    __tablename__ = "swap_requests"

    id = Column(Uuid, primary_key=True)
    skill_offered = Column(String(200))
    skill_wanted = Column(String(200))
    status = Column(String(20))
