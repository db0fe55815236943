from datetime import datetime

from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from core.base import Base


class Vote(Base):
    __tablename__ = "votes"

    voter_name: Mapped[str] = mapped_column(String(255), primary_key=True)
    restaurant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    voted_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"Vote(voter_name={self.voter_name!r}, restaurant_name={self.restaurant_name!r})"
