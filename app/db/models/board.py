from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from app.db.base import Base

DEFAULT_BOARD_COLOR = "#cbd5e1"

class Board(Base):
    __tablename__ = "boards"

    id = Column(Integer, primary_key=True, index=True)
    owner_user_id = Column(String, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    color = Column(String(10), nullable=False, default=DEFAULT_BOARD_COLOR)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    columns = relationship(
        "BoardColumn",
        back_populates="board",
        order_by="BoardColumn.order",
        passive_deletes=True,
    )
