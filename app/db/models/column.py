from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base

class BoardColumn(Base):
    __tablename__ = "columns"

    id = Column(String, primary_key=True)  # generated by the client
    board_id = Column(Integer, ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    order = Column(Integer, nullable=False)

    board = relationship("Board", back_populates="columns")
    items = relationship(
        "Item",
        back_populates="column",
        order_by="Item.order",
        passive_deletes=True,
    )
