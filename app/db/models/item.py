from sqlalchemy import Column, Float, String, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base

class Item(Base):
    __tablename__ = "items"

    id = Column(String, primary_key=True)  # generated by the client
    column_id = Column(String, ForeignKey("columns.id", ondelete="CASCADE"), nullable=False, index=True)
    order = Column(Float, nullable=False)
    title = Column(String, nullable=False)
    content = Column(String, nullable=True)

    column = relationship("BoardColumn", back_populates="items")
