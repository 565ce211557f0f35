"""Category model."""
from sqlalchemy import Column, String
from shopdb.database import Base, SerialId


class Category(Base):
    """Product Category."""

    __tablename__ = 'categories'

    id = Column(SerialId, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, unique=True)

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
