"""Product model."""
from sqlalchemy import Column, BigInteger, String, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from shopdb.database import Base


class Product(Base):
    """
    Catalog entry keyed by its EAN.

    Products are never deleted, only deprecated. ``amount`` is the on-hand
    quantity, adjusted by sales and restocks.
    """

    __tablename__ = 'products'

    id = Column(BigInteger, primary_key=True, autoincrement=False)  # EAN
    name = Column(String, nullable=False)
    category_id = Column('category', BigInteger, ForeignKey('categories.id'), nullable=False)
    amount = Column(Integer, nullable=False, default=0, server_default='0')
    deprecated = Column(Boolean, nullable=False, default=False, server_default='0')

    # Relationships
    category = relationship('Category')
    aliases = relationship('EanAlias', back_populates='product', order_by='EanAlias.id')
    metadata_entry = relationship('ProductMetadata', uselist=False, back_populates='product')

    @property
    def ean(self):
        return self.id

    def __repr__(self):
        return f"<Product(ean={self.id}, name='{self.name}', amount={self.amount})>"
