"""Product metadata model."""
from sqlalchemy import Column, BigInteger, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from shopdb.database import Base


class ProductMetadata(Base):
    """Nutritional and packaging details - 1:1 with Product."""

    __tablename__ = 'product_metadata'

    product_id = Column('product', BigInteger, ForeignKey('products.id'), primary_key=True)
    product_size = Column(Integer, nullable=False, default=0)
    product_size_is_weight = Column(Boolean, nullable=False, default=False)
    container_size = Column(Integer, nullable=False, default=0)
    calories = Column(Integer, nullable=False, default=0)
    carbohydrates = Column(Integer, nullable=False, default=0)
    fats = Column(Integer, nullable=False, default=0)
    proteins = Column(Integer, nullable=False, default=0)
    deposit = Column(Integer, nullable=False, default=0)  # cents
    container_deposit = Column(Integer, nullable=False, default=0)  # cents

    # Relationship
    product = relationship('Product', back_populates='metadata_entry')

    FIELDS = (
        'product_size', 'product_size_is_weight', 'container_size', 'calories',
        'carbohydrates', 'fats', 'proteins', 'deposit', 'container_deposit',
    )

    def to_dict(self):
        return {field: getattr(self, field) for field in self.FIELDS}

    def __repr__(self):
        return f"<ProductMetadata(product={self.product_id}, container_size={self.container_size})>"
