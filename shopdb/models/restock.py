"""Restock model."""
from sqlalchemy import Column, BigInteger, Integer, ForeignKey, Index
from shopdb.database import Base, SerialId


class Restock(Base):
    """Append-only record of stock added to the shelf."""

    __tablename__ = 'restock'

    id = Column(SerialId, primary_key=True, autoincrement=True)
    user = Column(Integer, nullable=False)
    product = Column(BigInteger, ForeignKey('products.id'), nullable=False)
    amount = Column(Integer, nullable=False)
    price = Column(Integer, nullable=False)  # unit cost in cents
    timestamp = Column(BigInteger, nullable=False)
    supplier = Column(BigInteger, nullable=True)
    best_before_date = Column(BigInteger, nullable=True)

    __table_args__ = (
        Index('ix_restock_product_timestamp', 'product', 'timestamp'),
    )

    def to_dict(self):
        return {
            'timestamp': self.timestamp,
            'amount': self.amount,
            'price': self.price,
            'supplier': self.supplier or 0,
            'best_before_date': self.best_before_date or 0,
        }

    def __repr__(self):
        return f"<Restock(product={self.product}, amount={self.amount}, price={self.price}, timestamp={self.timestamp})>"
