"""Sale model."""
from sqlalchemy import Column, BigInteger, Integer, ForeignKey, Index
from shopdb.database import Base, SerialId


class Sale(Base):
    """
    Purchase ledger: one row per article that left the shelf.

    No price is stored; it is derived from the price and restock history
    when the sale is read.
    """

    __tablename__ = 'sales'

    id = Column(SerialId, primary_key=True, autoincrement=True)
    user = Column(Integer, nullable=False)
    product = Column(BigInteger, ForeignKey('products.id'), nullable=False)
    timestamp = Column(BigInteger, nullable=False)

    __table_args__ = (
        Index('ix_sales_user_timestamp', 'user', 'timestamp'),
        Index('ix_sales_timestamp', 'timestamp'),
    )

    def __repr__(self):
        return f"<Sale(id={self.id}, user={self.user}, product={self.product}, timestamp={self.timestamp})>"
