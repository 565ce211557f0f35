"""Price model."""
from sqlalchemy import Column, BigInteger, Integer, ForeignKey
from shopdb.database import Base


class Price(Base):
    """
    Append-only price log.

    The effective price at time T is the row with the greatest
    ``valid_from <= T``. Rows are never updated or deleted.
    """

    __tablename__ = 'prices'

    product = Column(BigInteger, ForeignKey('products.id'), primary_key=True)
    valid_from = Column(BigInteger, primary_key=True)  # unix seconds
    memberprice = Column(Integer, nullable=False)  # cents
    guestprice = Column(Integer, nullable=False)  # cents

    def to_dict(self):
        return {
            'valid_from': self.valid_from,
            'memberprice': self.memberprice,
            'guestprice': self.guestprice,
        }

    def __repr__(self):
        return f"<Price(product={self.product}, valid_from={self.valid_from}, member={self.memberprice}, guest={self.guestprice})>"
