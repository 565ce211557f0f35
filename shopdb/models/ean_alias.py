"""EAN alias model."""
from sqlalchemy import Column, BigInteger, ForeignKey
from sqlalchemy.orm import relationship
from shopdb.database import Base


class EanAlias(Base):
    """Maps an alternate barcode onto a canonical product EAN (single hop)."""

    __tablename__ = 'ean_aliases'

    id = Column(BigInteger, primary_key=True, autoincrement=False)  # alias EAN
    real_ean = Column(BigInteger, ForeignKey('products.id'), nullable=False, index=True)

    # Relationship
    product = relationship('Product', back_populates='aliases')

    def __repr__(self):
        return f"<EanAlias(ean={self.id}, real_ean={self.real_ean})>"
