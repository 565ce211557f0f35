"""Supplier model."""
from sqlalchemy import Column, String
from shopdb.database import Base, SerialId


class Supplier(Base):
    """Supplier (Lieferant)."""

    __tablename__ = 'supplier'

    id = Column(SerialId, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    postal_code = Column(String, nullable=True)
    city = Column(String, nullable=True)
    street = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    website = Column(String, nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'postal_code': self.postal_code or '',
            'city': self.city or '',
            'street': self.street or '',
            'phone': self.phone or '',
            'website': self.website or '',
        }

    @classmethod
    def unknown(cls):
        """Placeholder for restocks referencing a supplier that does not exist."""
        return {
            'id': 0,
            'name': 'Unknown',
            'postal_code': '',
            'city': '',
            'street': '',
            'phone': '',
            'website': '',
        }

    def __repr__(self):
        return f"<Supplier(id={self.id}, name='{self.name}')>"
