"""Cashbox ledger model."""
from sqlalchemy import Column, BigInteger, Integer
from shopdb.database import Base, SerialId


class CashboxDiff(Base):
    """
    Append-only signed cash movement.

    ``user`` is a member id or a virtual account; -3 means loss for negative
    amounts and donation for positive ones.
    """

    __tablename__ = 'cashbox_diff'

    id = Column(SerialId, primary_key=True, autoincrement=True)
    user = Column(Integer, nullable=False)
    amount = Column(Integer, nullable=False)  # cents, signed
    timestamp = Column(BigInteger, nullable=False, index=True)

    def to_dict(self):
        return {'user': self.user, 'amount': self.amount, 'timestamp': self.timestamp}

    def __repr__(self):
        return f"<CashboxDiff(user={self.user}, amount={self.amount}, timestamp={self.timestamp})>"
