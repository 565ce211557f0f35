"""User model - members, the guest account and virtual accounts."""
from sqlalchemy import Column, Integer, BigInteger, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from shopdb.database import Base

GUEST_USER_ID = 0
LOSS_DONATION_ACCOUNT_ID = -3


class User(Base):
    """
    Shop user.

    Positive ids are human members, 0 is the anonymous guest and negative
    ids are system accounts (loss, donation, ...).
    """

    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=False)
    email = Column(String, nullable=False, default='')
    firstname = Column(String, nullable=False, default='')
    lastname = Column(String, nullable=False, default='')
    gender = Column(String, nullable=False, default='')
    street = Column(String, nullable=False, default='')
    plz = Column(String, nullable=False, default='')  # postcode
    city = Column(String, nullable=False, default='')
    pgp = Column(String, nullable=False, default='')
    joined_at = Column(BigInteger, nullable=False, default=0)
    disabled = Column(Boolean, nullable=False, default=False)
    hidden = Column(Boolean, nullable=False, default=False)
    sound_theme = Column(String, nullable=True)

    # Relationships
    rfids = relationship('RfidUser', back_populates='user', cascade='all, delete-orphan',
                         order_by='RfidUser.rfid')

    @property
    def is_member(self):
        return self.id > 0

    @property
    def full_name(self):
        return f"{self.firstname} {self.lastname}"

    def to_info(self):
        """Serialize to the UserInfo wire structure."""
        return {
            'id': self.id,
            'firstname': self.firstname,
            'lastname': self.lastname,
            'email': self.email,
            'gender': self.gender,
            'street': self.street,
            'postcode': self.plz,
            'city': self.city,
            'pgp': self.pgp,
            'joined_at': self.joined_at,
            'disabled': self.disabled,
            'hidden': self.hidden,
            'sound_theme': self.sound_theme or '',
            'rfid': [r.rfid for r in self.rfids],
        }

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.full_name}', disabled={self.disabled})>"


class RfidUser(Base):
    """RFID tag assigned to a user."""

    __tablename__ = 'rfid_users'

    rfid = Column(String, primary_key=True)
    user_id = Column('user', Integer, ForeignKey('users.id'), nullable=False, index=True)

    # Relationship
    user = relationship('User', back_populates='rfids')

    def __repr__(self):
        return f"<RfidUser(rfid='{self.rfid}', user={self.user_id})>"
