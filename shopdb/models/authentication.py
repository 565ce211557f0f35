"""Authentication model - credentials, session token and role flags."""
import hashlib
from sqlalchemy import Column, Integer, String, Boolean
from shopdb.database import Base


def hash_password(password):
    """Unsalted hex SHA-256 digest, compatible with existing stored hashes."""
    return hashlib.sha256(password.encode('utf-8')).hexdigest()


class Authentication(Base):
    """
    Per-user authentication row, created lazily on first write.

    Role flags are stored independently; superuser implying the other roles
    is applied by ``auth_service.has_permission``, not here.
    """

    __tablename__ = 'authentication'

    user = Column(Integer, primary_key=True, autoincrement=False)
    password = Column(String, nullable=True)
    session = Column(String, nullable=True, index=True)
    superuser = Column(Boolean, nullable=False, default=False, server_default='0')
    auth_users = Column(Boolean, nullable=False, default=False, server_default='0')
    auth_products = Column(Boolean, nullable=False, default=False, server_default='0')
    auth_cashbox = Column(Boolean, nullable=False, default=False, server_default='0')

    def set_password(self, password):
        self.password = hash_password(password)

    def check_password(self, password):
        if not self.password:
            return False
        return self.password == hash_password(password)

    def clear_roles(self):
        self.superuser = False
        self.auth_users = False
        self.auth_products = False
        self.auth_cashbox = False

    def to_dict(self):
        return {
            'id': self.user,
            'superuser': bool(self.superuser),
            'auth_cashbox': bool(self.auth_cashbox),
            'auth_products': bool(self.auth_products),
            'auth_users': bool(self.auth_users),
        }

    def __repr__(self):
        return f"<Authentication(user={self.user}, superuser={self.superuser})>"
