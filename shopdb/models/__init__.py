"""Models package - exports all SQLAlchemy models."""
# Catalog
from shopdb.models.category import Category
from shopdb.models.product import Product
from shopdb.models.product_metadata import ProductMetadata
from shopdb.models.ean_alias import EanAlias
from shopdb.models.price import Price

# Inventory
from shopdb.models.supplier import Supplier
from shopdb.models.restock import Restock

# Sales and cash
from shopdb.models.sale import Sale
from shopdb.models.cashbox_diff import CashboxDiff

# Users
from shopdb.models.user import User, RfidUser, GUEST_USER_ID, LOSS_DONATION_ACCOUNT_ID
from shopdb.models.authentication import Authentication, hash_password

__all__ = [
    # Catalog
    'Category', 'Product', 'ProductMetadata', 'EanAlias', 'Price',
    # Inventory
    'Supplier', 'Restock',
    # Sales and cash
    'Sale', 'CashboxDiff',
    # Users
    'User', 'RfidUser', 'GUEST_USER_ID', 'LOSS_DONATION_ACCOUNT_ID',
    'Authentication', 'hash_password',
]
