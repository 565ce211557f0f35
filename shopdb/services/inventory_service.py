"""
Inventory service - stock snapshot, restocks, suppliers and best-before report.

Best-before layering:
- For every product with amount > 0, restocks are walked newest first.
- Each restock layer is attributed min(remaining, restock amount) units at
  its best-before date, then the remaining amount shrinks by the restock
  amount; the walk stops once nothing remains.
- The newest layers therefore cover the on-hand stock. When recorded
  restocks exceed what is on hand (untracked loss), the last layer only gets
  the remainder, so the reported total never exceeds the on-hand amount.
"""
import logging
from datetime import datetime, timedelta

from shopdb.exceptions import InvalidArgumentError, NotFoundError
from shopdb.models import Category, Product, Restock, Supplier
from shopdb.services.alias_service import ean_alias_get
from shopdb.services.pricing_service import current_prices
from shopdb.utils.identifiers import validate_timestamp, validate_user_id
from shopdb.utils.timeutils import local_day_start, unix_now

logger = logging.getLogger(__name__)

SUPPLIER_RESTOCK_DATES_LIMIT = 10


def get_stock(session):
    """Non-deprecated products with category, amount and current prices."""
    prices = current_prices(session)
    products = (
        session.query(Product)
        .join(Category, Product.category_id == Category.id)
        .filter(Product.deprecated.is_(False))
        .order_by(Category.name, Product.name)
        .all()
    )

    stock = []
    for product in products:
        price = prices.get(product.id)
        if price is None:
            continue
        stock.append({
            'ean': product.id,
            'name': product.name,
            'category': product.category.name,
            'amount': product.amount,
            'memberprice': price.memberprice,
            'guestprice': price.guestprice,
        })
    return stock


def restock(session, user, ean, amount, price, supplier=None, best_before_date=None, timestamp=None):
    """
    Record stock arriving on the shelf and raise the on-hand amount.

    Args:
        user: member who restocked
        ean: (possibly aliased) product code
        amount: number of units, > 0
        price: unit cost in cents, >= 0
        supplier: supplier id or None
        best_before_date: unix timestamp or None
        timestamp: time of the restock, default now
    """
    user = validate_user_id(user)
    if amount is None or int(amount) <= 0:
        raise InvalidArgumentError('restock amount must be positive')
    if price is None or int(price) < 0:
        raise InvalidArgumentError('restock price must not be negative')

    product_id = ean_alias_get(session, ean)
    product = session.get(Product, product_id)
    if product is None:
        raise NotFoundError(f'product {ean} not found')

    timestamp = unix_now() if timestamp is None else validate_timestamp(timestamp)
    session.add(Restock(
        user=user,
        product=product_id,
        amount=int(amount),
        price=int(price),
        timestamp=timestamp,
        supplier=supplier or None,
        best_before_date=best_before_date or None,
    ))
    product.amount = Product.amount + int(amount)
    session.flush()

    logger.info(f"Restock of {product_id}: +{amount} at {price} by user {user}")


def _restock_query(session, product_id, descending):
    order = (Restock.timestamp.desc(), Restock.id.desc()) if descending else (Restock.timestamp.asc(), Restock.id.asc())
    return session.query(Restock).filter(Restock.product == product_id).order_by(*order)


def get_restocks(session, ean, descending=False):
    """Restock history of a product."""
    product_id = ean_alias_get(session, ean)
    return [r.to_dict() for r in _restock_query(session, product_id, descending).all()]


def get_last_restock(session, ean, min_price=0):
    """Most recent restock of a product with unit cost >= ``min_price``."""
    product_id = ean_alias_get(session, ean)
    row = (
        _restock_query(session, product_id, descending=True)
        .filter(Restock.price >= min_price)
        .first()
    )
    if row is None:
        raise NotFoundError(f'no restock of product {product_id} at or above {min_price}')
    return row.to_dict()


def bestbeforelist(session):
    """
    Units on hand per best-before date, newest date first.

    Returns:
        List of dicts: ean, name, amount, best_before_date
    """
    products = (
        session.query(Product)
        .filter(Product.amount > 0)
        .order_by(Product.id)
        .all()
    )

    entries = []
    for product in products:
        remaining = product.amount
        for layer in _restock_query(session, product.id, descending=True):
            entries.append({
                'ean': product.id,
                'name': product.name,
                'amount': min(remaining, layer.amount),
                'best_before_date': layer.best_before_date or 0,
            })
            remaining -= layer.amount
            if remaining <= 0:
                break

    entries.sort(key=lambda entry: entry['best_before_date'], reverse=True)
    logger.debug(f"Best-before list with {len(entries)} entries")
    return entries


def get_supplier_list(session):
    suppliers = session.query(Supplier).order_by(Supplier.id).all()
    return [s.to_dict() for s in suppliers]


def get_supplier(session, supplier_id):
    """
    Supplier details.

    Restocks may reference suppliers that were never recorded; those read as
    a synthetic "Unknown" supplier so reports stay renderable.
    """
    supplier = session.get(Supplier, supplier_id)
    if supplier is None:
        return Supplier.unknown()
    return supplier.to_dict()


def add_supplier(session, name, postal_code='', city='', street='', phone='', website=''):
    """Create a supplier. Returns its id."""
    if not name:
        raise InvalidArgumentError('supplier name is required')

    supplier = Supplier(
        name=name,
        postal_code=postal_code,
        city=city,
        street=street,
        phone=phone,
        website=website,
    )
    session.add(supplier)
    session.flush()
    logger.info(f"Supplier '{name}' created with id {supplier.id}")
    return supplier.id


def get_supplier_product_list(session, supplier_id, now=None):
    """Active products restocked from a supplier within the last year."""
    now = unix_now() if now is None else now
    one_year_ago = int((datetime.fromtimestamp(now) - timedelta(days=365)).timestamp())

    rows = (
        session.query(Product.id, Product.name)
        .join(Restock, Restock.product == Product.id)
        .filter(
            Restock.supplier == supplier_id,
            Restock.timestamp > one_year_ago,
            Product.deprecated.is_(False),
        )
        .group_by(Product.id, Product.name)
        .order_by(Product.id)
        .all()
    )
    return [{'ean': row.id, 'name': row.name} for row in rows]


def get_supplier_restock_dates(session, supplier_id):
    """Local midnights of the most recent days with restocks from a supplier."""
    timestamps = (
        session.query(Restock.timestamp)
        .filter(Restock.supplier == supplier_id)
        .order_by(Restock.timestamp.desc())
        .all()
    )

    days = []
    for (timestamp,) in timestamps:
        day = local_day_start(timestamp)
        if day not in days:
            days.append(day)
        if len(days) >= SUPPLIER_RESTOCK_DATES_LIMIT:
            break
    return days
