"""
Sales service - purchase ledger, undo and invoice valuation.

Invoice valuation (no price is stored with a sale):
- user > 0 (member): member price effective at the sale's timestamp.
- user == 0 (guest): guest price effective at the sale's timestamp.
- user < 0 (virtual account, e.g. loss): quantity-weighted average restock
  cost over restocks up to the sale's timestamp,
  sum(price * amount) // sum(amount).
"""
import logging

from sqlalchemy import case, func, select

from shopdb.exceptions import NotFoundError
from shopdb.models import Price, Product, Restock, Sale, User
from shopdb.services.alias_service import ean_alias_get
from shopdb.utils.identifiers import validate_timestamp, validate_user_id
from shopdb.utils.timeutils import format_utc, unix_now

logger = logging.getLogger(__name__)


def buy(session, user, ean, timestamp=None):
    """Record one unit of a (possibly aliased) product leaving the shelf."""
    user = validate_user_id(user)
    product_id = ean_alias_get(session, ean)
    product = session.get(Product, product_id)
    if product is None:
        raise NotFoundError(f'product {ean} not found')

    timestamp = unix_now() if timestamp is None else validate_timestamp(timestamp)
    session.add(Sale(user=user, product=product_id, timestamp=timestamp))
    # Decremented in SQL against the stored value
    product.amount = Product.amount - 1
    session.flush()

    logger.info(f"Sale: user {user} bought {product_id} ('{product.name}')")


def undo(session, user) -> str:
    """
    Remove the most recent sale of a user and put the unit back.

    Returns:
        Name of the product whose sale was undone
    """
    user = validate_user_id(user)
    sale = (
        session.query(Sale)
        .filter(Sale.user == user)
        .order_by(Sale.timestamp.desc(), Sale.id.desc())
        .first()
    )
    if sale is None:
        raise NotFoundError(f'no purchase to undo for user {user}')

    product = session.get(Product, sale.product)
    product.amount = Product.amount + 1
    session.delete(sale)
    session.flush()

    logger.info(f"Undo: removed sale {sale.id} of {product.id} for user {user}")
    return product.name


def _valuation_query(session):
    """Sales joined with product and both valuation inputs per row."""
    retail_price = (
        select(case((Sale.user == 0, Price.guestprice), else_=Price.memberprice))
        .where(Price.product == Sale.product, Price.valid_from <= Sale.timestamp)
        .order_by(Price.valid_from.desc())
        .limit(1)
        .correlate(Sale)
        .scalar_subquery()
    )
    cost_total = (
        select(func.sum(Restock.price * Restock.amount))
        .where(Restock.product == Sale.product, Restock.timestamp <= Sale.timestamp)
        .correlate(Sale)
        .scalar_subquery()
    )
    cost_units = (
        select(func.sum(Restock.amount))
        .where(Restock.product == Sale.product, Restock.timestamp <= Sale.timestamp)
        .correlate(Sale)
        .scalar_subquery()
    )
    return (
        session.query(
            Sale.timestamp,
            Sale.user,
            Product.id.label('ean'),
            Product.name,
            retail_price.label('retail_price'),
            cost_total.label('cost_total'),
            cost_units.label('cost_units'),
        )
        .join(Product, Sale.product == Product.id)
    )


def _row_price(row) -> int:
    if row.user < 0:
        if not row.cost_units:
            raise NotFoundError(f'no restock cost for product {row.ean} before {row.timestamp}')
        return int(row.cost_total) // int(row.cost_units)

    if row.retail_price is None:
        raise NotFoundError(f'no price for product {row.ean} at {row.timestamp}')
    return int(row.retail_price)


def get_invoice(session, user, timestamp_from, timestamp_to):
    """
    Valued purchases of a user in [from, to]; ``to < 0`` means until now.

    Aborts with NotFoundError on the first sale that cannot be valued.
    """
    user = validate_user_id(user)
    timestamp_from = validate_timestamp(timestamp_from)
    timestamp_to = validate_timestamp(timestamp_to)
    if timestamp_to < 0:
        timestamp_to = unix_now()

    rows = (
        _valuation_query(session)
        .filter(
            Sale.user == user,
            Sale.timestamp >= timestamp_from,
            Sale.timestamp <= timestamp_to,
        )
        .order_by(Sale.timestamp, Sale.id)
        .all()
    )

    return [
        {
            'timestamp': row.timestamp,
            'product': {'ean': row.ean, 'name': row.name},
            'price': _row_price(row),
        }
        for row in rows
    ]


def get_user_invoice_sum(session, user, timestamp_from, timestamp_to) -> int:
    """Total of ``get_invoice`` for the same user and range."""
    return sum(entry['price'] for entry in get_invoice(session, user, timestamp_from, timestamp_to))


def get_sales(session, timestamp_from, timestamp_to):
    """All sales in [from, to] with buyer and product, oldest first."""
    rows = (
        session.query(Sale.timestamp, Sale.user, User.firstname, User.lastname, Product.id, Product.name)
        .join(Product, Sale.product == Product.id)
        .outerjoin(User, Sale.user == User.id)
        .filter(Sale.timestamp >= timestamp_from, Sale.timestamp <= timestamp_to)
        .order_by(Sale.timestamp, Sale.id)
        .all()
    )
    return [
        {
            'timestamp': row.timestamp,
            'user': {
                'id': row.user,
                'firstname': row.firstname or '',
                'lastname': row.lastname or '',
            },
            'product': {'ean': row.id, 'name': row.name},
        }
        for row in rows
    ]


def get_users_with_sales(session, timestamp_from, timestamp_to):
    """Users with at least one purchase strictly between the two timestamps."""
    rows = (
        session.query(Sale.user)
        .filter(Sale.timestamp > timestamp_from, Sale.timestamp < timestamp_to)
        .group_by(Sale.user)
        .order_by(Sale.user)
        .all()
    )
    return [row.user for row in rows]


def get_first_purchase(session, user) -> int:
    """Timestamp of a user's first purchase, 0 if there is none."""
    value = session.query(func.min(Sale.timestamp)).filter(Sale.user == user).scalar()
    return value or 0


def get_last_purchase(session, user) -> int:
    """Timestamp of a user's last purchase, 0 if there is none."""
    value = session.query(func.max(Sale.timestamp)).filter(Sale.user == user).scalar()
    return value or 0


def get_timestamp_of_last_purchase(session) -> int:
    """Timestamp of the most recent sale overall, 0 if there is none."""
    value = session.query(func.max(Sale.timestamp)).scalar()
    return value or 0


def get_user_sale_stats(session, user, timecode):
    """
    Purchase counts of a user grouped by a strftime pattern (UTC).

    ``timecode`` like '%Y-%m' yields one entry per month.
    """
    counts = {}
    for (timestamp,) in session.query(Sale.timestamp).filter(Sale.user == user).order_by(Sale.timestamp):
        key = format_utc(timestamp, timecode)
        counts[key] = counts.get(key, 0) + 1

    return [{'timedatecode': key, 'count': count} for key, count in counts.items()]

