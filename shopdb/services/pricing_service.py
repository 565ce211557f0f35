"""
Pricing service - time-versioned price lookup.

Prices are an append-only log. The price effective at time T is the row with
the greatest ``valid_from <= T``; inserting a price at T2 never changes what
any t < T2 resolves to, so already-issued invoices stay stable.
"""
import logging

from sqlalchemy import func

from shopdb.exceptions import ConflictError, NotFoundError
from shopdb.models import Price, Product
from shopdb.services.alias_service import ean_alias_get
from shopdb.utils.identifiers import validate_timestamp
from shopdb.utils.timeutils import unix_now

logger = logging.getLogger(__name__)


def _effective_price_row(session, product_id, at_time):
    return (
        session.query(Price)
        .filter(Price.product == product_id, Price.valid_from <= at_time)
        .order_by(Price.valid_from.desc())
        .first()
    )


def effective_price(session, ean, at_time=None, is_member=True) -> int:
    """
    Member or guest price of a product at ``at_time`` (default: now).

    Raises:
        NotFoundError: no price is effective at that time
    """
    product_id = ean_alias_get(session, ean)
    at_time = unix_now() if at_time is None else validate_timestamp(at_time)

    row = _effective_price_row(session, product_id, at_time)
    if row is None:
        raise NotFoundError(f'no price for product {product_id} at {at_time}')

    return row.memberprice if is_member else row.guestprice


def get_product_price(session, user, ean) -> int:
    """Current price for a buyer: guest price for user 0, member price otherwise."""
    return effective_price(session, ean, unix_now(), is_member=(user != 0))


def get_prices(session, ean):
    """Full price history of a product, oldest first."""
    product_id = ean_alias_get(session, ean)
    rows = (
        session.query(Price)
        .filter(Price.product == product_id)
        .order_by(Price.valid_from.asc())
        .all()
    )
    return [row.to_dict() for row in rows]


def new_price(session, ean, timestamp, memberprice, guestprice):
    """
    Append a price row.

    ``timestamp`` None means effective immediately; a future timestamp
    schedules the change. Existing rows are never modified.
    """
    product_id = ean_alias_get(session, ean)
    if session.get(Product, product_id) is None:
        raise NotFoundError(f'product {product_id} not found')

    valid_from = unix_now() if timestamp is None else validate_timestamp(timestamp)
    if session.get(Price, (product_id, valid_from)) is not None:
        raise ConflictError(f'product {product_id} already has a price valid from {valid_from}')

    session.add(Price(
        product=product_id,
        valid_from=valid_from,
        memberprice=memberprice,
        guestprice=guestprice,
    ))
    session.flush()
    logger.info(f"Price of {product_id} from {valid_from}: member={memberprice} guest={guestprice}")


def current_prices(session, at_time=None):
    """Map of product EAN -> Price row effective at ``at_time`` (default: now)."""
    at_time = unix_now() if at_time is None else at_time

    latest = (
        session.query(Price.product, func.max(Price.valid_from).label('valid_from'))
        .filter(Price.valid_from <= at_time)
        .group_by(Price.product)
        .subquery()
    )
    rows = (
        session.query(Price)
        .join(latest, (Price.product == latest.c.product) & (Price.valid_from == latest.c.valid_from))
        .all()
    )
    return {row.product: row for row in rows}
