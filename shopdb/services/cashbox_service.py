"""Cashbox service - signed ledger of manual cash movements."""
import logging

from sqlalchemy import func

from shopdb.models import CashboxDiff, LOSS_DONATION_ACCOUNT_ID
from shopdb.utils.identifiers import validate_timestamp, validate_user_id
from shopdb.utils.timeutils import unix_now

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10


def cashbox_status(session) -> int:
    """Current cash balance in cents (running sum of all entries)."""
    return session.query(func.coalesce(func.sum(CashboxDiff.amount), 0)).scalar() or 0


def cashbox_add(session, user, amount, timestamp=None):
    """
    Append a signed cash movement.

    Withdrawals and losses are negative, deposits and donations positive.
    Losses and donations are booked on account -3.
    """
    user = validate_user_id(user)
    timestamp = unix_now() if timestamp is None else validate_timestamp(timestamp)

    amount = int(amount)
    session.add(CashboxDiff(user=user, amount=amount, timestamp=timestamp))
    session.flush()
    logger.info(f"Cashbox: {amount:+d} by {user} at {timestamp}")


def cashbox_history(session, limit=DEFAULT_HISTORY_LIMIT):
    """Most recent entries, newest first."""
    rows = (
        session.query(CashboxDiff)
        .order_by(CashboxDiff.timestamp.desc(), CashboxDiff.id.desc())
        .limit(limit)
        .all()
    )
    return [row.to_dict() for row in rows]


def cashbox_changes(session, start, stop):
    """Entries with start <= timestamp < stop, oldest first."""
    rows = (
        session.query(CashboxDiff)
        .filter(CashboxDiff.timestamp >= start, CashboxDiff.timestamp < stop)
        .order_by(CashboxDiff.timestamp.asc(), CashboxDiff.id.asc())
        .all()
    )
    return [row.to_dict() for row in rows]


def cashbox_entry_label(entry, username=None) -> str:
    """
    Display name for a ledger entry.

    Account -3 is shared by losses and donations and told apart by sign.
    """
    if entry['user'] == LOSS_DONATION_ACCOUNT_ID:
        return 'Loss' if entry['amount'] < 0 else 'Donation'
    return username or str(entry['user'])
