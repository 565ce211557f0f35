"""Formatting helpers for CLI output."""
from datetime import datetime


def money_eur(cents):
    """Format integer cents as euros: 1234 -> '12.34 €', -5 -> '-0.05 €'."""
    if cents is None:
        return '0.00 €'
    sign = '-' if cents < 0 else ''
    cents = abs(int(cents))
    return f"{sign}{cents // 100}.{cents % 100:02d} €"


def date_de(timestamp):
    """Format a Unix timestamp as dd.mm.yyyy (local time)."""
    if not timestamp:
        return ''
    return datetime.fromtimestamp(timestamp).strftime('%d.%m.%Y')
