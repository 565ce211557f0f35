"""
EAN alias service.

A shop can label one catalog entry with several barcodes (pack sizes,
reprints). Aliases are a single hop: resolving an alias yields a real
product EAN and a code without alias entry resolves to itself.
"""
import logging

from shopdb.exceptions import ConflictError, NotFoundError
from shopdb.models import EanAlias, Product
from shopdb.utils.identifiers import validate_ean

logger = logging.getLogger(__name__)


def ean_alias_get(session, ean) -> int:
    """Resolve an article code to its canonical product EAN."""
    ean = validate_ean(ean)
    alias = session.get(EanAlias, ean)
    return alias.real_ean if alias else ean


def ean_alias_add(session, ean, real_ean):
    """
    Register ``ean`` as an additional barcode of product ``real_ean``.

    The store does not prevent alias chains, so the checks live here:

    Raises:
        NotFoundError: target product does not exist
        ConflictError: alias already in use as alias or as product
    """
    ean = validate_ean(ean)
    real_ean = validate_ean(real_ean)

    if session.get(Product, real_ean) is None:
        raise NotFoundError(f'product EAN {real_ean} does not exist')

    existing = session.get(EanAlias, ean)
    if existing is not None:
        raise ConflictError(f'{ean} already exists as alias of {existing.real_ean}')

    if session.get(Product, ean) is not None:
        raise ConflictError(f'{ean} already exists as product')

    session.add(EanAlias(id=ean, real_ean=real_ean))
    session.flush()
    logger.info(f"Alias {ean} -> {real_ean} added")


def ean_alias_list(session):
    """All aliases ordered by alias code."""
    aliases = session.query(EanAlias).order_by(EanAlias.id.asc()).all()
    return [{'ean': a.id, 'real_ean': a.real_ean} for a in aliases]


def get_product_aliases(session, ean):
    """Alias codes pointing at product ``ean``."""
    ean = validate_ean(ean)
    rows = session.query(EanAlias.id).filter(EanAlias.real_ean == ean).order_by(EanAlias.id).all()
    return [row.id for row in rows]
