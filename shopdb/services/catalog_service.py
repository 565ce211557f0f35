"""
Catalog service - products, categories and product metadata.

Every lookup by article code resolves aliases first.
"""
import logging

from shopdb.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from shopdb.models import Category, EanAlias, Product, ProductMetadata, Sale
from shopdb.services.alias_service import ean_alias_get
from shopdb.services.pricing_service import current_prices, get_product_price, new_price
from shopdb.utils.identifiers import validate_ean

logger = logging.getLogger(__name__)


def get_product(session, ean) -> Product:
    """Load a product by (possibly aliased) code or raise NotFoundError."""
    product = session.get(Product, ean_alias_get(session, ean))
    if product is None:
        raise NotFoundError(f'product {ean} not found')
    return product


def get_products(session):
    """Map of EAN -> product name for every product."""
    rows = session.query(Product.id, Product.name).order_by(Product.id).all()
    return {row.id: row.name for row in rows}


def products_search(session, search_query):
    """Products whose name contains ``search_query``."""
    rows = (
        session.query(Product.id, Product.name)
        .filter(Product.name.contains(search_query, autoescape=True))
        .order_by(Product.id)
        .all()
    )
    return [{'ean': row.id, 'name': row.name} for row in rows]


def get_productlist(session):
    """
    Every product with aliases, category, stock and current prices.

    Products without any price row are left out.
    """
    prices = current_prices(session)
    products = (
        session.query(Product)
        .join(Category, Product.category_id == Category.id)
        .order_by(Category.name, Product.name)
        .all()
    )

    result = []
    for product in products:
        price = prices.get(product.id)
        if price is None:
            continue
        result.append({
            'ean': product.id,
            'aliases': [alias.id for alias in product.aliases],
            'name': product.name,
            'category': product.category.name,
            'amount': product.amount,
            'memberprice': price.memberprice,
            'guestprice': price.guestprice,
            'deprecated': bool(product.deprecated),
        })
    return result


def get_product_for_ean(session, ean):
    """Product details for a (possibly aliased) code at the current price."""
    product = get_product(session, ean)
    return {
        'ean': product.id,
        'name': product.name,
        'category': product.category.name,
        'amount': product.amount,
        'memberprice': get_product_price(session, 1, product.id),
        'guestprice': get_product_price(session, 0, product.id),
    }


def get_product_name(session, ean) -> str:
    return get_product(session, ean).name


def get_product_category(session, ean) -> str:
    return get_product(session, ean).category.name


def get_product_amount(session, ean) -> int:
    return get_product(session, ean).amount


def get_product_amount_with_container_size(session, ean):
    """On-hand amount plus container size (0 when no metadata is stored)."""
    product = get_product(session, ean)
    container_size = product.metadata_entry.container_size if product.metadata_entry else 0
    return [product.amount, container_size]


def get_product_deprecated(session, ean) -> bool:
    return bool(get_product(session, ean).deprecated)


def product_deprecate(session, ean, value: bool):
    """Deprecate or re-activate a product. Products are never deleted."""
    product = get_product(session, ean)
    product.deprecated = bool(value)
    logger.info(f"Product {product.id} deprecated={product.deprecated}")


def product_metadata_get(session, ean):
    product = get_product(session, ean)
    if product.metadata_entry is None:
        raise NotFoundError(f'no metadata for product {product.id}')
    return product.metadata_entry.to_dict()


def product_metadata_set(session, ean, metadata: dict):
    """Replace the metadata of a product; missing fields are reset."""
    product = get_product(session, ean)

    unknown = set(metadata) - set(ProductMetadata.FIELDS)
    if unknown:
        raise InvalidArgumentError(f"unknown metadata fields: {', '.join(sorted(unknown))}")

    entry = product.metadata_entry
    if entry is None:
        entry = ProductMetadata(product_id=product.id)
        product.metadata_entry = entry

    for field in ProductMetadata.FIELDS:
        default = False if field == 'product_size_is_weight' else 0
        setattr(entry, field, metadata.get(field, default))

    session.flush()
    logger.info(f"Metadata of product {product.id} replaced")


def get_product_sales_info(session, ean, since) -> int:
    """Number of units of a product sold after ``since``."""
    product_id = ean_alias_get(session, ean)
    return (
        session.query(Sale)
        .filter(Sale.product == product_id, Sale.timestamp > since)
        .count()
    )


def new_product(session, ean, name, category, memberprice, guestprice):
    """
    Create a product with zero stock and its initial price (valid from 0).

    Both rows are written in the caller's transaction, so the product never
    exists without a price.
    """
    ean = validate_ean(ean)

    if session.get(Category, category) is None:
        raise NotFoundError(f'category {category} not found')
    if session.get(Product, ean) is not None:
        raise ConflictError(f'product {ean} already exists')
    if session.get(EanAlias, ean) is not None:
        raise ConflictError(f'{ean} is already used as alias')

    session.add(Product(id=ean, name=name, category_id=category, amount=0, deprecated=False))
    session.flush()
    new_price(session, ean, 0, memberprice, guestprice)
    logger.info(f"Product {ean} '{name}' created")


def get_category_list(session):
    categories = session.query(Category).order_by(Category.id).all()
    return [{'id': c.id, 'name': c.name} for c in categories]


def add_category(session, name):
    """Create a category unless one with this name exists. Returns its id."""
    existing = session.query(Category).filter_by(name=name).first()
    if existing:
        return existing.id

    category = Category(name=name)
    session.add(category)
    session.flush()
    logger.info(f"Category '{name}' created with id {category.id}")
    return category.id
