"""
RPC blueprint - the flat method surface of the data service.

POST /rpc  {"method": "<name>", "params": {...}}
  -> {"status": "ok", "result": ...}
  -> {"status": "error", "error": "<kind>", "message": "..."} (via error handler)
GET  /rpc  -> list of method names

Each call runs in exactly one store session: committed when the method
returns, rolled back when it raises.
"""
import inspect
import logging
import time

from flask import Blueprint, current_app, jsonify, request

from shopdb.blueprints.metrics import record_rpc_call
from shopdb.database import get_store
from shopdb.exceptions import InvalidArgumentError, ShopError
from shopdb.services import (
    alias_service,
    auth_service,
    cashbox_service,
    catalog_service,
    inventory_service,
    pricing_service,
    sales_service,
    user_service,
)
from shopdb.utils.identifiers import (
    validate_bool,
    validate_ean,
    validate_integer,
    validate_timestamp,
    validate_user_id,
)

logger = logging.getLogger(__name__)

rpc_bp = Blueprint('rpc', __name__)


def _cashbox_history(session, limit=None):
    if limit is None:
        limit = current_app.config.get('CASHBOX_HISTORY_LIMIT', cashbox_service.DEFAULT_HISTORY_LIMIT)
    return cashbox_service.cashbox_history(session, limit)


METHODS = {
    # Catalog
    'get_products': catalog_service.get_products,
    'products_search': catalog_service.products_search,
    'get_productlist': catalog_service.get_productlist,
    'get_product_for_ean': catalog_service.get_product_for_ean,
    'get_product_name': catalog_service.get_product_name,
    'get_product_category': catalog_service.get_product_category,
    'get_product_amount': catalog_service.get_product_amount,
    'get_product_amount_with_container_size': catalog_service.get_product_amount_with_container_size,
    'get_product_deprecated': catalog_service.get_product_deprecated,
    'product_deprecate': catalog_service.product_deprecate,
    'product_metadata_get': catalog_service.product_metadata_get,
    'product_metadata_set': catalog_service.product_metadata_set,
    'get_product_sales_info': catalog_service.get_product_sales_info,
    'new_product': catalog_service.new_product,
    'get_category_list': catalog_service.get_category_list,
    'add_category': catalog_service.add_category,

    # Aliases
    'ean_alias_get': alias_service.ean_alias_get,
    'ean_alias_add': alias_service.ean_alias_add,
    'ean_alias_list': alias_service.ean_alias_list,
    'get_product_aliases': alias_service.get_product_aliases,

    # Prices
    'effective_price': pricing_service.effective_price,
    'get_product_price': pricing_service.get_product_price,
    'get_prices': pricing_service.get_prices,
    'new_price': pricing_service.new_price,

    # Inventory and suppliers
    'get_stock': inventory_service.get_stock,
    'restock': inventory_service.restock,
    'get_restocks': inventory_service.get_restocks,
    'get_last_restock': inventory_service.get_last_restock,
    'bestbeforelist': inventory_service.bestbeforelist,
    'get_supplier_list': inventory_service.get_supplier_list,
    'get_supplier': inventory_service.get_supplier,
    'add_supplier': inventory_service.add_supplier,
    'get_supplier_product_list': inventory_service.get_supplier_product_list,
    'get_supplier_restock_dates': inventory_service.get_supplier_restock_dates,

    # Sales and invoices
    'buy': sales_service.buy,
    'undo': sales_service.undo,
    'get_invoice': sales_service.get_invoice,
    'get_user_invoice_sum': sales_service.get_user_invoice_sum,
    'get_sales': sales_service.get_sales,
    'get_users_with_sales': sales_service.get_users_with_sales,
    'get_first_purchase': sales_service.get_first_purchase,
    'get_last_purchase': sales_service.get_last_purchase,
    'get_timestamp_of_last_purchase': sales_service.get_timestamp_of_last_purchase,
    'get_user_sale_stats': sales_service.get_user_sale_stats,

    # Users
    'get_user_info': user_service.get_user_info,
    'get_username': user_service.get_username,
    'get_member_ids': user_service.get_member_ids,
    'get_system_member_ids': user_service.get_system_member_ids,
    'user_exists': user_service.user_exists,
    'user_is_disabled': user_service.user_is_disabled,
    'user_disable': user_service.user_disable,
    'user_replace': user_service.user_replace,
    'user_equals': user_service.user_equals,
    'get_userid_for_rfid': user_service.get_userid_for_rfid,
    'set_user_theme': user_service.set_user_theme,
    'get_user_theme': user_service.get_user_theme,

    # Authentication
    'check_user_password': auth_service.check_user_password,
    'set_user_password': auth_service.set_user_password,
    'set_sessionid': auth_service.set_sessionid,
    'get_user_by_sessionid': auth_service.get_user_by_sessionid,
    'get_user_auth': auth_service.get_user_auth,
    'set_user_auth': auth_service.set_user_auth,
    'get_session_permissions': auth_service.get_session_permissions,

    # Cashbox
    'cashbox_status': cashbox_service.cashbox_status,
    'cashbox_add': cashbox_service.cashbox_add,
    'cashbox_history': _cashbox_history,
    'cashbox_changes': cashbox_service.cashbox_changes,
}

# Parameter name -> boundary validator
EAN_PARAMS = ('ean', 'real_ean')
USER_PARAMS = ('user', 'user_id')
TIMESTAMP_PARAMS = ('timestamp', 'timestamp_from', 'timestamp_to', 'since', 'start', 'stop', 'at_time', 'now')
INTEGER_PARAMS = (
    'amount', 'price', 'memberprice', 'guestprice', 'min_price', 'limit',
    'supplier', 'supplier_id', 'category', 'best_before_date',
)
BOOL_PARAMS = ('value', 'is_member', 'descending')


def _validate_params(params):
    validated = {}
    for name, value in params.items():
        if name in BOOL_PARAMS:
            validated[name] = validate_bool(value, name)
        elif value is None:
            validated[name] = None
        elif name in EAN_PARAMS:
            validated[name] = validate_ean(value)
        elif name in USER_PARAMS:
            validated[name] = validate_user_id(value)
        elif name in TIMESTAMP_PARAMS:
            validated[name] = validate_timestamp(value)
        elif name in INTEGER_PARAMS:
            validated[name] = validate_integer(value, name)
        else:
            validated[name] = value
    return validated


def dispatch(method, params):
    """
    Run one method in its own store session.

    Raises:
        InvalidArgumentError: unknown method or parameters not matching it
        ShopError: whatever the method raises
    """
    func = METHODS.get(method)
    if func is None:
        raise InvalidArgumentError(f'unknown method: {method}')
    if not isinstance(params, dict):
        raise InvalidArgumentError('params must be an object')

    params = _validate_params(params)

    with get_store().session_scope() as session:
        try:
            inspect.signature(func).bind(session, **params)
        except TypeError as e:
            raise InvalidArgumentError(f'{method}: {e}') from e
        return func(session, **params)


@rpc_bp.route('/rpc', methods=['POST'])
def call():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not isinstance(payload.get('method'), str):
        raise InvalidArgumentError('request body must be {"method": ..., "params": {...}}')

    method = payload['method']
    label = method if method in METHODS else 'unknown'
    start = time.time()
    try:
        result = dispatch(method, payload.get('params') or {})
    except ShopError as e:
        record_rpc_call(label, e.kind, time.time() - start)
        raise

    record_rpc_call(label, 'ok', time.time() - start)
    logger.debug(f"RPC {method} ok")
    return jsonify({'status': 'ok', 'result': result})


@rpc_bp.route('/rpc', methods=['GET'])
def list_methods():
    return jsonify({'status': 'ok', 'result': sorted(METHODS)})
