"""
Authentication service - passwords, session tokens and role flags.

SECURITY NOTES:
- Passwords are stored as unsalted SHA-256 hex digests so existing hashes
  keep working. See DESIGN.md before changing the scheme.
- The authentication row is created lazily on the first write.
- Roles are independent flags. ``has_permission`` is the single place where
  superuser implies every other role.
- Session tokens and flags are read-modify-write without locking; the last
  writer wins.
"""
import logging

from shopdb.exceptions import InvalidArgumentError, NotFoundError
from shopdb.models import Authentication, User
from shopdb.utils.identifiers import validate_user_id

logger = logging.getLogger(__name__)

PERMISSIONS = ('cashbox', 'products', 'users')

GUEST_SESSION = {
    'uid': 0,
    'name': 'Guest',
    'superuser': False,
    'auth_cashbox': False,
    'auth_products': False,
    'auth_users': False,
}


def _get_or_create_auth(session, user) -> Authentication:
    auth = session.get(Authentication, user)
    if auth is None:
        auth = Authentication(user=user)
        session.add(auth)
        session.flush()
    return auth


def check_user_password(session, user, password) -> bool:
    """True if ``password`` matches the stored digest; False without a row."""
    user = validate_user_id(user)
    auth = session.get(Authentication, user)
    if auth is None:
        return False
    return auth.check_password(password)


def set_user_password(session, user, password):
    user = validate_user_id(user)
    if not password:
        raise InvalidArgumentError('password must not be empty')

    auth = _get_or_create_auth(session, user)
    auth.set_password(password)
    logger.info(f"Password of user {user} changed")


def set_sessionid(session, user, sessionid):
    """Store the session token of a user (only for users with an auth row)."""
    user = validate_user_id(user)
    auth = session.get(Authentication, user)
    if auth is None:
        raise NotFoundError(f'no authentication entry for user {user}')
    auth.session = sessionid
    logger.debug(f"Session of user {user} updated")


def get_user_by_sessionid(session, sessionid) -> int:
    """Resolve a session token to its user id."""
    if not sessionid:
        raise NotFoundError('unknown session')
    auth = session.query(Authentication).filter(Authentication.session == sessionid).first()
    if auth is None:
        raise NotFoundError('unknown session')
    return auth.user


def get_user_auth(session, user):
    """Stored role flags of a user; all False when no row exists."""
    user = validate_user_id(user)
    auth = session.get(Authentication, user)
    if auth is None:
        return {
            'id': user,
            'superuser': False,
            'auth_cashbox': False,
            'auth_products': False,
            'auth_users': False,
        }
    return auth.to_dict()


def set_user_auth(session, auth):
    """
    Write the cashbox/products/users flags of a user.

    The superuser flag is never granted through this call.
    """
    user = validate_user_id(auth['id'])
    row = _get_or_create_auth(session, user)
    row.auth_users = bool(auth.get('auth_users', False))
    row.auth_products = bool(auth.get('auth_products', False))
    row.auth_cashbox = bool(auth.get('auth_cashbox', False))
    logger.info(
        f"Roles of user {user}: users={row.auth_users} "
        f"products={row.auth_products} cashbox={row.auth_cashbox}"
    )


def revoke_all_roles(session, user):
    """Clear every role flag, superuser included."""
    auth = _get_or_create_auth(session, user)
    auth.clear_roles()
    logger.info(f"All roles of user {user} revoked")


def has_permission(auth, permission) -> bool:
    """
    Authorization check for every handler.

    Args:
        auth: role flags as returned by ``get_user_auth``
        permission: 'cashbox', 'products', 'users' or 'superuser'
    """
    if permission == 'superuser':
        return bool(auth.get('superuser'))
    if permission not in PERMISSIONS:
        raise InvalidArgumentError(f'unknown permission: {permission}')
    return bool(auth.get('superuser')) or bool(auth.get(f'auth_{permission}'))


def get_session_permissions(session, sessionid):
    """
    Effective permissions behind a session token.

    Unknown tokens yield the guest session without any role.
    """
    try:
        uid = get_user_by_sessionid(session, sessionid)
    except NotFoundError:
        return dict(GUEST_SESSION)

    user = session.get(User, uid)
    if user is None:
        raise NotFoundError(f'user {uid} not found')

    auth = get_user_auth(session, uid)
    return {
        'uid': uid,
        'name': user.full_name,
        'superuser': auth['superuser'],
        'auth_cashbox': has_permission(auth, 'cashbox'),
        'auth_products': has_permission(auth, 'products'),
        'auth_users': has_permission(auth, 'users'),
    }
