"""
User service - profiles, RFID tags, sound themes and account state.

User ids: > 0 human members, 0 the anonymous guest, < 0 system accounts.
"""
import logging

from sqlalchemy import or_

from shopdb.exceptions import InvalidArgumentError, NotFoundError
from shopdb.models import RfidUser, User
from shopdb.services.auth_service import revoke_all_roles
from shopdb.utils.identifiers import validate_user_id

logger = logging.getLogger(__name__)

# Fields compared by user_equals, besides the RFID set
PROFILE_FIELDS = (
    'id', 'firstname', 'lastname', 'email', 'gender', 'street', 'postcode',
    'city', 'pgp', 'joined_at', 'disabled', 'hidden',
)


def _get_user(session, user_id) -> User:
    user = session.get(User, validate_user_id(user_id))
    if user is None:
        raise NotFoundError(f'user {user_id} not found')
    return user


def get_user_info(session, user_id):
    return _get_user(session, user_id).to_info()


def get_username(session, user_id) -> str:
    return _get_user(session, user_id).full_name


def get_member_ids(session):
    """Ids of human members (id > 0)."""
    return [row.id for row in session.query(User.id).filter(User.id > 0).order_by(User.id)]


def get_system_member_ids(session):
    """Ids of the guest and system accounts (id <= 0)."""
    return [row.id for row in session.query(User.id).filter(User.id <= 0).order_by(User.id)]


def user_exists(session, user_id) -> bool:
    """True for existing human members; system accounts do not count."""
    user_id = validate_user_id(user_id)
    return user_id > 0 and session.get(User, user_id) is not None


def user_is_disabled(session, user_id) -> bool:
    return bool(_get_user(session, user_id).disabled)


def user_disable(session, user_id, value: bool):
    """
    Disable or enable a user.

    Disabling always revokes every role; re-enabling does not restore them.
    """
    user = _get_user(session, user_id)
    if value:
        revoke_all_roles(session, user.id)
    user.disabled = bool(value)
    logger.info(f"User {user.id} disabled={user.disabled}")


def user_replace(session, info):
    """
    Insert or overwrite a user profile from a UserInfo dict.

    The stored sound theme is kept; the RFID list is replaced.
    """
    missing = [field for field in PROFILE_FIELDS if field not in info]
    if missing:
        raise InvalidArgumentError(f"user info lacks: {', '.join(missing)}")

    user_id = validate_user_id(info['id'])
    user = session.get(User, user_id)
    if user is None:
        user = User(id=user_id)
        session.add(user)

    user.firstname = info['firstname']
    user.lastname = info['lastname']
    user.email = info['email']
    user.gender = info['gender']
    user.street = info['street']
    user.plz = str(info['postcode'])
    user.city = info['city']
    user.pgp = info['pgp']
    user.joined_at = info['joined_at']
    user.disabled = bool(info['disabled'])
    user.hidden = bool(info['hidden'])

    session.flush()

    # A tag may move from another user to this one
    rfids = list(dict.fromkeys(info.get('rfid') or []))
    (
        session.query(RfidUser)
        .filter(or_(RfidUser.user_id == user_id, RfidUser.rfid.in_(rfids)))
        .delete(synchronize_session='fetch')
    )
    session.expire(user, ['rfids'])
    for rfid in rfids:
        session.add(RfidUser(rfid=rfid, user_id=user_id))
    session.flush()

    logger.info(f"User {user_id} replaced ({len(rfids)} RFID tags)")


def user_equals(session, info) -> bool:
    """
    Compare a UserInfo dict with the stored user, field by field.

    RFID tags are compared as sets, so their order does not matter.
    """
    stored = get_user_info(session, info['id'])

    for field in PROFILE_FIELDS:
        if field == 'postcode':
            if str(stored[field]) != str(info.get(field)):
                return False
        elif stored[field] != info.get(field):
            return False

    return set(stored['rfid']) == set(info.get('rfid') or [])


def get_userid_for_rfid(session, rfid) -> int:
    row = session.get(RfidUser, rfid)
    if row is None:
        raise NotFoundError('unknown RFID tag')
    return row.user_id


def set_user_theme(session, user_id, theme):
    """Set the preferred audio theme; an empty string resets to the default."""
    user = _get_user(session, user_id)
    user.sound_theme = theme or None
    logger.info(f"Sound theme of user {user.id} set to {user.sound_theme!r}")


def get_user_theme(session, user_id, fallback) -> str:
    """Preferred audio theme of a user, ``fallback`` when unset."""
    user = _get_user(session, user_id)
    return user.sound_theme or fallback
