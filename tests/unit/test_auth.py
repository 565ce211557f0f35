"""
Unit tests for passwords, session tokens and role flags.
"""

import pytest

from shopdb.exceptions import InvalidArgumentError, NotFoundError
from shopdb.models import Authentication, hash_password
from shopdb.services.auth_service import (
    check_user_password,
    get_session_permissions,
    get_user_auth,
    get_user_by_sessionid,
    has_permission,
    set_sessionid,
    set_user_auth,
    set_user_password,
)
from shopdb.services.user_service import user_disable


class TestPasswords:
    """Tests for password handling."""

    def test_no_row_means_no_match(self, session, member):
        """Test a user without authentication row never matches."""
        assert check_user_password(session, member.id, '') is False
        assert check_user_password(session, member.id, 'secret') is False

    def test_set_and_check(self, session, member):
        """Test the row is created on first write and the digest matches."""
        set_user_password(session, member.id, 'hunter2')

        assert check_user_password(session, member.id, 'hunter2') is True
        assert check_user_password(session, member.id, 'hunter3') is False
        assert session.get(Authentication, member.id).password == hash_password('hunter2')

    def test_empty_password(self, session, member):
        """Test an empty password is rejected."""
        with pytest.raises(InvalidArgumentError):
            set_user_password(session, member.id, '')

    def test_digest_format(self):
        """Test the stored digest is hex SHA-256."""
        assert hash_password('abc') == 'ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad'


class TestSessions:
    """Tests for session tokens."""

    def test_set_and_resolve(self, session, member):
        """Test a stored token resolves to its user."""
        set_user_password(session, member.id, 'pw')
        set_sessionid(session, member.id, 'abc123')

        assert get_user_by_sessionid(session, 'abc123') == member.id

    def test_unknown_token(self, session, member):
        """Test unknown and empty tokens are NotFound."""
        with pytest.raises(NotFoundError):
            get_user_by_sessionid(session, 'nope')
        with pytest.raises(NotFoundError):
            get_user_by_sessionid(session, '')

    def test_set_session_without_row(self, session, member):
        """Test a token can only be stored for users with an auth row."""
        with pytest.raises(NotFoundError):
            set_sessionid(session, member.id, 'abc123')


class TestRoles:
    """Tests for role flags and the permission check."""

    def test_defaults_without_row(self, session, member):
        """Test all flags read false without authentication row."""
        assert get_user_auth(session, member.id) == {
            'id': member.id,
            'superuser': False,
            'auth_cashbox': False,
            'auth_products': False,
            'auth_users': False,
        }

    def test_set_user_auth_never_grants_superuser(self, session, member):
        """Test the superuser flag is ignored on write."""
        set_user_auth(session, {
            'id': member.id,
            'superuser': True,
            'auth_cashbox': True,
            'auth_products': False,
            'auth_users': True,
        })

        auth = get_user_auth(session, member.id)
        assert auth['superuser'] is False
        assert (auth['auth_cashbox'], auth['auth_products'], auth['auth_users']) == (True, False, True)

    def test_superuser_implies_every_role(self):
        """Test the single authorization check folds superuser in."""
        auth = {'superuser': True, 'auth_cashbox': False, 'auth_products': False, 'auth_users': False}

        assert all(has_permission(auth, p) for p in ('cashbox', 'products', 'users', 'superuser'))

    def test_plain_roles(self):
        """Test roles are independent without superuser."""
        auth = {'superuser': False, 'auth_cashbox': True, 'auth_products': False, 'auth_users': False}

        assert has_permission(auth, 'cashbox') is True
        assert has_permission(auth, 'products') is False
        assert has_permission(auth, 'superuser') is False

    def test_unknown_permission(self):
        """Test an unknown permission name is rejected."""
        with pytest.raises(InvalidArgumentError):
            has_permission({}, 'root')

    @pytest.mark.parametrize('flags', [
        {'superuser': True},
        {'auth_users': True, 'auth_products': True, 'auth_cashbox': True},
        {'superuser': True, 'auth_cashbox': True},
        {},
    ])
    def test_disable_clears_all_roles(self, session, member, flags):
        """Test disabling a user leaves every flag false, whatever was set."""
        session.add(Authentication(user=member.id, **flags))
        session.flush()

        user_disable(session, member.id, True)

        auth = get_user_auth(session, member.id)
        assert not any(auth[flag] for flag in ('superuser', 'auth_cashbox', 'auth_products', 'auth_users'))

    def test_reenable_does_not_restore_roles(self, session, member):
        """Test enabling again keeps the roles cleared."""
        session.add(Authentication(user=member.id, auth_users=True))
        session.flush()

        user_disable(session, member.id, True)
        user_disable(session, member.id, False)

        assert get_user_auth(session, member.id)['auth_users'] is False


class TestSessionPermissions:
    """Tests for effective session permissions."""

    def test_superuser_session(self, session, superuser):
        """Test superuser is folded into every role."""
        assert get_session_permissions(session, 'token-ada') == {
            'uid': 5,
            'name': 'Ada Lovelace',
            'superuser': True,
            'auth_cashbox': True,
            'auth_products': True,
            'auth_users': True,
        }

    def test_unknown_token_is_guest(self, session):
        """Test unknown tokens yield the guest session."""
        permissions = get_session_permissions(session, 'missing')

        assert permissions['uid'] == 0
        assert permissions['name'] == 'Guest'
        assert not permissions['auth_products']
