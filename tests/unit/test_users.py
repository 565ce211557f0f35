"""
Unit tests for user profiles, RFID tags and themes.
"""

import pytest

from shopdb.exceptions import InvalidArgumentError, NotFoundError
from shopdb.models import RfidUser, User
from shopdb.services.user_service import (
    get_member_ids,
    get_system_member_ids,
    get_user_info,
    get_user_theme,
    get_userid_for_rfid,
    get_username,
    set_user_theme,
    user_disable,
    user_equals,
    user_exists,
    user_is_disabled,
    user_replace,
)


def make_info(user_id=7, **overrides):
    info = {
        'id': user_id,
        'firstname': 'Grace',
        'lastname': 'Hopper',
        'email': 'grace@example.org',
        'gender': 'female',
        'street': 'Main St 1',
        'postcode': '30159',
        'city': 'Hannover',
        'pgp': '',
        'joined_at': 1_500_000_000,
        'disabled': False,
        'hidden': False,
        'rfid': ['aa01', 'bb02'],
    }
    info.update(overrides)
    return info


class TestUserReplace:
    """Tests for upserting user profiles."""

    def test_insert_and_read(self, session):
        """Test a new user is created from the profile."""
        user_replace(session, make_info())

        info = get_user_info(session, 7)
        assert info['firstname'] == 'Grace'
        assert info['postcode'] == '30159'
        assert sorted(info['rfid']) == ['aa01', 'bb02']
        assert get_username(session, 7) == 'Grace Hopper'

    def test_update_keeps_theme_and_replaces_rfids(self, session):
        """Test the sound theme survives and RFID tags are replaced."""
        user_replace(session, make_info())
        set_user_theme(session, 7, 'retro')

        user_replace(session, make_info(city='Berlin', rfid=['cc03']))

        info = get_user_info(session, 7)
        assert info['city'] == 'Berlin'
        assert info['sound_theme'] == 'retro'
        assert info['rfid'] == ['cc03']
        assert session.get(RfidUser, 'aa01') is None

    def test_rfid_moves_between_users(self, session):
        """Test a tag handed to another user is taken from the first one."""
        user_replace(session, make_info(7, rfid=['aa01']))
        user_replace(session, make_info(8, rfid=['aa01']))

        assert get_userid_for_rfid(session, 'aa01') == 8
        assert get_user_info(session, 7)['rfid'] == []

    def test_incomplete_info(self, session):
        """Test a profile with missing fields is rejected."""
        info = make_info()
        del info['email']

        with pytest.raises(InvalidArgumentError):
            user_replace(session, info)


class TestUserEquals:
    """Tests for profile comparison."""

    def test_equal_ignores_rfid_order(self, session):
        """Test RFID tags are compared as a set."""
        user_replace(session, make_info())

        assert user_equals(session, make_info(rfid=['bb02', 'aa01'])) is True

    def test_field_difference(self, session):
        """Test a changed field is detected."""
        user_replace(session, make_info())

        assert user_equals(session, make_info(lastname='Murray')) is False
        assert user_equals(session, make_info(rfid=['aa01'])) is False

    def test_postcode_compared_as_text(self, session):
        """Test numeric and text postcodes compare equal."""
        user_replace(session, make_info())

        assert user_equals(session, make_info(postcode=30159)) is True


class TestUserState:
    """Tests for existence, disabling and id lists."""

    def test_user_exists_only_for_members(self, session, member, guest, loss_account):
        """Test the guest and system accounts do not count as existing."""
        assert user_exists(session, member.id) is True
        assert user_exists(session, 0) is False
        assert user_exists(session, -3) is False
        assert user_exists(session, 99) is False

    def test_member_and_system_ids(self, session, member, guest, loss_account):
        """Test id lists are split by sign."""
        assert get_member_ids(session) == [5]
        assert get_system_member_ids(session) == [-3, 0]

    def test_disable(self, session, member):
        """Test the disabled flag round trip."""
        user_disable(session, member.id, True)
        assert user_is_disabled(session, member.id) is True

        user_disable(session, member.id, False)
        assert user_is_disabled(session, member.id) is False

    def test_unknown_user(self, session):
        """Test lookups of missing users are NotFound."""
        with pytest.raises(NotFoundError):
            get_user_info(session, 99)
        with pytest.raises(NotFoundError):
            get_userid_for_rfid(session, 'ffff')


class TestThemes:
    """Tests for sound themes."""

    def test_fallback_when_unset(self, session, member):
        """Test the fallback is returned without stored theme."""
        assert get_user_theme(session, member.id, 'default') == 'default'

    def test_set_and_clear(self, session, member):
        """Test an empty theme resets to the fallback."""
        set_user_theme(session, member.id, 'space')
        assert get_user_theme(session, member.id, 'default') == 'space'

        set_user_theme(session, member.id, '')
        assert session.get(User, member.id).sound_theme is None
        assert get_user_theme(session, member.id, 'default') == 'default'
