"""
Unit tests for the cashbox ledger.
"""

from shopdb.services.cashbox_service import (
    cashbox_add,
    cashbox_changes,
    cashbox_entry_label,
    cashbox_history,
    cashbox_status,
)


class TestCashbox:
    """Tests for cash movements."""

    def test_empty_status(self, session):
        """Test an empty ledger sums to zero."""
        assert cashbox_status(session) == 0

    def test_status_is_running_sum(self, session):
        """Test deposits and withdrawals add up."""
        cashbox_add(session, 5, 5000, 100)
        cashbox_add(session, 5, -1250, 200)
        cashbox_add(session, -3, -30, 300)

        assert cashbox_status(session) == 3720

    def test_history_newest_first(self, session):
        """Test history is limited and ordered newest first."""
        for ts in range(1, 13):
            cashbox_add(session, 5, ts, ts * 100)

        history = cashbox_history(session)

        assert len(history) == 10
        assert [e['timestamp'] for e in history[:2]] == [1200, 1100]
        assert len(cashbox_history(session, limit=3)) == 3

    def test_changes_half_open(self, session):
        """Test start is included, stop excluded, oldest first."""
        for ts in (100, 200, 300):
            cashbox_add(session, 5, 1, ts)

        assert [e['timestamp'] for e in cashbox_changes(session, 100, 300)] == [100, 200]

    def test_entry_labels(self):
        """Test account -3 reads as loss or donation by sign."""
        assert cashbox_entry_label({'user': -3, 'amount': -50}) == 'Loss'
        assert cashbox_entry_label({'user': -3, 'amount': 50}) == 'Donation'
        assert cashbox_entry_label({'user': 5, 'amount': 50}, 'Ada Lovelace') == 'Ada Lovelace'
        assert cashbox_entry_label({'user': 9, 'amount': 50}) == '9'
