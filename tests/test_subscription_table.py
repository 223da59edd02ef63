"""Tests for the subscription table."""

from unittest.mock import MagicMock

import pytest

from shocker_hub.application.services import SubscriptionTable, normalize_device_ids
from shocker_hub.domain.errors import MissingCredentialError, MissingDeviceIdsError


class TestNormalizeDeviceIds:
    """Tests for device ID normalization."""

    def test_when_comma_string_then_split_and_trimmed(self) -> None:
        """Given a comma string with blanks, when normalizing, then trimmed non-empty IDs remain."""
        assert normalize_device_ids(" a , b,, c ,") == ["a", "b", "c"]

    def test_when_list_with_numbers_then_stringified(self) -> None:
        """Given a list with numbers and blanks, when normalizing, then items become strings."""
        assert normalize_device_ids([1, " x ", "", None]) == ["1", "x"]

    def test_when_duplicates_then_first_occurrence_kept(self) -> None:
        """Given duplicate IDs, when normalizing, then each appears once in first order."""
        assert normalize_device_ids(["b", "a", "b"]) == ["b", "a"]

    def test_when_unsupported_type_then_empty(self) -> None:
        """Given a non-list, non-string value, when normalizing, then nothing is returned."""
        assert normalize_device_ids(42) == []
        assert normalize_device_ids(None) == []


class TestSubscribe:
    """Tests for subscribing connections."""

    def test_when_subscribed_then_normalized_ids_returned(self, make_connection) -> None:
        """Given IDs and a token, when subscribing, then normalized IDs are acknowledged."""
        table = SubscriptionTable()
        connection = make_connection()

        result = table.subscribe(connection, "s1, s2", "token-a", api_key="key")

        assert result == ["s1", "s2"]
        assert table.is_subscribed(connection)
        subscription = table.get(connection)
        assert subscription is not None
        assert subscription.device_ids == ("s1", "s2")
        assert subscription.api_key == "key"

    def test_when_no_ids_and_no_default_then_missing_ids_error(self, make_connection) -> None:
        """Given no device IDs and no defaults, when subscribing, then MissingDeviceIdsError."""
        table = SubscriptionTable()

        with pytest.raises(MissingDeviceIdsError):
            table.subscribe(make_connection(), " , ", "token")

        assert len(table) == 0

    def test_when_no_ids_then_defaults_used(self, make_connection) -> None:
        """Given configured default IDs, when subscribing without IDs, then defaults apply."""
        table = SubscriptionTable(default_device_ids=["d1", "d2"])

        assert table.subscribe(make_connection(), None, "token") == ["d1", "d2"]

    def test_when_blank_token_then_missing_credential_error(self, make_connection) -> None:
        """Given a blank token and no default, when subscribing, then MissingCredentialError."""
        table = SubscriptionTable()

        with pytest.raises(MissingCredentialError):
            table.subscribe(make_connection(), ["s1"], "   ")

    def test_when_no_token_then_default_credential_used(self, make_connection) -> None:
        """Given a default credential, when subscribing without a token, then it is used."""
        table = SubscriptionTable(default_credential="server-token")
        connection = make_connection()

        table.subscribe(connection, ["s1"], None)

        assert table.group_by_credential() == {"server-token": {"s1"}}

    def test_when_resubscribed_then_entry_overwritten(self, make_connection) -> None:
        """Given an existing subscription, when subscribing again, then it is replaced."""
        table = SubscriptionTable()
        connection = make_connection()
        table.subscribe(connection, ["s1"], "old")

        table.subscribe(connection, ["s2"], "new")

        assert len(table) == 1
        assert table.group_by_credential() == {"new": {"s2"}}


class TestEdgeChecks:
    """Tests for listener notification on subscriber set changes."""

    def test_when_subscribe_and_unsubscribe_then_listener_notified(self, make_connection) -> None:
        """Given a listener, when subscribing and unsubscribing, then it is notified each time."""
        table = SubscriptionTable()
        listener = MagicMock()
        table.add_listener(listener)
        connection = make_connection()

        table.subscribe(connection, ["s1"], "token")
        removed = table.unsubscribe(connection)

        assert removed is True
        assert listener.call_count == 2
        assert table.has_active_subscribers() is False

    def test_when_unsubscribing_unknown_connection_then_false(self, make_connection) -> None:
        """Given an unsubscribed connection, when unsubscribing, then False is returned."""
        table = SubscriptionTable()

        assert table.unsubscribe(make_connection()) is False

    def test_when_disconnected_then_entry_removed_and_listener_notified(
        self, make_connection
    ) -> None:
        """Given a subscriber, when its connection goes away, then the entry is removed."""
        table = SubscriptionTable()
        listener = MagicMock()
        connection = make_connection()
        table.subscribe(connection, ["s1"], "token")
        table.add_listener(listener)

        table.remove_on_disconnect(connection)

        assert not table.is_subscribed(connection)
        listener.assert_called_once_with()

    def test_when_closed_entry_pruned_then_listener_notified(self, make_connection) -> None:
        """Given a subscriber whose connection closed, when reading entries, then pruned."""
        table = SubscriptionTable()
        closed = make_connection()
        table.subscribe(closed, ["s1"], "token")
        listener = MagicMock()
        table.add_listener(listener)
        closed.close()

        assert table.active_entries() == []
        listener.assert_called_once_with()

    def test_when_checking_active_then_prunes_without_notifying(self, make_connection) -> None:
        """Given a closed subscriber, when checking activity, then pruned silently."""
        table = SubscriptionTable()
        closed = make_connection()
        table.subscribe(closed, ["s1"], "token")
        listener = MagicMock()
        table.add_listener(listener)
        closed.close()

        assert table.has_active_subscribers() is False
        assert len(table) == 0
        listener.assert_not_called()

    def test_when_listener_raises_then_subscribe_still_succeeds(self, make_connection) -> None:
        """Given a failing listener, when subscribing, then the subscription is kept."""
        table = SubscriptionTable()
        table.add_listener(MagicMock(side_effect=RuntimeError("boom")))
        connection = make_connection()

        table.subscribe(connection, ["s1"], "token")

        assert table.is_subscribed(connection)


class TestGroupByCredential:
    """Tests for credential grouping."""

    def test_when_subscribers_share_token_then_device_ids_unioned(self, make_connection) -> None:
        """Given two subscribers with one token, when grouping, then one group holds the union."""
        table = SubscriptionTable()
        table.subscribe(make_connection(), ["a", "b"], "T1")
        table.subscribe(make_connection(), ["b", "c"], "T1")
        table.subscribe(make_connection(), ["x"], "T2")

        groups = table.group_by_credential()

        assert groups == {"T1": {"a", "b", "c"}, "T2": {"x"}}

    def test_when_result_mutated_then_table_unaffected(self, make_connection) -> None:
        """Given a grouping result, when mutated, then the next grouping is unchanged."""
        table = SubscriptionTable()
        table.subscribe(make_connection(), ["a"], "T1")

        table.group_by_credential()["T1"].add("z")

        assert table.group_by_credential() == {"T1": {"a"}}

    def test_when_connection_closed_then_excluded_from_groups(self, make_connection) -> None:
        """Given a closed subscriber, when grouping, then its devices are not included."""
        table = SubscriptionTable()
        closed = make_connection()
        table.subscribe(closed, ["gone"], "T1")
        table.subscribe(make_connection(), ["kept"], "T1")
        closed.close()

        assert table.group_by_credential() == {"T1": {"kept"}}
