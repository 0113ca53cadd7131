"""Tests for adapters.fedex.notifications: success classification."""

import pytest

from adapters.fedex.notifications import Notification
from adapters.fedex.xml_tree import parse_document


def _reply(severity, code="0", message="Done"):
    return parse_document(
        "<Reply><Notifications>"
        f"<Severity>{severity}</Severity><Code>{code}</Code><Message>{message}</Message>"
        "</Notifications></Reply>"
    )


class TestNotification:

    @pytest.mark.parametrize("severity", ["SUCCESS", "WARNING", "NOTE"])
    def test_non_error_tiers_succeed(self, severity):
        assert Notification.from_reply(_reply(severity)).is_success

    @pytest.mark.parametrize("severity", ["ERROR", "FAILURE", ""])
    def test_error_tiers_fail(self, severity):
        assert not Notification.from_reply(_reply(severity)).is_success

    def test_message_is_composed_even_on_success(self):
        notification = Notification.from_reply(_reply("WARNING", "556", "There are no valid services available."))
        assert notification.compose_message() == "WARNING - 556: There are no valid services available."

    def test_first_notification_wins(self):
        reply = parse_document(
            "<Reply>"
            "<Notifications><Severity>ERROR</Severity><Code>1</Code><Message>bad</Message></Notifications>"
            "<Notifications><Severity>SUCCESS</Severity><Code>0</Code><Message>ok</Message></Notifications>"
            "</Reply>"
        )
        assert Notification.from_reply(reply) == Notification("ERROR", "1", "bad")

    def test_missing_notification(self):
        notification = Notification.from_reply(parse_document("<Reply/>"))
        assert not notification.is_success
        assert notification.compose_message() == " - : "
        assert Notification.from_reply(None) == Notification()
