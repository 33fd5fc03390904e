"""Tests for the detail level ordering and the send attempt context."""

import pytest

from mailticks.models import DetailLevel, Recipient, SendAttempt, Transport


class TestDetailLevel:
    """Tests for the ordered detail level enumeration."""

    def test_levels_are_ordered(self):
        """Levels compare from NONE up to FULL."""
        assert (
            DetailLevel.NONE
            < DetailLevel.INFO
            < DetailLevel.DETAILED
            < DetailLevel.FULL
        )

    @pytest.mark.parametrize(
        "level, expected",
        [
            (DetailLevel.NONE, False),
            (DetailLevel.INFO, False),
            (DetailLevel.DETAILED, True),
            (DetailLevel.FULL, True),
        ],
    )
    def test_atleast_detailed(self, level, expected):
        """atleast() is true for the level itself and everything above."""
        assert level.atleast(DetailLevel.DETAILED) is expected

    def test_atleast_none_is_always_true(self):
        """Every level is at least NONE."""
        assert all(level.atleast(DetailLevel.NONE) for level in DetailLevel)

    def test_levels_read_from_strings(self):
        """Levels are created from their lowercase names."""
        assert DetailLevel("detailed") is DetailLevel.DETAILED

    def test_comparison_with_other_types_fails(self):
        """Levels are not comparable with raw integers."""
        with pytest.raises(TypeError):
            DetailLevel.INFO < 2


class TestSendAttempt:
    """Tests for the per-call attempt context."""

    def test_defaults_are_empty(self):
        """A new attempt only knows its start time."""
        attempt = SendAttempt(start_timestamp=1724932393.008985)
        assert attempt.to == []
        assert attempt.extra == {}
        assert attempt.subject == ""

    def test_capture_copies_sender_state(self, make_mailer):
        """capture() snapshots recipients and message of a sender."""
        sender = make_mailer(transport=Transport.MAIL)
        sender.add_address("to@mail.com", "To")
        sender.add_cc("cc@mail.com")
        sender.add_bcc("bcc@mail.com")

        attempt = SendAttempt(start_timestamp=0.0)
        attempt.capture(sender)
        sender.clear_recipients()

        assert attempt.to == [Recipient("to@mail.com", "To")]
        assert attempt.cc == [Recipient("cc@mail.com")]
        assert attempt.bcc == [Recipient("bcc@mail.com")]
        assert attempt.subject == "subject"
        assert attempt.body == "full mime body"
        assert attempt.from_address == "from@mail.com"


class TestRecipient:
    def test_str_with_name(self):
        recipient = Recipient("jane@mail.com", "Jane")
        assert str(recipient) == "Jane <jane@mail.com>"

    def test_str_without_name(self):
        assert str(Recipient("jane@mail.com")) == "jane@mail.com"
