"""
Tests for PII pseudonymization
"""

import pytest
from datetime import datetime

from chatbond.models import Message
from chatbond.privacy import Pseudonymizer, pseudonymize_messages


def test_phone_and_email_masked():
    pseudo = Pseudonymizer()
    masked = pseudo.pseudonymize_text("Call me at 9876543210 or email john@example.com")

    assert masked == "Call me at <PHONE_1> or email <EMAIL_1>"


def test_country_code_and_ids():
    pseudo = Pseudonymizer()
    masked = pseudo.pseudonymize_text("My ID is 12345678 and phone is +91-9876543210")

    assert "<NUM_1>" in masked
    assert "<PHONE_1>" in masked
    assert "9876543210" not in masked


def test_times_untouched():
    pseudo = Pseudonymizer()
    assert pseudo.pseudonymize_text("Meeting at 3:45 PM tomorrow") == "Meeting at 3:45 PM tomorrow"


def test_sender_aliases_are_stable():
    pseudo = Pseudonymizer()

    assert pseudo.pseudonymize_sender("Alice") == "User_1"
    assert pseudo.pseudonymize_sender("Bob") == "User_2"
    assert pseudo.pseudonymize_sender("Alice") == "User_1"
    assert pseudo.get_sender_mapping() == {"Alice": "User_1", "Bob": "User_2"}


def test_pseudonymize_messages_masks_mentions():
    """Sender names inside text are replaced, and can be restored."""
    now = datetime(2024, 1, 1, 9, 0)
    messages = [
        Message("Alice", "hi Bob", now),
        Message("Bob", "hey Alice, mail me at bob@example.com", now),
    ]
    masked, pseudo = pseudonymize_messages(messages)

    assert [m.sender for m in masked] == ["User_1", "User_2"]
    assert masked[0].text == "hi User_2"
    assert masked[1].text == "hey User_1, mail me at <EMAIL_1>"
    assert messages[0].text == "hi Bob"
    assert pseudo.restore_text("User_2 is kind to User_1") == "Bob is kind to Alice"


def test_restore_prefers_longer_alias():
    pseudo = Pseudonymizer()
    for i in range(12):
        pseudo.pseudonymize_sender(f"Person{i}")

    assert pseudo.restore_text("User_12 and User_1") == "Person11 and Person0"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
