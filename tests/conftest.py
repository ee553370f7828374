"""
Shared fixtures: a ten-day, two-person conversation with known scores
"""

import pytest
from datetime import datetime, timedelta

from chatbond.models import Message

SCENARIO_START = datetime(2024, 3, 15)
SCENARIO_POSITIVE_BOB = 19


def build_scenario_messages():
    """
    120 messages, 12 per day for 10 days, 10 minutes apart from 09:00.

    Alice and Bob alternate until Alice sends the last ten in a row
    (Alice 65, Bob 55). Alice always laughs; only Bob's first 19 do.
    """
    messages = []
    bob_sent = 0
    for i in range(120):
        sender = "Bob" if (i % 2 == 1 and i < 110) else "Alice"
        if sender == "Alice":
            text = "haha this is great"
        else:
            text = "haha that is great" if bob_sent < SCENARIO_POSITIVE_BOB else "see you at the station"
            bob_sent += 1
        ts = SCENARIO_START + timedelta(days=i // 12, hours=9, minutes=(i % 12) * 10)
        messages.append(Message(sender=sender, text=text, timestamp=ts))
    return messages


def scenario_export():
    """The scenario as a plain-text export."""
    return "\n".join(
        f"{m.timestamp:%d/%m/%y, %H:%M} - {m.sender}: {m.text}" for m in build_scenario_messages()
    )


@pytest.fixture
def scenario_messages():
    return build_scenario_messages()


@pytest.fixture
def scenario_now():
    """Noon on the last active day, so the current streak is live."""
    return SCENARIO_START + timedelta(days=9, hours=12)


@pytest.fixture
def scenario_text():
    return scenario_export()
