"""
Privacy and PII pseudonymization for chatbond
Applied to message text and sender names before anything leaves the process
"""

import re
from dataclasses import replace
from typing import Dict, List, Sequence, Tuple

from .models import Message


class Pseudonymizer:
    """Replace PII with stable tokens and senders with User_N aliases."""

    def __init__(self):
        self.phone_counter = 0
        self.email_counter = 0
        self.number_counter = 0
        self.sender_map: Dict[str, str] = {}

        # Optional country code, then 10-15 digits
        self.phone_pattern = re.compile(r'(?:\+\d{1,3}[\s-]?)?\b\d{10,15}\b')
        self.email_pattern = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
        # 6-9 digit sequences (IDs, account numbers); shorter runs are usually times or dates
        self.number_pattern = re.compile(r'\b\d{6,9}\b')

    def pseudonymize_text(self, text: str) -> str:
        """
        Pseudonymize text by replacing PII with tokens.

        Args:
            text: Original text

        Returns:
            Text with <PHONE_n>, <EMAIL_n> and <NUM_n> tokens
        """
        if not text:
            return text

        text = self.email_pattern.sub(lambda m: self._next_token("email"), text)
        text = self.phone_pattern.sub(lambda m: self._next_token("phone"), text)
        text = self.number_pattern.sub(lambda m: self._next_token("number"), text)

        # Names of known senders mentioned inside messages
        for name, alias in self.sender_map.items():
            text = re.sub(rf'\b{re.escape(name)}\b', alias, text)

        return text

    def pseudonymize_sender(self, sender: str) -> str:
        """Map sender name to a pseudonymous ID (User_1, User_2, ...)."""
        if sender not in self.sender_map:
            self.sender_map[sender] = f"User_{len(self.sender_map) + 1}"
        return self.sender_map[sender]

    def restore_text(self, text: str) -> str:
        """Put real sender names back into text produced from pseudonymized input."""
        if not text:
            return text
        # Longest aliases first so User_12 is not clobbered by User_1
        for name, alias in sorted(self.sender_map.items(), key=lambda kv: -len(kv[1])):
            text = re.sub(rf'\b{re.escape(alias)}\b', name, text)
        return text

    def get_sender_mapping(self) -> Dict[str, str]:
        """Get the sender name to pseudo-ID mapping."""
        return self.sender_map.copy()

    def _next_token(self, kind: str) -> str:
        if kind == "phone":
            self.phone_counter += 1
            return f"<PHONE_{self.phone_counter}>"
        if kind == "email":
            self.email_counter += 1
            return f"<EMAIL_{self.email_counter}>"
        self.number_counter += 1
        return f"<NUM_{self.number_counter}>"


def pseudonymize_messages(messages: Sequence[Message]) -> Tuple[List[Message], Pseudonymizer]:
    """
    Pseudonymize senders and text of a message list.

    Returns:
        Tuple of (pseudonymized copies, pseudonymizer instance with mappings)
    """
    pseudo = Pseudonymizer()
    # Register every sender first so in-text mentions are caught from the first message
    for msg in messages:
        pseudo.pseudonymize_sender(msg.sender)

    masked = [
        replace(msg, sender=pseudo.pseudonymize_sender(msg.sender), text=pseudo.pseudonymize_text(msg.text))
        for msg in messages
    ]
    return masked, pseudo


if __name__ == "__main__":
    from datetime import datetime

    pseudo = Pseudonymizer()
    test_cases = [
        "Call me at 9876543210 or email john@example.com",
        "My ID is 12345678 and phone is +91-9876543210",
        "Meeting at 3:45 PM tomorrow",
    ]

    print("Pseudonymization Test:")
    for text in test_cases:
        print(f"Original: {text}")
        print(f"Masked:   {pseudo.pseudonymize_text(text)}\n")

    msgs = [Message(sender=s, text=f"hi {s}", timestamp=datetime.now()) for s in ["Alice", "Bob", "Alice"]]
    masked, mapping = pseudonymize_messages(msgs)
    for m in masked:
        print(f"{m.sender}: {m.text}")
    print(f"\nMapping: {mapping.get_sender_mapping()}")
