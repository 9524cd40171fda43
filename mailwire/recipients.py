"""Message recipients written as ``Name <address>`` or a bare address."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Recipient:
    """A recipient with an optional display name."""

    name: str = ""
    email: str = ""

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} <{self.email}>"
        return self.email


def parse_recipient(text: str) -> Recipient:
    """Parse ``Name <address>`` or a bare address into a Recipient."""
    if not text.endswith(">"):
        return Recipient(email=text)
    index = text.find("<")
    # A name needs at least one character followed by a space.
    if index < 2:
        raise ValueError(f"malformed recipient string '{text}'")
    return Recipient(name=text[:index].strip(), email=text[index + 1 : -1])