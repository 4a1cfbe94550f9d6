"""Incoming observations and their validation."""

from __future__ import annotations

from dataclasses import dataclass

from contactgraph.domain.errors import ValidationError


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


@dataclass(frozen=True, slots=True)
class Observation:
    """One submitted (email, phone number) pair; at least one value is present."""

    email: str | None = None
    phone_number: str | None = None

    def __post_init__(self) -> None:
        if self.email is None and self.phone_number is None:
            raise ValidationError("Either email or phoneNumber is required")

    @classmethod
    def from_values(cls, email: str | None, phone_number: str | None) -> Observation:
        """Build an observation, treating blank strings as absent."""

        return cls(email=_blank_to_none(email), phone_number=_blank_to_none(phone_number))

    def adds_to(self, emails: set[str], phone_numbers: set[str]) -> bool:
        """Return whether this observation carries a value missing from the given sets."""

        new_email = self.email is not None and self.email not in emails
        new_phone = self.phone_number is not None and self.phone_number not in phone_numbers
        return new_email or new_phone
