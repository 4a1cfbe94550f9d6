"""Pydantic models describing the identify request and response payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from contactgraph.domain.model import IdentityView


def _normalize_value(value: object) -> object:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class IdentifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class IdentifyRequest(IdentifyBaseModel):
    email: str | None = None
    phone_number: str | None = Field(default=None, alias="phoneNumber")

    _normalize_values = field_validator("email", "phone_number", mode="before")(_normalize_value)


class ContactPayload(IdentifyBaseModel):
    primary_contact_id: int = Field(alias="primaryContactId")
    emails: list[str] = Field(default_factory=list)
    phone_numbers: list[str] = Field(default_factory=list, alias="phoneNumbers")
    secondary_contact_ids: list[int] = Field(default_factory=list, alias="secondaryContactIds")


class IdentifyResponse(IdentifyBaseModel):
    contact: ContactPayload

    @classmethod
    def from_view(cls, view: IdentityView) -> IdentifyResponse:
        return cls(
            contact=ContactPayload(
                primary_contact_id=view.primary_contact_id,
                emails=list(view.emails),
                phone_numbers=list(view.phone_numbers),
                secondary_contact_ids=list(view.secondary_contact_ids),
            )
        )

    def to_json(self, *, indent: int | None = None) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
