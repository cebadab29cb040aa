"""Certification record and catalog type models.

This module defines immutable Pydantic models for the two inputs of the
irregularity engine:
- CertificationRecord: one person's claim of holding a certification
- CertificationType: a standardized, platform-specific catalog entry

Both accept camelCase keys (as sent by the dashboard), snake_case keys, and
the column names used by the backing store (``user_id``, ``full_name``...),
so exports can be fed in without reshaping.
"""

from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _coerce_identifier(value: object) -> object:
    # Exports from some tables carry integer keys
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def _require_identifier(value: str) -> str:
    if not value.strip():
        msg = "identifier must not be blank"
        raise ValueError(msg)
    return value


class CertificationRecord(BaseModel):
    """A certification a person claims to hold.

    Two records are exact duplicates only when their normalized name,
    normalized function and owner all match; the same certification held
    by different people is never an irregularity.

    Attributes:
        id: Opaque unique identifier.
        name: Certification name as typed by the user.
        function: Role/specialization label as typed by the user.
        owner_id: Person holding the certification (immutable).
        created_at: Creation timestamp, used to pick the most recent record.
        validity_date: Optional expiry date.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(description="Record identifier")
    name: str = Field(default="", description="Raw certification name")
    function: str = Field(default="", description="Raw role/specialization label")
    owner_id: str = Field(
        validation_alias=AliasChoices("owner_id", "ownerId", "user_id", "userId"),
        description="Owner identifier",
    )
    created_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("created_at", "createdAt"),
        description="Creation timestamp",
    )
    validity_date: date | None = Field(
        default=None,
        validation_alias=AliasChoices("validity_date", "validityDate"),
        description="Expiry date",
    )

    @field_validator("id", "owner_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: object) -> object:
        return _coerce_identifier(value)

    @field_validator("id", "owner_id")
    @classmethod
    def _require_ids(cls, value: str) -> str:
        return _require_identifier(value)

    @field_validator("name", "function", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value


class CertificationType(BaseModel):
    """A standardized certification entry in the catalog.

    Deactivated types stay in the catalog for audit and as migration
    targets but are never suggested for new standardizations.

    Attributes:
        id: Catalog identifier.
        platform_id: Issuing platform reference.
        name: Short name (e.g. "SAA").
        full_name: Canonical long name.
        function: Canonical specialization label.
        aliases: Alternate spellings users type instead of the full name.
        is_active: Whether the type can still be selected.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(description="Type identifier")
    platform_id: str = Field(
        default="",
        validation_alias=AliasChoices("platform_id", "platformId"),
        description="Issuing platform identifier",
    )
    name: str = Field(default="", description="Short name")
    full_name: str = Field(
        default="",
        validation_alias=AliasChoices("full_name", "fullName"),
        description="Canonical long name",
    )
    function: str = Field(default="", description="Canonical specialization")
    aliases: tuple[str, ...] = Field(default=(), description="Alternate names")
    is_active: bool = Field(
        default=True,
        validation_alias=AliasChoices("is_active", "isActive"),
        description="Whether the type is selectable",
    )

    @field_validator("id", "platform_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: object) -> object:
        return _coerce_identifier(value)

    @field_validator("id")
    @classmethod
    def _require_id(cls, value: str) -> str:
        return _require_identifier(value)

    @field_validator("platform_id", "name", "full_name", "function", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("aliases", mode="before")
    @classmethod
    def _none_to_no_aliases(cls, value: object) -> object:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return value

    @property
    def label(self) -> str:
        """Display label used in duplicate-type findings."""
        return f"{self.name} ({self.full_name})"

    @property
    def comparable_name(self) -> str:
        """Full name, or the short name when no full name is set."""
        return self.full_name or self.name
