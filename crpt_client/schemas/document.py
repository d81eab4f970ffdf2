"""Pydantic schemas for the commissioning document payload.

Attribute names are snake_case; aliases carry the exact wire names. Every
field is optional and only fields the caller actually set are serialized,
so the payload never contains ``null`` placeholders.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    """Immutable model serialized by alias with unset fields omitted."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    def present_fields(self) -> frozenset[str]:
        """Names of fields the caller set to a non-None value."""
        return frozenset(
            name for name in self.model_fields_set if getattr(self, name) is not None
        )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_unset=True,
            exclude_none=True,
        )


class Description(_WireModel):
    """Nested participant description."""

    participant_inn: str | None = Field(
        default=None,
        alias="participantInn",
        description="Participant tax identifier (INN).",
    )


class Product(_WireModel):
    """One commissioned product with its certificate metadata."""

    certificate_document: str | None = Field(
        default=None, description="Certificate document type/identifier."
    )
    certificate_document_date: str | None = Field(
        default=None, description="Certificate issue date (YYYY-MM-DD)."
    )
    certificate_document_number: str | None = Field(
        default=None, description="Certificate number."
    )
    owner_inn: str | None = Field(default=None, description="Owner tax identifier.")
    producer_inn: str | None = Field(default=None, description="Producer tax identifier.")
    production_date: str | None = Field(
        default=None, description="Production date (YYYY-MM-DD)."
    )
    tnved_code: str | None = Field(
        default=None, description="Commodity classification code (TN VED)."
    )
    uit_code: str | None = Field(default=None, description="Unit identifier code (UIT).")
    uitu_code: str | None = Field(
        default=None, description="Transport unit identifier code (UITU)."
    )


class Document(_WireModel):
    """Commissioning record submitted for registration."""

    description: Description | None = Field(default=None)
    doc_id: str | None = Field(default=None)
    doc_status: str | None = Field(default=None)
    doc_type: str | None = Field(default=None)
    import_request: bool | None = Field(default=None, alias="importRequest")
    owner_inn: str | None = Field(default=None)
    participant_inn: str | None = Field(default=None)
    producer_inn: str | None = Field(default=None)
    production_date: str | None = Field(default=None)
    production_type: str | None = Field(default=None)
    products: tuple[Product, ...] | None = Field(default=None)
    reg_date: str | None = Field(default=None)
    reg_number: str | None = Field(default=None)


class SubmissionRequest(BaseModel):
    """The exact unit sent to the endpoint: one document and its signature."""

    model_config = ConfigDict(frozen=True)

    document: Document
    signature: str = Field(..., min_length=1)

    def to_payload(self) -> dict[str, Any]:
        return {"document": self.document.to_wire(), "signature": self.signature}

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), ensure_ascii=False)
