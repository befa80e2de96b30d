"""
Validation of product input and reconciliation of partial updates.

Create input is checked field by field and turned into a ``NewProduct``.
Update input becomes a ``ProductPatch`` whose fields are either ``UNSET`` or
carry a value; ``reconcile`` compares the present fields against the stored
record and keeps only the ones whose value actually differs, so that a patch
repeating the current values is a no-op (nothing persisted, ``updated_at``
untouched).

Every violated constraint is collected and raised together in a single
``ValidationError``; nothing is applied when any field is invalid.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Union

from app.core.errors import ValidationError
from app.models import NAME_MAX_LENGTH
from app.schemas import ProductCreate, ProductUpdate


class _Unset:
    """Marker for a field absent from the input."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()

RECONCILED_FIELDS = ("name", "description", "price")


@dataclass(frozen=True)
class NewProduct:
    name: str
    description: str
    price: float


@dataclass(frozen=True)
class ProductPatch:
    name: Union[str, _Unset] = UNSET
    description: Union[str, _Unset] = UNSET
    price: Union[float, _Unset] = UNSET

    @classmethod
    def from_input(cls, payload: ProductUpdate) -> "ProductPatch":
        # A key sent as null is treated the same as a missing key.
        values = {
            name: getattr(payload, name)
            for name in RECONCILED_FIELDS
            if name in payload.model_fields_set and getattr(payload, name) is not None
        }
        return cls(**values)

    def present(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in RECONCILED_FIELDS if getattr(self, name) is not UNSET}


@dataclass(frozen=True)
class Reconciliation:
    changes: dict[str, Any] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.changes)


def _name_errors(name: str) -> list[str]:
    if name == "":
        return ["name cannot be empty"]
    if len(name) > NAME_MAX_LENGTH:
        return [f"name must be at most {NAME_MAX_LENGTH} characters"]
    return []


def _price_errors(price: float) -> list[str]:
    if not math.isfinite(price):
        return ["price must be a finite number"]
    if price < 0:
        return ["price must be greater than or equal to 0"]
    return []


def validate_create(payload: ProductCreate) -> NewProduct:
    errors: list[str] = []

    if payload.name is None:
        errors.append("name is required")
    else:
        errors.extend(_name_errors(payload.name))

    if payload.price is None:
        errors.append("price is required")
    else:
        errors.extend(_price_errors(payload.price))

    if errors:
        raise ValidationError(errors)

    return NewProduct(
        name=payload.name,
        description=payload.description if payload.description is not None else "",
        price=float(payload.price),
    )


def validate_patch(patch: ProductPatch) -> None:
    errors: list[str] = []
    if patch.name is not UNSET:
        errors.extend(_name_errors(patch.name))
    if patch.price is not UNSET:
        errors.extend(_price_errors(patch.price))
    if errors:
        raise ValidationError(errors)


def reconcile(current: Any, patch: ProductPatch) -> Reconciliation:
    """
    Compute the minimal set of changes ``patch`` makes to ``current``.

    ``current`` is anything exposing ``name``, ``description`` and ``price``
    attributes (the ORM row in practice). It is not modified.
    """
    validate_patch(patch)

    changes = {}
    for name, value in patch.present().items():
        if name == "price":
            value = float(value)
        if value != getattr(current, name):
            changes[name] = value
    return Reconciliation(changes=changes)
