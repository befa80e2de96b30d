from __future__ import annotations

import math
from types import SimpleNamespace

import pytest

from app.core.errors import ValidationError
from app.schemas import ProductCreate, ProductUpdate
from app.validation import UNSET, NewProduct, ProductPatch, reconcile, validate_create


def _current(**overrides):
    values = {"name": "Widget", "description": "Blue", "price": 9.99}
    values.update(overrides)
    return SimpleNamespace(**values)


# -------------------------
# validate_create
# -------------------------
def test_validate_create_defaults_description():
    new = validate_create(ProductCreate(name="Widget", price=9.99))
    assert new == NewProduct(name="Widget", description="", price=9.99)


def test_validate_create_keeps_description():
    new = validate_create(ProductCreate(name="Widget", description="Blue", price=0))
    assert new.description == "Blue"
    assert new.price == 0.0


def test_validate_create_collects_every_error():
    with pytest.raises(ValidationError) as exc_info:
        validate_create(ProductCreate())
    assert exc_info.value.details == ["name is required", "price is required"]
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("price", [-0.01, -100.0, math.inf, math.nan])
def test_validate_create_rejects_bad_price(price):
    with pytest.raises(ValidationError):
        validate_create(ProductCreate(name="Widget", price=price))


def test_validate_create_rejects_empty_name():
    with pytest.raises(ValidationError) as exc_info:
        validate_create(ProductCreate(name="", price=1.0))
    assert exc_info.value.details == ["name cannot be empty"]


# -------------------------
# ProductPatch
# -------------------------
def test_patch_from_input_tracks_presence():
    patch = ProductPatch.from_input(ProductUpdate.model_validate({"price": 12.0}))
    assert patch.price == 12.0
    assert patch.name is UNSET
    assert patch.description is UNSET
    assert patch.present() == {"price": 12.0}


def test_patch_from_input_treats_null_as_absent():
    patch = ProductPatch.from_input(ProductUpdate.model_validate({"name": None, "description": ""}))
    assert patch.name is UNSET
    assert patch.present() == {"description": ""}


# -------------------------
# reconcile
# -------------------------
def test_reconcile_empty_patch_is_no_op():
    result = reconcile(_current(), ProductPatch())
    assert not result.changed
    assert result.changes == {}


def test_reconcile_uses_value_equality_not_presence():
    result = reconcile(_current(), ProductPatch(name="Widget", description="Blue", price=9.99))
    assert not result.changed


def test_reconcile_keeps_only_changed_fields():
    result = reconcile(_current(), ProductPatch(name="Widget", price=12.0))
    assert result.changed
    assert result.changes == {"price": 12.0}


def test_reconcile_clearing_description_is_a_change():
    result = reconcile(_current(), ProductPatch(description=""))
    assert result.changes == {"description": ""}


def test_reconcile_does_not_touch_current():
    current = _current()
    reconcile(current, ProductPatch(name="Gadget"))
    assert current.name == "Widget"


def test_reconcile_integer_price_equal_to_float_is_no_op():
    result = reconcile(_current(price=3.0), ProductPatch(price=3))
    assert not result.changed


def test_reconcile_rejects_all_invalid_fields_at_once():
    with pytest.raises(ValidationError) as exc_info:
        reconcile(_current(), ProductPatch(name="", price=-1.0, description="changed"))
    assert exc_info.value.details == [
        "name cannot be empty",
        "price must be greater than or equal to 0",
    ]


def test_reconcile_validates_even_when_value_matches():
    # A negative stored price cannot exist, but the rule is checked before comparing.
    with pytest.raises(ValidationError):
        reconcile(_current(price=-1.0), ProductPatch(price=-1.0))
