from __future__ import annotations

import re
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.core.errors import MalformedInputError, NotFoundError, format_decode_errors
from app.models import Product
from app.repositories import (
    count_products,
    create_product,
    delete_product,
    get_product,
    list_products,
    update_product,
)
from app.schemas import MessageResponse, ProductCreate, ProductEnvelope, ProductPage, ProductRead, ProductUpdate
from app.validation import ProductPatch, reconcile, validate_create

router = APIRouter(prefix="/products", tags=["products"])

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

_DIGITS = re.compile(r"[0-9]+")
_MAX_ID = 2**63 - 1


def parse_product_id(raw: str) -> int:
    if not _DIGITS.fullmatch(raw) or int(raw) > _MAX_ID:
        raise MalformedInputError("Invalid product ID format", [f"id must be a non-negative integer, got {raw!r}"])
    return int(raw)


def parse_positive_int(raw: Optional[str], default: int, message: str) -> int:
    # An empty value (?page=) means "not given".
    if raw is None or raw == "":
        return default
    if not _DIGITS.fullmatch(raw) or not 0 < int(raw) <= _MAX_ID:
        raise MalformedInputError(message, [f"expected a positive integer, got {raw!r}"])
    return int(raw)


def _get_or_404(db: Session, product_id: int) -> Product:
    product = get_product(db, product_id)
    if product is None:
        raise NotFoundError()
    return product


@router.post("", response_model=ProductEnvelope, status_code=status.HTTP_201_CREATED)
def http_create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    product = create_product(db, validate_create(payload))
    return {"message": "Product created successfully", "product": product}


@router.get("", response_model=ProductPage)
def http_list_products(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    db: Session = Depends(get_db),
):
    page_n = parse_positive_int(page, DEFAULT_PAGE, "Invalid page number, must be a positive integer")
    limit_n = parse_positive_int(limit, DEFAULT_LIMIT, "Invalid limit, must be a positive integer")

    offset = (page_n - 1) * limit_n
    if offset > _MAX_ID:
        raise MalformedInputError(
            "Invalid page number, must be a positive integer",
            [f"page {page_n} with limit {limit_n} is out of range"],
        )

    total = count_products(db)
    items = list_products(db, offset=offset, limit=limit_n)
    return {"data": items, "total": total, "page": page_n, "limit": limit_n}


@router.get("/{product_id}", response_model=ProductRead)
def http_get_product(product_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, parse_product_id(product_id))


def decode_update(body: Any) -> ProductUpdate:
    try:
        return ProductUpdate.model_validate(body)
    except PydanticValidationError as e:
        raise MalformedInputError(details=format_decode_errors(e.errors())) from e


@router.patch(
    "/{product_id}",
    response_model=ProductEnvelope,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ProductUpdate.model_json_schema()}},
        }
    },
)
def http_update_product(product_id: str, body: Any = Body(default=None), db: Session = Depends(get_db)):
    # The record is looked up before the body is decoded: unknown id -> 404 whatever the body.
    product = _get_or_404(db, parse_product_id(product_id))
    payload = decode_update(body)

    result = reconcile(product, ProductPatch.from_input(payload))
    if not result.changed:
        return {"message": "No changes detected, product update not performed", "product": product}

    product = update_product(db, product, result.changes)
    return {"message": "Product updated successfully", "product": product}


@router.delete("/{product_id}", response_model=MessageResponse)
def http_delete_product(product_id: str, db: Session = Depends(get_db)):
    if not delete_product(db, parse_product_id(product_id)):
        raise NotFoundError()
    return {"message": "Product deleted successfully"}
