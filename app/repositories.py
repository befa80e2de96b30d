from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageError
from app.core.logging import get_logger
from app.models import Product, utcnow
from app.validation import NewProduct

logger = get_logger(__name__)


def create_product(db: Session, new: NewProduct) -> Product:
    now = utcnow()
    product = Product(
        name=new.name,
        description=new.description,
        price=new.price,
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(product)
        db.commit()
        db.refresh(product)
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Failed to create product") from e

    logger.info("Product created id=%s", product.id)
    return product


def count_products(db: Session) -> int:
    try:
        return db.execute(select(func.count()).select_from(Product)).scalar_one()
    except SQLAlchemyError as e:
        raise StorageError("Could not retrieve product count") from e


def list_products(db: Session, offset: int, limit: int) -> list[Product]:
    stmt = select(Product).order_by(Product.id).offset(offset).limit(limit)
    try:
        return list(db.execute(stmt).scalars().all())
    except SQLAlchemyError as e:
        raise StorageError("Could not retrieve products") from e


def get_product(db: Session, product_id: int) -> Product | None:
    try:
        return db.get(Product, product_id)
    except SQLAlchemyError as e:
        raise StorageError("Could not retrieve product") from e


def update_product(db: Session, product: Product, changes: Mapping[str, Any]) -> Product:
    """
    Write ``changes`` onto ``product`` and persist them.

    ``updated_at`` is refreshed by the column's ``onupdate``, i.e. only when an
    UPDATE is actually issued.
    """
    for name, value in changes.items():
        setattr(product, name, value)
    try:
        db.commit()
        db.refresh(product)
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Could not update product") from e

    logger.info("Product updated id=%s fields=%s", product.id, sorted(changes))
    return product


def delete_product(db: Session, product_id: int) -> bool:
    """Hard delete. Returns False when no row had that id."""
    try:
        result = db.execute(delete(Product).where(Product.id == product_id))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Could not delete product") from e

    deleted = result.rowcount > 0
    if deleted:
        logger.info("Product deleted id=%s", product_id)
    return deleted
