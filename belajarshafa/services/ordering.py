# belajarshafa/services/ordering.py
"""Sequence helpers shared by topics (within a course) and materials (within a topic)."""
import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from belajarshafa.core.exceptions import BadRequestError
from belajarshafa.schemas.common import ReorderItem

logger = logging.getLogger(__name__)


def next_sequence(db: Session, parent_column, parent_id: int, sequence_column) -> int:
    """max(sequence) + 1 among the siblings, or 1 for the first child."""
    current = db.query(func.max(sequence_column)).filter(parent_column == parent_id).scalar()
    return (current or 0) + 1


def sequence_taken(db: Session, model, parent_column, parent_id: int, sequence: int) -> bool:
    return (
        db.query(model.id)
        .filter(parent_column == parent_id, model.sequence == sequence)
        .first()
        is not None
    )


def apply_reorder(
    db: Session,
    *,
    model,
    parent_column,
    parent_id: int,
    items: List[ReorderItem],
    mismatch_message: str,
) -> None:
    """
    Apply ``{id, sequence}`` pairs to the children of one parent in a single
    transaction.

    Every row is first parked on a negative sequence so that swaps never trip
    the (parent, sequence) unique constraint half way. Any failure rolls the
    whole set back.
    """
    ids = [item.id for item in items]
    if len(set(ids)) != len(ids):
        raise BadRequestError("Duplicate IDs in reorder request")
    if len({item.sequence for item in items}) != len(items):
        raise BadRequestError("Duplicate sequence numbers in reorder request")

    rows = (
        db.query(model)
        .filter(model.id.in_(ids), parent_column == parent_id)
        .all()
    )
    if len(rows) != len(ids):
        raise BadRequestError(mismatch_message)

    targets = {item.id: item.sequence for item in items}
    try:
        for row in rows:
            row.sequence = -row.id
        db.flush()
        for row in rows:
            row.sequence = targets[row.id]
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(
            f"Reorder of {model.__tablename__} under parent {parent_id} rolled back"
        )
        raise BadRequestError("Sequence numbers conflict with existing items")
