import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from asset_rules.errors import UpstreamReadError, UpstreamWriteError
from asset_rules.models import (
    ApprovalRequest,
    ApprovalRequestStage,
    ApprovalStageTemplate,
    ApprovalTemplate,
    Asset,
    AssetYearlyCycle,
)

log = logging.getLogger(__name__)

# Entity names as they arrive on record events
ENTITY_MODELS = {
    "asset": Asset,
    "asset_yearly_cycle": AssetYearlyCycle,
    "approval_request": ApprovalRequest,
    "approval_template": ApprovalTemplate,
    "approval_stage_template": ApprovalStageTemplate,
}


def new_id() -> str:
    return uuid.uuid4().hex

def primary_key(model) -> str:
    return inspect(model).primary_key[0].key

def columns(model) -> set:
    return set(model.__table__.columns.keys())

def as_dict(row) -> Dict[str, Any]:
    """Plain column -> value dict for any mapped row."""
    return {c: getattr(row, c) for c in columns(type(row))}

def _check_fields(model, fields: Dict[str, Any]) -> None:
    unknown = set(fields) - columns(model)
    if unknown:
        raise ValueError(f"unknown field(s) for {model.__tablename__}: {', '.join(sorted(unknown))}")

def _flush(db: Session, what: str) -> None:
    try:
        db.flush()
    except SQLAlchemyError as e:
        log.exception("write failed: %s", what)
        raise UpstreamWriteError(f"could not write {what}: {e}") from e


# -------------------------------------------------------------------
# Generic record access
# -------------------------------------------------------------------
def get_record(db: Session, model, record_id: str):
    """Fetch one row by id; a missing row counts as a failed read."""
    try:
        row = db.get(model, record_id)
    except SQLAlchemyError as e:
        log.exception("read failed: %s id=%s", model.__tablename__, record_id)
        raise UpstreamReadError(f"could not read {model.__tablename__} {record_id}: {e}") from e
    if row is None:
        log.warning("record not found: %s id=%s", model.__tablename__, record_id)
        raise UpstreamReadError(f"{model.__tablename__} {record_id} not found")
    return row

def snapshot(db: Session, model, record_id: str) -> Dict[str, Any]:
    return as_dict(get_record(db, model, record_id))

def save_record(db: Session, model, message: str, record_id: Optional[str], fields: Dict[str, Any]) -> str:
    """
    Apply a Create or Update payload and flush it.
    Create generates an id unless one is given; Update needs an existing row.
    """
    pk = primary_key(model)
    fields = {k: v for k, v in fields.items() if k != pk}
    _check_fields(model, fields)

    if message == "Create":
        record_id = record_id or new_id()
        db.add(model(**{pk: record_id}, **fields))
    else:
        row = get_record(db, model, record_id)
        for k, v in fields.items():
            setattr(row, k, v)

    _flush(db, f"{model.__tablename__} {record_id}")
    return record_id

def update_record(db: Session, model, record_id: str, changes: Dict[str, Any]):
    _check_fields(model, changes)
    row = get_record(db, model, record_id)
    for k, v in changes.items():
        setattr(row, k, v)
    _flush(db, f"{model.__tablename__} {record_id}")
    return row


# -------------------------------------------------------------------
# Queries used by the handlers
# -------------------------------------------------------------------
def previous_cycle(db: Session, asset_id: str, exclude_cycle_id: str) -> Optional[AssetYearlyCycle]:
    """Most recent other cycle of the same asset, or None."""
    stmt = (
        select(AssetYearlyCycle)
        .where(AssetYearlyCycle.asset_id == asset_id)
        .where(AssetYearlyCycle.cycle_id != exclude_cycle_id)
        .order_by(AssetYearlyCycle.created_on.desc())
        .limit(1)
    )
    try:
        return db.execute(stmt).scalars().first()
    except SQLAlchemyError as e:
        log.exception("previous cycle lookup failed: asset_id=%s", asset_id)
        raise UpstreamReadError(f"could not read cycles of asset {asset_id}: {e}") from e

def template_stages(db: Session, template_id: str) -> List[ApprovalStageTemplate]:
    stmt = (
        select(ApprovalStageTemplate)
        .where(ApprovalStageTemplate.template_id == template_id)
        .order_by(ApprovalStageTemplate.stage_order.asc())
    )
    try:
        return list(db.execute(stmt).scalars().all())
    except SQLAlchemyError as e:
        log.exception("template stage lookup failed: template_id=%s", template_id)
        raise UpstreamReadError(f"could not read stages of template {template_id}: {e}") from e

def replace_request_stages(db: Session, request_id: str, stages: List[Dict[str, Any]]) -> int:
    """Drop the request's current stages and insert `stages` in their place."""
    try:
        db.execute(delete(ApprovalRequestStage).where(ApprovalRequestStage.request_id == request_id))
    except SQLAlchemyError as e:
        log.exception("stage delete failed: request_id=%s", request_id)
        raise UpstreamWriteError(f"could not clear stages of request {request_id}: {e}") from e

    for s in stages:
        db.add(ApprovalRequestStage(stage_id=new_id(), request_id=request_id, **s))
    _flush(db, f"stages of approval request {request_id}")
    return len(stages)
