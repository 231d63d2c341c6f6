from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from asset_rules.db import get_db
from asset_rules.models import Asset, AssetYearlyCycle, ApprovalRequest, ApprovalRequestStage
from asset_rules.repositories import as_dict

router = APIRouter(prefix="", tags=["read"])

# -------------------------------------------------------------------
# Helper serializers: turn ORM objects into plain dicts for JSON
# -------------------------------------------------------------------
def _asset_to_dict(a: Asset, db: Session) -> Dict[str, Any]:
    """Return an asset row plus the ids of its yearly cycles."""
    out = as_dict(a)
    cycles = (
        db.query(AssetYearlyCycle)
        .filter(AssetYearlyCycle.asset_id == a.asset_id)
        .order_by(AssetYearlyCycle.created_on.desc())
        .all()
    )
    out["cycles"] = [c.cycle_id for c in cycles]
    return out

def _stage_to_dict(s: ApprovalRequestStage) -> Dict[str, Any]:
    return {
        "stage_id": s.stage_id,
        "name": s.name,
        "stage_order": s.stage_order,
        "approver": s.approver,
    }

# -------------------------------------------------------------------
# Assets
# -------------------------------------------------------------------
@router.get("/assets")
def list_assets(
    asset_type: Optional[int] = Query(None, description="AssetClass option value"),
    service_type: Optional[int] = Query(None, description="ServiceClass option value"),
    limit: int = Query(100, ge=1, le=2000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> List[Dict[str, Any]]:
    """List assets with optional filters on asset and service type."""
    q = db.query(Asset)
    if asset_type is not None:
        q = q.filter(Asset.asset_type == asset_type)
    if service_type is not None:
        q = q.filter(Asset.service_type == service_type)
    q = q.order_by(Asset.asset_id).offset(offset).limit(limit)
    return [_asset_to_dict(a, db) for a in q.all()]

@router.get("/assets/{asset_id}")
def get_asset(asset_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    a = db.get(Asset, asset_id)
    if not a: raise HTTPException(404, "Asset not found")
    return _asset_to_dict(a, db)

@router.get("/cycles/{cycle_id}")
def get_cycle(cycle_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    c = db.get(AssetYearlyCycle, cycle_id)
    if not c: raise HTTPException(404, "Cycle not found")
    return as_dict(c)

# -------------------------------------------------------------------
# Approvals
# -------------------------------------------------------------------
@router.get("/approval-requests/{request_id}/stages")
def list_request_stages(request_id: str, db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
    """Stages of an approval request in stage order."""
    if not db.get(ApprovalRequest, request_id):
        raise HTTPException(404, "Approval request not found")
    stages = (
        db.query(ApprovalRequestStage)
        .filter(ApprovalRequestStage.request_id == request_id)
        .order_by(ApprovalRequestStage.stage_order)
        .all()
    )
    return [_stage_to_dict(s) for s in stages]
