from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Numeric, DateTime, ForeignKey
from .db import Base


def _utcnow():
    # naive UTC, same as everything else we store
    return datetime.now(timezone.utc).replace(tzinfo=None)


# -----------------------------
# ORM models (tables) for the asset register
# -----------------------------
class Asset(Base):
    __tablename__ = "assets"
    # A physical asset: well, pipeline (with its service), facility or burrow pit
    asset_id          = Column(String, primary_key=True)
    unique_identifier = Column(String, index=True)          # sequence value assigned by the platform
    asset_type        = Column(Integer)                      # AssetClass option value
    service_type      = Column(Integer)                      # ServiceClass option value
    readiness_status  = Column(Integer)                      # ReadinessStatus option value

    # One identifier field per asset/service class
    well_code     = Column(String, index=True)
    pipeline_id   = Column(String)
    facility_id   = Column(String)
    burrow_pit_id = Column(String)
    flowline_id   = Column(String, index=True)
    bulkline_id   = Column(String)
    manifold_id   = Column(String)

    asset_code = Column(String)                              # composite code (prefix + sequence)
    name       = Column(String)                              # display name

    def __repr__(self):
        return f"<Asset(asset_id={self.asset_id}, name={self.name}, asset_code={self.asset_code})>"


class AssetYearlyCycle(Base):
    __tablename__ = "asset_yearly_cycles"
    # One planning cycle (cost estimate snapshot) for an asset
    cycle_id             = Column(String, primary_key=True)
    asset_id             = Column(String, ForeignKey("assets.asset_id"), index=True)
    p50_edm_cost         = Column(Numeric(18, 2))
    p50_mod              = Column(Numeric(18, 2))
    decommissioning_year = Column(Integer)                   # year option value
    asset_type           = Column(Integer)                   # CycleAssetType option value
    p50_mod_tracker      = Column(String)                    # change-log text written by the tracker
    created_on           = Column(DateTime, default=_utcnow, nullable=False)


class ApprovalTemplate(Base):
    __tablename__ = "approval_templates"
    template_id = Column(String, primary_key=True)
    name        = Column(String)


class ApprovalStageTemplate(Base):
    __tablename__ = "approval_stage_templates"
    # Stage blueprint copied onto every request that uses the template
    stage_template_id = Column(String, primary_key=True)
    template_id       = Column(String, ForeignKey("approval_templates.template_id"), index=True)
    name              = Column(String)
    stage_order       = Column(Integer)
    approver          = Column(String)                       # user reference (plain string)


class ApprovalRequest(Base):
    __tablename__ = "approval_requests"
    request_id           = Column(String, primary_key=True)
    name                 = Column(String)
    approval_template_id = Column(String, ForeignKey("approval_templates.template_id"))


class ApprovalRequestStage(Base):
    __tablename__ = "approval_request_stages"
    stage_id    = Column(String, primary_key=True)
    request_id  = Column(String, ForeignKey("approval_requests.request_id"), index=True)
    name        = Column(String)
    stage_order = Column(Integer)
    approver    = Column(String)

    def __str__(self):
        return f"Stage {self.stage_order} '{self.name}' (approver={self.approver})"
