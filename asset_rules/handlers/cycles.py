from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from asset_rules import repositories
from asset_rules.errors import UpstreamError
from asset_rules.models import Asset, AssetYearlyCycle
from asset_rules.normalizers import AssetClass, CycleAssetType, ReadinessStatus, ServiceClass
from .context import HandlerContext, HandlerResult

# Service type wins over asset type, same as for identifiers
_SERVICE_CYCLE_TYPES = {
    ServiceClass.BULKLINE: CycleAssetType.BULKLINE,
    ServiceClass.FLOWLINE: CycleAssetType.FLOWLINE,
    ServiceClass.MANIFOLD: CycleAssetType.MANIFOLD,
}
_ASSET_CYCLE_TYPES = {
    AssetClass.WELL: CycleAssetType.WELL,
    AssetClass.PIPELINE: CycleAssetType.PIPELINE,
    AssetClass.FACILITY: CycleAssetType.FACILITY,
    AssetClass.BURROW_PIT: CycleAssetType.BURROW_PIT,
}

NOT_TRACKED = {
    ReadinessStatus.READY_FOR_ABANDONMENT: "Asset is Ready For Abandonment – changes not tracked.",
    ReadinessStatus.ABANDONED: "Asset is Abandoned – changes not tracked.",
}
UNKNOWN_READINESS = "Readiness status unknown – changes not tracked."


def cycle_type_for(asset_type, service_type) -> Optional[CycleAssetType]:
    service = ServiceClass.resolve(service_type)
    if service is not None:
        return _SERVICE_CYCLE_TYPES[service]
    asset = AssetClass.resolve(asset_type)
    if asset is not None:
        return _ASSET_CYCLE_TYPES[asset]
    return None


def _decimal(v) -> Optional[Decimal]:
    # str() first so a float payload compares equal to the stored Numeric
    return None if v is None else Decimal(str(v))

def _amount(v) -> str:
    if v is None:
        return "—"
    whole = _decimal(v).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return f"{whole:,.0f}"

def _year(v) -> str:
    return "" if v is None else str(v)

def describe_changes(previous, current) -> str:
    """Tracker text comparing a cycle with the one before it (None if first)."""
    if previous is None:
        return "First cycle for this asset."

    changes = []
    if _decimal(previous.p50_edm_cost) != _decimal(current.p50_edm_cost):
        changes.append(f"P50 EDM Cost ({_amount(previous.p50_edm_cost)} to {_amount(current.p50_edm_cost)})")
    if _decimal(previous.p50_mod) != _decimal(current.p50_mod):
        changes.append(f"P50 MOD ({_amount(previous.p50_mod)} to {_amount(current.p50_mod)})")
    if previous.decommissioning_year != current.decommissioning_year:
        changes.append(f"Decomm Year ({_year(previous.decommissioning_year)} to {_year(current.decommissioning_year)})")

    if changes:
        return f"Change detected: {', '.join(changes)}."
    return "No change from previous cycle."


def sync_cycle_asset_type(ctx: HandlerContext) -> HandlerResult:
    """Copy the parent asset's (flattened) type onto the yearly cycle."""
    name = "sync_cycle_asset_type"
    asset_id = ctx.target.get("asset_id")
    if not asset_id:
        return HandlerResult.skipped(name, "no asset selected")

    try:
        asset = repositories.get_record(ctx.db, Asset, asset_id)
        ctx.log.info("%s: parent asset_type=%s service_type=%s", name, asset.asset_type, asset.service_type)

        cycle_type = cycle_type_for(asset.asset_type, asset.service_type)
        if cycle_type is None:
            return HandlerResult.skipped(name, "parent asset has no applicable type")

        changes = {"asset_type": int(cycle_type)}
        repositories.update_record(ctx.db, AssetYearlyCycle, ctx.record_id, changes)
    except UpstreamError as e:
        ctx.log.error("%s failed: %s", name, e)
        return HandlerResult.failed(name, e.kind, str(e))

    ctx.log.info("%s: set asset_type = %s", name, cycle_type.name)
    return HandlerResult.applied(name, f"asset_type = {cycle_type.name}", changes)


def track_cycle_changes(ctx: HandlerContext) -> HandlerResult:
    """
    Write a short change log onto the cycle.

    Assets on their way out (ready for abandonment, abandoned, or with no
    readiness status) get a "not tracked" note instead of a comparison.
    """
    name = "track_cycle_changes"
    asset_id = ctx.target.get("asset_id")
    if not asset_id:
        ctx.log.info("%s: no asset selected, skipping", name)
        return HandlerResult.skipped(name, "no asset selected")

    try:
        asset = repositories.get_record(ctx.db, Asset, asset_id)
        readiness = ReadinessStatus.resolve(asset.readiness_status)

        if readiness in NOT_TRACKED:
            text = NOT_TRACKED[readiness]
            ctx.log.info("%s: blocked (%s)", name, readiness.name)
        elif readiness is not ReadinessStatus.NOT_ABANDONED:
            text = UNKNOWN_READINESS
            ctx.log.info("%s: blocked (readiness=%s)", name, asset.readiness_status)
        else:
            current = repositories.get_record(ctx.db, AssetYearlyCycle, ctx.record_id)
            previous = repositories.previous_cycle(ctx.db, asset_id, ctx.record_id)
            text = describe_changes(previous, current)

        changes = {"p50_mod_tracker": text}
        repositories.update_record(ctx.db, AssetYearlyCycle, ctx.record_id, changes)
    except UpstreamError as e:
        ctx.log.error("%s failed: %s", name, e)
        return HandlerResult.failed(name, e.kind, str(e))

    ctx.log.info("%s: tracked: %s", name, text)
    return HandlerResult.applied(name, text, changes)
