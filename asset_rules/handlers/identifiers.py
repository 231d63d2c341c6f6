from asset_rules import repositories
from asset_rules.errors import UpstreamError
from asset_rules.models import Asset
from asset_rules.normalizers import NoApplicableClass, provision_identifier, resolve_slot
from .context import HandlerContext, HandlerResult


def validate_asset_identifiers(ctx: HandlerContext) -> HandlerResult:
    """
    Pre-operation check on asset Create/Update.

    The asset/service type may be missing from an Update payload; the
    pre-change record fills the gap. Only the identifier field selected
    by those types is checked, and only if the payload is changing it.
    """
    name = "validate_asset_identifiers"
    asset_type = ctx.value("asset_type")
    service_type = ctx.value("service_type")

    slot = resolve_slot(asset_type, service_type)
    if slot is None:
        ctx.log.debug("%s: no applicable class (asset_type=%s service_type=%s)", name, asset_type, service_type)
        return HandlerResult.skipped(name, "no applicable asset or service class")
    if slot.field not in ctx.target:
        return HandlerResult.skipped(name, f"{slot.field} not in payload")

    raw = ctx.target[slot.field]
    rec = {"asset_type": asset_type, "service_type": service_type, slot.field: raw}
    new_code = ctx.normalizer.normalize_record("asset", rec).get(slot.field)

    if new_code == raw:
        ctx.log.info("%s: %s '%s' accepted", name, slot.field, raw)
        return HandlerResult.applied(name, f"{slot.field} accepted")

    ctx.target[slot.field] = new_code
    ctx.log.info("%s: rectified %s '%s' -> '%s'", name, slot.field, raw, new_code)
    return HandlerResult.applied(name, f"{slot.field} rectified", {slot.field: new_code})


def provision_unique_identifier(ctx: HandlerContext) -> HandlerResult:
    """Post-operation on asset Create: derive identifier, composite code and name."""
    name = "provision_unique_identifier"
    if ctx.message != "Create":
        return HandlerResult.skipped(name, "only runs on Create")

    try:
        asset = repositories.get_record(ctx.db, Asset, ctx.record_id)
        if not asset.unique_identifier:
            ctx.log.info("%s: unique_identifier is empty, skipping", name)
            return HandlerResult.skipped(name, "unique_identifier is empty")

        slot = resolve_slot(asset.asset_type, asset.service_type)
        existing = getattr(asset, slot.field) if slot else None
        result = provision_identifier(
            asset.unique_identifier, asset.asset_type, asset.service_type, existing
        )
        if isinstance(result, NoApplicableClass):
            ctx.log.info("%s: %s", name, result.reason)
            return HandlerResult.skipped(name, result.reason)

        changes = {}
        if result.value_to_write is not None:
            changes[result.target_field] = result.value_to_write
            ctx.log.info("%s: set %s = %s", name, result.target_field, result.value_to_write)
        else:
            ctx.log.info("%s: %s already = %s", name, result.target_field, existing)
        changes["asset_code"] = result.composite_code
        changes["name"] = result.display_name

        repositories.update_record(ctx.db, Asset, ctx.record_id, changes)
    except UpstreamError as e:
        ctx.log.error("%s failed: %s", name, e)
        return HandlerResult.failed(name, e.kind, str(e))

    return HandlerResult.applied(name, f"asset_code={changes['asset_code']} name={changes['name']}", changes)
