from asset_rules import repositories
from asset_rules.errors import UpstreamError
from .context import HandlerContext, HandlerResult

DEFAULT_STAGE_NAME = "Stage"


def copy_template_stages(ctx: HandlerContext) -> HandlerResult:
    """
    Rebuild an approval request's stages from its template.
    Existing request stages are removed first so re-saving never duplicates them.
    """
    name = "copy_template_stages"
    template_id = ctx.target.get("approval_template_id")
    if not template_id:
        return HandlerResult.skipped(name, "no approval template selected")

    ctx.log.info("%s: copying stages from template %s to request %s", name, template_id, ctx.record_id)
    try:
        stages = repositories.template_stages(ctx.db, template_id)
        if not stages:
            ctx.log.info("%s: no template stages found", name)
            return HandlerResult.skipped(name, "no template stages found")

        rows = [
            {
                "name": ts.name if ts.name and ts.name.strip() else DEFAULT_STAGE_NAME,
                "stage_order": ts.stage_order if ts.stage_order is not None else 0,
                "approver": ts.approver,
            }
            for ts in stages
        ]
        copied = repositories.replace_request_stages(ctx.db, ctx.record_id, rows)
    except UpstreamError as e:
        ctx.log.error("%s failed: %s", name, e)
        return HandlerResult.failed(name, e.kind, str(e))

    ctx.log.info("%s: copied %d stage(s)", name, copied)
    return HandlerResult.applied(name, f"copied {copied} stage(s)", {"stages": copied})
