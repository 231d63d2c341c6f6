import logging
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from asset_rules.errors import UpstreamError
from asset_rules.normalizers import Normalizer, get_default_normalizer
from asset_rules.repositories import ENTITY_MODELS, save_record, snapshot
from .approvals import copy_template_stages
from .context import EventOutcome, HandlerContext, HandlerResult, RecordEvent
from .cycles import sync_cycle_asset_type, track_cycle_changes
from .identifiers import provision_unique_identifier, validate_asset_identifiers

log = logging.getLogger(__name__)

Handler = Callable[[HandlerContext], HandlerResult]

# --------------------------------------------------------------------
# Handler registry, keyed by entity name
# --------------------------------------------------------------------
# Pre-operation handlers may rewrite the payload before it is saved
PRE_OPERATION: Dict[str, List[Handler]] = {
    "asset": [validate_asset_identifiers],
}

# Post-operation handlers see the saved record and may update it or others
POST_OPERATION: Dict[str, List[Handler]] = {
    "asset": [provision_unique_identifier],
    "asset_yearly_cycle": [sync_cycle_asset_type, track_cycle_changes],
    "approval_request": [copy_template_stages],
}


def _run(handlers: Iterable[Handler], ctx: HandlerContext, outcome: EventOutcome) -> bool:
    """Run handlers in order; stop at the first failure."""
    for handler in handlers:
        result = handler(ctx)
        outcome.results.append(result)
        ctx.log.debug("%s -> %s (%s)", result.handler, result.status, result.message)
        if not result.ok:
            return False
    return True


def process_event(
    db: Session,
    event: RecordEvent,
    normalizer: Optional[Normalizer] = None,
    log: logging.Logger = log,
) -> EventOutcome:
    """
    Run one record event through its handlers and persist it.

    Order: pre-change snapshot (Update) -> pre-operation handlers ->
    save -> post-operation handlers. Nothing is committed here; the
    caller commits when the outcome has no failures and rolls back otherwise.
    Raises ValueError for malformed events (missing id, unknown fields).
    """
    model = ENTITY_MODELS[event.entity]
    if event.message == "Update" and not event.record_id:
        raise ValueError("record_id is required for Update events")

    target = dict(event.target)
    outcome = EventOutcome(record_id=event.record_id, target=target)
    ctx = HandlerContext(
        db=db,
        message=event.message,
        entity=event.entity,
        record_id=event.record_id,
        target=target,
        pre_image=event.pre_image,
        log=log,
        normalizer=normalizer or get_default_normalizer(),
    )
    log.info("%s %s id=%s", event.message, event.entity, event.record_id)

    if event.message == "Update" and ctx.pre_image is None:
        try:
            ctx.pre_image = snapshot(db, model, event.record_id)
        except UpstreamError as e:
            outcome.results.append(HandlerResult.failed("load_pre_image", e.kind, str(e)))
            return outcome

    if not _run(PRE_OPERATION.get(event.entity, ()), ctx, outcome):
        return outcome

    try:
        ctx.record_id = save_record(db, model, event.message, event.record_id, target)
    except UpstreamError as e:
        outcome.results.append(HandlerResult.failed("save_record", e.kind, str(e)))
        return outcome
    outcome.record_id = ctx.record_id

    _run(POST_OPERATION.get(event.entity, ()), ctx, outcome)
    if outcome.failures:
        log.warning("%s %s id=%s aborted: %s", event.message, event.entity,
                    outcome.record_id, outcome.failures[0].message)
    return outcome
