import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from asset_rules.db import get_db
from asset_rules.handlers import RecordEvent, process_event

log = logging.getLogger(__name__)

# --------------------------------------------------------------------
# Router setup
# --------------------------------------------------------------------
router = APIRouter(prefix="", tags=["events"])


@router.post("/events")
def post_event(event: RecordEvent, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Apply one record Create/Update event and run its business rules.

    Request body:
      {"message": "Create", "entity": "asset",
       "target": {"asset_type": 2, "service_type": 1, "flowline_id": "adibw-002-lfln"}}

    Behavior:
        * Pre-operation rules may rewrite the payload (identifier validation).
        * The record is saved, then post-operation rules run
          (provisioning, cycle tracking/sync, approval stage copy).
        * Any failed rule aborts the whole event: nothing is committed.

    Returns:
        {
          "ok": True,
          "record_id": "<id>",
          "target": { ...payload as saved... },
          "results": [ {"handler": ..., "status": ..., ...}, ... ]
        }
    """
    try:
        outcome = process_event(db, event)
    except ValueError as e:
        db.rollback()
        raise HTTPException(400, str(e))
    except Exception as e:
        db.rollback()
        log.exception("event failed: %s %s id=%s", event.message, event.entity, event.record_id)
        raise HTTPException(500, f"Event failed: {e}")

    if outcome.failures:
        # Abort the triggering transaction and report what went wrong
        db.rollback()
        failure = outcome.failures[0]
        raise HTTPException(500, {
            "ok": False,
            "handler": failure.handler,
            "error": failure.error.value if failure.error else None,
            "message": failure.message,
        })

    db.commit()
    return outcome.to_dict()
