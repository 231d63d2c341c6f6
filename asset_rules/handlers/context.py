import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session

from asset_rules.errors import ErrorKind
from asset_rules.normalizers import Normalizer, get_default_normalizer

_default_log = logging.getLogger("asset_rules.handlers")

Message = Literal["Create", "Update"]
Entity = Literal[
    "asset",
    "asset_yearly_cycle",
    "approval_request",
    "approval_template",
    "approval_stage_template",
]


class RecordEvent(BaseModel):
    message: Message
    entity: Entity
    record_id: Optional[str] = None           # required for Update
    target: Dict[str, Any] = {}               # fields being created/changed
    pre_image: Optional[Dict[str, Any]] = None  # record as it was before the change


@dataclass
class HandlerContext:
    """Everything a handler may touch for one event; nothing is looked up globally."""
    db: Session
    message: str
    entity: str
    record_id: Optional[str]
    target: Dict[str, Any]
    pre_image: Optional[Dict[str, Any]] = None
    log: logging.Logger = _default_log
    normalizer: Normalizer = field(default_factory=get_default_normalizer)

    def value(self, key: str) -> Any:
        """Changed value if the payload carries the field, else the pre-change one."""
        if key in self.target:
            return self.target[key]
        return (self.pre_image or {}).get(key)


@dataclass
class HandlerResult:
    handler: str
    status: Literal["applied", "skipped", "failed"]
    message: str = ""
    changes: Dict[str, Any] = field(default_factory=dict)
    error: Optional[ErrorKind] = None

    @classmethod
    def applied(cls, handler: str, message: str = "", changes: Optional[Dict[str, Any]] = None):
        return cls(handler, "applied", message, changes or {})

    @classmethod
    def skipped(cls, handler: str, message: str):
        return cls(handler, "skipped", message, error=ErrorKind.NOT_APPLICABLE)

    @classmethod
    def failed(cls, handler: str, kind: ErrorKind, message: str):
        return cls(handler, "failed", message, error=kind)

    @property
    def ok(self) -> bool:
        return self.status != "failed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "handler": self.handler,
            "status": self.status,
            "message": self.message,
            "changes": self.changes,
            "error": self.error.value if self.error else None,
        }


@dataclass
class EventOutcome:
    record_id: Optional[str]
    target: Dict[str, Any]
    results: List[HandlerResult] = field(default_factory=list)

    @property
    def failures(self) -> List[HandlerResult]:
        return [r for r in self.results if not r.ok]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": not self.failures,
            "record_id": self.record_id,
            "target": self.target,
            "results": [r.to_dict() for r in self.results],
        }
