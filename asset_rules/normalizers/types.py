# asset_rules/normalizers/types.py
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Literal, Optional, Union

RecordKind = Literal["asset"]
Record = Dict[str, Any]


class _OptionSet(IntEnum):
    """Closed enumeration stored as a platform option value."""

    @classmethod
    def resolve(cls, value):
        """Member for `value`, or None when it is absent or not a known option."""
        # Only whole option values count: ints (not bools) or ASCII digit strings
        if isinstance(value, bool):
            return None
        if isinstance(value, str) and value.isascii() and value.isdigit():
            value = int(value)
        if not isinstance(value, int):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class AssetClass(_OptionSet):
    WELL = 1
    PIPELINE = 2
    FACILITY = 3
    BURROW_PIT = 4


class ServiceClass(_OptionSet):
    BULKLINE = 0
    FLOWLINE = 1
    MANIFOLD = 2


class CycleAssetType(_OptionSet):
    """Flattened asset/service type used on yearly cycles."""
    WELL = 0
    PIPELINE = 1
    FACILITY = 2
    BURROW_PIT = 3
    BULKLINE = 4
    FLOWLINE = 5
    MANIFOLD = 6


class ReadinessStatus(_OptionSet):
    READY_FOR_ABANDONMENT = 1
    ABANDONED = 2
    NOT_ABANDONED = 3


# Validation rule applied to a slot's field
Rule = Optional[Literal["line", "well"]]


@dataclass(frozen=True)
class IdentifierSlot:
    field: str
    prefix: str
    rule: Rule = None


SERVICE_SLOTS = {
    ServiceClass.BULKLINE: IdentifierSlot("bulkline_id", "BULK", "line"),
    ServiceClass.FLOWLINE: IdentifierSlot("flowline_id", "FLID", "line"),
    ServiceClass.MANIFOLD: IdentifierSlot("manifold_id", "MFLD", "line"),
}

ASSET_SLOTS = {
    AssetClass.WELL: IdentifierSlot("well_code", "WELL", "well"),
    AssetClass.PIPELINE: IdentifierSlot("pipeline_id", "PIPE"),
    AssetClass.FACILITY: IdentifierSlot("facility_id", "FACN"),
    AssetClass.BURROW_PIT: IdentifierSlot("burrow_pit_id", "BPIT"),
}

IDENTIFIER_FIELDS = tuple(s.field for s in (*SERVICE_SLOTS.values(), *ASSET_SLOTS.values()))


def resolve_slot(asset_class=None, service_class=None) -> Optional[IdentifierSlot]:
    """
    Pick the identifier slot for a pair of classifiers.
    A recognised service class always wins; the asset class is only
    looked at when there is none.
    """
    service = ServiceClass.resolve(service_class)
    if service is not None:
        return SERVICE_SLOTS[service]
    asset = AssetClass.resolve(asset_class)
    if asset is not None:
        return ASSET_SLOTS[asset]
    return None


# --- Results ---

@dataclass(frozen=True)
class Unchanged:
    """Leave the code as it is."""


@dataclass(frozen=True)
class Replace:
    new_code: str


NormalizationResult = Union[Unchanged, Replace]


@dataclass(frozen=True)
class ProvisionResult:
    target_field: str
    value_to_write: Optional[str]   # None when the field already holds a value
    composite_code: str
    display_name: str


@dataclass(frozen=True)
class NoApplicableClass:
    reason: str = "no applicable asset or service class"
