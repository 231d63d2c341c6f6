from .pipeline import get_default_normalizer, NormalizerPipeline
from .rules import RuleNormalizer, normalize, rectify, clean_code, is_short_code, normalize_well_code
from .provisioning import provision_identifier
from .types import (
    AssetClass,
    CycleAssetType,
    IdentifierSlot,
    NoApplicableClass,
    NormalizationResult,
    ProvisionResult,
    ReadinessStatus,
    Record,
    RecordKind,
    Replace,
    ServiceClass,
    Unchanged,
    resolve_slot,
)
from .base import Normalizer

__all__ = [
    "get_default_normalizer",
    "NormalizerPipeline",
    "RuleNormalizer",
    "normalize",
    "rectify",
    "clean_code",
    "is_short_code",
    "normalize_well_code",
    "provision_identifier",
    "AssetClass",
    "CycleAssetType",
    "IdentifierSlot",
    "NoApplicableClass",
    "NormalizationResult",
    "ProvisionResult",
    "ReadinessStatus",
    "Record",
    "RecordKind",
    "Replace",
    "ServiceClass",
    "Unchanged",
    "resolve_slot",
    "Normalizer",
]
