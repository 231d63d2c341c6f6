from copy import deepcopy
from typing import List
from .base import Normalizer
from .types import RecordKind, Record
from .rules import RuleNormalizer

class NormalizerPipeline(Normalizer):
    """
    A chain of normalizers.
    Each stage takes the output of the previous stage, so site-specific
    code rules can run after (or instead of) the standard ones.
    """
    def __init__(self, stages: List[Normalizer]):
        self.stages = stages

    def normalize_record(self, kind: RecordKind, rec: Record) -> Record:
        out = deepcopy(rec)  # Don't mutate the input
        for stage in self.stages:
            out = stage.normalize_record(kind, out)
        return out

def get_default_normalizer() -> Normalizer:
    """Factory for the default pipeline: the standard identifier rules only."""
    return NormalizerPipeline([RuleNormalizer()])
