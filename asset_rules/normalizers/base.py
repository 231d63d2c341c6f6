# asset_rules/normalizers/base.py
from typing import Protocol
from .types import RecordKind, Record

class Normalizer(Protocol):
    def normalize_record(self, kind: RecordKind, rec: Record) -> Record:
        """Return a NEW record with its identifier fields normalized. Do not mutate `rec`."""
        ...
