from typing import Any, Dict, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from asset_rules.normalizers import NoApplicableClass, Replace, normalize, provision_identifier

# --------------------------------------------------------------------
# Router setup: stateless identifier checks, no database involved
# --------------------------------------------------------------------
router = APIRouter(prefix="/identifiers", tags=["identifiers"])


class NormalizeRequest(BaseModel):
    raw_code: Optional[str] = None
    asset_type: Optional[int] = None      # AssetClass option value
    service_type: Optional[int] = None    # ServiceClass option value


class ProvisionRequest(BaseModel):
    sequence_value: Optional[str] = None
    asset_type: Optional[int] = None
    service_type: Optional[int] = None
    existing_value: Optional[str] = None  # current value of the target field


@router.post("/normalize")
def normalize_code(req: NormalizeRequest) -> Dict[str, Any]:
    """
    Preview what the identifier rules would do to a code.

    Response JSON:
      {"result": "unchanged"}  or  {"result": "replace", "new_code": "ADIBW002LFLN"}
    """
    result = normalize(req.raw_code, req.asset_type, req.service_type)
    if isinstance(result, Replace):
        return {"result": "replace", "new_code": result.new_code}
    return {"result": "unchanged"}


@router.post("/provision")
def provision(req: ProvisionRequest) -> Dict[str, Any]:
    """Preview the identifiers a new asset would get from its sequence value."""
    result = provision_identifier(req.sequence_value, req.asset_type, req.service_type, req.existing_value)
    if isinstance(result, NoApplicableClass):
        return {"result": "no_applicable_class", "reason": result.reason}
    return {
        "result": "provisioned",
        "target_field": result.target_field,
        "value_to_write": result.value_to_write,
        "composite_code": result.composite_code,
        "display_name": result.display_name,
    }
