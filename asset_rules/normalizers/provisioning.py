import re
from typing import Optional, Union
from .types import NoApplicableClass, ProvisionResult, resolve_slot

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def provision_identifier(
    sequence_value: Optional[str],
    asset_class=None,
    service_class=None,
    existing_field_value: Optional[str] = None,
) -> Union[ProvisionResult, NoApplicableClass]:
    """
    Derive the identifiers of a newly created asset from its sequence value.

    - The slot field only gets `<prefix><sequence>` (alphanumerics only) when
      it is still empty; an operator-entered value is never overwritten.
    - The composite code always comes from the fresh sequence value.
    - The display name follows whatever the slot field ends up holding,
      so an existing value wins there.
    """
    slot = resolve_slot(asset_class, service_class)
    if slot is None:
        return NoApplicableClass()
    if not sequence_value:
        return NoApplicableClass("sequence value is empty")

    composite = f"{slot.prefix}{sequence_value}"
    if existing_field_value:
        return ProvisionResult(
            target_field=slot.field,
            value_to_write=None,
            composite_code=composite,
            display_name=existing_field_value,
        )

    candidate = _NON_ALNUM.sub("", composite)
    return ProvisionResult(
        target_field=slot.field,
        value_to_write=candidate,
        composite_code=composite,
        display_name=candidate,
    )
