"""
Validation layer for inbound property feature sets.

``validate`` is a pure check: it either returns a frozen ``PropertyFeatures``
or raises ``ValidationError`` naming the first offending field. It must run
to completion before the estimation engine is ever invoked.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from house_price_pro.errors import ValidationError
from house_price_pro.models import PropertyFeatures

BODY_FIELD = "body"


def _accepted_keys() -> frozenset[str]:
    keys = set()
    for name, field in PropertyFeatures.model_fields.items():
        keys.add(name)
        if field.alias:
            keys.add(field.alias)
    return frozenset(keys)


ACCEPTED_KEYS = _accepted_keys()


def validate(raw: Any, *, reject_unknown: bool = False) -> PropertyFeatures:
    """Validate an untrusted mapping into ``PropertyFeatures``.

    Args:
        raw: Key/value mapping from the caller (usually a decoded JSON body)
        reject_unknown: Fail on keys outside the schema instead of ignoring them

    Returns:
        The validated, immutable feature set

    Raises:
        ValidationError: If the input is not a mapping, a required field is
            missing, or a field is mistyped or out of range
    """
    if not isinstance(raw, Mapping):
        raise ValidationError(BODY_FIELD, "expected a JSON object of property features")

    if reject_unknown:
        for key in raw:
            if key not in ACCEPTED_KEYS:
                raise ValidationError(str(key), "unknown field")

    try:
        return PropertyFeatures.model_validate(dict(raw))
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or BODY_FIELD
        raise ValidationError(field, first["msg"]) from exc
