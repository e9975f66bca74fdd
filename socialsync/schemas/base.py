"""
Shared field types and payload validation for entity schemas.
"""
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Literal, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError

Platform = Literal["instagram", "youtube"]
PLATFORMS = ("instagram", "youtube")

M = TypeVar("M", bound=BaseModel)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise a timestamp to timezone-aware UTC.

    Naive values are treated as UTC; SQLite hands them back that way.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_insert(model: Type[M], payload: Any) -> M:
    """Parse ``payload`` into ``model``, reporting every violated field.

    Unknown keys are ignored. Raises :class:`ValidationError` listing all
    violations rather than stopping at the first one.
    """
    if type(payload) is model:
        return payload
    if isinstance(payload, model):
        # Entities subclass their insert shape; only the insert fields carry over
        payload = payload.model_dump(include=set(model.model_fields))
    elif isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    if not isinstance(payload, Mapping):
        raise ValidationError([{"field": "body", "message": "Expected an object"}])

    try:
        return model.model_validate(dict(payload))
    except PydanticValidationError as exc:
        errors = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or "body"
            errors.append({"field": field, "message": err["msg"]})
        raise ValidationError(errors) from exc
