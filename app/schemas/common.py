"""
Shared pydantic building blocks for request/response bodies.

Clients talk camelCase (``studentId``, ``isHighPriority``); models keep
snake_case attribute names so they map 1:1 onto the SQLAlchemy columns.
"""
from typing import Annotated, Any, Optional
from pydantic import BaseModel, BeforeValidator
from pydantic.alias_generators import to_camel


# Sentinel sent by the dashboard's select boxes when nothing is chosen
NO_REFERENCE = "none"


class ApiModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def normalize_reference(value: Any) -> Optional[int]:
    """
    Normalize a relational reference coming from a client.

    "none", "" and None mean "no relation"; numeric strings and integral
    numbers become integer IDs. Anything else is rejected.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("Reference must be a numeric ID or 'none'")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if stripped == "" or stripped.lower() == NO_REFERENCE:
            return None
        if stripped.isdigit():
            return int(stripped)
    raise ValueError("Reference must be a numeric ID or 'none'")


# Optional relation: null or a numeric ID
Reference = Annotated[Optional[int], BeforeValidator(normalize_reference)]

# Mandatory relation: "none" normalizes to None and then fails int validation
RequiredReference = Annotated[int, BeforeValidator(normalize_reference)]


def empty_str_to_none(v):
    """Convert empty strings to None for optional fields"""
    if isinstance(v, str) and v.strip() == '':
        return None
    return v


def reject_null(v):
    """Used on update bodies: a not-null column may be omitted but not nulled"""
    if v is None:
        raise ValueError("Field may not be null")
    return v
