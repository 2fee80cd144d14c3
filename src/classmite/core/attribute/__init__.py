"""Attribute functionality: specs, option validation, accessors."""

from classmite.core.attribute.accessor import is_accessor, make_accessor
from classmite.core.attribute.models import VALID_OPTIONS, AttributeSpec

__all__ = [
    "AttributeSpec",
    "VALID_OPTIONS",
    "make_accessor",
    "is_accessor",
]
