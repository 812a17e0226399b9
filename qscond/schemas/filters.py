"""Per-column filter sets.

A filter set holds the operator tags sent for one column, e.g.
``age[gte]=20&age[lt]=50`` validates into ``NumberFilterSet(gte=20, lt=50)``.
Tags left as ``None`` are not applied. The condition translator walks the
present tags in the order the fields are declared here.
"""

import uuid
from datetime import date
from typing import Any, Generic, Iterator, Optional, TypeVar, Union

from pydantic import AliasChoices, AwareDatetime, BaseModel, ConfigDict, Field, NaiveDatetime, field_validator

from qscond.core.config import settings

T = TypeVar("T")


def _in_field():
    return Field(default=None, validation_alias=AliasChoices("in", "in_"), serialization_alias="in")


def _ne_field():
    return Field(default=None, validation_alias=AliasChoices("ne", "neq"))


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(settings.LIST_SEPARATOR) if item.strip()]


class FilterSet(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("in_", mode="before", check_fields=False)
    @classmethod
    def wrap_list_value(cls, value: Any) -> Any:
        # `field[in]=x` arrives as a single string when the key is not repeated.
        if isinstance(value, str):
            return cls.list_from_string(value)
        return value

    @classmethod
    def list_from_string(cls, value: str) -> list[str]:
        return [value]

    def active_operators(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(tag, value)`` for every present tag, in declaration order."""
        for name in type(self).model_fields:
            value = getattr(self, name)
            if value is None:
                continue
            yield name.rstrip("_"), value

    def is_empty(self) -> bool:
        return next(self.active_operators(), None) is None


class StringFilterSet(FilterSet):
    eq: Optional[str] = None
    ne: Optional[str] = _ne_field()
    contains: Optional[str] = None
    not_contains: Optional[str] = Field(default=None, validation_alias=AliasChoices("not_contains", "notcontains"))
    i_contains: Optional[str] = Field(default=None, validation_alias=AliasChoices("i_contains", "icontains"))
    starts_with: Optional[str] = Field(default=None, validation_alias=AliasChoices("starts_with", "startswith"))
    ends_with: Optional[str] = Field(default=None, validation_alias=AliasChoices("ends_with", "endswith"))
    in_: Optional[list[str]] = _in_field()


class EqualityFilterSet(FilterSet, Generic[T]):
    eq: Optional[T] = None
    ne: Optional[T] = _ne_field()
    in_: Optional[list[T]] = _in_field()

    @classmethod
    def list_from_string(cls, value: str) -> list[str]:
        return _split_list(value)


class ComparableFilterSet(FilterSet, Generic[T]):
    eq: Optional[T] = None
    ne: Optional[T] = _ne_field()
    gt: Optional[T] = None
    gte: Optional[T] = None
    lt: Optional[T] = None
    lte: Optional[T] = None
    in_: Optional[list[T]] = _in_field()

    @classmethod
    def list_from_string(cls, value: str) -> list[str]:
        return _split_list(value)


class TemporalFilterSet(ComparableFilterSet[T], Generic[T]):
    # before -> `<`, after -> `>=`
    before: Optional[T] = None
    after: Optional[T] = None


class NumberFilterSet(ComparableFilterSet[Union[int, float]]):
    pass


class UuidFilterSet(EqualityFilterSet[uuid.UUID]):
    pass


class DateFilterSet(TemporalFilterSet[date]):
    pass


class DateTimeFilterSet(TemporalFilterSet[NaiveDatetime]):
    pass


class DateTimeTzFilterSet(TemporalFilterSet[AwareDatetime]):
    pass
