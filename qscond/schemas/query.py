import typing
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

from qscond.schemas.row_filter import RowFilter

F = TypeVar("F", bound=RowFilter)


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class PageSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    offset: int = 0
    limit: int
    sort_field: Optional[str] = None
    direction: SortOrder = SortOrder.ASC


class QueryFilter(BaseModel, Generic[F]):
    """Listing request: ``start``/``end`` bounds, ``sort``/``order`` and the
    entity filters under the ``filter`` key, e.g.
    ``filter[age][lt]=50&start=10&end=100&sort=age&order=DESC``.
    """

    start: Optional[int] = None
    end: Optional[int] = None
    sort: Optional[str] = None
    order: Optional[SortOrder] = None
    filter: Optional[F] = None

    @field_validator("sort", mode="before")
    @classmethod
    def normalize_sort(cls, value: Any) -> Optional[str]:
        text = str(value or "").strip()
        return text or None

    @field_validator("order", mode="before")
    @classmethod
    def parse_order(cls, value: Any) -> Optional[SortOrder]:
        if value is None or isinstance(value, SortOrder):
            return value
        # Unknown directions fall back to the default instead of failing the listing.
        normalized = str(value).strip().upper()
        if normalized not in SortOrder.__members__:
            return None
        return SortOrder(normalized)

    @classmethod
    def filter_class(cls) -> type[RowFilter]:
        for arg in typing.get_args(cls.model_fields["filter"].annotation):
            if isinstance(arg, type) and issubclass(arg, RowFilter):
                return arg
        return RowFilter
