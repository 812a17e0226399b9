from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import and_, column, true
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.expression import FromClause

from qscond.core.config import settings
from qscond.schemas.filters import FilterSet
from qscond.services.conditions import to_condition


class RowFilter(BaseModel):
    """Base class for an entity's filters.

    Subclasses declare one ``Optional[...FilterSet]`` field per filterable
    column, plus the listing configuration::

        class UserFilters(RowFilter):
            SORTABLE_FIELDS: ClassVar[frozenset[str]] = frozenset({"name", "age"})
            MAX_LIMIT: ClassVar[Optional[int]] = 100

            name: Optional[StringFilterSet] = None
            age: Optional[NumberFilterSet] = None

    ``SOURCE`` may point at an ORM model or a ``Table``; columns are then
    looked up there instead of being referenced by bare name.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    SORTABLE_FIELDS: ClassVar[frozenset[str]] = frozenset()
    MAX_LIMIT: ClassVar[Optional[int]] = None
    SOURCE: ClassVar[Any] = None

    @classmethod
    def sortable_fields(cls) -> frozenset[str]:
        return frozenset(cls.SORTABLE_FIELDS)

    @classmethod
    def max_limit(cls) -> int:
        if cls.MAX_LIMIT is None:
            return settings.DEFAULT_MAX_LIMIT
        return cls.MAX_LIMIT

    @classmethod
    def column_for(cls, name: str) -> ColumnElement:
        source = cls.SOURCE
        if source is None:
            return column(name)
        if isinstance(source, FromClause):
            return source.c[name]
        return getattr(source, name)

    def conditions(self) -> list[ColumnElement]:
        conds = []
        for name in type(self).model_fields:
            filter_set: Optional[FilterSet] = getattr(self, name)
            if filter_set is None:
                continue
            cond = to_condition(filter_set, self.column_for(name))
            if cond is not None:
                conds.append(cond)
        return conds

    def to_condition(self) -> ColumnElement:
        # and_() drops true() as soon as another clause is present.
        return and_(true(), *self.conditions())
