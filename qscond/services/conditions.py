from __future__ import annotations

import operator
from typing import Any, Callable, Optional, Union

from sqlalchemy import and_, column
from sqlalchemy.sql.elements import ColumnElement

from qscond.core.config import settings
from qscond.schemas.filters import FilterSet

FieldRef = Union[str, ColumnElement]


def _escape_like(value: str) -> str:
    escape = settings.LIKE_ESCAPE_CHAR
    return value.replace(escape, escape + escape).replace("%", escape + "%").replace("_", escape + "_")


def _like_pattern(value: str, prefix: str, suffix: str) -> tuple[str, Optional[str]]:
    if not settings.ESCAPE_LIKE_WILDCARDS:
        return f"{prefix}{value}{suffix}", None
    return f"{prefix}{_escape_like(value)}{suffix}", settings.LIKE_ESCAPE_CHAR


def _contains(col, value):
    pattern, escape = _like_pattern(value, "%", "%")
    return col.like(pattern, escape=escape)


def _not_contains(col, value):
    pattern, escape = _like_pattern(value, "%", "%")
    return col.not_like(pattern, escape=escape)


def _i_contains(col, value):
    pattern, escape = _like_pattern(value, "%", "%")
    return col.ilike(pattern, escape=escape)


def _starts_with(col, value):
    pattern, escape = _like_pattern(value, "", "%")
    return col.like(pattern, escape=escape)


def _ends_with(col, value):
    pattern, escape = _like_pattern(value, "%", "")
    return col.like(pattern, escape=escape)


# Maps operator tags from `field[tag]=value` to column expression builders.
OPERATOR_BUILDERS: dict[str, Callable[[Any, Any], ColumnElement]] = {
    "eq": operator.eq,
    "ne": operator.ne,
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
    "before": operator.lt,
    "after": operator.ge,
    "in": lambda col, values: col.in_(values),
    "contains": _contains,
    "not_contains": _not_contains,
    "i_contains": _i_contains,
    "starts_with": _starts_with,
    "ends_with": _ends_with,
}


def _column_ref(field: FieldRef) -> ColumnElement:
    if isinstance(field, str):
        return column(field)
    return field


def to_condition(filter_set: Optional[FilterSet], field: FieldRef) -> Optional[ColumnElement]:
    """Translate one column's filter set into a boolean clause.

    Returns ``None`` when there is nothing to filter on. Several present tags
    are ANDed and grouped, so ``age[gte]=20&age[lt]=50`` renders as
    ``(age >= 20 AND age < 50)`` inside a larger expression.
    """
    if filter_set is None or filter_set.is_empty():
        return None

    col = _column_ref(field)
    leaves = [OPERATOR_BUILDERS[tag](col, value) for tag, value in filter_set.active_operators()]
    if len(leaves) == 1:
        return leaves[0]
    return and_(*leaves).self_group()
