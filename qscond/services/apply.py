"""Apply row filters and listing bounds to SQLAlchemy queries.

Statements are generative, so every helper returns the new query; callers
write ``q = apply_query_filter(q, qf)`` the same way they chain ``.where()``.
Both Core statements and ORM ``Query`` objects are accepted.
"""

from __future__ import annotations

import logging
from typing import Optional, TypeVar

from sqlalchemy import asc, column, desc

from qscond.schemas.query import PageSpec, QueryFilter, SortOrder
from qscond.schemas.row_filter import RowFilter
from qscond.services.pagination import page_spec_for

_LOG = logging.getLogger("qscond.apply")

Q = TypeVar("Q")


def apply_row_filter(query: Q, row_filter: Optional[RowFilter]) -> Q:
    if row_filter is None:
        return query
    conds = row_filter.conditions()
    if not conds:
        return query
    # Each field is its own WHERE criterion; where() ANDs them with the
    # criteria already on the query and keeps multi-tag groups parenthesized.
    return query.where(*conds)


def apply_pagination(query: Q, spec: PageSpec, *, columns: Optional[type[RowFilter]] = None) -> Q:
    if spec.sort_field is not None:
        col = columns.column_for(spec.sort_field) if columns is not None else column(spec.sort_field)
        query = query.order_by(desc(col) if spec.direction == SortOrder.DESC else asc(col))
    _LOG.debug(
        "paginating sort=%s direction=%s limit=%s offset=%s",
        spec.sort_field,
        spec.direction.value,
        spec.limit,
        spec.offset,
    )
    return query.limit(spec.limit).offset(spec.offset)


def apply_query_filter(query: Q, query_filter: QueryFilter) -> Q:
    query = apply_row_filter(query, query_filter.filter)
    return apply_pagination(query, page_spec_for(query_filter), columns=query_filter.filter_class())


def apply_delete_filter(query: Q, query_filter: QueryFilter) -> Q:
    # LIMIT/ORDER BY on DELETE are dialect specific; only the row filter is applied.
    return apply_row_filter(query, query_filter.filter)
