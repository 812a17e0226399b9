from __future__ import annotations

import logging
from typing import AbstractSet, Optional

from qscond.schemas.query import PageSpec, QueryFilter, SortOrder

_LOG = logging.getLogger("qscond.pagination")


def extract_page_spec(
    start: Optional[int],
    end: Optional[int],
    sort: Optional[str],
    order: Optional[SortOrder],
    *,
    sortable_fields: AbstractSet[str],
    max_limit: int,
) -> PageSpec:
    """Derive offset/limit/sort from raw listing bounds.

    Never fails: a missing ``end`` means a full page, and a sort field outside
    ``sortable_fields`` is dropped so the listing is returned unsorted.
    """
    offset = max(start or 0, 0)
    raw_limit = end - offset if end is not None else max_limit
    limit = max(min(raw_limit, max_limit), 1)

    sort_field = None
    if sort is not None:
        if sort in sortable_fields:
            sort_field = sort
        else:
            _LOG.debug("ignoring sort on non-sortable field %r", sort)

    return PageSpec(
        offset=offset,
        limit=limit,
        sort_field=sort_field,
        direction=order or SortOrder.ASC,
    )


def page_spec_for(query_filter: QueryFilter) -> PageSpec:
    filter_cls = query_filter.filter_class()
    return extract_page_spec(
        query_filter.start,
        query_filter.end,
        query_filter.sort,
        query_filter.order,
        sortable_fields=filter_cls.sortable_fields(),
        max_limit=filter_cls.max_limit(),
    )
