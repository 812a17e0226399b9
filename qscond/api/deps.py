from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union, get_args, get_origin

from fastapi import HTTPException, Request
from pydantic import AliasChoices, BaseModel, ValidationError
from pydantic.fields import FieldInfo

from qscond.core.querystring import QueryStringError, parse_bracket_query
from qscond.schemas.query import QueryFilter
from qscond.schemas.row_filter import RowFilter

_LOG = logging.getLogger("qscond.api")


def _lookup_field(model: type[BaseModel], key: str) -> Optional[FieldInfo]:
    for name, info in model.model_fields.items():
        keys = {name}
        alias = info.validation_alias
        if isinstance(alias, str):
            keys.add(alias)
        elif isinstance(alias, AliasChoices):
            keys.update(choice for choice in alias.choices if isinstance(choice, str))
        if key in keys:
            return info
    return None


def _nested_model(annotation: Any) -> Optional[type[BaseModel]]:
    if get_origin(annotation) is None and isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    for arg in get_args(annotation):
        found = _nested_model(arg)
        if found is not None:
            return found
    return None


def _param_name(model: type[BaseModel], loc: tuple[Any, ...]) -> str:
    """Rebuild the bracketed query key from a pydantic error location.

    Past the last model level only list indexes are kept; pydantic appends the
    union branch (``int``, ``float``) there, which is not part of the key.
    """
    parts = []
    current: Optional[type[BaseModel]] = model
    for part in loc:
        if current is not None:
            parts.append(part)
            info = _lookup_field(current, str(part))
            current = _nested_model(info.annotation) if info is not None else None
        elif isinstance(part, int):
            parts.append(part)
        else:
            break
    if not parts:
        return "query"
    head, *rest = parts
    return str(head) + "".join(f"[{part}]" for part in rest)


def _validation_detail(model: type[BaseModel], exc: ValidationError) -> str:
    error = exc.errors()[0]
    return f'Invalid query parameter "{_param_name(model, error.get("loc", ()))}": {error.get("msg")}'


def decode_query_filter(
    filter_cls: type[RowFilter],
    query: Union[str, Iterable[tuple[str, str]]],
) -> QueryFilter:
    return QueryFilter[filter_cls].model_validate(parse_bracket_query(query))


def query_filter_dependency(filter_cls: type[RowFilter]):
    def _inner(request: Request) -> QueryFilter:
        try:
            return decode_query_filter(filter_cls, request.query_params.multi_items())
        except ValidationError as exc:
            _LOG.debug("rejected query %s: %s", request.url.query, exc)
            raise HTTPException(status_code=400, detail=_validation_detail(QueryFilter[filter_cls], exc))
        except QueryStringError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
    return _inner
