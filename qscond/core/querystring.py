from __future__ import annotations

import re
from typing import Any, Iterable, Union
from urllib.parse import parse_qsl

_KEY_RE = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_PART_RE = re.compile(r"\[([^\[\]]*)\]")


class QueryStringError(ValueError):
    pass


def _key_path(key: str) -> list[str]:
    match = _KEY_RE.fullmatch(key)
    if not match:
        # Unbalanced brackets: keep the key as a flat name.
        return [key]
    head, tail = match.groups()
    return [head, *(part for part in _PART_RE.findall(tail) if part)]


def _assign(target: dict[str, Any], key: str, value: str) -> None:
    *parents, leaf = _key_path(key)
    node = target
    for part in parents:
        child = node.setdefault(part, {})
        if not isinstance(child, dict):
            raise QueryStringError(f'Conflicting query parameter "{key}"')
        node = child

    if leaf not in node:
        node[leaf] = value
        return
    existing = node[leaf]
    if isinstance(existing, dict):
        raise QueryStringError(f'Conflicting query parameter "{key}"')
    if isinstance(existing, list):
        existing.append(value)
    else:
        node[leaf] = [existing, value]


def parse_bracket_query(query: Union[str, Iterable[tuple[str, str]]]) -> dict[str, Any]:
    """Decode ``a[b][c]=v`` style parameters into nested dicts.

    Repeated keys collect into a list in arrival order. Accepts a raw query
    string or already split ``(key, value)`` pairs.
    """
    pairs = parse_qsl(query, keep_blank_values=True) if isinstance(query, str) else query
    result: dict[str, Any] = {}
    for key, value in pairs:
        _assign(result, key, value)
    return result
