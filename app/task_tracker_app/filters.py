from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class Predicate:
    """One ``column = value`` condition of a dynamically filtered query."""

    column: str
    value: Any


def collect_predicates(filters: Iterable[tuple[str, Any]]) -> list[Predicate]:
    """Keep the filters whose value is present, in the order given.

    Missing and empty values are dropped instead of being compared against, so an
    absent query parameter never turns into ``column = ''``.
    """
    predicates: list[Predicate] = []
    for column, value in filters:
        if value is None or value == "":
            continue
        predicates.append(Predicate(column=column, value=value))
    return predicates


def render_where_clause(predicates: Iterable[Predicate]) -> tuple[str, tuple[Any, ...]]:
    # Placeholder N is bound to params[N - 1]; both come from the same position.
    conditions: list[str] = []
    params: list[Any] = []
    for predicate in predicates:
        params.append(predicate.value)
        conditions.append(f"{predicate.column} = ?{len(params)}")
    if not conditions:
        return "", ()
    return " WHERE " + " AND ".join(conditions), tuple(params)
