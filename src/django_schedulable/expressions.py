"""Filter expressions for schedule boundaries.

A small expression tree that can both test a record in memory and compile to
a Django Q object, so bulk filters and single-record predicates can be
checked against each other.

Comparisons against an unset (None) attribute are false, matching SQL NULL
semantics; use IsNull to select unset boundaries.
"""
from __future__ import annotations

import operator
from dataclasses import dataclass
from datetime import datetime
from functools import reduce
from typing import Any, Optional

from django.db.models import Q


class Expression:
    """Base class for filter expression nodes."""

    def matches(self, record: Any) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    def to_q(self) -> Q:  # pragma: no cover - interface
        raise NotImplementedError

    def __and__(self, other: Expression) -> And:
        return And((self, other))

    def __or__(self, other: Expression) -> Or:
        return Or((self, other))


@dataclass(frozen=True)
class Lte(Expression):
    """field <= value"""

    field: str
    value: datetime

    def matches(self, record: Any) -> bool:
        current = getattr(record, self.field)
        return current is not None and current <= self.value

    def to_q(self) -> Q:
        return Q(**{f"{self.field}__lte": self.value})


@dataclass(frozen=True)
class Gt(Expression):
    """field > value"""

    field: str
    value: datetime

    def matches(self, record: Any) -> bool:
        current = getattr(record, self.field)
        return current is not None and current > self.value

    def to_q(self) -> Q:
        return Q(**{f"{self.field}__gt": self.value})


@dataclass(frozen=True)
class IsNull(Expression):
    """field IS NULL"""

    field: str

    def matches(self, record: Any) -> bool:
        return getattr(record, self.field) is None

    def to_q(self) -> Q:
        return Q(**{f"{self.field}__isnull": True})


@dataclass(frozen=True)
class And(Expression):
    items: tuple[Expression, ...]

    def matches(self, record: Any) -> bool:
        return all(item.matches(record) for item in self.items)

    def to_q(self) -> Q:
        return reduce(operator.and_, (item.to_q() for item in self.items))


@dataclass(frozen=True)
class Or(Expression):
    items: tuple[Expression, ...]

    def matches(self, record: Any) -> bool:
        return any(item.matches(record) for item in self.items)

    def to_q(self) -> Q:
        return reduce(operator.or_, (item.to_q() for item in self.items))


def active_expression(start_field: str, end_field: Optional[str], now: datetime) -> Expression:
    """
    Records whose window contains now.

    Query pattern: start <= now AND (end IS NULL OR end > now)
    Without an end field: start <= now
    """
    started = Lte(start_field, now)
    if end_field is None:
        return started
    return started & (IsNull(end_field) | Gt(end_field, now))


def scheduled_expression(start_field: str, now: datetime) -> Expression:
    """
    Records whose start is still in the future.

    Query pattern: start > now
    """
    return Gt(start_field, now)
