"""Schedule declarations for Django models.

A model opts in by declaring a Schedule as a class attribute:

    class Article(SchedulableMixin):
        published_at = models.DateTimeField(null=True, blank=True)
        expired_at = models.DateTimeField(null=True, blank=True)

        publication = Schedule("published_at", end="expired_at")

        objects = SchedulableQuerySet.as_manager()

Which gives:

    article.is_published              # start has passed, end has not
    article.is_expired                # end has passed (only with an end field)
    article.is_scheduled()            # start still in the future
    article.is_scheduled("expired_at")
    article.publication.fact("expired_at", now=ts)

    Article.publication.active()      # QuerySet, start <= now AND (end IS NULL OR end > now)
    Article.publication.scheduled()   # QuerySet, start > now
"""
import copy
import dataclasses
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from django.core.exceptions import FieldDoesNotExist
from django.db.models import Q
from django.db.models.signals import class_prepared

from django_schedulable import expressions
from django_schedulable.conf import get_clock
from django_schedulable.exceptions import ScheduleConfigError, UnconfiguredBoundaryError
from django_schedulable.registry import ScheduleRegistry
from django_schedulable.validators import validate_window
from django_schedulable.window import BoundaryKind, TemporalFact, evaluate

DEFAULT_START_FIELD = "published_at"

TIMESTAMP_SUFFIXES = ("_at", "_on")


def predicate_stem(field_name: str) -> str:
    """Derive a predicate stem from a timestamp field name.

    published_at -> published, authorized_on -> authorized
    """
    for suffix in TIMESTAMP_SUFFIXES:
        if field_name.endswith(suffix) and len(field_name) > len(suffix):
            return field_name[: -len(suffix)]
    return field_name


@dataclass(frozen=True)
class ScheduleConfig:
    """
    One validity window declared on a model.

    Attributes:
        model: The host model class (None until attached)
        start_field: Field holding the window start
        end_field: Field holding the window end, or None
        end_required: A start without an end is invalid
        end_requires_start: An end without a start is invalid
        end_after_start: End must be strictly after start when both are set
        active_name: Stem of the generated "active" predicate
        expired_name: Stem of the generated "expired" predicate
        clock: Zero-argument callable returning now; defaults to SCHEDULABLE_CLOCK
    """

    model: Optional[type] = None
    start_field: str = DEFAULT_START_FIELD
    end_field: Optional[str] = None
    end_required: bool = False
    end_requires_start: bool = True
    end_after_start: bool = True
    active_name: Optional[str] = None
    expired_name: Optional[str] = None
    clock: Optional[Callable[[], datetime]] = None

    def __post_init__(self):
        if self.end_required and self.end_field is None:
            raise ScheduleConfigError(
                "end_required needs an end field; "
                f"declare end= alongside '{self.start_field}'"
            )
        if self.end_field is not None and self.end_field == self.start_field:
            raise ScheduleConfigError(
                f"Start and end of a schedule must be different fields, got '{self.start_field}' twice"
            )
        if self.expired_name is not None and self.end_field is None:
            raise ScheduleConfigError("expired_name needs an end field")
        if self.active_name is None:
            object.__setattr__(self, "active_name", predicate_stem(self.start_field))
        if self.expired_name is None and self.end_field is not None:
            object.__setattr__(self, "expired_name", predicate_stem(self.end_field))

    @property
    def boundaries(self) -> dict[str, BoundaryKind]:
        """Configured boundary fields mapped to their kind."""
        boundaries = {self.start_field: BoundaryKind.START}
        if self.end_field is not None:
            boundaries[self.end_field] = BoundaryKind.END
        return boundaries

    def now(self) -> datetime:
        clock = self.clock or get_clock()
        return clock()

    def _require_end(self) -> str:
        if self.end_field is None:
            raise UnconfiguredBoundaryError(
                self.model,
                message=f"Schedule on '{self.start_field}' has no end field",
            )
        return self.end_field

    def fact(self, record: Any, field: Optional[str] = None, now: Optional[datetime] = None) -> TemporalFact:
        """Evaluate one boundary of record. Defaults to the start field."""
        field = field or self.start_field
        kind = self.boundaries.get(field)
        if kind is None:
            raise UnconfiguredBoundaryError(self.model, field)
        if now is None:
            now = self.now()
        return evaluate(getattr(record, field), kind, now)

    def is_active(self, record: Any, now: Optional[datetime] = None) -> bool:
        if now is None:
            now = self.now()
        active = self.fact(record, self.start_field, now).active
        if self.end_field is not None:
            active = active and self.fact(record, self.end_field, now).active
        return active

    def is_expired(self, record: Any, now: Optional[datetime] = None) -> bool:
        return self.fact(record, self._require_end(), now).expired

    def is_scheduled(self, record: Any, field: Optional[str] = None, now: Optional[datetime] = None) -> bool:
        return self.fact(record, field, now).scheduled

    def active_expression(self, now: Optional[datetime] = None) -> expressions.Expression:
        if now is None:
            now = self.now()
        return expressions.active_expression(self.start_field, self.end_field, now)

    def scheduled_expression(self, now: Optional[datetime] = None) -> expressions.Expression:
        self._require_end()
        if now is None:
            now = self.now()
        return expressions.scheduled_expression(self.start_field, now)


class BoundSchedule:
    """A schedule bound to one model instance."""

    def __init__(self, config: ScheduleConfig, instance: Any):
        self.config = config
        self.instance = instance

    def __repr__(self):
        return (
            f"<BoundSchedule {self.config.start_field}={self.start!r} "
            f"{self.config.end_field}={self.end!r}>"
        )

    @property
    def start(self) -> Optional[datetime]:
        return getattr(self.instance, self.config.start_field)

    @property
    def end(self) -> Optional[datetime]:
        if self.config.end_field is None:
            return None
        return getattr(self.instance, self.config.end_field)

    def fact(self, field: Optional[str] = None, now: Optional[datetime] = None) -> TemporalFact:
        return self.config.fact(self.instance, field, now)

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return self.config.is_active(self.instance, now)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.config.is_expired(self.instance, now)

    def is_scheduled(self, field: Optional[str] = None, now: Optional[datetime] = None) -> bool:
        return self.config.is_scheduled(self.instance, field, now)

    def errors(self) -> list:
        """Field/error pairs for the current start and end values."""
        return validate_window(self.config, self.start, self.end)


def _predicate_property(config: ScheduleConfig, method_name: str) -> property:
    method = getattr(config, method_name)

    def getter(instance):
        return method(instance)

    getter.__doc__ = f"{method_name} for {config.start_field}"
    return property(getter)


class Schedule:
    """
    Declares a validity window on a model.

    Args:
        start: Start field name (default 'published_at')
        end: End field name, or None for a window that never closes
        end_required: Reject a start without an end
        end_requires_start: Reject an end without a start
        end_after_start: Reject end <= start
        active_name: Override the stem of the "active" predicate
        expired_name: Override the stem of the "expired" predicate
        clock: Zero-argument callable returning now

    Raises:
        ScheduleConfigError: On invalid options, abstract models, missing
            fields, or generated predicate names that collide
        DuplicateScheduleError: If the model already has a schedule on start
    """

    def __init__(
        self,
        start: str = DEFAULT_START_FIELD,
        end: Optional[str] = None,
        *,
        end_required: bool = False,
        end_requires_start: bool = True,
        end_after_start: bool = True,
        active_name: Optional[str] = None,
        expired_name: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = ScheduleConfig(
            start_field=start,
            end_field=end,
            end_required=end_required,
            end_requires_start=end_requires_start,
            end_after_start=end_after_start,
            active_name=active_name,
            expired_name=expired_name,
            clock=clock,
        )
        self.model = None
        self.name = None

    def __repr__(self):
        model = self.model.__name__ if self.model else None
        return f"<Schedule {model}.{self.name} {self.config.start_field}->{self.config.end_field}>"

    def contribute_to_class(self, cls, name):
        if cls._meta.abstract:
            raise ScheduleConfigError(
                f"Schedule '{name}' cannot be declared on abstract model {cls.__name__}; "
                "declare it on a concrete or proxy model"
            )
        self.model = cls
        self.name = name
        self.config = dataclasses.replace(self.config, model=cls)
        setattr(cls, name, self)
        class_prepared.connect(self._attach, sender=cls, weak=False)

    def _attach(self, sender, **kwargs):
        for field_name in self.config.boundaries:
            try:
                sender._meta.get_field(field_name)
            except FieldDoesNotExist as e:
                raise ScheduleConfigError(
                    f"Schedule '{self.name}' refers to missing field "
                    f"{sender.__name__}.{field_name}"
                ) from e

        predicates = {f"is_{self.config.active_name}": "is_active"}
        if self.config.expired_name is not None:
            predicates[f"is_{self.config.expired_name}"] = "is_expired"
        for attr in predicates:
            if hasattr(sender, attr):
                raise ScheduleConfigError(
                    f"Cannot generate {sender.__name__}.{attr}: attribute already exists; "
                    "pass active_name/expired_name to rename it"
                )

        ScheduleRegistry.register(self.config)

        for attr, method_name in predicates.items():
            setattr(sender, attr, _predicate_property(self.config, method_name))

    def __get__(self, instance, owner=None):
        if instance is None:
            if owner is None or owner is self.model:
                return self
            # Subclasses filter their own rows.
            inherited = copy.copy(self)
            inherited.model = owner
            return inherited
        return BoundSchedule(self.config, instance)

    def active_q(self, now: Optional[datetime] = None) -> Q:
        return self.config.active_expression(now).to_q()

    def scheduled_q(self, now: Optional[datetime] = None) -> Q:
        return self.config.scheduled_expression(now).to_q()

    def active(self, now: Optional[datetime] = None):
        """Records whose window contains now."""
        return self.model._default_manager.filter(self.active_q(now))

    def scheduled(self, now: Optional[datetime] = None):
        """Records whose start is still ahead. Requires an end field."""
        return self.model._default_manager.filter(self.scheduled_q(now))
