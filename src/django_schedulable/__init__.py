"""Django Schedulable - Start/end validity windows for Django models."""

__version__ = "0.1.0"

__all__ = [
    # Declarations
    "Schedule",
    "ScheduleConfig",
    "BoundSchedule",
    "ScheduleRegistry",
    # Mixins
    "SchedulableMixin",
    # QuerySets
    "SchedulableQuerySet",
    "SchedulableManager",
    # Window evaluation
    "BoundaryKind",
    "TemporalFact",
    "evaluate",
    # Expressions
    "Expression",
    "Lte",
    "Gt",
    "IsNull",
    "And",
    "Or",
    # Exceptions
    "SchedulableError",
    "ScheduleConfigError",
    "DuplicateScheduleError",
    "UnconfiguredBoundaryError",
]


def __getattr__(name):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in ("Schedule", "ScheduleConfig", "BoundSchedule"):
        from django_schedulable import schedule
        return getattr(schedule, name)
    if name == "ScheduleRegistry":
        from django_schedulable import registry
        return getattr(registry, name)
    if name == "SchedulableMixin":
        from django_schedulable import mixins
        return getattr(mixins, name)
    if name in ("SchedulableQuerySet", "SchedulableManager"):
        from django_schedulable import querysets
        return getattr(querysets, name)
    if name in ("BoundaryKind", "TemporalFact", "evaluate"):
        from django_schedulable import window
        return getattr(window, name)
    if name in ("Expression", "Lte", "Gt", "IsNull", "And", "Or"):
        from django_schedulable import expressions
        return getattr(expressions, name)
    if name in (
        "SchedulableError",
        "ScheduleConfigError",
        "DuplicateScheduleError",
        "UnconfiguredBoundaryError",
    ):
        from django_schedulable import exceptions
        return getattr(exceptions, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
