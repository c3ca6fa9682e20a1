"""QuerySet helpers for scheduled records."""
from functools import partial

from django.db import models

from django_schedulable.registry import ScheduleRegistry


def _stem_filter(queryset, model, name):
    """Return queryset.active bound to the schedule whose active_name is name."""
    if model is not None and not name.startswith("_"):
        for config in ScheduleRegistry.for_model(model):
            if config.active_name == name:
                return partial(queryset.active, config.start_field)
    raise AttributeError(f"{type(queryset).__name__!r} object has no attribute {name!r}")


class SchedulableQuerySet(models.QuerySet):
    """
    QuerySet for models that declare a Schedule.

    Query patterns:
    - active: start <= now AND (end IS NULL OR end > now)
    - scheduled: start > now

    `field` picks the schedule by one of its boundary fields and may be
    omitted when the model declares a single schedule. `now` is read from the
    schedule's clock each time a filter is built.

    Each schedule's active filter is also reachable under its predicate stem:
    a schedule on `published_at` gives `Article.objects.published()`, the same
    as `Article.objects.active("published_at")`. Existing QuerySet methods
    always win over a stem with the same name.
    """

    def __getattr__(self, name):
        return _stem_filter(self, self.__dict__.get("model"), name)

    def active(self, field=None, now=None):
        """
        Return records whose window contains now.

        Args:
            field: Boundary field selecting the schedule
            now: Reference time, defaults to the schedule's clock

        Returns:
            QuerySet filtered to currently active records
        """
        config = ScheduleRegistry.resolve(self.model, field)
        return self.filter(config.active_expression(now).to_q())

    def scheduled(self, field=None, now=None):
        """
        Return records whose start is still in the future.

        Only available for schedules with an end field.
        """
        config = ScheduleRegistry.resolve(self.model, field)
        return self.filter(config.scheduled_expression(now).to_q())

    def as_of(self, timestamp, field=None):
        """
        Return records that were active at the given timestamp.

        Equivalent to active(now=timestamp).
        """
        return self.active(field=field, now=timestamp)

    def as_manager(cls):
        """Build a SchedulableManager so stem filters work on the manager too."""
        manager = SchedulableManager.from_queryset(cls)()
        manager._built_with_as_manager = True
        return manager

    as_manager.queryset_only = True
    as_manager = classmethod(as_manager)


class SchedulableManager(models.Manager):
    """Manager that forwards schedule stem filters to its queryset."""

    def __getattr__(self, name):
        model = self.__dict__.get("model")
        if model is None or name.startswith("_"):
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        return _stem_filter(self.get_queryset(), model, name)
