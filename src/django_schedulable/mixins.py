"""Model mixin wiring schedules into Django's validation pipeline."""
from django.core.exceptions import ValidationError
from django.db import models

from django_schedulable.conf import validate_on_save
from django_schedulable.registry import ScheduleRegistry
from django_schedulable.validators import schedule_errors


class SchedulableMixin(models.Model):
    """
    Abstract mixin for models that declare one or more Schedules.

    - clean() / full_clean() report schedule errors keyed by field
    - save() validates schedules first unless SCHEDULABLE_VALIDATE_ON_SAVE is False
    - is_scheduled() answers for any configured boundary

    Schedules themselves are declared on the concrete (or proxy) model:

        class Admin(SchedulableMixin):
            authorized_on = models.DateTimeField(null=True, blank=True)
            unauthorized_on = models.DateTimeField(null=True, blank=True)

            authorization = Schedule(
                "authorized_on", "unauthorized_on", end_required=True
            )
    """

    class Meta:
        abstract = True

    def clean(self):
        super().clean()
        self.validate_schedules()

    def validate_schedules(self):
        """Raise ValidationError if any schedule's rules are violated."""
        errors = schedule_errors(self)
        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        if validate_on_save():
            self.validate_schedules()
        super().save(*args, **kwargs)

    def is_scheduled(self, field=None, now=None) -> bool:
        """
        True if the boundary's instant is still in the future.

        Args:
            field: Start or end field name; defaults to the start field of
                the model's only schedule
            now: Reference time; defaults to the schedule's clock
        """
        config = ScheduleRegistry.resolve(type(self), field)
        return config.is_scheduled(self, field, now)
