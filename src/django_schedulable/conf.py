"""Configuration for django-schedulable."""

from django.conf import settings
from django.utils import timezone
from django.utils.module_loading import import_string

from django_schedulable.exceptions import ScheduleConfigError


def get_clock():
    """Get the configured current-time source.

    Reads SCHEDULABLE_CLOCK from Django settings.
    Format: dotted path to a zero-argument callable, e.g. 'myapp.clock.now'

    Falls back to django.utils.timezone.now when unset.

    Raises:
        ScheduleConfigError: If SCHEDULABLE_CLOCK cannot be imported
    """
    clock_path = getattr(settings, "SCHEDULABLE_CLOCK", None)
    if not clock_path:
        return timezone.now
    try:
        return import_string(clock_path)
    except ImportError as e:
        raise ScheduleConfigError(
            f"SCHEDULABLE_CLOCK '{clock_path}' could not be imported. "
            "Set it to a callable path, e.g. 'django.utils.timezone.now'"
        ) from e


def validate_on_save() -> bool:
    """Whether SchedulableMixin.save() runs schedule validation first."""
    return getattr(settings, "SCHEDULABLE_VALIDATE_ON_SAVE", True)
