"""Cross-field validation for schedule boundaries.

Every rule attributes its error to the end field, since the end value is the
one that contradicts (or is missing from) the window.
"""
import logging

from django.core.exceptions import ValidationError

from django_schedulable.registry import ScheduleRegistry

logger = logging.getLogger(__name__)


def validate_window(config, start, end) -> list[tuple[str, ValidationError]]:
    """
    Check a start/end pair against a schedule's rules.

    A record with neither value set always passes.

    Args:
        config: The ScheduleConfig declaring the rules
        start: Current start value, or None
        end: Current end value, or None

    Returns:
        List of (field_name, ValidationError) pairs, empty if valid
    """
    errors = []
    end_field = config.end_field
    if end_field is None:
        return errors

    if end is not None:
        if start is None:
            if config.end_requires_start:
                errors.append((end_field, ValidationError(
                    f"{config.start_field} is required when {end_field} is set.",
                    code="start_required",
                )))
        elif config.end_after_start and end <= start:
            errors.append((end_field, ValidationError(
                f"{end_field} must be after {config.start_field}.",
                code="end_before_start",
            )))
    elif start is not None and config.end_required:
        errors.append((end_field, ValidationError(
            f"{end_field} is required when {config.start_field} is set.",
            code="end_required",
        )))

    return errors


def schedule_errors(instance) -> dict[str, list[ValidationError]]:
    """
    Run every schedule registered for the instance's model.

    Returns:
        Dict of field_name -> errors, suitable for ValidationError(dict)
    """
    errors: dict[str, list[ValidationError]] = {}
    for config in ScheduleRegistry.for_model(type(instance)):
        start = getattr(instance, config.start_field)
        end = getattr(instance, config.end_field) if config.end_field else None
        for field_name, error in validate_window(config, start, end):
            errors.setdefault(field_name, []).append(error)

    if errors:
        logger.debug(
            "Schedule validation failed for %s: %s",
            type(instance).__name__,
            sorted(errors),
        )
    return errors
