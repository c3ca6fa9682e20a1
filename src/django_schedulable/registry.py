"""Process-wide registry of schedule configurations.

Populated while model classes are created (app loading) and read-only
afterwards. Keyed by (model class, start field).
"""
import logging

from django_schedulable.exceptions import (
    DuplicateScheduleError,
    ScheduleConfigError,
    UnconfiguredBoundaryError,
)

logger = logging.getLogger(__name__)


class ScheduleRegistry:
    """Central registry for ScheduleConfig instances."""

    _configs: dict[tuple[type, str], "ScheduleConfig"] = {}

    @classmethod
    def register(cls, config) -> None:
        """Register a schedule configuration.

        Raises:
            DuplicateScheduleError: If the model, or one of its parents,
                already has a schedule on the same start field
        """
        for existing in cls.for_model(config.model):
            if existing.start_field == config.start_field:
                raise DuplicateScheduleError(config.model, config.start_field)
        cls._configs[(config.model, config.start_field)] = config
        logger.debug(
            "Registered schedule %s.%s -> %s",
            config.model.__name__,
            config.start_field,
            config.end_field,
        )

    @classmethod
    def unregister(cls, model: type, start_field: str) -> None:
        """Unregister a schedule configuration."""
        cls._configs.pop((model, start_field), None)

    @classmethod
    def get(cls, model: type, start_field: str):
        """Get the configuration declared directly on model for start_field."""
        return cls._configs.get((model, start_field))

    @classmethod
    def for_model(cls, model: type) -> list:
        """Get configurations that apply to model, nearest class first."""
        return [
            config
            for klass in model.__mro__
            for (owner, _), config in cls._configs.items()
            if owner is klass
        ]

    @classmethod
    def resolve(cls, model: type, field: str | None = None):
        """Find the configuration owning a boundary field.

        Args:
            model: The model class
            field: A start or end field name; None selects the only schedule

        Raises:
            UnconfiguredBoundaryError: If no schedule covers the field
            ScheduleConfigError: If field is None and the model has several schedules
        """
        configs = cls.for_model(model)
        if field is None:
            if not configs:
                raise UnconfiguredBoundaryError(model)
            if len(configs) > 1:
                raise ScheduleConfigError(
                    f"{model.__name__} has {len(configs)} schedules; "
                    "pass the boundary field explicitly"
                )
            return configs[0]
        for config in configs:
            if field in config.boundaries:
                return config
        raise UnconfiguredBoundaryError(model, field)

    @classmethod
    def all(cls) -> list:
        """Get all registered configurations."""
        return list(cls._configs.values())

    @classmethod
    def clear(cls) -> None:
        """Clear all registered configurations (for testing)."""
        cls._configs.clear()
