"""Django app configuration for django-schedulable."""

from django.apps import AppConfig


class DjangoSchedulableConfig(AppConfig):
    """App config for django-schedulable."""

    name = "django_schedulable"
    verbose_name = "Django Schedulable"
    default_auto_field = "django.db.models.BigAutoField"
