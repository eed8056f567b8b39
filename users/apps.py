"""Django app configuration for the users app."""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Registers the custom user model app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "users"
    verbose_name = "Users"
