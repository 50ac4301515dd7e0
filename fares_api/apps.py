from django.apps import AppConfig


class FaresApiConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fares_api"
