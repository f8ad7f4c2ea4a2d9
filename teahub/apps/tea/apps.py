from django.apps import AppConfig


class TeaConfig(AppConfig):
    """
    Django app for the Transparency Exchange API.

    Holds products, components, releases and collections together with the
    association records that relate them.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "teahub.apps.tea"
    label = "tea"
    verbose_name = "Transparency Exchange API"
