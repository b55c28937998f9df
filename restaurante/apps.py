# restaurante/apps.py

from django.apps import AppConfig


class RestauranteConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'restaurante'
    verbose_name = 'Casa Pasapalos'

    def ready(self):
        # Conecta los receptores de señales (cambios en tiempo real y auditoría)
        from . import signals  # noqa: F401
