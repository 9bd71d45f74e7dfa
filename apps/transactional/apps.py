from django.apps import AppConfig

class TransactionalConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.transactional"
    label = "transactional"
    verbose_name = "Bodegas y movimientos"
