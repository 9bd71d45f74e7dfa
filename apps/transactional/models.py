from django.db import models
from django.core.validators import MinValueValidator
from django.core.exceptions import ValidationError
from django.conf import settings

from apps.products.models import Producto, valida_codigo


BODEGA_PRINCIPAL = "BOD-PRINCIPAL"


class Bodega(models.Model):
    codigo = models.CharField("Código", max_length=50, unique=True, validators=[valida_codigo])
    nombre = models.CharField("Nombre", max_length=200)
    direccion = models.CharField("Dirección", max_length=255)
    capacidad = models.PositiveIntegerField(
        "Capacidad", null=True, blank=True, validators=[MinValueValidator(1)]
    )
    responsable_nombre = models.CharField("Responsable", max_length=100)
    responsable_email = models.EmailField("Email del responsable", max_length=191)
    responsable_celular = models.CharField("Celular del responsable", max_length=20)

    activo = models.BooleanField("Activo", default=True)
    creado_en = models.DateTimeField("Creado en", auto_now_add=True)
    actualizado_en = models.DateTimeField("Actualizado en", auto_now=True)

    class Meta:
        ordering = ["nombre"]
        verbose_name = "Bodega"
        verbose_name_plural = "Bodegas"

    def save(self, *args, **kwargs):
        if self.codigo:
            self.codigo = self.codigo.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.codigo} - {self.nombre}"


class Movimiento(models.Model):
    """
    Entrada del kardex. No se modifica nunca después de creada; solo se
    elimina como acción compensatoria (ver services.eliminar_movimiento).
    """

    TIPO_ENTRADA = "entrada"
    TIPO_SALIDA = "salida"

    TIPOS = (
        (TIPO_ENTRADA, "Entrada"),
        (TIPO_SALIDA, "Salida"),
    )

    ORIGEN_MOVIMIENTO = "movimiento"
    ORIGEN_AJUSTE = "ajuste"
    ORIGEN_INICIAL = "inicial"

    ORIGENES = (
        (ORIGEN_MOVIMIENTO, "Movimiento"),
        (ORIGEN_AJUSTE, "Ajuste de stock"),
        (ORIGEN_INICIAL, "Stock inicial"),
    )

    tipo = models.CharField(max_length=10, choices=TIPOS)
    origen = models.CharField(max_length=12, choices=ORIGENES, default=ORIGEN_MOVIMIENTO)
    fecha = models.DateTimeField(auto_now_add=True)

    producto = models.ForeignKey(Producto, on_delete=models.PROTECT, related_name="movimientos")
    bodega = models.ForeignKey(Bodega, on_delete=models.PROTECT, related_name="movimientos")

    cantidad = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    observaciones = models.TextField(blank=True)
    registrado_por = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="movimientos"
    )

    class Meta:
        ordering = ["-fecha", "-id"]
        verbose_name = "Movimiento"
        verbose_name_plural = "Movimientos"
        indexes = [
            models.Index(fields=["producto", "bodega"], name="mov_producto_bodega_idx"),
            models.Index(fields=["fecha"], name="mov_fecha_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(cantidad__gt=0), name="mov_cantidad_gt_0"),
        ]

    # -------------------------------
    # VALIDACIONES
    # -------------------------------
    def clean(self):
        if self.tipo not in (self.TIPO_ENTRADA, self.TIPO_SALIDA):
            raise ValidationError({"tipo": "Tipo inválido (entrada o salida)."})
        if not self.cantidad or self.cantidad <= 0:
            raise ValidationError({"cantidad": "La cantidad debe ser mayor que cero."})

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Los movimientos no se pueden modificar.")
        super().save(*args, **kwargs)

    @property
    def delta(self):
        """Efecto con signo sobre el stock del producto."""
        return self.cantidad if self.tipo == self.TIPO_ENTRADA else -self.cantidad

    def __str__(self):
        return f"{self.tipo} {self.cantidad} x {self.producto} @ {self.bodega}"
