from django.db import models
from django.core.validators import MinValueValidator, RegexValidator

valida_codigo = RegexValidator(r'^[A-Z0-9\-_.]{2,50}$', "Código inválido (usa A-Z, 0-9, -, _, .)")


# Estados de stock (solo para mostrar; no disparan ninguna acción)
AGOTADO = "agotado"
BAJO = "bajo"
MEDIO = "medio"
OPTIMO = "optimo"


def estado_stock(stock_actual, stock_minimo):
    """
    Clasifica el stock: 0 -> agotado, <= mínimo -> bajo,
    <= 1.5 * mínimo -> medio, resto -> optimo.
    """
    if stock_actual == 0:
        return AGOTADO
    if stock_actual <= stock_minimo:
        return BAJO
    if stock_actual <= stock_minimo * 1.5:
        return MEDIO
    return OPTIMO


class Categoria(models.Model):
    codigo = models.CharField("Código", max_length=50, unique=True, validators=[valida_codigo])
    nombre = models.CharField("Nombre", max_length=100)
    descripcion = models.TextField("Descripción", blank=True)
    activo = models.BooleanField("Activo", default=True)

    class Meta:
        ordering = ["nombre"]
        verbose_name = "Categoría"
        verbose_name_plural = "Categorías"

    def save(self, *args, **kwargs):
        if self.codigo:
            self.codigo = self.codigo.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.nombre


class UnidadMedida(models.Model):
    codigo = models.CharField("Código", max_length=20, unique=True, validators=[valida_codigo])
    nombre = models.CharField("Nombre", max_length=100)
    abreviatura = models.CharField("Abreviatura", max_length=10)
    activo = models.BooleanField("Activo", default=True)

    class Meta:
        ordering = ["nombre"]
        verbose_name = "Unidad de medida"
        verbose_name_plural = "Unidades de medida"

    def save(self, *args, **kwargs):
        if self.codigo:
            self.codigo = self.codigo.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.nombre} ({self.abreviatura})"


class Producto(models.Model):
    codigo = models.CharField("Código", max_length=50, unique=True, validators=[valida_codigo])
    nombre = models.CharField("Nombre", max_length=200)
    descripcion = models.TextField("Descripción", blank=True)
    categoria = models.ForeignKey(Categoria, on_delete=models.PROTECT, related_name="productos", verbose_name="Categoría")
    unidad_medida = models.ForeignKey(UnidadMedida, on_delete=models.PROTECT, related_name="productos",
                                      verbose_name="Unidad de medida")

    stock_minimo = models.PositiveIntegerField("Stock mínimo", default=0)
    # Contador desnormalizado: después de crear el producto solo lo escribe el kardex
    stock_actual = models.PositiveIntegerField("Stock actual", default=0, validators=[MinValueValidator(0)])

    perecedero = models.BooleanField("Perecedero", default=False)
    fecha_vencimiento = models.DateField("Fecha de vencimiento", null=True, blank=True)

    activo = models.BooleanField("Activo", default=True)
    creado_en = models.DateTimeField("Creado en", auto_now_add=True)
    actualizado_en = models.DateTimeField("Actualizado en", auto_now=True)

    class Meta:
        ordering = ["nombre"]
        verbose_name = "Producto"
        verbose_name_plural = "Productos"
        indexes = [
            models.Index(fields=["nombre"], name="prod_nombre_idx"),
            models.Index(fields=["activo"], name="prod_activo_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                name="prod_stock_actual_ge_0",
                condition=models.Q(stock_actual__gte=0),
            ),
        ]

    def save(self, *args, **kwargs):
        # Normaliza campos de texto antes de guardar.
        if self.codigo:
            self.codigo = self.codigo.strip().upper()
        if self.nombre:
            self.nombre = self.nombre.strip()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.codigo} - {self.nombre}"

    @property
    def estado_stock(self):
        return estado_stock(self.stock_actual, self.stock_minimo)
