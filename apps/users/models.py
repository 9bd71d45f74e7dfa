from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models
from django.db.models.functions import Upper
from django.utils.translation import gettext_lazy as _


ROL_ADMIN = "ADMIN"

celular_validator = RegexValidator(
    regex=r'^\+?\d{7,15}$',
    message='Formato inválido: usa entre 7 y 15 dígitos, opcionalmente con +.'
)


class Permiso(models.Model):

    class Modulos(models.TextChoices):
        EMERGENCIAS = 'emergencias', _('Emergencias')
        INVENTARIO = 'inventario', _('Inventario')
        BENEFICIARIOS = 'beneficiarios', _('Beneficiarios')
        ENTREGAS = 'entregas', _('Entregas')
        CONFIGURACION = 'configuracion', _('Configuración')
        SEGURIDAD = 'seguridad', _('Seguridad')

    class Acciones(models.TextChoices):
        CREAR = 'crear', _('Crear')
        LEER = 'leer', _('Leer')
        ACTUALIZAR = 'actualizar', _('Actualizar')
        ELIMINAR = 'eliminar', _('Eliminar')

    codigo = models.CharField("Código", max_length=100, unique=True, editable=False)
    nombre = models.CharField("Nombre", max_length=150)
    modulo = models.CharField("Módulo", max_length=30, choices=Modulos.choices)
    accion = models.CharField("Acción", max_length=20, choices=Acciones.choices)

    class Meta:
        verbose_name = "Permiso"
        verbose_name_plural = "Permisos"
        ordering = ["modulo", "accion"]
        constraints = [
            models.UniqueConstraint(fields=["modulo", "accion"], name="permiso_modulo_accion_uniq"),
        ]

    @staticmethod
    def codigo_de(modulo, accion):
        return f"{modulo}:{accion}"

    def save(self, *args, **kwargs):
        # El código siempre se deriva del par (modulo, accion)
        self.codigo = self.codigo_de(self.modulo, self.accion)
        if not self.nombre:
            self.nombre = f"{self.accion.capitalize()} {self.modulo}"
        super().save(*args, **kwargs)

    def __str__(self):
        return self.codigo


class Rol(models.Model):
    codigo = models.CharField("Código", max_length=50, unique=True)
    nombre = models.CharField("Nombre", max_length=100)
    descripcion = models.TextField("Descripción", blank=True)
    activo = models.BooleanField("Activo", default=True)
    permisos = models.ManyToManyField(Permiso, related_name="roles", blank=True, verbose_name="Permisos")

    creado_en = models.DateTimeField("Creado en", auto_now_add=True)
    actualizado_en = models.DateTimeField("Actualizado en", auto_now=True)

    class Meta:
        verbose_name = "Rol"
        verbose_name_plural = "Roles"
        ordering = ["nombre"]

    def save(self, *args, **kwargs):
        if self.codigo:
            self.codigo = self.codigo.strip().upper()
        if self.nombre:
            self.nombre = self.nombre.strip()
        super().save(*args, **kwargs)

    @property
    def es_admin(self):
        return self.codigo == ROL_ADMIN

    def __str__(self):
        return f"{self.codigo} - {self.nombre}"


class UsuarioManager(BaseUserManager):
    """
    El login es por email: no hay username.
    """
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("El email es obligatorio")
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superusuario debe tener is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superusuario debe tener is_superuser=True.")
        return self._create_user(email, password, **extra_fields)


class Usuario(AbstractUser):
    username = None

    email = models.EmailField(
        _("email address"),
        max_length=191,
        unique=True,
    )

    celular = models.CharField(
        "Celular",
        max_length=20,
        blank=True,
        validators=[celular_validator],
    )

    roles = models.ManyToManyField(Rol, related_name="usuarios", blank=True, verbose_name="Roles")

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UsuarioManager()

    class Meta:
        verbose_name = "Usuario"
        verbose_name_plural = "Usuarios"
        indexes = [
            # índice case-insensitive para búsquedas por email:
            models.Index(Upper("email"), name="user_email_upper_idx"),
            models.Index(fields=["is_active"], name="user_activo_idx"),
        ]
        ordering = ["email"]

    def clean(self):
        super().clean()
        if self.email:
            self.email = self.email.strip().lower()
        tel = (self.celular or "").replace(" ", "")
        if tel:
            qs = Usuario.objects.filter(celular=tel)
            if self.pk:
                qs = qs.exclude(pk=self.pk)
            if qs.exists():
                raise ValidationError({"celular": "Ya existe un usuario con este número de celular."})
        self.celular = tel

    @property
    def codigos_roles(self):
        return sorted(self.roles.values_list("codigo", flat=True))

    def __str__(self):
        nombre = (self.first_name + " " + self.last_name).strip()
        return f"{self.email} ({nombre})" if nombre else self.email
