import os

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.products.models import Categoria, UnidadMedida
from apps.transactional.models import BODEGA_PRINCIPAL, Bodega
from apps.users.models import ROL_ADMIN, Permiso, Rol, Usuario

MODULOS = [m for m, _ in Permiso.Modulos.choices]
ACCIONES = [a for a, _ in Permiso.Acciones.choices]


def _todos(p):
    return True


ROLES = [
    (ROL_ADMIN, "Administrador", "Acceso total al sistema", _todos),
    ("COORDINADOR", "Coordinador", "Gestiona emergencias, entregas y reportes",
     lambda p: p.modulo in ("emergencias", "entregas", "beneficiarios", "inventario")),
    ("BODEGUERO", "Bodeguero", "Gestiona inventario y movimientos",
     lambda p: p.modulo in ("inventario", "configuracion")),
    ("DIGITADOR", "Digitador", "Registra beneficiarios y entregas",
     lambda p: p.modulo in ("beneficiarios", "entregas")
     or (p.modulo == "emergencias" and p.accion == "leer")),
    ("CONSULTA", "Solo Consulta", "Solo lectura en todos los módulos",
     lambda p: p.accion == "leer"),
]

CATEGORIAS = [
    ("ALIMENTOS", "Alimentos", "Productos alimenticios no perecederos"),
    ("HIGIENE", "Higiene", "Productos de aseo personal"),
    ("COBIJO", "Cobijo", "Carpas, mantas, colchonetas"),
    ("COCINA", "Cocina", "Utensilios de cocina"),
    ("AGUA", "Agua", "Agua potable y purificación"),
    ("MEDICAMENTOS", "Medicamentos", "Medicamentos básicos"),
]

UNIDADES = [
    ("UND", "Unidad", "und"),
    ("KG", "Kilogramo", "kg"),
    ("LT", "Litro", "lt"),
    ("MT", "Metro", "mt"),
    ("CAJA", "Caja", "caja"),
    ("PAQUETE", "Paquete", "paq"),
]


class Command(BaseCommand):
    help = "Carga permisos, roles, usuario administrador y catálogos base. Se puede re-ejecutar."

    def add_arguments(self, parser):
        parser.add_argument("--admin-email", default=os.getenv("ADMIN_EMAIL", "admin@sistema.com"))
        parser.add_argument("--admin-password", default=os.getenv("ADMIN_PASSWORD", "Admin123!"))

    @transaction.atomic
    def handle(self, *args, **options):
        # Permisos: módulo x acción
        permisos = []
        for modulo in MODULOS:
            for accion in ACCIONES:
                permiso, _ = Permiso.objects.get_or_create(modulo=modulo, accion=accion)
                permisos.append(permiso)
        self.stdout.write(f"Permisos: {len(permisos)}")

        # Roles (la matriz se reemplaza completa en cada corrida)
        for codigo, nombre, descripcion, incluye in ROLES:
            rol, _ = Rol.objects.get_or_create(
                codigo=codigo,
                defaults={"nombre": nombre, "descripcion": descripcion},
            )
            rol.permisos.set([p for p in permisos if incluye(p)])
        self.stdout.write(f"Roles: {len(ROLES)}")

        # Administrador
        email = options["admin_email"].strip().lower()
        admin, creado = Usuario.objects.get_or_create(
            email=email,
            defaults={
                "first_name": "Administrador",
                "last_name": "Sistema",
                "celular": "3001234567",
                "is_staff": True,
                "is_superuser": True,
            },
        )
        if creado:
            admin.set_password(options["admin_password"])
            admin.save(update_fields=["password"])
        admin.roles.add(Rol.objects.get(codigo=ROL_ADMIN))
        self.stdout.write(f"Administrador: {email}" + (" (creado)" if creado else ""))

        for codigo, nombre, descripcion in CATEGORIAS:
            Categoria.objects.get_or_create(codigo=codigo, defaults={"nombre": nombre, "descripcion": descripcion})

        for codigo, nombre, abreviatura in UNIDADES:
            UnidadMedida.objects.get_or_create(codigo=codigo, defaults={"nombre": nombre, "abreviatura": abreviatura})

        Bodega.objects.get_or_create(
            codigo=BODEGA_PRINCIPAL,
            defaults={
                "nombre": "Bodega principal",
                "direccion": "Sede central",
                "responsable_nombre": "Administrador Sistema",
                "responsable_email": email,
                "responsable_celular": "3001234567",
            },
        )

        self.stdout.write(self.style.SUCCESS(
            f"Seed completo: {len(CATEGORIAS)} categorías, {len(UNIDADES)} unidades, bodega principal."
        ))
