from apps.users.models import ROL_ADMIN, Permiso, Rol, Usuario

PASSWORD = "Clave1234"


def crear_permisos():
    """Los 24 permisos modulo:accion, indexados por código."""
    permisos = {}
    for modulo, _ in Permiso.Modulos.choices:
        for accion, _ in Permiso.Acciones.choices:
            p, _ = Permiso.objects.get_or_create(modulo=modulo, accion=accion)
            permisos[p.codigo] = p
    return permisos


def crear_rol(codigo, *codigos_permiso, activo=True):
    rol, _ = Rol.objects.get_or_create(codigo=codigo, defaults={"nombre": codigo.title(), "activo": activo})
    rol.permisos.set(Permiso.objects.filter(codigo__in=codigos_permiso))
    return rol


def crear_usuario(email, *roles, activo=True):
    usuario = Usuario.objects.create_user(
        email=email, password=PASSWORD, first_name="Nombre", last_name="Apellido", is_active=activo
    )
    if roles:
        usuario.roles.set(roles)
    return usuario


def crear_admin(email="admin@test.com"):
    crear_permisos()
    rol = crear_rol(ROL_ADMIN, *Permiso.objects.values_list("codigo", flat=True))
    return crear_usuario(email, rol)
