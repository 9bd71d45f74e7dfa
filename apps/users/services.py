"""
Gestión de roles, su matriz de permisos y los usuarios que los reciben.
"""
from django.db import transaction
from django.db.models import Count, Q

from ayuda_erp.exceptions import Conflicto, ErrorValidacion, NoEncontrado
from apps.account.tokens import invalidar_tokens_de
from apps.account.utils import registrar_auditoria

from .models import ROL_ADMIN, Permiso, Rol, Usuario


def obtener_rol(rol_id):
    try:
        return (
            Rol.objects.prefetch_related("permisos")
            .annotate(total_usuarios=Count("usuarios"))
            .get(pk=rol_id)
        )
    except Rol.DoesNotExist:
        raise NoEncontrado("Rol no encontrado")


def _permisos_por_id(permiso_ids):
    ids = set(permiso_ids)
    permisos = list(Permiso.objects.filter(pk__in=ids))
    if len(permisos) != len(ids):
        raise ErrorValidacion("Uno o más permisos no existen")
    return permisos


def permisos_agrupados():
    """{modulo: [Permiso, ...]} en el orden de Permiso.Meta.ordering."""
    grupos = {}
    for permiso in Permiso.objects.all():
        grupos.setdefault(permiso.modulo, []).append(permiso)
    return grupos


@transaction.atomic
def crear_rol(datos, usuario=None):
    codigo = datos["codigo"].strip().upper()
    if Rol.objects.filter(codigo=codigo).exists():
        raise ErrorValidacion("Ya existe un rol con ese código")

    permisos = _permisos_por_id(datos.pop("permiso_ids", []))
    rol = Rol.objects.create(**{**datos, "codigo": codigo})
    rol.permisos.set(permisos)

    registrar_auditoria(usuario, "CREATE", f"Rol id={rol.id} codigo={rol.codigo} permisos={len(permisos)}")
    return rol


@transaction.atomic
def actualizar_rol(rol_id, datos, usuario=None):
    rol = obtener_rol(rol_id)

    codigo = datos.get("codigo")
    if codigo:
        datos["codigo"] = codigo = codigo.strip().upper()
        if rol.codigo == ROL_ADMIN and codigo != ROL_ADMIN:
            raise Conflicto("El código del rol ADMIN no se puede cambiar")
        if codigo != rol.codigo and Rol.objects.filter(codigo=codigo).exists():
            raise ErrorValidacion("Ya existe un rol con ese código")

    permiso_ids = datos.pop("permiso_ids", None)
    for campo, valor in datos.items():
        setattr(rol, campo, valor)
    rol.save()

    # None = no tocar la matriz; [] = dejar el rol sin permisos
    if permiso_ids is not None:
        rol.permisos.set(_permisos_por_id(permiso_ids))

    registrar_auditoria(usuario, "UPDATE", f"Rol id={rol.id} campos={sorted(datos)}")
    return rol


@transaction.atomic
def eliminar_rol(rol_id, usuario=None):
    rol = obtener_rol(rol_id)
    if rol.codigo == ROL_ADMIN:
        raise Conflicto("El rol ADMIN no se puede eliminar")
    if rol.total_usuarios:
        raise Conflicto("No se puede eliminar un rol con usuarios asignados")
    rol.delete()
    registrar_auditoria(usuario, "DELETE", f"Rol id={rol_id}")


# ==============================================================
#               USUARIOS
# ==============================================================
_USUARIOS = Usuario.objects.prefetch_related("roles")


def listar_usuarios(search=None, activo=None):
    qs = _USUARIOS.order_by("-date_joined", "-id")
    if search:
        qs = qs.filter(
            Q(first_name__icontains=search) | Q(last_name__icontains=search) | Q(email__icontains=search)
        )
    if activo is not None:
        qs = qs.filter(is_active=activo)
    return qs


def obtener_usuario(usuario_id):
    try:
        return _USUARIOS.get(pk=usuario_id)
    except Usuario.DoesNotExist:
        raise NoEncontrado("Usuario no encontrado")


def _roles_por_id(rol_ids):
    ids = set(rol_ids)
    if not ids:
        raise ErrorValidacion("El usuario debe tener al menos un rol")
    roles = list(Rol.objects.filter(pk__in=ids))
    if len(roles) != len(ids):
        raise ErrorValidacion("Uno o más roles no existen")
    return roles


def _validar_contacto(email=None, celular=None, excluir_id=None):
    otros = Usuario.objects.exclude(pk=excluir_id) if excluir_id else Usuario.objects.all()
    if email and otros.filter(email__iexact=email).exists():
        raise ErrorValidacion("El email ya está registrado")
    if celular and otros.filter(celular=celular).exists():
        raise ErrorValidacion("Ya existe un usuario con este número de celular.")


@transaction.atomic
def crear_usuario(datos, usuario=None):
    """
    Alta de usuario con uno o más roles (por id). La contraseña ya viene
    validada por AUTH_PASSWORD_VALIDATORS en el serializer.
    """
    email = datos["email"].strip().lower()
    celular = (datos.get("celular") or "").replace(" ", "")
    _validar_contacto(email, celular)
    roles = _roles_por_id(datos.get("rol_ids", []))

    nuevo = Usuario.objects.create_user(
        email=email,
        password=datos["password"],
        first_name=datos["first_name"],
        last_name=datos["last_name"],
        celular=celular,
    )
    nuevo.roles.set(roles)

    registrar_auditoria(
        usuario, "CREATE",
        f"Usuario id={nuevo.id} email={nuevo.email} roles={sorted(r.codigo for r in roles)}"
    )
    return nuevo


@transaction.atomic
def actualizar_usuario(usuario_id, datos, usuario=None):
    """
    Actualiza datos básicos, `is_active` y, si viene `rol_ids`, reemplaza
    todos los roles. Desactivar la cuenta revoca sus refresh tokens.
    """
    objetivo = obtener_usuario(usuario_id)

    if "email" in datos:
        datos["email"] = datos["email"].strip().lower()
    if "celular" in datos:
        datos["celular"] = (datos["celular"] or "").replace(" ", "")
    _validar_contacto(datos.get("email"), datos.get("celular"), excluir_id=objetivo.pk)

    if datos.get("is_active") is False and usuario is not None and usuario.pk == objetivo.pk:
        raise Conflicto("No puedes desactivar tu propia cuenta")

    rol_ids = datos.pop("rol_ids", None)
    roles = _roles_por_id(rol_ids) if rol_ids is not None else None

    estaba_activo = objetivo.is_active
    for campo, valor in datos.items():
        setattr(objetivo, campo, valor)
    objetivo.save()

    if roles is not None:
        objetivo.roles.set(roles)
    if estaba_activo and not objetivo.is_active:
        invalidar_tokens_de(objetivo)

    detalle = f"Usuario id={objetivo.id} campos={sorted(datos)}"
    if roles is not None:
        detalle += f" roles={sorted(r.codigo for r in roles)}"
    registrar_auditoria(usuario, "UPDATE", detalle)
    return obtener_usuario(objetivo.pk)


@transaction.atomic
def eliminar_usuario(usuario_id, usuario=None):
    objetivo = obtener_usuario(usuario_id)
    if usuario is not None and usuario.pk == objetivo.pk:
        raise Conflicto("No puedes eliminar tu propia cuenta")
    email = objetivo.email
    objetivo.delete()
    registrar_auditoria(usuario, "DELETE", f"Usuario id={usuario_id} email={email}")


@transaction.atomic
def alternar_usuario(usuario_id, usuario=None):
    objetivo = obtener_usuario(usuario_id)
    if objetivo.is_active and usuario is not None and usuario.pk == objetivo.pk:
        raise Conflicto("No puedes desactivar tu propia cuenta")

    objetivo.is_active = not objetivo.is_active
    objetivo.save(update_fields=["is_active"])
    if not objetivo.is_active:
        invalidar_tokens_de(objetivo)

    registrar_auditoria(usuario, "TOGGLE", f"Usuario id={objetivo.id} activo={objetivo.is_active}")
    return objetivo


@transaction.atomic
def restablecer_password(usuario_id, password, usuario=None):
    """Fija una nueva contraseña y cierra todas las sesiones del usuario."""
    objetivo = obtener_usuario(usuario_id)
    objetivo.set_password(password)
    objetivo.save(update_fields=["password"])
    invalidar_tokens_de(objetivo)
    registrar_auditoria(usuario, "RESET_PASSWORD", f"Usuario id={objetivo.id}")
