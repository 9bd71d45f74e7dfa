"""
Resolución de permisos por rol.

Una identidad (claims del JWT ya verificado) tiene roles; cada rol agrupa
permisos `modulo:accion`. El permiso efectivo es la unión deduplicada de
los permisos de todos sus roles. El rol ADMIN pasa cualquier verificación.

No hay caché: cada decisión vuelve a leer las relaciones rol -> permiso.
"""
from collections import namedtuple

from ayuda_erp.exceptions import NoAutenticado, NoEncontrado, Prohibido

from .models import ROL_ADMIN, Permiso, Usuario

Identidad = namedtuple("Identidad", ["usuario_id", "email", "roles"])


def identidad_desde_request(request):
    """
    Construye la Identidad a partir del token validado por JWTAuthentication.
    Sin token (p. ej. sesión) se leen los roles desde la BD.
    """
    user = getattr(request, "user", None)
    if not user or not user.is_authenticated:
        raise NoAutenticado()

    token = getattr(request, "auth", None)
    if token is not None and hasattr(token, "get"):
        roles = token.get("roles")
        if roles is not None:
            return Identidad(user.pk, token.get("email", user.email), tuple(roles))

    return Identidad(user.pk, user.email, tuple(user.codigos_roles))


def permisos_efectivos(usuario_id):
    """
    Devuelve (roles, permisos) del usuario: códigos de rol y códigos
    `modulo:accion` sin duplicados, ambos ordenados.
    """
    try:
        usuario = Usuario.objects.get(pk=usuario_id)
    except Usuario.DoesNotExist:
        raise NoEncontrado("Usuario no encontrado")

    roles = sorted(usuario.roles.values_list("codigo", flat=True))
    permisos = sorted(set(
        Permiso.objects.filter(roles__usuarios=usuario).values_list("codigo", flat=True)
    ))
    return roles, permisos


def _codigos_de(identidad):
    try:
        _, permisos = permisos_efectivos(identidad.usuario_id)
    except NoEncontrado:
        # Token válido de un usuario que ya no existe
        raise NoAutenticado("Usuario no encontrado")
    return set(permisos)


def autorizar(identidad, codigos):
    """
    Permite si la identidad tiene ADMIN o al menos uno de `codigos`.
    Lanza Prohibido indicando los permisos requeridos.
    """
    if ROL_ADMIN in identidad.roles:
        return True

    if _codigos_de(identidad) & set(codigos):
        return True

    raise Prohibido(
        "Acceso denegado. Se requiere alguno de los permisos: " + ", ".join(codigos)
    )


def verificar_permiso(identidad, modulo, accion):
    """
    Variante estricta: exige exactamente el par (modulo, accion).
    """
    if ROL_ADMIN in identidad.roles:
        return True

    codigo = Permiso.codigo_de(modulo, accion)
    if codigo in _codigos_de(identidad):
        return True

    raise Prohibido(f"Acceso denegado. Falta el permiso: {codigo}")
