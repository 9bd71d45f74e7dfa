# ayuda_erp/roles.py
from functools import wraps

from ayuda_erp.exceptions import Prohibido
from apps.users.permisos import autorizar, identidad_desde_request, verificar_permiso


def _aplica(request, metodos):
    return metodos is None or request.method in metodos


def requiere_permisos(*codigos, metodos=None):
    """
    Decorador para vistas @api_view según permisos `modulo:accion`.
    - Sin autenticación: 401.
    - Autenticado sin ninguno de los permisos: 403.
    - ADMIN siempre tiene acceso.
    `metodos` limita la verificación a ciertos verbos HTTP, para apilar
    un decorador por verbo sobre la misma vista:
        @api_view(["GET", "POST"])
        @requiere_permisos("inventario:leer", metodos=["GET"])
        @requiere_permisos("inventario:crear", metodos=["POST"])
        def productos(request): ...
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            if _aplica(request, metodos):
                autorizar(identidad_desde_request(request), codigos)
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


def requiere_permiso(modulo, accion, metodos=None):
    """
    Igual que `requiere_permisos`, pero exige exactamente un par (modulo, accion).
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            if _aplica(request, metodos):
                verificar_permiso(identidad_desde_request(request), modulo, accion)
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


def requiere_roles(*roles_permitidos):
    """
    Decorador por código de rol, para las rutas reservadas a un rol
    concreto (p. ej. registro de usuarios, solo ADMIN).
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            identidad = identidad_desde_request(request)
            if not set(identidad.roles) & set(roles_permitidos):
                raise Prohibido(
                    "Acceso denegado. Se requiere el rol: " + ", ".join(roles_permitidos)
                )
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator
