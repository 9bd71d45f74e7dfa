# apps/account/views.py
import logging

from django.contrib.auth.models import update_last_login
from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from ayuda_erp.exceptions import ErrorValidacion, NoAutenticado
from ayuda_erp.respuestas import creado, ok
from ayuda_erp.roles import requiere_roles
from apps.users.models import ROL_ADMIN, Rol, Usuario
from apps.users.permisos import permisos_efectivos

from .serializers import (
    CambioPasswordSerializer,
    LoginSerializer,
    LogoutSerializer,
    RefreshTokenSerializer,
    RegistroSerializer,
    UsuarioSesionSerializer,
)
from .tokens import emitir_tokens, invalidar_tokens_de
from .utils import registrar_auditoria

logger = logging.getLogger('login_secure')


def _ip(request):
    return request.META.get('REMOTE_ADDR', 'desconocida')


# ================================================================
# LOGIN
# ================================================================

@api_view(["POST"])
@permission_classes([AllowAny])
def login(request):
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    email = serializer.validated_data["email"].strip().lower()
    password = serializer.validated_data["password"]
    ip = _ip(request)
    logger.info(f"Intento de login: email={email}, ip={ip}")

    usuario = Usuario.objects.filter(email__iexact=email).first()

    if usuario is None:
        logger.info(f"Login fallido: email={email}, ip={ip}")
        raise NoAutenticado("Credenciales inválidas")

    if not usuario.is_active:
        logger.info(f"Login bloqueado (usuario inactivo): email={email}, ip={ip}")
        raise NoAutenticado("La cuenta de usuario está desactivada")

    if not usuario.check_password(password):
        logger.info(f"Login fallido: email={email}, ip={ip}")
        raise NoAutenticado("Credenciales inválidas")

    tokens = emitir_tokens(usuario)
    update_last_login(None, usuario)
    logger.info(f"Login exitoso: email={email}, ip={ip}")

    return ok({**tokens, "user": UsuarioSesionSerializer(usuario).data})


# ================================================================
# TOKENS
# ================================================================

@api_view(["POST"])
@permission_classes([AllowAny])
def refresh_token(request):
    """
    Rota el refresh token: el anterior queda en lista negra y el nuevo par
    lleva los roles vigentes del usuario.
    """
    serializer = RefreshTokenSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        anterior = RefreshToken(serializer.validated_data["refreshToken"])
    except TokenError:
        raise NoAutenticado("Refresh token inválido o expirado")

    usuario = Usuario.objects.filter(pk=anterior.get("user_id"), is_active=True).first()
    if usuario is None:
        raise NoAutenticado("Refresh token inválido o expirado")

    anterior.blacklist()
    return ok(emitir_tokens(usuario))


@api_view(["POST"])
def logout(request):
    serializer = LogoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    token = serializer.validated_data.get("refreshToken")
    if token:
        try:
            RefreshToken(token).blacklist()
        except TokenError:
            # ya expirado o revocado: la sesión igual queda cerrada
            logger.info(f"Logout con refresh token inválido: email={request.user.email}")

    logger.info(f"Logout: email={request.user.email}, ip={_ip(request)}")
    return ok(message="Sesión cerrada correctamente")


# ================================================================
# CONTRASEÑA
# ================================================================

@api_view(["POST"])
def change_password(request):
    usuario = request.user
    serializer = CambioPasswordSerializer(data=request.data, context={"usuario": usuario})
    serializer.is_valid(raise_exception=True)

    if not usuario.check_password(serializer.validated_data["currentPassword"]):
        raise ErrorValidacion("La contraseña actual es incorrecta")

    with transaction.atomic():
        usuario.set_password(serializer.validated_data["newPassword"])
        usuario.save(update_fields=["password"])
        invalidar_tokens_de(usuario)

    registrar_auditoria(usuario, "CHANGE_PASSWORD", f"Usuario id={usuario.id}")
    return ok(message="Contraseña actualizada correctamente")


# ================================================================
# REGISTRO (solo ADMIN)
# ================================================================

@api_view(["POST"])
@requiere_roles(ROL_ADMIN)
def register(request):
    serializer = RegistroSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    d = serializer.validated_data

    with transaction.atomic():
        usuario = Usuario.objects.create_user(
            email=d["email"],
            password=d["password"],
            first_name=d["nombres"],
            last_name=d["apellidos"],
            celular=d.get("celular", ""),
        )
        rol = Rol.objects.filter(codigo=(d.get("rolCodigo") or "").strip().upper()).first()
        if rol:
            usuario.roles.add(rol)

    registrar_auditoria(request.user, "CREATE", f"Usuario id={usuario.id} email={usuario.email}")
    return creado({"id": usuario.id, "email": usuario.email}, "Usuario registrado")


# ================================================================
# PERFIL
# ================================================================

@api_view(["GET"])
def profile(request):
    usuario = request.user
    roles, permisos = permisos_efectivos(usuario.pk)
    return ok({
        "id": usuario.id,
        "nombres": usuario.first_name,
        "apellidos": usuario.last_name,
        "email": usuario.email,
        "celular": usuario.celular,
        "roles": roles,
        "permisos": permisos,
    })
