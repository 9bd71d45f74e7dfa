# apps/account/tokens.py
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken


def emitir_tokens(usuario):
    """
    Par access/refresh con los claims que lee el control de acceso:
    `email` y `roles` (códigos de rol vigentes al momento de emitir).
    """
    refresh = RefreshToken.for_user(usuario)
    refresh["email"] = usuario.email
    refresh["roles"] = list(usuario.codigos_roles)

    access = refresh.access_token
    return {"accessToken": str(access), "refreshToken": str(refresh)}


def invalidar_tokens_de(usuario):
    """Pone en lista negra todos los refresh tokens vigentes del usuario."""
    for token in OutstandingToken.objects.filter(user=usuario):
        BlacklistedToken.objects.get_or_create(token=token)
