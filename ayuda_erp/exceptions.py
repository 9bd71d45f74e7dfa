# ayuda_erp/exceptions.py
import logging

from django.db.models.deletion import ProtectedError, RestrictedError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


# ================================================================
# TAXONOMÍA DE ERRORES
# ================================================================

class ErrorAyuda(APIException):
    """
    Error de negocio con status HTTP. Las vistas no lo capturan:
    sube hasta `manejador_excepciones`, que arma el sobre de respuesta.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Solicitud inválida."
    default_code = "error"


class NoEncontrado(ErrorAyuda):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Recurso no encontrado."
    default_code = "no_encontrado"


class ErrorValidacion(ErrorAyuda):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Datos inválidos."
    default_code = "validacion"


class StockInsuficiente(ErrorAyuda):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Stock insuficiente para esta salida."
    default_code = "stock_insuficiente"


class ReversionInvalida(ErrorAyuda):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "No se puede revertir este movimiento, dejaría stock negativo."
    default_code = "reversion_invalida"


class NoAutenticado(ErrorAyuda):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Token no proporcionado, inválido o expirado."
    default_code = "no_autenticado"


class Prohibido(ErrorAyuda):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Acceso denegado. Permisos insuficientes."
    default_code = "prohibido"


class Conflicto(ErrorAyuda):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "El recurso tiene registros dependientes."
    default_code = "conflicto"


# ================================================================
# HANDLER DRF -> {success: false, message}
# ================================================================

def _primer_mensaje(detalle):
    if isinstance(detalle, dict):
        for campo, valor in detalle.items():
            msg = _primer_mensaje(valor)
            if campo == "non_field_errors":
                return msg
            return f"{campo}: {msg}"
    if isinstance(detalle, (list, tuple)):
        return _primer_mensaje(detalle[0]) if detalle else "Datos inválidos."
    return str(detalle)


def manejador_excepciones(exc, context):
    """
    EXCEPTION_HANDLER de REST_FRAMEWORK.
    Todas las respuestas de error usan el mismo sobre que las exitosas.
    """
    if isinstance(exc, (ProtectedError, RestrictedError)):
        exc = Conflicto("No se puede eliminar: existen registros asociados.")

    response = exception_handler(exc, context)

    if response is None:
        logger.exception("Error no controlado en %s", context.get("view"))
        return Response(
            {"success": False, "message": "Error interno del servidor"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        body = {
            "success": False,
            "message": _primer_mensaje(exc.detail),
            "errors": exc.detail,
        }
    else:
        detalle = response.data
        if isinstance(detalle, dict):
            detalle = detalle.get("detail", detalle)
        body = {"success": False, "message": _primer_mensaje(detalle)}

    logger.warning("Error %s: %s", response.status_code, body["message"])
    response.data = body
    return response
