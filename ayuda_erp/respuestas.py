# ayuda_erp/respuestas.py
from rest_framework import status as http
from rest_framework.response import Response


def ok(data=None, message=None, status=http.HTTP_200_OK, pagination=None):
    """
    Respuesta exitosa con el sobre {success, data?, message?, pagination?}.
    Los errores los arma ayuda_erp.exceptions.manejador_excepciones.
    """
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    if pagination is not None:
        body["pagination"] = pagination
    return Response(body, status=status)


def creado(data=None, message=None):
    return ok(data, message, status=http.HTTP_201_CREATED)
