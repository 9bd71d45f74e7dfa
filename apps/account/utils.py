import logging

audit_logger = logging.getLogger('audit')

def registrar_auditoria(usuario, accion, objeto):
    """
    Registra operaciones de escritura sin exponer datos sensibles.
    """
    email = getattr(usuario, "email", None) or "desconocido"

    mensaje = (
        f"Usuario={email} | "
        f"Accion={accion} | "
        f"Objeto={objeto}"
    )

    audit_logger.info(mensaje)
