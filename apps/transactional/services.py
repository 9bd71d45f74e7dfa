"""
Kardex: mantiene Producto.stock_actual consistente con los movimientos.

Toda escritura corre dentro de transaction.atomic(): el movimiento y el
cambio de stock se confirman juntos o no se confirma ninguno. La fila del
producto se bloquea con select_for_update() antes de leer el stock, y la
salida se aplica con un UPDATE condicional (stock_actual >= cantidad) para
que dos salidas concurrentes no dejen el stock en negativo.
"""
from django.db import models, transaction
from django.db.models import F, Q, Sum, Count, Value
from django.db.models.functions import Coalesce

from ayuda_erp.exceptions import (
    Conflicto,
    ErrorValidacion,
    NoEncontrado,
    ReversionInvalida,
    StockInsuficiente,
)
from apps.account.utils import registrar_auditoria
from apps.products.models import Producto, Categoria, UnidadMedida

from .models import BODEGA_PRINCIPAL, Bodega, Movimiento

TIPOS_VALIDOS = (Movimiento.TIPO_ENTRADA, Movimiento.TIPO_SALIDA)


# ==============================================================
#               HELPERS
# ==============================================================
def _bloquear_producto(producto_id):
    try:
        return Producto.objects.select_for_update().get(pk=producto_id)
    except Producto.DoesNotExist:
        raise NoEncontrado("Producto no encontrado")


def _obtener_bodega(bodega_id):
    try:
        return Bodega.objects.get(pk=bodega_id)
    except Bodega.DoesNotExist:
        raise NoEncontrado("Bodega no encontrada")


def _validar_cantidad(cantidad):
    if isinstance(cantidad, bool) or not isinstance(cantidad, int) or cantidad <= 0:
        raise ErrorValidacion("La cantidad debe ser un entero mayor que cero.")


def _aplicar_delta(producto, delta):
    """
    Suma `delta` al stock en la BD. Un delta negativo solo se aplica si
    alcanza el stock; si no, ninguna fila cambia y devuelve False.
    """
    qs = Producto.objects.filter(pk=producto.pk)
    if delta < 0:
        qs = qs.filter(stock_actual__gte=-delta)
    return qs.update(stock_actual=F("stock_actual") + delta) == 1


# ==============================================================
#               MOVIMIENTOS
# ==============================================================
@transaction.atomic
def registrar_movimiento(tipo, producto_id, bodega_id, cantidad, observaciones="",
                         registrado_por=None, origen=Movimiento.ORIGEN_MOVIMIENTO):
    """
    Crea un movimiento y actualiza el stock del producto en una sola transacción.

    La instancia devuelta lleva `stock_anterior` y `stock_nuevo` para mostrar.
    """
    if tipo not in TIPOS_VALIDOS:
        raise ErrorValidacion("Tipo inválido (entrada o salida).")
    _validar_cantidad(cantidad)

    producto = _bloquear_producto(producto_id)
    bodega = _obtener_bodega(bodega_id)

    stock_anterior = producto.stock_actual
    delta = cantidad if tipo == Movimiento.TIPO_ENTRADA else -cantidad

    if tipo == Movimiento.TIPO_SALIDA and stock_anterior < cantidad:
        raise StockInsuficiente()

    if not _aplicar_delta(producto, delta):
        raise StockInsuficiente()

    mov = Movimiento.objects.create(
        tipo=tipo,
        origen=origen,
        producto=producto,
        bodega=bodega,
        cantidad=cantidad,
        observaciones=observaciones or "",
        registrado_por=registrado_por,
    )

    producto.refresh_from_db(fields=["stock_actual"])
    mov.stock_anterior = stock_anterior
    mov.stock_nuevo = producto.stock_actual

    registrar_auditoria(
        registrado_por, f"MOVIMIENTO_{tipo.upper()}",
        f"Movimiento id={mov.id} producto={producto.codigo} bodega={bodega.codigo} "
        f"cantidad={cantidad} stock={stock_anterior}->{mov.stock_nuevo} origen={origen}"
    )
    return mov


def ajustar_stock(producto_id, cantidad, tipo, bodega_id, observaciones="", registrado_por=None):
    """
    Ajuste manual desde la ficha del producto. Es el mismo registro del
    kardex, marcado con origen 'ajuste'. Devuelve (nuevo_stock, movimiento).
    """
    mov = registrar_movimiento(
        tipo, producto_id, bodega_id, cantidad,
        observaciones=observaciones or f"{tipo} de stock",
        registrado_por=registrado_por,
        origen=Movimiento.ORIGEN_AJUSTE,
    )
    return mov.stock_nuevo, mov


@transaction.atomic
def eliminar_movimiento(movimiento_id, usuario=None):
    """
    Elimina un movimiento y revierte su efecto sobre el stock.
    Si la reversión deja stock negativo no se cambia nada (ReversionInvalida).
    Devuelve el stock revertido.
    """
    try:
        mov = Movimiento.objects.select_related("bodega").get(pk=movimiento_id)
    except Movimiento.DoesNotExist:
        raise NoEncontrado("Movimiento no encontrado")

    producto = _bloquear_producto(mov.producto_id)
    stock_revertido = producto.stock_actual - mov.delta

    if stock_revertido < 0 or not _aplicar_delta(producto, -mov.delta):
        raise ReversionInvalida()

    mov_id = mov.id
    mov.delete()

    registrar_auditoria(
        usuario, "MOVIMIENTO_ELIMINADO",
        f"Movimiento id={mov_id} producto={producto.codigo} tipo={mov.tipo} "
        f"cantidad={mov.cantidad} stock={producto.stock_actual}->{stock_revertido}"
    )
    return stock_revertido


def filtrar_movimientos(tipo=None, producto_id=None, bodega_id=None, fecha_inicio=None, fecha_fin=None):
    qs = Movimiento.objects.select_related(
        "producto", "producto__categoria", "producto__unidad_medida", "bodega", "registrado_por"
    )
    if tipo:
        qs = qs.filter(tipo=tipo)
    if producto_id:
        qs = qs.filter(producto_id=producto_id)
    if bodega_id:
        qs = qs.filter(bodega_id=bodega_id)
    return _rango_fechas(qs, fecha_inicio, fecha_fin).order_by("-fecha", "-id")


def _rango_fechas(qs, fecha_inicio=None, fecha_fin=None, campo="fecha"):
    if fecha_inicio:
        qs = qs.filter(**{f"{campo}__gte": fecha_inicio})
    if fecha_fin:
        qs = qs.filter(**{f"{campo}__lte": fecha_fin})
    return qs


# ==============================================================
#               AGREGADOS
# ==============================================================
_CERO = Value(0, output_field=models.IntegerField())


def _totales_por_tipo():
    return {
        "entradas": Coalesce(Sum("cantidad", filter=Q(tipo=Movimiento.TIPO_ENTRADA)),
                             _CERO, output_field=models.IntegerField()),
        "salidas": Coalesce(Sum("cantidad", filter=Q(tipo=Movimiento.TIPO_SALIDA)),
                            _CERO, output_field=models.IntegerField()),
    }


def stock_por_bodega(bodega_id):
    """
    Stock por producto dentro de una bodega, calculado sumando sus
    movimientos (entradas - salidas). Es independiente de
    Producto.stock_actual, que es global: las salidas se validan contra el
    total, así que una bodega puede quedar en negativo. Solo lista stock positivo.
    """
    bodega = _obtener_bodega(bodega_id)

    filas = (
        Movimiento.objects.filter(bodega=bodega)
        .values("producto_id")
        .annotate(**_totales_por_tipo())
        .order_by("producto_id")
    )

    productos = Producto.objects.select_related("categoria", "unidad_medida").in_bulk(
        [f["producto_id"] for f in filas]
    )

    resultado = []
    for f in filas:
        stock = f["entradas"] - f["salidas"]
        producto = productos.get(f["producto_id"])
        if producto is None or stock <= 0:
            continue
        resultado.append({
            "producto": producto,
            "stock_actual": stock,
            "entradas": f["entradas"],
            "salidas": f["salidas"],
        })

    resultado.sort(key=lambda r: r["stock_actual"], reverse=True)
    return bodega, resultado


def estadisticas(fecha_inicio=None, fecha_fin=None):
    """
    Totales de entradas/salidas del periodo, agrupados por producto y por bodega.
    """
    qs = _rango_fechas(Movimiento.objects.all(), fecha_inicio, fecha_fin)

    resumen = qs.aggregate(total_movimientos=Count("id"), **_totales_por_tipo())

    def _agrupar(campo, modelo):
        filas = list(
            qs.values(campo)
            .annotate(total_cantidad=Sum("cantidad"), total_movimientos=Count("id"), **_totales_por_tipo())
            .order_by("-total_cantidad", campo)
        )
        objetos = modelo.objects.in_bulk([f[campo] for f in filas])
        return [
            {
                "objeto": objetos.get(f[campo]),
                "total_entradas": f["entradas"],
                "total_salidas": f["salidas"],
                "total_cantidad": f["total_cantidad"] or 0,
                "total_movimientos": f["total_movimientos"],
            }
            for f in filas
        ]

    return {
        "resumen": {
            "total_entradas": resumen["entradas"],
            "total_salidas": resumen["salidas"],
            "total_movimientos": resumen["total_movimientos"],
        },
        "por_producto": _agrupar("producto_id", Producto),
        "por_bodega": _agrupar("bodega_id", Bodega),
    }


# ==============================================================
#               PRODUCTOS
# ==============================================================
def _validar_catalogos(categoria_id=None, unidad_medida_id=None):
    if categoria_id is not None and not Categoria.objects.filter(pk=categoria_id).exists():
        raise ErrorValidacion("Categoría no encontrada")
    if unidad_medida_id is not None and not UnidadMedida.objects.filter(pk=unidad_medida_id).exists():
        raise ErrorValidacion("Unidad de medida no encontrada")


def _bodega_principal():
    bodega = Bodega.objects.filter(codigo=BODEGA_PRINCIPAL).first()
    if bodega is None:
        raise ErrorValidacion("El stock inicial requiere una bodega (no existe la bodega principal)")
    return bodega


@transaction.atomic
def crear_producto(datos, bodega_id=None, registrado_por=None):
    """
    Crea el producto con stock 0. El stock inicial entra por el kardex como
    movimiento 'inicial' en la bodega indicada o, si no viene, en la bodega
    principal.
    """
    codigo = datos["codigo"].strip().upper()
    if Producto.objects.filter(codigo=codigo).exists():
        raise ErrorValidacion("Ya existe un producto con ese código")
    _validar_catalogos(datos["categoria_id"], datos["unidad_medida_id"])

    stock_inicial = datos.pop("stock_actual", 0) or 0
    if bodega_id is not None:
        _obtener_bodega(bodega_id)
    elif stock_inicial > 0:
        bodega_id = _bodega_principal().pk

    producto = Producto.objects.create(
        **{**datos, "codigo": codigo},
        stock_actual=0,
    )

    if stock_inicial > 0:
        registrar_movimiento(
            Movimiento.TIPO_ENTRADA, producto.pk, bodega_id, stock_inicial,
            observaciones="Stock inicial",
            registrado_por=registrado_por,
            origen=Movimiento.ORIGEN_INICIAL,
        )
        producto.refresh_from_db()

    registrar_auditoria(registrado_por, "CREATE", f"Producto id={producto.id} codigo={producto.codigo}")
    return producto


@transaction.atomic
def actualizar_producto(producto_id, datos, usuario=None):
    producto = _bloquear_producto(producto_id)

    if "stock_actual" in datos and datos["stock_actual"] != producto.stock_actual:
        raise ErrorValidacion("El stock solo se modifica con movimientos o ajustes de stock")
    datos.pop("stock_actual", None)

    codigo = datos.get("codigo")
    if codigo:
        datos["codigo"] = codigo = codigo.strip().upper()
        if codigo != producto.codigo and Producto.objects.filter(codigo=codigo).exists():
            raise ErrorValidacion("Ya existe un producto con ese código")

    _validar_catalogos(datos.get("categoria_id"), datos.get("unidad_medida_id"))

    for campo, valor in datos.items():
        setattr(producto, campo, valor)
    producto.save()

    registrar_auditoria(usuario, "UPDATE", f"Producto id={producto.id} campos={sorted(datos)}")
    return producto


@transaction.atomic
def eliminar_producto(producto_id, usuario=None):
    producto = _bloquear_producto(producto_id)
    if producto.movimientos.exists():
        raise Conflicto("No se puede eliminar un producto con movimientos asociados")
    producto.delete()
    registrar_auditoria(usuario, "DELETE", f"Producto id={producto_id}")


def alternar_producto(producto_id, usuario=None):
    try:
        producto = Producto.objects.get(pk=producto_id)
    except Producto.DoesNotExist:
        raise NoEncontrado("Producto no encontrado")
    producto.activo = not producto.activo
    producto.save(update_fields=["activo", "actualizado_en"])
    registrar_auditoria(usuario, "TOGGLE", f"Producto id={producto.id} activo={producto.activo}")
    return producto


# ==============================================================
#               BODEGAS
# ==============================================================
def crear_bodega(datos, usuario=None):
    codigo = datos["codigo"].strip().upper()
    if Bodega.objects.filter(codigo=codigo).exists():
        raise ErrorValidacion("Ya existe una bodega con ese código")
    bodega = Bodega.objects.create(**{**datos, "codigo": codigo})
    registrar_auditoria(usuario, "CREATE", f"Bodega id={bodega.id} codigo={bodega.codigo}")
    return bodega


def actualizar_bodega(bodega_id, datos, usuario=None):
    bodega = _obtener_bodega(bodega_id)

    codigo = datos.get("codigo")
    if codigo:
        datos["codigo"] = codigo = codigo.strip().upper()
        if codigo != bodega.codigo and Bodega.objects.filter(codigo=codigo).exists():
            raise ErrorValidacion("Ya existe una bodega con ese código")

    for campo, valor in datos.items():
        setattr(bodega, campo, valor)
    bodega.save()
    registrar_auditoria(usuario, "UPDATE", f"Bodega id={bodega.id} campos={sorted(datos)}")
    return bodega


@transaction.atomic
def eliminar_bodega(bodega_id, usuario=None):
    bodega = _obtener_bodega(bodega_id)
    if bodega.movimientos.exists():
        raise Conflicto("No se puede eliminar una bodega con movimientos asociados")
    bodega.delete()
    registrar_auditoria(usuario, "DELETE", f"Bodega id={bodega_id}")


def alternar_bodega(bodega_id, usuario=None):
    bodega = _obtener_bodega(bodega_id)
    bodega.activo = not bodega.activo
    bodega.save(update_fields=["activo", "actualizado_en"])
    registrar_auditoria(usuario, "TOGGLE", f"Bodega id={bodega.id} activo={bodega.activo}")
    return bodega
