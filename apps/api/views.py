# ============================
#   IMPORTS
# ============================
from django.core.paginator import Paginator
from django.db.models import Count, Q
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

from ayuda_erp.exceptions import ErrorValidacion, NoEncontrado
from ayuda_erp.respuestas import creado, ok
from ayuda_erp.roles import requiere_permiso, requiere_permisos

# MODELOS
from apps.products.models import Categoria, Producto, UnidadMedida
from apps.transactional.models import Bodega
from apps.users.models import Rol

# SERVICIOS
from apps.account.utils import registrar_auditoria
from apps.transactional import services as kardex
from apps.users import services as seguridad

# SERIALIZERS
from .exportar import movimientos_xlsx
from .serializers import (
    AjusteStockSerializer,
    BodegaSerializer,
    CategoriaSerializer,
    EstadisticaBodegaSerializer,
    EstadisticaProductoSerializer,
    FiltroMovimientosSerializer,
    FiltroUsuariosSerializer,
    MovimientoEntradaSerializer,
    MovimientoSerializer,
    PermisoSerializer,
    ProductoEntradaSerializer,
    ProductoSerializer,
    ResetPasswordSerializer,
    RolEntradaSerializer,
    RolSerializer,
    StockBodegaSerializer,
    UnidadMedidaSerializer,
    UsuarioAltaSerializer,
    UsuarioEntradaSerializer,
    UsuarioSerializer,
)


# ============================
#   HELPERS
# ============================
def _flag(request, nombre):
    return str(request.query_params.get(nombre, "")).lower() in ("1", "true", "si", "yes")


def _entero(request, nombre):
    valor = request.query_params.get(nombre)
    if valor in (None, ""):
        return None
    try:
        return int(valor)
    except (TypeError, ValueError):
        raise ErrorValidacion(f"{nombre} debe ser un número entero")


def _obtener(qs, pk, mensaje):
    try:
        return qs.get(pk=pk)
    except qs.model.DoesNotExist:
        raise NoEncontrado(mensaje)


def _validar(serializer_class, data, partial=False):
    serializer = serializer_class(data=data, partial=partial)
    serializer.is_valid(raise_exception=True)
    return dict(serializer.validated_data)


_PRODUCTOS = Producto.objects.select_related("categoria", "unidad_medida")


# ============================
#   HEALTH
# ============================
@api_view(["GET"])
@permission_classes([AllowAny])
def health(request):
    return ok({"status": "ok"}, "API funcionando")


# ============================
#   PRODUCTOS
# ============================
@api_view(["GET", "POST"])
@requiere_permisos("inventario:leer", metodos=["GET"])
@requiere_permisos("inventario:crear", metodos=["POST"])
def productos_list_create(request):
    if request.method == "GET":
        qs = _PRODUCTOS
        if not _flag(request, "includeInactive"):
            qs = qs.filter(activo=True)

        categoria_id = _entero(request, "categoriaId")
        if categoria_id is not None:
            qs = qs.filter(categoria_id=categoria_id)

        search = (request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(Q(codigo__icontains=search) | Q(nombre__icontains=search))

        return ok(ProductoSerializer(qs, many=True).data)

    datos = _validar(ProductoEntradaSerializer, request.data)
    bodega_id = datos.pop("bodega_id", None)
    producto = kardex.crear_producto(datos, bodega_id=bodega_id, registrado_por=request.user)
    return creado(ProductoSerializer(producto).data, "Producto creado")


@api_view(["GET", "PUT", "DELETE"])
@requiere_permisos("inventario:leer", metodos=["GET"])
@requiere_permisos("inventario:actualizar", metodos=["PUT"])
@requiere_permisos("inventario:eliminar", metodos=["DELETE"])
def productos_detail(request, pk):
    if request.method == "GET":
        producto = _obtener(_PRODUCTOS, pk, "Producto no encontrado")
        return ok(ProductoSerializer(producto).data)

    if request.method == "PUT":
        datos = _validar(ProductoEntradaSerializer, request.data, partial=True)
        datos.pop("bodega_id", None)
        producto = kardex.actualizar_producto(pk, datos, usuario=request.user)
        return ok(ProductoSerializer(producto).data, "Producto actualizado")

    kardex.eliminar_producto(pk, usuario=request.user)
    return ok(message="Producto eliminado")


@api_view(["PATCH"])
@requiere_permisos("inventario:actualizar")
def productos_toggle(request, pk):
    producto = kardex.alternar_producto(pk, usuario=request.user)
    estado = "activado" if producto.activo else "desactivado"
    return ok(ProductoSerializer(producto).data, f"Producto {estado}")


@api_view(["POST"])
@requiere_permisos("inventario:actualizar")
def productos_adjust_stock(request, pk):
    d = _validar(AjusteStockSerializer, request.data)
    nuevo_stock, mov = kardex.ajustar_stock(
        pk, d["cantidad"], d["tipo"], d["bodega_id"],
        observaciones=d.get("observaciones", ""),
        registrado_por=request.user,
    )
    producto = _obtener(_PRODUCTOS, pk, "Producto no encontrado")
    return ok(
        {
            "producto": ProductoSerializer(producto).data,
            "stockAnterior": mov.stock_anterior,
            "stockNuevo": nuevo_stock,
            "movimiento": MovimientoSerializer(mov).data,
        },
        "Stock ajustado",
    )


# ============================
#   MOVIMIENTOS
# ============================
@api_view(["GET", "POST"])
@requiere_permisos("inventario:leer", metodos=["GET"])
@requiere_permisos("inventario:crear", metodos=["POST"])
def movimientos_list_create(request):
    if request.method == "GET":
        f = _validar(FiltroMovimientosSerializer, request.query_params)
        qs = kardex.filtrar_movimientos(
            tipo=f.get("tipo"),
            producto_id=f.get("producto_id"),
            bodega_id=f.get("bodega_id"),
            fecha_inicio=f.get("fecha_inicio"),
            fecha_fin=f.get("fecha_fin"),
        )

        if f.get("export") == "xlsx":
            return movimientos_xlsx(qs)

        paginator = Paginator(qs, f["limit"])
        page_obj = paginator.get_page(f["page"])
        return ok(
            MovimientoSerializer(page_obj.object_list, many=True).data,
            pagination={
                "page": page_obj.number,
                "limit": f["limit"],
                "total": paginator.count,
                "totalPages": paginator.num_pages,
            },
        )

    d = _validar(MovimientoEntradaSerializer, request.data)
    mov = kardex.registrar_movimiento(
        d["tipo"], d["producto_id"], d["bodega_id"], d["cantidad"],
        observaciones=d.get("observaciones", ""),
        registrado_por=request.user,
    )
    return creado(MovimientoSerializer(mov).data, "Movimiento registrado")


@api_view(["GET", "DELETE"])
@requiere_permisos("inventario:leer", metodos=["GET"])
@requiere_permiso("inventario", "eliminar", metodos=["DELETE"])
def movimientos_detail(request, pk):
    if request.method == "GET":
        mov = _obtener(kardex.filtrar_movimientos(), pk, "Movimiento no encontrado")
        return ok(MovimientoSerializer(mov).data)

    stock = kardex.eliminar_movimiento(pk, usuario=request.user)
    return ok({"stockRevertido": stock}, "Movimiento eliminado y stock revertido")


@api_view(["GET"])
@requiere_permisos("inventario:leer")
def movimientos_estadisticas(request):
    f = _validar(FiltroMovimientosSerializer, request.query_params)
    est = kardex.estadisticas(f.get("fecha_inicio"), f.get("fecha_fin"))
    resumen = est["resumen"]
    return ok({
        "resumen": {
            "totalEntradas": resumen["total_entradas"],
            "totalSalidas": resumen["total_salidas"],
            "totalMovimientos": resumen["total_movimientos"],
        },
        "porProducto": EstadisticaProductoSerializer(est["por_producto"], many=True).data,
        "porBodega": EstadisticaBodegaSerializer(est["por_bodega"], many=True).data,
    })


# ============================
#   BODEGAS
# ============================
@api_view(["GET", "POST"])
@requiere_permisos("inventario:leer", metodos=["GET"])
@requiere_permisos("inventario:crear", metodos=["POST"])
def bodegas_list_create(request):
    if request.method == "GET":
        qs = Bodega.objects.all()
        if not _flag(request, "includeInactive"):
            qs = qs.filter(activo=True)
        return ok(BodegaSerializer(qs, many=True).data)

    datos = _validar(BodegaSerializer, request.data)
    bodega = kardex.crear_bodega(datos, usuario=request.user)
    return creado(BodegaSerializer(bodega).data, "Bodega creada")


@api_view(["GET", "PUT", "DELETE"])
@requiere_permisos("inventario:leer", metodos=["GET"])
@requiere_permisos("inventario:actualizar", metodos=["PUT"])
@requiere_permisos("inventario:eliminar", metodos=["DELETE"])
def bodegas_detail(request, pk):
    if request.method == "GET":
        bodega = _obtener(Bodega.objects.all(), pk, "Bodega no encontrada")
        return ok(BodegaSerializer(bodega).data)

    if request.method == "PUT":
        datos = _validar(BodegaSerializer, request.data, partial=True)
        bodega = kardex.actualizar_bodega(pk, datos, usuario=request.user)
        return ok(BodegaSerializer(bodega).data, "Bodega actualizada")

    kardex.eliminar_bodega(pk, usuario=request.user)
    return ok(message="Bodega eliminada")


@api_view(["PATCH"])
@requiere_permisos("inventario:actualizar")
def bodegas_toggle(request, pk):
    bodega = kardex.alternar_bodega(pk, usuario=request.user)
    estado = "activada" if bodega.activo else "desactivada"
    return ok(BodegaSerializer(bodega).data, f"Bodega {estado}")


@api_view(["GET"])
@requiere_permisos("inventario:leer")
def bodegas_stock(request, pk):
    bodega, filas = kardex.stock_por_bodega(pk)
    return ok({
        "bodega": BodegaSerializer(bodega).data,
        "stockPorProducto": StockBodegaSerializer(filas, many=True).data,
    })


# ============================
#   CATÁLOGOS
# ============================
def _catalogo_listar_crear(request, modelo, serializer_class, creado_msg):
    if request.method == "GET":
        qs = modelo.objects.all()
        if not _flag(request, "includeInactive"):
            qs = qs.filter(activo=True)
        return ok(serializer_class(qs, many=True).data)

    serializer = serializer_class(data=request.data)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    registrar_auditoria(request.user, "CREATE", f"{modelo.__name__} id={serializer.instance.pk}")
    return creado(serializer.data, creado_msg)


def _catalogo_detalle(request, pk, modelo, serializer_class, nombre):
    # nombre: "Categoría" / "Unidad de medida"; DELETE con productos -> ProtectedError (409)
    obj = _obtener(modelo.objects.all(), pk, f"{nombre} no encontrada")

    if request.method == "GET":
        return ok(serializer_class(obj).data)

    if request.method == "PUT":
        serializer = serializer_class(obj, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        registrar_auditoria(request.user, "UPDATE", f"{modelo.__name__} id={obj.pk}")
        return ok(serializer.data, f"{nombre} actualizada")

    obj.delete()
    registrar_auditoria(request.user, "DELETE", f"{modelo.__name__} id={pk}")
    return ok(message=f"{nombre} eliminada")


def _catalogo_alternar(request, pk, modelo, serializer_class, nombre):
    obj = _obtener(modelo.objects.all(), pk, f"{nombre} no encontrada")
    obj.activo = not obj.activo
    obj.save(update_fields=["activo"])
    registrar_auditoria(request.user, "TOGGLE", f"{modelo.__name__} id={obj.pk} activo={obj.activo}")
    estado = "activada" if obj.activo else "desactivada"
    return ok(serializer_class(obj).data, f"{nombre} {estado}")


@api_view(["GET", "POST"])
@requiere_permisos("configuracion:leer", "inventario:leer", metodos=["GET"])
@requiere_permisos("configuracion:crear", metodos=["POST"])
def categorias_list_create(request):
    return _catalogo_listar_crear(request, Categoria, CategoriaSerializer, "Categoría creada")


@api_view(["GET", "PUT", "DELETE"])
@requiere_permisos("configuracion:leer", "inventario:leer", metodos=["GET"])
@requiere_permisos("configuracion:actualizar", metodos=["PUT"])
@requiere_permisos("configuracion:eliminar", metodos=["DELETE"])
def categorias_detail(request, pk):
    return _catalogo_detalle(request, pk, Categoria, CategoriaSerializer, "Categoría")


@api_view(["PATCH"])
@requiere_permisos("configuracion:actualizar")
def categorias_toggle(request, pk):
    return _catalogo_alternar(request, pk, Categoria, CategoriaSerializer, "Categoría")


@api_view(["GET", "POST"])
@requiere_permisos("configuracion:leer", "inventario:leer", metodos=["GET"])
@requiere_permisos("configuracion:crear", metodos=["POST"])
def unidades_list_create(request):
    return _catalogo_listar_crear(request, UnidadMedida, UnidadMedidaSerializer, "Unidad de medida creada")


@api_view(["GET", "PUT", "DELETE"])
@requiere_permisos("configuracion:leer", "inventario:leer", metodos=["GET"])
@requiere_permisos("configuracion:actualizar", metodos=["PUT"])
@requiere_permisos("configuracion:eliminar", metodos=["DELETE"])
def unidades_detail(request, pk):
    return _catalogo_detalle(request, pk, UnidadMedida, UnidadMedidaSerializer, "Unidad de medida")


@api_view(["PATCH"])
@requiere_permisos("configuracion:actualizar")
def unidades_toggle(request, pk):
    return _catalogo_alternar(request, pk, UnidadMedida, UnidadMedidaSerializer, "Unidad de medida")


# ============================
#   ROLES
# ============================
_ROLES = Rol.objects.prefetch_related("permisos").annotate(total_usuarios=Count("usuarios"))


@api_view(["GET", "POST"])
@requiere_permisos("seguridad:leer", metodos=["GET"])
@requiere_permisos("seguridad:crear", metodos=["POST"])
def roles_list_create(request):
    if request.method == "GET":
        qs = _ROLES
        if not _flag(request, "includeInactive"):
            qs = qs.filter(activo=True)
        return ok(RolSerializer(qs, many=True).data)

    datos = _validar(RolEntradaSerializer, request.data)
    rol = seguridad.crear_rol(datos, usuario=request.user)
    return creado(RolSerializer(seguridad.obtener_rol(rol.pk)).data, "Rol creado")


@api_view(["GET"])
@requiere_permisos("seguridad:leer")
def roles_permisos(request):
    grupos = seguridad.permisos_agrupados()
    return ok({
        modulo: PermisoSerializer(permisos, many=True).data
        for modulo, permisos in grupos.items()
    })


@api_view(["GET", "PUT", "DELETE"])
@requiere_permisos("seguridad:leer", metodos=["GET"])
@requiere_permisos("seguridad:actualizar", metodos=["PUT"])
@requiere_permisos("seguridad:eliminar", metodos=["DELETE"])
def roles_detail(request, pk):
    if request.method == "GET":
        return ok(RolSerializer(seguridad.obtener_rol(pk)).data)

    if request.method == "PUT":
        datos = _validar(RolEntradaSerializer, request.data, partial=True)
        rol = seguridad.actualizar_rol(pk, datos, usuario=request.user)
        return ok(RolSerializer(seguridad.obtener_rol(rol.pk)).data, "Rol actualizado")

    seguridad.eliminar_rol(pk, usuario=request.user)
    return ok(message="Rol eliminado")


# ============================
#   USUARIOS
# ============================
@api_view(["GET", "POST"])
@requiere_permisos("seguridad:leer", metodos=["GET"])
@requiere_permisos("seguridad:crear", metodos=["POST"])
def usuarios_list_create(request):
    if request.method == "GET":
        f = _validar(FiltroUsuariosSerializer, request.query_params)
        qs = seguridad.listar_usuarios(search=(f.get("search") or "").strip(), activo=f.get("activo"))

        paginator = Paginator(qs, f["limit"])
        page_obj = paginator.get_page(f["page"])
        return ok(
            UsuarioSerializer(page_obj.object_list, many=True).data,
            pagination={
                "page": page_obj.number,
                "limit": f["limit"],
                "total": paginator.count,
                "totalPages": paginator.num_pages,
            },
        )

    datos = _validar(UsuarioAltaSerializer, request.data)
    nuevo = seguridad.crear_usuario(datos, usuario=request.user)
    return creado(UsuarioSerializer(seguridad.obtener_usuario(nuevo.pk)).data, "Usuario creado")


@api_view(["GET", "PUT", "DELETE"])
@requiere_permisos("seguridad:leer", metodos=["GET"])
@requiere_permisos("seguridad:actualizar", metodos=["PUT"])
@requiere_permisos("seguridad:eliminar", metodos=["DELETE"])
def usuarios_detail(request, pk):
    if request.method == "GET":
        return ok(UsuarioSerializer(seguridad.obtener_usuario(pk)).data)

    if request.method == "PUT":
        datos = _validar(UsuarioEntradaSerializer, request.data, partial=True)
        usuario = seguridad.actualizar_usuario(pk, datos, usuario=request.user)
        return ok(UsuarioSerializer(usuario).data, "Usuario actualizado")

    seguridad.eliminar_usuario(pk, usuario=request.user)
    return ok(message="Usuario eliminado correctamente")


@api_view(["PATCH"])
@requiere_permisos("seguridad:actualizar")
def usuarios_toggle(request, pk):
    usuario = seguridad.alternar_usuario(pk, usuario=request.user)
    estado = "activado" if usuario.is_active else "desactivado"
    return ok({"id": usuario.id, "activo": usuario.is_active}, f"Usuario {estado}")


@api_view(["PATCH"])
@requiere_permisos("seguridad:actualizar")
def usuarios_reset_password(request, pk):
    d = _validar(ResetPasswordSerializer, request.data)
    seguridad.restablecer_password(pk, d["password"], usuario=request.user)
    return ok(message="Contraseña actualizada correctamente")
