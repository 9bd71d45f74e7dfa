# apps/api/serializers.py
"""
Serializers del borde REST. Las claves son camelCase; `source` las mapea
a los campos del modelo, así `validated_data` ya llega con nombres de modelo.
"""
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from apps.products.models import Categoria, Producto, UnidadMedida, valida_codigo
from apps.transactional.models import Bodega, Movimiento
from apps.users.models import Permiso, Rol, Usuario, celular_validator


# ============================
#   CATÁLOGOS
# ============================
class CategoriaSerializer(serializers.ModelSerializer):
    codigo = serializers.CharField(max_length=50)

    class Meta:
        model = Categoria
        fields = ["id", "codigo", "nombre", "descripcion", "activo"]

    def validate_codigo(self, value):
        value = value.strip().upper()
        valida_codigo(value)
        if Categoria.objects.filter(codigo=value).exclude(pk=getattr(self.instance, "pk", None)).exists():
            raise serializers.ValidationError("Ya existe una categoría con ese código")
        return value


class UnidadMedidaSerializer(serializers.ModelSerializer):
    codigo = serializers.CharField(max_length=20)

    class Meta:
        model = UnidadMedida
        fields = ["id", "codigo", "nombre", "abreviatura", "activo"]

    def validate_codigo(self, value):
        value = value.strip().upper()
        valida_codigo(value)
        if UnidadMedida.objects.filter(codigo=value).exclude(pk=getattr(self.instance, "pk", None)).exists():
            raise serializers.ValidationError("Ya existe una unidad con ese código")
        return value


class _CategoriaMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = Categoria
        fields = ["id", "codigo", "nombre"]


class _UnidadMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = UnidadMedida
        fields = ["id", "codigo", "nombre", "abreviatura"]


# ============================
#   PRODUCTOS
# ============================
class ProductoSerializer(serializers.ModelSerializer):
    categoriaId = serializers.IntegerField(source="categoria_id", read_only=True)
    categoria = _CategoriaMiniSerializer(read_only=True)
    unidadMedidaId = serializers.IntegerField(source="unidad_medida_id", read_only=True)
    unidadMedida = _UnidadMiniSerializer(source="unidad_medida", read_only=True)
    stockMinimo = serializers.IntegerField(source="stock_minimo", read_only=True)
    stockActual = serializers.IntegerField(source="stock_actual", read_only=True)
    estadoStock = serializers.CharField(source="estado_stock", read_only=True)
    fechaVencimiento = serializers.DateField(source="fecha_vencimiento", read_only=True)
    creadoEn = serializers.DateTimeField(source="creado_en", read_only=True)
    actualizadoEn = serializers.DateTimeField(source="actualizado_en", read_only=True)

    class Meta:
        model = Producto
        fields = [
            "id", "codigo", "nombre", "descripcion",
            "categoriaId", "categoria", "unidadMedidaId", "unidadMedida",
            "stockMinimo", "stockActual", "estadoStock",
            "perecedero", "fechaVencimiento", "activo", "creadoEn", "actualizadoEn",
        ]


class ProductoEntradaSerializer(serializers.Serializer):
    """Alta y edición. En PUT se usa con partial=True."""
    codigo = serializers.CharField(max_length=50)
    nombre = serializers.CharField(max_length=200)
    descripcion = serializers.CharField(required=False, allow_blank=True)
    categoriaId = serializers.IntegerField(source="categoria_id")
    unidadMedidaId = serializers.IntegerField(source="unidad_medida_id")
    stockMinimo = serializers.IntegerField(source="stock_minimo", min_value=0, required=False)
    stockActual = serializers.IntegerField(source="stock_actual", min_value=0, required=False)
    perecedero = serializers.BooleanField(required=False)
    fechaVencimiento = serializers.DateField(source="fecha_vencimiento", required=False, allow_null=True)
    bodegaId = serializers.IntegerField(source="bodega_id", required=False, allow_null=True)

    def validate_codigo(self, value):
        value = value.strip().upper()
        valida_codigo(value)
        return value

    def validate(self, attrs):
        if attrs.get("perecedero") and not attrs.get("fecha_vencimiento") and not self.partial:
            raise serializers.ValidationError(
                {"fechaVencimiento": "Un producto perecedero requiere fecha de vencimiento."}
            )
        return attrs


class AjusteStockSerializer(serializers.Serializer):
    cantidad = serializers.IntegerField(min_value=1)
    tipo = serializers.ChoiceField(choices=Movimiento.TIPOS)
    bodegaId = serializers.IntegerField(source="bodega_id")
    observaciones = serializers.CharField(required=False, allow_blank=True)


# ============================
#   BODEGAS
# ============================
class BodegaSerializer(serializers.ModelSerializer):
    responsableNombre = serializers.CharField(source="responsable_nombre", max_length=100)
    responsableEmail = serializers.EmailField(source="responsable_email", max_length=191)
    responsableCelular = serializers.CharField(
        source="responsable_celular", max_length=20, validators=[celular_validator]
    )
    creadoEn = serializers.DateTimeField(source="creado_en", read_only=True)
    actualizadoEn = serializers.DateTimeField(source="actualizado_en", read_only=True)

    class Meta:
        model = Bodega
        fields = [
            "id", "codigo", "nombre", "direccion", "capacidad",
            "responsableNombre", "responsableEmail", "responsableCelular",
            "activo", "creadoEn", "actualizadoEn",
        ]
        extra_kwargs = {
            # unicidad y normalización las resuelve el servicio
            "codigo": {"validators": []},
            "activo": {"read_only": True},
        }

    def validate_codigo(self, value):
        value = value.strip().upper()
        valida_codigo(value)
        return value


class _BodegaMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = Bodega
        fields = ["id", "codigo", "nombre"]


class _ProductoMiniSerializer(serializers.ModelSerializer):
    unidadMedida = serializers.CharField(source="unidad_medida.abreviatura", read_only=True)

    class Meta:
        model = Producto
        fields = ["id", "codigo", "nombre", "unidadMedida"]


class StockBodegaSerializer(serializers.Serializer):
    """Fila de services.stock_por_bodega."""
    producto = _ProductoMiniSerializer()
    stockActual = serializers.IntegerField(source="stock_actual")
    entradas = serializers.IntegerField()
    salidas = serializers.IntegerField()


# ============================
#   MOVIMIENTOS
# ============================
class MovimientoSerializer(serializers.ModelSerializer):
    productoId = serializers.IntegerField(source="producto_id", read_only=True)
    producto = _ProductoMiniSerializer(read_only=True)
    bodegaId = serializers.IntegerField(source="bodega_id", read_only=True)
    bodega = _BodegaMiniSerializer(read_only=True)
    registradoPor = serializers.SerializerMethodField()

    class Meta:
        model = Movimiento
        fields = [
            "id", "tipo", "origen", "fecha", "productoId", "producto",
            "bodegaId", "bodega", "cantidad", "observaciones", "registradoPor",
        ]

    def get_registradoPor(self, obj):
        u = obj.registrado_por
        if u is None:
            return None
        return {"id": u.id, "email": u.email, "nombres": u.first_name, "apellidos": u.last_name}

    def to_representation(self, instance):
        data = super().to_representation(instance)
        # Solo presentes en la instancia devuelta por registrar_movimiento
        if hasattr(instance, "stock_nuevo"):
            data["stockAnterior"] = instance.stock_anterior
            data["stockNuevo"] = instance.stock_nuevo
        return data


class MovimientoEntradaSerializer(serializers.Serializer):
    tipo = serializers.ChoiceField(choices=Movimiento.TIPOS)
    productoId = serializers.IntegerField(source="producto_id")
    bodegaId = serializers.IntegerField(source="bodega_id")
    cantidad = serializers.IntegerField(min_value=1)
    observaciones = serializers.CharField(required=False, allow_blank=True)


# fecha sola = inicio del día (como el lte/gte del listado)
_FORMATOS_FECHA = ["iso-8601", "%Y-%m-%d"]


class FiltroMovimientosSerializer(serializers.Serializer):
    """Query params de GET /movimientos y /movimientos/estadisticas."""
    tipo = serializers.ChoiceField(choices=Movimiento.TIPOS, required=False)
    productoId = serializers.IntegerField(source="producto_id", required=False)
    bodegaId = serializers.IntegerField(source="bodega_id", required=False)
    fechaInicio = serializers.DateTimeField(source="fecha_inicio", required=False, input_formats=_FORMATOS_FECHA)
    fechaFin = serializers.DateTimeField(source="fecha_fin", required=False, input_formats=_FORMATOS_FECHA)
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=500, required=False, default=20)
    export = serializers.ChoiceField(choices=["xlsx"], required=False)


class _EstadisticaSerializer(serializers.Serializer):
    totalEntradas = serializers.IntegerField(source="total_entradas")
    totalSalidas = serializers.IntegerField(source="total_salidas")
    totalCantidad = serializers.IntegerField(source="total_cantidad")
    totalMovimientos = serializers.IntegerField(source="total_movimientos")


class EstadisticaProductoSerializer(_EstadisticaSerializer):
    producto = _ProductoMiniSerializer(source="objeto")


class EstadisticaBodegaSerializer(_EstadisticaSerializer):
    bodega = _BodegaMiniSerializer(source="objeto")


# ============================
#   ROLES
# ============================
class PermisoSerializer(serializers.ModelSerializer):
    class Meta:
        model = Permiso
        fields = ["id", "codigo", "nombre", "modulo", "accion"]


class RolSerializer(serializers.ModelSerializer):
    permisos = PermisoSerializer(many=True, read_only=True)
    # anotado con Count("usuarios") en la consulta
    totalUsuarios = serializers.IntegerField(source="total_usuarios", read_only=True)

    class Meta:
        model = Rol
        fields = ["id", "codigo", "nombre", "descripcion", "activo", "permisos", "totalUsuarios"]


class RolEntradaSerializer(serializers.Serializer):
    codigo = serializers.CharField(max_length=50)
    nombre = serializers.CharField(max_length=100)
    descripcion = serializers.CharField(required=False, allow_blank=True)
    activo = serializers.BooleanField(required=False)
    permisoIds = serializers.ListField(
        source="permiso_ids", child=serializers.IntegerField(), required=False
    )


# ============================
#   USUARIOS
# ============================
class _RolMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = Rol
        fields = ["id", "codigo", "nombre"]


class UsuarioSerializer(serializers.ModelSerializer):
    nombres = serializers.CharField(source="first_name", read_only=True)
    apellidos = serializers.CharField(source="last_name", read_only=True)
    activo = serializers.BooleanField(source="is_active", read_only=True)
    fechaRegistro = serializers.DateTimeField(source="date_joined", read_only=True)
    ultimoAcceso = serializers.DateTimeField(source="last_login", read_only=True)
    roles = _RolMiniSerializer(many=True, read_only=True)

    class Meta:
        model = Usuario
        fields = ["id", "nombres", "apellidos", "email", "celular", "activo", "fechaRegistro", "ultimoAcceso", "roles"]


class UsuarioEntradaSerializer(serializers.Serializer):
    """Edición (partial=True). `roles` son ids y reemplazan los actuales."""
    nombres = serializers.CharField(source="first_name", min_length=2, max_length=150)
    apellidos = serializers.CharField(source="last_name", min_length=2, max_length=150)
    email = serializers.EmailField(max_length=191)
    celular = serializers.CharField(max_length=20, allow_blank=True, validators=[celular_validator])
    activo = serializers.BooleanField(source="is_active")
    roles = serializers.ListField(source="rol_ids", child=serializers.IntegerField(), min_length=1)


class UsuarioAltaSerializer(UsuarioEntradaSerializer):
    activo = None
    password = serializers.CharField(trim_whitespace=False)

    def validate_password(self, value):
        validate_password(value)
        return value


class ResetPasswordSerializer(serializers.Serializer):
    password = serializers.CharField(trim_whitespace=False)

    def validate_password(self, value):
        validate_password(value)
        return value


class FiltroUsuariosSerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    activo = serializers.BooleanField(required=False, allow_null=True, default=None)
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, default=10)
