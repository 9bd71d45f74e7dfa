from django.contrib import admin
from .models import Categoria, UnidadMedida, Producto

@admin.register(Categoria)
class CategoriaAdmin(admin.ModelAdmin):
    list_display = ("codigo", "nombre", "activo")
    search_fields = ("codigo", "nombre")
    ordering = ("nombre",)

@admin.register(UnidadMedida)
class UnidadMedidaAdmin(admin.ModelAdmin):
    list_display = ("codigo", "nombre", "abreviatura", "activo")
    search_fields = ("codigo", "nombre")
    ordering = ("nombre",)

@admin.register(Producto)
class ProductoAdmin(admin.ModelAdmin):
    list_display = (
        "codigo", "nombre", "categoria", "unidad_medida",
        "stock_minimo", "stock_actual", "perecedero", "activo"
    )
    list_filter = ("categoria", "perecedero", "activo")
    search_fields = ("codigo", "nombre")
    ordering = ("nombre",)
    fieldsets = (
        ("Identificación", {"fields": ("codigo", "nombre", "descripcion", "categoria", "unidad_medida")}),
        ("Stock", {"fields": ("stock_minimo", "stock_actual")}),
        ("Vencimiento", {"fields": ("perecedero", "fecha_vencimiento")}),
        ("Estado y tiempos", {"fields": ("activo", "creado_en", "actualizado_en")}),
    )
    # stock_actual solo cambia con movimientos del kardex
    readonly_fields = ("stock_actual", "creado_en", "actualizado_en")
