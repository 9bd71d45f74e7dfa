from django.contrib import admin
from .models import Bodega, Movimiento

@admin.register(Bodega)
class BodegaAdmin(admin.ModelAdmin):
    list_display = ("codigo", "nombre", "direccion", "capacidad", "responsable_nombre", "activo")
    list_filter = ("activo",)
    search_fields = ("codigo", "nombre", "direccion", "responsable_nombre")
    ordering = ("nombre",)

@admin.register(Movimiento)
class MovimientoAdmin(admin.ModelAdmin):
    list_display = ("tipo", "origen", "fecha", "producto", "cantidad", "bodega", "registrado_por")
    list_filter = ("tipo", "origen", "bodega", "fecha")
    search_fields = ("producto__codigo", "producto__nombre", "observaciones")
    ordering = ("-fecha",)
    fieldsets = (
        ("Datos del movimiento", {"fields": ("tipo", "origen", "fecha", "producto", "cantidad", "observaciones", "registrado_por")}),
        ("Ubicación", {"fields": ("bodega",)}),
    )

    # El kardex solo se escribe desde la API (services), nunca desde el admin
    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
