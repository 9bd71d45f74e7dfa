from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import Usuario, Rol, Permiso

@admin.register(Usuario)
class UsuarioAdmin(UserAdmin):
    list_display = ("email", "first_name", "last_name", "celular", "is_staff", "is_active", "last_login")
    list_filter = ("is_staff", "is_superuser", "is_active", "roles")
    search_fields = ("email", "first_name", "last_name", "celular")
    ordering = ("email",)
    filter_horizontal = ("roles",)
    fieldsets = (
        ("Credenciales", {"fields": ("email", "password")}),
        ("Información personal", {"fields": ("first_name", "last_name", "celular")}),
        ("Roles", {"fields": ("roles",)}),
        ("Permisos Django", {"fields": ("is_active", "is_staff", "is_superuser")}),
        ("Fechas", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "password1", "password2")}),
    )
    readonly_fields = ("last_login", "date_joined")

@admin.register(Rol)
class RolAdmin(admin.ModelAdmin):
    list_display = ("codigo", "nombre", "activo")
    list_filter = ("activo",)
    search_fields = ("codigo", "nombre")
    filter_horizontal = ("permisos",)
    ordering = ("nombre",)

@admin.register(Permiso)
class PermisoAdmin(admin.ModelAdmin):
    list_display = ("codigo", "nombre", "modulo", "accion")
    list_filter = ("modulo", "accion")
    search_fields = ("codigo", "nombre")
    readonly_fields = ("codigo",)
