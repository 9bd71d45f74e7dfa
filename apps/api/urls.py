from django.urls import path
from . import views

urlpatterns = [
    path("health", views.health, name="api_health"),

    # Productos
    path("productos", views.productos_list_create, name="api_productos_list"),
    path("productos/<int:pk>", views.productos_detail, name="api_productos_detail"),
    path("productos/<int:pk>/toggle-active", views.productos_toggle, name="api_productos_toggle"),
    path("productos/<int:pk>/adjust-stock", views.productos_adjust_stock, name="api_productos_adjust_stock"),

    # Movimientos (estadisticas antes del detalle)
    path("movimientos", views.movimientos_list_create, name="api_movimientos_list"),
    path("movimientos/estadisticas", views.movimientos_estadisticas, name="api_movimientos_estadisticas"),
    path("movimientos/<int:pk>", views.movimientos_detail, name="api_movimientos_detail"),

    # Bodegas
    path("bodegas", views.bodegas_list_create, name="api_bodegas_list"),
    path("bodegas/<int:pk>", views.bodegas_detail, name="api_bodegas_detail"),
    path("bodegas/<int:pk>/toggle-active", views.bodegas_toggle, name="api_bodegas_toggle"),
    path("bodegas/<int:pk>/stock", views.bodegas_stock, name="api_bodegas_stock"),

    # Catálogos
    path("categorias", views.categorias_list_create, name="api_categorias_list"),
    path("categorias/<int:pk>", views.categorias_detail, name="api_categorias_detail"),
    path("categorias/<int:pk>/toggle-active", views.categorias_toggle, name="api_categorias_toggle"),
    path("unidades", views.unidades_list_create, name="api_unidades_list"),
    path("unidades/<int:pk>", views.unidades_detail, name="api_unidades_detail"),
    path("unidades/<int:pk>/toggle-active", views.unidades_toggle, name="api_unidades_toggle"),

    # Roles
    path("roles", views.roles_list_create, name="api_roles_list"),
    path("roles/permisos", views.roles_permisos, name="api_roles_permisos"),
    path("roles/<int:pk>", views.roles_detail, name="api_roles_detail"),

    # Usuarios
    path("usuarios", views.usuarios_list_create, name="api_usuarios_list"),
    path("usuarios/<int:pk>", views.usuarios_detail, name="api_usuarios_detail"),
    path("usuarios/<int:pk>/toggle-active", views.usuarios_toggle, name="api_usuarios_toggle"),
    path("usuarios/<int:pk>/reset-password", views.usuarios_reset_password, name="api_usuarios_reset_password"),
]
