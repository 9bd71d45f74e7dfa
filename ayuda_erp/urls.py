from django.contrib import admin
from django.urls import path, include

# ==========================
# Swagger / Redoc
# ==========================
from drf_yasg.views import get_schema_view
from drf_yasg import openapi
from rest_framework import permissions


schema_view = get_schema_view(
    openapi.Info(
        title="Ayuda Humanitaria - API REST",
        default_version="v1",
        description=(
            "API del sistema de gestión de ayuda humanitaria.\n"
            "Incluye módulos de Autenticación, Roles, Productos, Bodegas y Movimientos."
        ),
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)


# ==========================
# URLS PRINCIPALES
# ==========================
urlpatterns = [
    # Admin Django
    path("admin/", admin.site.urls),

    # Autenticación (login, refresh-token, logout, register, profile)
    path("api/auth/", include("apps.account.urls")),

    # API REST
    path("api/", include("apps.api.urls")),
]


# ==========================
# Documentación Swagger / ReDoc
# ==========================
urlpatterns += [
    path("swagger/", schema_view.with_ui("swagger", cache_timeout=0), name="swagger-ui"),
    path("redoc/", schema_view.with_ui("redoc", cache_timeout=0), name="redoc-ui"),
]

handler404 = "ayuda_erp.views.handler404"
handler500 = "ayuda_erp.views.handler500"
