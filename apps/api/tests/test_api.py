from rest_framework import status
from rest_framework.test import APITestCase

from apps.products.models import Categoria, Producto, UnidadMedida
from apps.transactional import services
from apps.transactional.models import BODEGA_PRINCIPAL, Bodega, Movimiento
from apps.users.models import ROL_ADMIN, Rol, Usuario
from apps.users.tests.helpers import PASSWORD, crear_admin, crear_permisos, crear_rol, crear_usuario


class BaseAPITest(APITestCase):
    maxDiff = None

    def setUp(self):
        crear_permisos()
        self.bodeguero = crear_usuario(
            "bodeguero@test.com",
            crear_rol(
                "BODEGUERO",
                "inventario:leer", "inventario:crear", "inventario:actualizar",
                "configuracion:leer", "configuracion:crear",
            ),
        )
        self.lector = crear_usuario("lector@test.com", crear_rol("CONSULTA", "inventario:leer"))
        self.sin_rol = crear_usuario("nadie@test.com")

        self.categoria = Categoria.objects.create(codigo="ALIMENTOS", nombre="Alimentos")
        self.unidad = UnidadMedida.objects.create(codigo="KG", nombre="Kilogramo", abreviatura="kg")
        self.bodega = Bodega.objects.create(
            codigo="BOD-1", nombre="Central", direccion="Calle 1",
            responsable_nombre="Ana", responsable_email="ana@test.com", responsable_celular="3001234567",
        )
        self.producto = Producto.objects.create(
            codigo="ARROZ", nombre="Arroz", categoria=self.categoria,
            unidad_medida=self.unidad, stock_minimo=5,
        )

    def login_as(self, usuario):
        self.client.force_authenticate(user=usuario)


class EnvelopeAndAccessTests(BaseAPITest):

    def test_health_publico(self):
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data["success"])

    def test_sin_token_401(self):
        resp = self.client.get("/api/productos")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data["success"])
        self.assertIn("message", resp.data)

    def test_token_invalido_401(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer no-es-un-jwt")
        resp = self.client.get("/api/productos")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data["success"])

    def test_sin_permiso_403(self):
        self.login_as(self.sin_rol)
        resp = self.client.get("/api/productos")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(resp.data["success"])
        self.assertIn("inventario:leer", resp.data["message"])

    def test_permiso_por_metodo(self):
        self.login_as(self.lector)
        self.assertEqual(self.client.get("/api/productos").status_code, status.HTTP_200_OK)
        resp = self.client.post("/api/productos", {"codigo": "X1"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_error_de_validacion_con_sobre(self):
        self.login_as(self.bodeguero)
        resp = self.client.post(
            "/api/movimientos",
            {"tipo": "entrada", "productoId": self.producto.pk, "bodegaId": self.bodega.pk, "cantidad": 0},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.data["success"])
        self.assertTrue(resp.data["message"].startswith("cantidad"))
        self.assertIn("cantidad", resp.data["errors"])

    def test_no_encontrado_404(self):
        self.login_as(self.bodeguero)
        resp = self.client.get("/api/productos/9999")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data, {"success": False, "message": "Producto no encontrado"})


class ProductoAPITests(BaseAPITest):

    def test_crear_producto_con_stock_inicial(self):
        self.login_as(self.bodeguero)
        resp = self.client.post("/api/productos", {
            "codigo": "lenteja",
            "nombre": "Lenteja",
            "categoriaId": self.categoria.pk,
            "unidadMedidaId": self.unidad.pk,
            "stockMinimo": 10,
            "stockActual": 100,
            "bodegaId": self.bodega.pk,
        }, format="json")

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.data["data"]
        self.assertEqual(data["codigo"], "LENTEJA")
        self.assertEqual(data["stockActual"], 100)
        self.assertEqual(data["estadoStock"], "optimo")
        mov = Movimiento.objects.get(producto_id=data["id"])
        self.assertEqual(mov.origen, Movimiento.ORIGEN_INICIAL)
        self.assertEqual(mov.registrado_por, self.bodeguero)

    def test_crear_producto_sin_bodega_usa_la_principal(self):
        payload = {
            "codigo": "aceite",
            "nombre": "Aceite",
            "descripcion": "Aceite vegetal",
            "categoriaId": self.categoria.pk,
            "unidadMedidaId": self.unidad.pk,
            "stockMinimo": 20,
            "stockActual": 100,
            "perecedero": True,
            "fechaVencimiento": "2030-01-31",
        }
        self.login_as(self.bodeguero)

        resp = self.client.post("/api/productos", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        principal = Bodega.objects.create(
            codigo=BODEGA_PRINCIPAL, nombre="Bodega principal", direccion="Sede",
            responsable_nombre="Admin", responsable_email="admin@test.com", responsable_celular="3000000000",
        )
        resp = self.client.post("/api/productos", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["data"]["stockActual"], 100)
        mov = Movimiento.objects.get(producto_id=resp.data["data"]["id"])
        self.assertEqual((mov.bodega, mov.origen, mov.cantidad), (principal, Movimiento.ORIGEN_INICIAL, 100))

    def test_listado_filtra_inactivos_y_busca(self):
        Producto.objects.create(
            codigo="VIEJO", nombre="Viejo", categoria=self.categoria, unidad_medida=self.unidad, activo=False
        )
        self.login_as(self.lector)

        resp = self.client.get("/api/productos")
        self.assertEqual([p["codigo"] for p in resp.data["data"]], ["ARROZ"])

        resp = self.client.get("/api/productos", {"includeInactive": "true"})
        self.assertEqual(len(resp.data["data"]), 2)

        resp = self.client.get("/api/productos", {"search": "arr"})
        self.assertEqual(len(resp.data["data"]), 1)

    def test_editar_stock_directo_rechazado(self):
        self.login_as(self.bodeguero)
        resp = self.client.put(f"/api/productos/{self.producto.pk}", {"stockActual": 50}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Producto.objects.get(pk=self.producto.pk).stock_actual, 0)

        resp = self.client.put(f"/api/productos/{self.producto.pk}", {"nombre": "Arroz integral"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["data"]["nombre"], "Arroz integral")

    def test_toggle_active(self):
        self.login_as(self.bodeguero)
        resp = self.client.patch(f"/api/productos/{self.producto.pk}/toggle-active")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(resp.data["data"]["activo"])

    def test_adjust_stock(self):
        self.login_as(self.bodeguero)
        url = f"/api/productos/{self.producto.pk}/adjust-stock"

        resp = self.client.post(url, {"cantidad": 7, "tipo": "entrada", "bodegaId": self.bodega.pk}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["data"]["stockAnterior"], 0)
        self.assertEqual(resp.data["data"]["stockNuevo"], 7)
        self.assertEqual(resp.data["data"]["producto"]["estadoStock"], "medio")
        self.assertEqual(resp.data["data"]["movimiento"]["origen"], "ajuste")

        resp = self.client.post(url, {"cantidad": 8, "tipo": "salida", "bodegaId": self.bodega.pk}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["message"], "Stock insuficiente para esta salida.")
        self.assertEqual(Producto.objects.get(pk=self.producto.pk).stock_actual, 7)

    def test_eliminar_con_movimientos_409(self):
        services.registrar_movimiento("entrada", self.producto.pk, self.bodega.pk, 3)
        admin = crear_admin()
        self.login_as(admin)
        resp = self.client.delete(f"/api/productos/{self.producto.pk}")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(resp.data["success"])


class MovimientoAPITests(BaseAPITest):

    def _registrar(self, tipo, cantidad):
        return self.client.post(
            "/api/movimientos",
            {"tipo": tipo, "productoId": self.producto.pk, "bodegaId": self.bodega.pk, "cantidad": cantidad},
            format="json",
        )

    def test_registrar_movimiento(self):
        self.login_as(self.bodeguero)
        resp = self._registrar("entrada", 12)
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.data["data"]
        self.assertEqual(data["stockAnterior"], 0)
        self.assertEqual(data["stockNuevo"], 12)
        self.assertEqual(data["registradoPor"]["email"], "bodeguero@test.com")

        resp = self._registrar("salida", 13)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_listado_paginado_y_filtros(self):
        self.login_as(self.bodeguero)
        for _ in range(3):
            self._registrar("entrada", 2)
        self._registrar("salida", 1)

        resp = self.client.get("/api/movimientos", {"limit": 2, "page": 2})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["pagination"], {"page": 2, "limit": 2, "total": 4, "totalPages": 2})
        self.assertEqual(len(resp.data["data"]), 2)

        resp = self.client.get("/api/movimientos", {"tipo": "salida"})
        self.assertEqual(resp.data["pagination"]["total"], 1)

    def test_exportar_xlsx(self):
        self.login_as(self.lector)
        services.registrar_movimiento("entrada", self.producto.pk, self.bodega.pk, 3)
        resp = self.client.get("/api/movimientos", {"export": "xlsx"})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIn("spreadsheetml", resp["Content-Type"])

    def test_eliminar_requiere_permiso_exacto(self):
        mov = services.registrar_movimiento("entrada", self.producto.pk, self.bodega.pk, 5)

        self.login_as(self.bodeguero)
        resp = self.client.delete(f"/api/movimientos/{mov.pk}")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn("inventario:eliminar", resp.data["message"])

        self.login_as(crear_admin())
        resp = self.client.delete(f"/api/movimientos/{mov.pk}")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["data"]["stockRevertido"], 0)

    def test_eliminar_reversion_invalida(self):
        entrada = services.registrar_movimiento("entrada", self.producto.pk, self.bodega.pk, 10)
        services.registrar_movimiento("salida", self.producto.pk, self.bodega.pk, 8)

        self.login_as(crear_admin())
        resp = self.client.delete(f"/api/movimientos/{entrada.pk}")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Producto.objects.get(pk=self.producto.pk).stock_actual, 2)

    def test_estadisticas(self):
        services.registrar_movimiento("entrada", self.producto.pk, self.bodega.pk, 10)
        services.registrar_movimiento("salida", self.producto.pk, self.bodega.pk, 4)

        self.login_as(self.lector)
        resp = self.client.get("/api/movimientos/estadisticas")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.data["data"]
        self.assertEqual(data["resumen"], {"totalEntradas": 10, "totalSalidas": 4, "totalMovimientos": 2})
        self.assertEqual(data["porProducto"][0]["producto"]["codigo"], "ARROZ")
        self.assertEqual(data["porProducto"][0]["totalCantidad"], 14)
        self.assertEqual(data["porBodega"][0]["bodega"]["codigo"], "BOD-1")


class BodegaAPITests(BaseAPITest):

    def test_crear_y_codigo_duplicado(self):
        self.login_as(self.bodeguero)
        payload = {
            "codigo": "bod-2", "nombre": "Norte", "direccion": "Calle 2", "capacidad": 500,
            "responsableNombre": "Luis", "responsableEmail": "luis@test.com", "responsableCelular": "3009876543",
        }
        resp = self.client.post("/api/bodegas", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["data"]["codigo"], "BOD-2")

        resp = self.client.post("/api/bodegas", payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["message"], "Ya existe una bodega con ese código")

    def test_stock_por_bodega(self):
        services.registrar_movimiento("entrada", self.producto.pk, self.bodega.pk, 10)
        services.registrar_movimiento("salida", self.producto.pk, self.bodega.pk, 3)

        self.login_as(self.lector)
        resp = self.client.get(f"/api/bodegas/{self.bodega.pk}/stock")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        fila = resp.data["data"]["stockPorProducto"][0]
        self.assertEqual(fila["producto"]["codigo"], "ARROZ")
        self.assertEqual((fila["stockActual"], fila["entradas"], fila["salidas"]), (7, 10, 3))

    def test_eliminar_con_movimientos_409(self):
        services.registrar_movimiento("entrada", self.producto.pk, self.bodega.pk, 1)
        self.login_as(crear_admin())
        resp = self.client.delete(f"/api/bodegas/{self.bodega.pk}")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)


class CatalogoAPITests(BaseAPITest):

    def test_categorias(self):
        self.login_as(self.bodeguero)
        resp = self.client.post("/api/categorias", {"codigo": "agua", "nombre": "Agua"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data["data"]["codigo"], "AGUA")

        resp = self.client.get("/api/categorias")
        self.assertEqual(len(resp.data["data"]), 2)

        self.login_as(self.lector)
        resp = self.client.post("/api/unidades", {"codigo": "LT", "nombre": "Litro", "abreviatura": "lt"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_editar_alternar_y_eliminar(self):
        agua = Categoria.objects.create(codigo="AGUA", nombre="Agua")

        self.login_as(self.bodeguero)
        resp = self.client.put(f"/api/categorias/{agua.pk}", {"nombre": "Agua potable"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.login_as(crear_admin())
        resp = self.client.put(f"/api/categorias/{agua.pk}", {"codigo": "agua", "nombre": "Agua potable"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["data"]["nombre"], "Agua potable")

        resp = self.client.put(f"/api/categorias/{agua.pk}", {"codigo": "ALIMENTOS"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        resp = self.client.patch(f"/api/categorias/{agua.pk}/toggle-active")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(resp.data["data"]["activo"])
        self.assertEqual(len(self.client.get("/api/categorias").data["data"]), 1)

        # con productos asociados no se puede borrar
        resp = self.client.delete(f"/api/categorias/{self.categoria.pk}")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        resp = self.client.delete(f"/api/categorias/{agua.pk}")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(Categoria.objects.filter(pk=agua.pk).exists())

    def test_unidades_detalle(self):
        self.login_as(crear_admin())
        resp = self.client.get(f"/api/unidades/{self.unidad.pk}")
        self.assertEqual(resp.data["data"]["abreviatura"], "kg")

        resp = self.client.put(f"/api/unidades/{self.unidad.pk}", {"abreviatura": "Kg"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(UnidadMedida.objects.get(pk=self.unidad.pk).abreviatura, "Kg")

        self.assertEqual(self.client.get("/api/unidades/9999").status_code, status.HTTP_404_NOT_FOUND)
        resp = self.client.delete(f"/api/unidades/{self.unidad.pk}")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)


class RolAPITests(BaseAPITest):

    def setUp(self):
        super().setUp()
        self.admin = crear_admin()
        self.login_as(self.admin)

    def test_listar_y_permisos_agrupados(self):
        resp = self.client.get("/api/roles")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIn(ROL_ADMIN, [r["codigo"] for r in resp.data["data"]])
        totales = {r["codigo"]: r["totalUsuarios"] for r in resp.data["data"]}
        self.assertEqual(totales, {ROL_ADMIN: 1, "BODEGUERO": 1, "CONSULTA": 1})

        consulta = Rol.objects.get(codigo="CONSULTA")
        resp = self.client.get(f"/api/roles/{consulta.pk}")
        self.assertEqual(resp.data["data"]["totalUsuarios"], 1)

        resp = self.client.get("/api/roles/permisos")
        self.assertEqual(len(resp.data["data"]["inventario"]), 4)
        self.assertEqual(len(resp.data["data"]), 6)

    def test_crear_actualizar_eliminar(self):
        resp = self.client.post("/api/roles", {
            "codigo": "auditor", "nombre": "Auditor", "permisoIds": [],
        }, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        rol_id = resp.data["data"]["id"]
        self.assertEqual(resp.data["data"]["codigo"], "AUDITOR")

        ids = list(Rol.objects.get(codigo="CONSULTA").permisos.values_list("id", flat=True))
        resp = self.client.put(f"/api/roles/{rol_id}", {"permisoIds": ids}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([p["codigo"] for p in resp.data["data"]["permisos"]], ["inventario:leer"])

        resp = self.client.delete(f"/api/roles/{rol_id}")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

    def test_permiso_inexistente(self):
        resp = self.client.post("/api/roles", {"codigo": "X", "nombre": "X", "permisoIds": [99999]}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_no_se_elimina_admin_ni_rol_con_usuarios(self):
        admin_rol = Rol.objects.get(codigo=ROL_ADMIN)
        self.assertEqual(self.client.delete(f"/api/roles/{admin_rol.pk}").status_code, status.HTTP_409_CONFLICT)

        consulta = Rol.objects.get(codigo="CONSULTA")
        self.assertEqual(self.client.delete(f"/api/roles/{consulta.pk}").status_code, status.HTTP_409_CONFLICT)

    def test_roles_requieren_seguridad(self):
        self.login_as(self.bodeguero)
        self.assertEqual(self.client.get("/api/roles").status_code, status.HTTP_403_FORBIDDEN)


class UsuarioAPITests(BaseAPITest):

    def setUp(self):
        super().setUp()
        self.admin = crear_admin()
        self.login_as(self.admin)
        self.consulta = Rol.objects.get(codigo="CONSULTA")
        self.rol_bodeguero = Rol.objects.get(codigo="BODEGUERO")

    def _alta(self, **extra):
        payload = {
            "nombres": "Lucía", "apellidos": "Pérez", "email": "Lucia@Test.com",
            "celular": "3015556677", "password": "Segura123",
            "roles": [self.consulta.pk, self.rol_bodeguero.pk],
        }
        payload.update(extra)
        return self.client.post("/api/usuarios", payload, format="json")

    def test_listado_paginado_y_busqueda(self):
        resp = self.client.get("/api/usuarios", {"limit": 2})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["pagination"], {"page": 1, "limit": 2, "total": 4, "totalPages": 2})

        resp = self.client.get("/api/usuarios", {"search": "lector"})
        self.assertEqual([u["email"] for u in resp.data["data"]], ["lector@test.com"])
        self.assertEqual(resp.data["data"][0]["roles"][0]["codigo"], "CONSULTA")

        crear_usuario("baja@test.com", activo=False)
        resp = self.client.get("/api/usuarios", {"activo": "false"})
        self.assertEqual([u["email"] for u in resp.data["data"]], ["baja@test.com"])

    def test_crear_con_varios_roles(self):
        resp = self._alta()
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        data = resp.data["data"]
        self.assertEqual(data["email"], "lucia@test.com")
        self.assertEqual(sorted(r["codigo"] for r in data["roles"]), ["BODEGUERO", "CONSULTA"])
        self.assertTrue(Usuario.objects.get(pk=data["id"]).check_password("Segura123"))

        # email repetido
        self.assertEqual(self._alta(celular="3015556688").status_code, status.HTTP_400_BAD_REQUEST)

    def test_crear_validaciones(self):
        self.assertEqual(self._alta(roles=[]).status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self._alta(roles=[99999]).status_code, status.HTTP_400_BAD_REQUEST)
        # sin minúscula
        self.assertEqual(self._alta(password="SEGURA123").status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Usuario.objects.filter(email="lucia@test.com").exists())

    def test_reasignar_roles(self):
        url = f"/api/usuarios/{self.lector.pk}"
        resp = self.client.put(url, {"roles": [self.rol_bodeguero.pk]}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([r["codigo"] for r in resp.data["data"]["roles"]], ["BODEGUERO"])
        self.assertEqual(Usuario.objects.get(pk=self.lector.pk).codigos_roles, ["BODEGUERO"])

        # los permisos efectivos cambian en la siguiente petición
        self.login_as(Usuario.objects.get(pk=self.lector.pk))
        resp = self.client.post("/api/movimientos", {
            "tipo": "entrada", "productoId": self.producto.pk, "bodegaId": self.bodega.pk, "cantidad": 1,
        }, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

    def test_desactivar_usuario(self):
        refresh = self.client.post(
            "/api/auth/login", {"email": "lector@test.com", "password": PASSWORD}, format="json"
        ).data["data"]["refreshToken"]

        resp = self.client.put(f"/api/usuarios/{self.lector.pk}", {"activo": False}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(resp.data["data"]["activo"])

        resp = self.client.post("/api/auth/refresh-token", {"refreshToken": refresh}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        resp = self.client.post("/api/auth/login", {"email": "lector@test.com", "password": PASSWORD}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

        resp = self.client.patch(f"/api/usuarios/{self.lector.pk}/toggle-active")
        self.assertEqual(resp.data["data"], {"id": self.lector.pk, "activo": True})

    def test_no_se_desactiva_ni_elimina_a_si_mismo(self):
        self.assertEqual(
            self.client.patch(f"/api/usuarios/{self.admin.pk}/toggle-active").status_code,
            status.HTTP_409_CONFLICT,
        )
        self.assertEqual(self.client.delete(f"/api/usuarios/{self.admin.pk}").status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Usuario.objects.get(pk=self.admin.pk).is_active)

    def test_eliminar(self):
        resp = self.client.delete(f"/api/usuarios/{self.sin_rol.pk}")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(f"/api/usuarios/{self.sin_rol.pk}").status_code, status.HTTP_404_NOT_FOUND)

    def test_reset_password(self):
        url = f"/api/usuarios/{self.lector.pk}/reset-password"
        self.assertEqual(self.client.patch(url, {"password": "corta"}, format="json").status_code,
                         status.HTTP_400_BAD_REQUEST)

        resp = self.client.patch(url, {"password": "Nueva5678"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(Usuario.objects.get(pk=self.lector.pk).check_password("Nueva5678"))

    def test_usuarios_requieren_seguridad(self):
        self.login_as(self.lector)
        self.assertEqual(self.client.get("/api/usuarios").status_code, status.HTTP_403_FORBIDDEN)
