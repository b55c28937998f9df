# -*- coding: utf-8 -*-
"""
Fixtures compartidas: un usuario por rol, productos del menú y clientes con sesión iniciada.
Los roles los crea la migración 0002_roles_iniciales.
"""
from decimal import Decimal

import pytest
from django.core.cache import cache

from restaurante.models import CategoriaProducto, NombreRol, Producto, Rol, Usuario


@pytest.fixture(autouse=True)
def limpiar_cache():
    # Contadores de tiempo real y claves de debounce
    cache.clear()
    yield
    cache.clear()


class SesionFalsa(dict):
    """Sesión mínima para probar el carrito sin middleware."""
    modified = False


@pytest.fixture
def sesion():
    return SesionFalsa()


def crear_usuario(email, rol=None, nombre='Usuario de Prueba', password='secreto123'):
    return Usuario.objects.create_user(
        email=email,
        nombre_completo=nombre,
        password=password,
        rol=Rol.objects.get(nombre=rol) if rol else None,
    )


@pytest.fixture
def admin(db):
    return crear_usuario('admin@pasapalos.test', NombreRol.ADMIN, 'Ana Admin')


@pytest.fixture
def cocinero(db):
    return crear_usuario('cocina@pasapalos.test', NombreRol.COCINERO, 'Carlos Cocina')


@pytest.fixture
def mesero(db):
    return crear_usuario('mesero@pasapalos.test', NombreRol.MESERO, 'Mario Mesero')


@pytest.fixture
def cajero(db):
    return crear_usuario('caja@pasapalos.test', NombreRol.CAJERO, 'Carla Caja')


@pytest.fixture
def cliente(db):
    return crear_usuario('cliente@pasapalos.test', NombreRol.USUARIO, 'Luisa Cliente')


@pytest.fixture
def otro_cliente(db):
    return crear_usuario('otro@pasapalos.test', NombreRol.USUARIO, 'Pedro Otro')


@pytest.fixture
def sin_rol(db):
    return crear_usuario('sinrol@pasapalos.test', None, 'Sin Rol')


@pytest.fixture
def tequenos(db):
    return Producto.objects.create(
        nombre='Tequeños', descripcion='Palitos de queso', ingredientes=['harina', 'queso'],
        categoria=CategoriaProducto.COMIDA_RAPIDA, precio=Decimal('6000'),
        is_featured=True, calificacion=Decimal('4.5'),
    )


@pytest.fixture
def papelon(db):
    return Producto.objects.create(
        nombre='Papelón con limón', categoria=CategoriaProducto.BEBIDA, precio=Decimal('3500'),
    )


@pytest.fixture
def producto_inactivo(db):
    return Producto.objects.create(
        nombre='Cachapa', categoria=CategoriaProducto.ESPECIAL, precio=Decimal('12000'), is_active=False,
    )


def _cliente_con_sesion(client, usuario):
    client.force_login(usuario)
    return client


@pytest.fixture
def client_admin(client, admin):
    return _cliente_con_sesion(client, admin)


@pytest.fixture
def client_cocinero(client, cocinero):
    return _cliente_con_sesion(client, cocinero)


@pytest.fixture
def client_cliente(client, cliente):
    return _cliente_con_sesion(client, cliente)
