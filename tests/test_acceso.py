# -*- coding: utf-8 -*-
"""
Tests de autorización por rol: resolución pura y redirecciones de las superficies protegidas.
"""
import pytest
from django.db import DatabaseError
from django.http import HttpResponse
from django.utils.functional import SimpleLazyObject

from restaurante.acceso import (
    Acceso, EstadoSesion, SesionUsuario, evaluar_sesion, obtener_rol, resolver_acceso, ruta_inicio,
)
from restaurante.decorators import rol_requerido
from restaurante.models import NombreRol, Rol, Usuario


# === RESOLUCIÓN PURA ===

def test_sin_roles_requeridos_concede():
    assert resolver_acceso([], NombreRol.USUARIO) == Acceso.CONCEDIDO
    assert resolver_acceso((), None) == Acceso.CONCEDIDO


def test_rol_incluido_concede():
    assert resolver_acceso([NombreRol.ADMIN, NombreRol.COCINERO], NombreRol.COCINERO) == Acceso.CONCEDIDO


def test_rol_no_incluido_deniega():
    assert resolver_acceso([NombreRol.ADMIN], NombreRol.USUARIO) == Acceso.DENEGADO


def test_rol_desconocido_deniega():
    assert resolver_acceso([NombreRol.ADMIN], None) == Acceso.DENEGADO


def test_sesion_cargando_no_concede_ni_deniega():
    sesion = SesionUsuario(EstadoSesion.AUTENTICANDO)
    assert evaluar_sesion(sesion, [NombreRol.ADMIN]) == Acceso.CARGANDO
    assert evaluar_sesion(sesion, []) == Acceso.CARGANDO


def test_sesion_sin_autenticar_deniega():
    assert evaluar_sesion(SesionUsuario(EstadoSesion.SIN_AUTENTICAR), []) == Acceso.DENEGADO


def test_sesion_autenticada_usa_el_rol():
    sesion = SesionUsuario(EstadoSesion.AUTENTICADO, 1, NombreRol.MESERO)
    assert evaluar_sesion(sesion, [NombreRol.MESERO]) == Acceso.CONCEDIDO
    assert evaluar_sesion(sesion, [NombreRol.CAJERO]) == Acceso.DENEGADO


def test_ruta_inicio_por_rol():
    assert ruta_inicio(NombreRol.ADMIN) == 'dashboard_admin'
    assert ruta_inicio('usuario') == 'dashboard_usuario'
    assert ruta_inicio(None) == 'menu'
    assert ruta_inicio('superheroe') == 'menu'


# === ROL LEÍDO EN CADA REQUEST ===

@pytest.mark.django_db
def test_cambio_de_rol_se_ve_en_la_siguiente_lectura(cliente):
    assert obtener_rol(cliente) == NombreRol.USUARIO
    Usuario.objects.filter(pk=cliente.pk).update(rol=Rol.objects.get(nombre=NombreRol.COCINERO))
    assert obtener_rol(cliente) == NombreRol.COCINERO


@pytest.mark.django_db
def test_rol_se_lee_a_traves_del_usuario_perezoso_del_request(cliente):
    # request.user llega envuelto en un objeto perezoso, no en la instancia del modelo
    assert obtener_rol(SimpleLazyObject(lambda: cliente)) == NombreRol.USUARIO


class _PerfilNoDisponible:
    """Modelo de usuario cuya lectura de perfil falla en la base de datos."""

    class objects:
        @staticmethod
        def filter(*args, **kwargs):
            raise DatabaseError('perfil no disponible')


@pytest.mark.django_db
def test_fallo_al_leer_perfil_trata_el_rol_como_desconocido(cliente, monkeypatch):
    monkeypatch.setattr('restaurante.acceso.Usuario', _PerfilNoDisponible)
    assert obtener_rol(cliente) is None


# === REDIRECCIONES ===

@pytest.mark.django_db
def test_anonimo_va_al_login(client):
    respuesta = client.get('/admin/')
    assert respuesta.status_code == 302
    assert respuesta.url == '/login/'


def test_usuario_en_panel_admin_vuelve_a_su_panel(client_cliente):
    respuesta = client_cliente.get('/admin/')
    assert respuesta.status_code == 302
    assert respuesta.url == '/usuario/'


def test_cocinero_en_panel_cliente_vuelve_a_cocina(client_cocinero):
    respuesta = client_cocinero.get('/usuario/')
    assert respuesta.status_code == 302
    assert respuesta.url == '/cocinero/'


def test_rol_desconocido_va_al_menu(client, sin_rol):
    client.force_login(sin_rol)
    respuesta = client.get('/cocinero/')
    assert respuesta.status_code == 302
    assert respuesta.url == '/'


def test_fallo_al_leer_perfil_manda_al_menu_y_permite_salir(client_cliente, monkeypatch):
    monkeypatch.setattr('restaurante.acceso.Usuario', _PerfilNoDisponible)

    respuesta = client_cliente.get('/usuario/')
    assert respuesta.status_code == 302
    assert respuesta.url == '/'

    salida = client_cliente.post('/logout/')
    assert salida.status_code == 302
    assert salida.url == '/login/'
    assert '_auth_user_id' not in client_cliente.session


def test_dashboard_redirige_segun_rol(client_admin):
    respuesta = client_admin.get('/dashboard/')
    assert respuesta.url == '/admin/'


@pytest.mark.parametrize('ruta', ['/admin/', '/cocinero/', '/cajero/', '/mesero/'])
def test_admin_entra_a_los_paneles_del_personal(client_admin, ruta):
    assert client_admin.get(ruta).status_code == 200


def test_cliente_ve_su_panel(client_cliente):
    respuesta = client_cliente.get('/usuario/')
    assert respuesta.status_code == 200
    assert b'Luisa Cliente' in respuesta.content


def test_api_protegida_no_revela_datos(client_cliente):
    respuesta = client_cliente.get('/api/cocina/pedidos/')
    assert respuesta.status_code == 302
    assert respuesta.url == '/usuario/'


def test_identidad_en_resolucion_muestra_cargando(rf, monkeypatch):
    monkeypatch.setattr(
        'restaurante.decorators.sesion_desde_request',
        lambda request: SesionUsuario(EstadoSesion.AUTENTICANDO)
    )
    vista = rol_requerido([NombreRol.ADMIN])(lambda request: HttpResponse('panel'))

    respuesta = vista(rf.get('/admin/'))

    assert respuesta.status_code == 202
    assert b'panel' not in respuesta.content
