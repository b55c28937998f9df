# -*- coding: utf-8 -*-
"""
Tests del menú público, la API del carrito y la confirmación del pedido.
"""
import json
from decimal import Decimal

import pytest
from django.db import DatabaseError
from django.db.models.query import QuerySet

from restaurante.models import Pedido

pytestmark = pytest.mark.django_db


def _post_json(client, url, datos):
    return client.post(url, data=json.dumps(datos), content_type='application/json')


def test_menu_muestra_solo_productos_activos(client, tequenos, producto_inactivo):
    respuesta = client.get('/')

    assert respuesta.status_code == 200
    assert tequenos in respuesta.context['productos']
    assert producto_inactivo not in respuesta.context['productos']
    assert tequenos in respuesta.context['destacados']


def test_menu_filtra_por_categoria(client, tequenos, papelon):
    respuesta = client.get('/', {'categoria': 'bebida'})
    assert list(respuesta.context['productos']) == [papelon]


def test_api_menu(client, tequenos, papelon):
    datos = client.get('/api/menu/', {'destacados': '1'}).json()
    assert [p['nombre'] for p in datos] == ['Tequeños']
    assert datos[0]['ingredientes'] == ['harina', 'queso']


def test_agregar_al_carrito(client, tequenos):
    _post_json(client, '/api/carrito/agregar/', {'producto_id': tequenos.id})
    datos = _post_json(client, '/api/carrito/agregar/', {'producto_id': tequenos.id}).json()

    assert datos['cantidad_items'] == 2
    assert Decimal(datos['total']) == Decimal('12000')
    assert client.get('/api/carrito/').json()['cantidad_items'] == 2


def test_agregar_producto_inactivo_o_invalido(client, producto_inactivo):
    assert _post_json(client, '/api/carrito/agregar/', {'producto_id': producto_inactivo.id}).status_code == 404
    assert _post_json(client, '/api/carrito/agregar/', {'producto_id': 'abc'}).status_code == 400


@pytest.mark.parametrize('cuerpo', ['[1]', '"texto"', '3', '{malo'])
def test_cuerpo_que_no_es_objeto_json(client, tequenos, cuerpo):
    for url in ('/api/carrito/agregar/', '/api/carrito/actualizar/', '/api/carrito/eliminar/', '/api/carrito/confirmar/'):
        respuesta = client.post(url, data=cuerpo, content_type='application/json')
        assert respuesta.status_code == 400, url
        assert respuesta.json()['error'] == 'Formato JSON inválido'
    assert Pedido.objects.count() == 0


def test_actualizar_a_cero_elimina(client, tequenos, papelon):
    _post_json(client, '/api/carrito/agregar/', {'producto_id': tequenos.id})
    _post_json(client, '/api/carrito/agregar/', {'producto_id': papelon.id})

    datos = _post_json(client, '/api/carrito/actualizar/', {'producto_id': tequenos.id, 'cantidad': 0}).json()

    assert [item['name'] for item in datos['items']] == ['Papelón con limón']


def test_vaciar_carrito(client, tequenos):
    _post_json(client, '/api/carrito/agregar/', {'producto_id': tequenos.id})
    datos = client.post('/api/carrito/vaciar/').json()
    assert datos['items'] == []


# === CONFIRMACIÓN ===

def test_checkout_anonimo(client, tequenos):
    for _ in range(3):
        _post_json(client, '/api/carrito/agregar/', {'producto_id': tequenos.id})

    respuesta = _post_json(client, '/api/carrito/confirmar/', {'nombre_cliente': 'Ana'})

    assert respuesta.status_code == 201
    datos = respuesta.json()
    assert Decimal(datos['total']) == Decimal('18000')
    pedido = Pedido.objects.get(pk=datos['pedido_id'])
    assert pedido.usuario is None
    assert pedido.estado == 'pendiente'
    assert client.get('/api/carrito/').json()['items'] == []


def test_checkout_con_sesion_asocia_el_usuario(client_cliente, cliente, tequenos):
    _post_json(client_cliente, '/api/carrito/agregar/', {'producto_id': tequenos.id})

    datos = _post_json(client_cliente, '/api/carrito/confirmar/', {'nombre_cliente': 'Para mi mamá'}).json()

    pedido = Pedido.objects.get(pk=datos['pedido_id'])
    assert pedido.usuario == cliente
    assert pedido.nombre_cliente == 'Para mi mamá'


def test_checkout_sin_nombre(client, tequenos):
    _post_json(client, '/api/carrito/agregar/', {'producto_id': tequenos.id})

    respuesta = _post_json(client, '/api/carrito/confirmar/', {'nombre_cliente': '  '})

    assert respuesta.status_code == 400
    assert respuesta.json()['error'] == 'Nombre requerido'
    assert Pedido.objects.count() == 0
    assert client.get('/api/carrito/').json()['cantidad_items'] == 1


def test_checkout_carrito_vacio(client):
    respuesta = _post_json(client, '/api/carrito/confirmar/', {'nombre_cliente': 'Ana'})

    assert respuesta.status_code == 400
    assert respuesta.json()['error'] == 'Carrito vacío'


def test_doble_envio_bloqueado(client, tequenos):
    _post_json(client, '/api/carrito/agregar/', {'producto_id': tequenos.id})
    primero = _post_json(client, '/api/carrito/confirmar/', {'nombre_cliente': 'Ana'})
    _post_json(client, '/api/carrito/agregar/', {'producto_id': tequenos.id})

    segundo = _post_json(client, '/api/carrito/confirmar/', {'nombre_cliente': 'Ana'})

    assert primero.status_code == 201
    assert segundo.status_code == 429
    assert Pedido.objects.count() == 1


def test_fallo_al_guardar_el_pedido_responde_500(client, tequenos, monkeypatch):
    _post_json(client, '/api/carrito/agregar/', {'producto_id': tequenos.id})

    def bulk_create_caido(self, *args, **kwargs):
        raise DatabaseError('sin conexión')

    monkeypatch.setattr(QuerySet, 'bulk_create', bulk_create_caido)
    respuesta = _post_json(client, '/api/carrito/confirmar/', {'nombre_cliente': 'Ana'})

    assert respuesta.status_code == 500
    assert Pedido.objects.count() == 0
    monkeypatch.undo()
    assert client.get('/api/carrito/').json()['cantidad_items'] == 1
    # La clave anti-duplicados se libera y el cliente puede reintentar
    assert _post_json(client, '/api/carrito/confirmar/', {'nombre_cliente': 'Ana'}).status_code == 201


def test_error_de_validacion_permite_reintentar(client, tequenos):
    assert _post_json(client, '/api/carrito/confirmar/', {'nombre_cliente': 'Ana'}).status_code == 400
    _post_json(client, '/api/carrito/agregar/', {'producto_id': tequenos.id})
    assert _post_json(client, '/api/carrito/confirmar/', {'nombre_cliente': 'Ana'}).status_code == 201


def test_checkout_desde_formulario(client, tequenos):
    _post_json(client, '/api/carrito/agregar/', {'producto_id': tequenos.id})

    respuesta = client.post('/carrito/confirmar/', {'nombre_cliente': 'Ana', 'notas': 'Sin salsa'})

    assert respuesta.status_code == 302
    assert respuesta.url == '/'
    assert Pedido.objects.get().notas == 'Sin salsa'


def test_pagina_del_carrito(client, tequenos):
    _post_json(client, '/api/carrito/agregar/', {'producto_id': tequenos.id})
    respuesta = client.get('/carrito/')
    assert respuesta.status_code == 200
    assert 'Tequeños' in respuesta.content.decode()
