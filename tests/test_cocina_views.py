# -*- coding: utf-8 -*-
"""
Tests de las APIs y el tablero de cocina.
"""
from decimal import Decimal

import pytest
from django.db import DatabaseError
from django.db.models.query import QuerySet

from restaurante.estados import EstadoPedido
from restaurante.models import Pedido

pytestmark = pytest.mark.django_db


def _pedido(estado=EstadoPedido.PENDIENTE, nombre='Ana'):
    return Pedido.objects.create(nombre_cliente=nombre, total=Decimal('6000'), estado=estado)


def test_tablero_de_cocina(client_cocinero):
    _pedido(nombre='Ana')
    _pedido(EstadoPedido.PENDIENTE_ENTREGA, nombre='Beto')

    respuesta = client_cocinero.get('/cocinero/')

    assert respuesta.status_code == 200
    assert [p['nombre_cliente'] for p in respuesta.context['activos']] == ['Ana']
    assert [p['nombre_cliente'] for p in respuesta.context['pendientes_entrega']] == ['Beto']
    assert 'Marcar como Recibido' in respuesta.content.decode()


def test_api_pedidos_cocina(client_cocinero):
    pedido = _pedido()

    datos = client_cocinero.get('/api/cocina/pedidos/').json()

    assert datos['total_pedidos'] == 1
    assert datos['pedidos'][0]['id'] == pedido.id
    assert datos['pedidos'][0]['siguiente_estado'] == 'recibido'
    assert datos['pedidos'][0]['accion'] == 'Marcar como Recibido'


def test_api_pedidos_cocina_estado_invalido(client_cocinero):
    assert client_cocinero.get('/api/cocina/pedidos/', {'estado': 'volando'}).status_code == 400


def test_avanzar_pedido(client_cocinero):
    pedido = _pedido()

    respuesta = client_cocinero.post(f'/api/cocina/pedido/{pedido.id}/avanzar/')

    assert respuesta.status_code == 200
    assert respuesta.json()['estado'] == 'recibido'
    pedido.refresh_from_db()
    assert pedido.estado == EstadoPedido.RECIBIDO


def test_avanzar_pedido_inexistente(client_cocinero):
    assert client_cocinero.post('/api/cocina/pedido/999/avanzar/').status_code == 404


def test_avanzar_pedido_con_fallo_de_datos(client_cocinero, monkeypatch):
    pedido = _pedido()

    def update_caido(self, **kwargs):
        raise DatabaseError('sin conexión')

    monkeypatch.setattr(QuerySet, 'update', update_caido)
    respuesta = client_cocinero.post(f'/api/cocina/pedido/{pedido.id}/avanzar/')

    assert respuesta.status_code == 500
    assert respuesta.json()['error'] == 'No se pudo actualizar el estado del pedido'
    pedido.refresh_from_db()
    assert pedido.estado == EstadoPedido.PENDIENTE


def test_doble_clic_en_avanzar_no_salta_estados(client_cocinero):
    pedido = _pedido()

    client_cocinero.post(f'/api/cocina/pedido/{pedido.id}/avanzar/')
    segundo = client_cocinero.post(f'/api/cocina/pedido/{pedido.id}/avanzar/')

    assert segundo.status_code == 429
    pedido.refresh_from_db()
    assert pedido.estado == EstadoPedido.RECIBIDO


def test_marcar_entregado(client_cocinero):
    pedido = _pedido(EstadoPedido.PENDIENTE_ENTREGA)

    respuesta = client_cocinero.post(f'/api/cocina/pedido/{pedido.id}/entregar/')

    assert respuesta.status_code == 200
    pedido.refresh_from_db()
    assert pedido.estado == EstadoPedido.ENTREGADO


def test_marcar_entregado_fuera_de_turno(client_cocinero):
    pedido = _pedido(EstadoPedido.COCINANDO)

    respuesta = client_cocinero.post(f'/api/cocina/pedido/{pedido.id}/entregar/')

    assert respuesta.status_code == 409
    assert respuesta.json()['estado_actual'] == 'cocinando'


def test_mesero_no_avanza_pedidos(client, mesero):
    client.force_login(mesero)
    pedido = _pedido()

    respuesta = client.post(f'/api/cocina/pedido/{pedido.id}/avanzar/')

    assert respuesta.status_code == 302
    assert respuesta.url == '/mesero/'
    pedido.refresh_from_db()
    assert pedido.estado == EstadoPedido.PENDIENTE


def test_tablero_de_mesero_es_de_solo_lectura(client, mesero):
    client.force_login(mesero)
    _pedido(nombre='Ana')

    respuesta = client.get('/mesero/')

    assert respuesta.status_code == 200
    assert 'Ana' in respuesta.content.decode()
    assert 'data-avanzar' not in respuesta.content.decode()
