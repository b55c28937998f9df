# -*- coding: utf-8 -*-
"""
Tests del panel del cliente: historial propio, resumen, factura y perfil.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from restaurante.models import ConfiguracionFactura, Pedido, PedidoItem
from restaurante.services import usuario_service
from restaurante.utils import filtrar_por_fecha

pytestmark = pytest.mark.django_db


def _pedido(usuario, producto, cantidad=1, nombre='Luisa'):
    total = producto.precio * cantidad
    pedido = Pedido.objects.create(nombre_cliente=nombre, total=total, usuario=usuario)
    PedidoItem.objects.create(
        pedido=pedido, producto=producto, cantidad=cantidad,
        precio_unitario=producto.precio, total_linea=total,
    )
    return pedido


def test_historial_solo_incluye_pedidos_propios(cliente, otro_cliente, tequenos):
    propio = _pedido(cliente, tequenos)
    _pedido(otro_cliente, tequenos, nombre='Pedro')

    historial = usuario_service.historial(cliente)

    assert [p['id'] for p in historial['pedidos']] == [propio.id]


def test_historial_busqueda(cliente, tequenos):
    _pedido(cliente, tequenos, nombre='Cumpleaños')
    _pedido(cliente, tequenos, nombre='Oficina')

    pedidos = usuario_service.historial(cliente, busqueda='oficina')['pedidos']
    assert [p['nombre_cliente'] for p in pedidos] == ['Oficina']


def test_filtro_por_fecha(cliente, tequenos):
    hoy = _pedido(cliente, tequenos, nombre='Hoy')
    viejo = _pedido(cliente, tequenos, nombre='Viejo')
    Pedido.objects.filter(pk=viejo.pk).update(creado_en=timezone.now() - timedelta(days=40))
    pedidos = list(Pedido.objects.all())

    assert [p.id for p in filtrar_por_fecha(pedidos, 'today')] == [hoy.id]
    assert [p.id for p in filtrar_por_fecha(pedidos, 'week')] == [hoy.id]
    assert len(filtrar_por_fecha(pedidos, 'all')) == 2
    assert len(filtrar_por_fecha(pedidos, 'desconocido')) == 2


def test_resumen(cliente, tequenos, papelon):
    _pedido(cliente, tequenos, cantidad=2)
    ultimo = _pedido(cliente, papelon)

    resumen = usuario_service.resumen(cliente)

    assert resumen['total_pedidos'] == 2
    assert Decimal(resumen['total_gastado']) == Decimal('15500')
    assert resumen['ultimo_pedido']['id'] == ultimo.id


def test_resumen_sin_pedidos(cliente):
    resumen = usuario_service.resumen(cliente)
    assert resumen['total_pedidos'] == 0
    assert resumen['ultimo_pedido'] is None


def test_factura_de_pedido_propio(client_cliente, cliente, tequenos):
    ConfiguracionFactura.objects.create(nombre_restaurante='Casa Pasapalos', nit='900.123.456-7')
    pedido = _pedido(cliente, tequenos, cantidad=3)

    respuesta = client_cliente.get(f'/factura/pedido/{pedido.id}/')

    assert respuesta.status_code == 200
    assert respuesta['Content-Disposition'] == f'attachment; filename="factura-pedido-{pedido.id}.txt"'
    texto = respuesta.content.decode()
    assert 'Casa Pasapalos' in texto
    assert 'NIT: 900.123.456-7' in texto
    assert '3 x Tequeños' in texto
    assert f'Pedido #{pedido.id}' in texto


def test_factura_de_pedido_ajeno(client_cliente, otro_cliente, tequenos):
    ajeno = _pedido(otro_cliente, tequenos)
    assert client_cliente.get(f'/factura/pedido/{ajeno.id}/').status_code == 404


def test_api_mis_pedidos(client_cliente, cliente, otro_cliente, tequenos):
    _pedido(cliente, tequenos)
    _pedido(otro_cliente, tequenos)

    datos = client_cliente.get('/api/mis-pedidos/').json()

    assert datos['total_pedidos'] == 1
    assert datos['pedidos'][0]['usuario_id'] == cliente.pk


def test_actualizar_perfil(client_cliente, cliente):
    respuesta = client_cliente.post('/perfil/', {'nombre_completo': 'Luisa Fernanda'})

    assert respuesta.status_code == 302
    cliente.refresh_from_db()
    assert cliente.nombre_completo == 'Luisa Fernanda'


def test_perfil_con_nombre_vacio_no_cambia(client_cliente, cliente):
    client_cliente.post('/perfil/', {'nombre_completo': ''})
    cliente.refresh_from_db()
    assert cliente.nombre_completo == 'Luisa Cliente'
