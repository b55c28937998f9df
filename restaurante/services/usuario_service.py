# restaurante/services/usuario_service.py
"""
Servicio del panel del cliente: historial propio, resumen y factura.
Un cliente solo ve los pedidos cuyo dueño es él mismo.
"""

from decimal import Decimal

from django.template.loader import render_to_string
from django.utils import timezone

from ..models import ConfiguracionFactura, Pedido
from ..utils import filtrar_por_busqueda, filtrar_por_fecha, obtener_datos_completos_pedido
from .pedido_service import PedidoService

RANGOS_FECHA = ('all', 'today', 'week', 'month')


class UsuarioService:

    def __init__(self, pedido_service=None):
        self.pedido_service = pedido_service or PedidoService()

    def historial(self, usuario, busqueda='', rango='all'):
        if rango not in RANGOS_FECHA:
            rango = 'all'
        pedidos = self.pedido_service.listar_pedidos(usuario_id=usuario.pk, ascendente=False)
        pedidos = filtrar_por_busqueda(pedidos, busqueda)
        pedidos = filtrar_por_fecha(pedidos, rango)
        return {
            'success': True,
            'pedidos': [obtener_datos_completos_pedido(p) for p in pedidos],
            'total_pedidos': len(pedidos)
        }

    def resumen(self, usuario):
        pedidos = self.pedido_service.listar_pedidos(usuario_id=usuario.pk, ascendente=False)
        total_gastado = sum((p.total for p in pedidos), Decimal('0'))
        ultimo = pedidos[0] if pedidos else None
        return {
            'total_pedidos': len(pedidos),
            'total_gastado': str(total_gastado),
            'ultimo_pedido': obtener_datos_completos_pedido(ultimo) if ultimo else None,
        }

    def obtener_pedido_propio(self, usuario, pedido_id):
        return (
            Pedido.objects.prefetch_related('items__producto')
            .filter(pk=pedido_id, usuario_id=usuario.pk).first()
        )

    def datos_factura(self, usuario, pedido_id):
        """Datos de la factura de un pedido propio, o None si el pedido no es del usuario."""
        pedido = self.obtener_pedido_propio(usuario, pedido_id)
        if pedido is None:
            return None
        return {
            'pedido': obtener_datos_completos_pedido(pedido),
            'configuracion': ConfiguracionFactura.actual(),
            'emitida_en': timezone.localtime(),
        }

    def generar_factura_texto(self, usuario, pedido_id):
        datos = self.datos_factura(usuario, pedido_id)
        if datos is None:
            return None
        return render_to_string('facturas/factura.txt', datos)
