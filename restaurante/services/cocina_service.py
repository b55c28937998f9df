# restaurante/services/cocina_service.py
"""
Servicio de negocio para operaciones específicas de la cocina.
Tablero de pedidos activos, pedidos listos para entregar y avance de estado.
"""

from ..acceso import ROLES_COCINA, Acceso, obtener_rol, resolver_acceso
from ..estados import ESTADOS_COCINA, ESTADOS_ENTREGA, EstadoPedido, como_estado
from ..utils import filtrar_por_busqueda, obtener_datos_completos_pedido
from .pedido_service import PedidoService


class CocinaService:
    """Servicio que maneja toda la lógica de negocio específica de la cocina."""

    def __init__(self, pedido_service=None):
        self.pedido_service = pedido_service or PedidoService()
        self.ESTADOS_ACTIVOS = ESTADOS_COCINA
        self.ESTADOS_ENTREGA = ESTADOS_ENTREGA

    # === CONSULTAS ===

    def obtener_pedidos_activos(self, busqueda='', estado=None):
        """
        Pedidos en preparación, del más antiguo al más reciente.

        Args:
            busqueda: Texto a buscar en id o nombre del cliente
            estado: Estado puntual dentro de los activos, o None/'all' para todos
        """
        estados = self.ESTADOS_ACTIVOS
        if estado and estado != 'all':
            try:
                estado = como_estado(estado)
            except ValueError as e:
                return {'success': False, 'errores': [str(e)]}
            if estado not in self.ESTADOS_ACTIVOS:
                return {'success': False, 'errores': [f'El estado {estado.value} no es un estado de cocina']}
            estados = (estado,)

        pedidos = self.pedido_service.listar_pedidos(estados=estados, ascendente=True)
        pedidos = filtrar_por_busqueda(pedidos, busqueda)
        return {
            'success': True,
            'pedidos': [obtener_datos_completos_pedido(p) for p in pedidos],
            'total_pedidos': len(pedidos)
        }

    def obtener_pendientes_entrega(self, busqueda=''):
        pedidos = self.pedido_service.listar_pedidos(estados=self.ESTADOS_ENTREGA, ascendente=True)
        pedidos = filtrar_por_busqueda(pedidos, busqueda)
        return {
            'success': True,
            'pedidos': [obtener_datos_completos_pedido(p) for p in pedidos],
            'total_pedidos': len(pedidos)
        }

    # === ACCIONES ===

    def avanzar_pedido(self, pedido_id, usuario_cocina):
        return self.pedido_service.avanzar_estado(pedido_id, usuario_cocina)

    def marcar_entregado(self, pedido_id, usuario_cocina):
        """Entrega un pedido listo. Solo aplica a pedidos en pendiente_entrega."""
        if resolver_acceso(ROLES_COCINA, obtener_rol(usuario_cocina)) != Acceso.CONCEDIDO:
            return {'success': False, 'no_autorizado': True, 'errores': ['No autorizado']}
        resultado = self.pedido_service.actualizar_estado(pedido_id, EstadoPedido.ENTREGADO)
        if resultado['success']:
            resultado['mensaje'] = f'Pedido #{pedido_id} entregado'
        return resultado

    def obtener_resumen_cocina(self):
        """Conteo de pedidos por estado activo, para la cabecera del tablero."""
        pedidos = self.pedido_service.listar_pedidos(estados=self.ESTADOS_ACTIVOS + self.ESTADOS_ENTREGA)
        resumen = {estado.value: 0 for estado in self.ESTADOS_ACTIVOS + self.ESTADOS_ENTREGA}
        for pedido in pedidos:
            resumen[pedido.estado] += 1
        return resumen
