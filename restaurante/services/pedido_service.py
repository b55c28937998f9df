# restaurante/services/pedido_service.py
"""
Servicio de negocio para el ciclo de vida de los pedidos.
Creación atómica de pedido + items, transiciones de estado y consultas.
"""

import logging
from decimal import Decimal

from django.db import DatabaseError, transaction
from django.utils import timezone

from ..acceso import ROLES_COCINA, NombreRol, obtener_rol, resolver_acceso, Acceso
from ..estados import ESTADO_INICIAL, como_estado, estado_anterior, siguiente_estado
from ..models import Pedido, PedidoItem, Producto
from ..tiempo_real import TABLA_PEDIDO_ITEMS, TABLA_PEDIDOS, notificar_cambio
from ..utils import calcular_total_lineas, obtener_datos_completos_pedido
from .auth_service import registrar_evento_seguridad

logger = logging.getLogger(__name__)


class PedidoService:
    """Servicio que maneja la creación y el avance de estado de los pedidos."""

    # === CREACIÓN ===

    def validar_pedido(self, nombre_cliente, lineas, total=None):
        """Valida antes de cualquier escritura. Devuelve la lista de errores (vacía si es válido)."""
        errores = []
        if not (nombre_cliente or '').strip():
            errores.append('El nombre del cliente es obligatorio')
        if not lineas:
            errores.append('El pedido debe tener al menos un producto')
            return errores

        for linea in lineas:
            cantidad = linea.get('cantidad')
            if not isinstance(cantidad, int) or isinstance(cantidad, bool) or cantidad <= 0:
                errores.append(f'Cantidad inválida para el producto {linea.get("producto_id")}')
            try:
                if Decimal(str(linea.get('precio_unitario'))) < 0:
                    errores.append(f'Precio inválido para el producto {linea.get("producto_id")}')
            except (ArithmeticError, ValueError):
                errores.append(f'Precio inválido para el producto {linea.get("producto_id")}')

        if not errores and total is not None and Decimal(str(total)) != calcular_total_lineas(lineas):
            errores.append('El total no coincide con la suma de los items')
        return errores

    def crear_pedido(self, nombre_cliente, lineas, usuario=None, notas='', total=None):
        """
        Crea un pedido en estado inicial junto con sus items, como una sola unidad.

        Args:
            nombre_cliente: Nombre libre del cliente
            lineas: [{'producto_id': int, 'cantidad': int, 'precio_unitario': Decimal}]
            usuario: Usuario dueño del pedido, o None para pedidos anónimos
            notas: Observaciones libres
            total: Total declarado por quien envía; si se indica debe coincidir con las líneas

        Returns:
            dict: {'success': bool, 'pedido': Pedido, 'mensaje': str, 'errores': list}
        """
        errores = self.validar_pedido(nombre_cliente, lineas, total)
        if errores:
            return {'success': False, 'errores': errores, 'pedido': None}

        ids = {linea['producto_id'] for linea in lineas}
        productos = Producto.objects.in_bulk(ids)
        faltantes = [pid for pid in ids if pid not in productos or not productos[pid].is_active]
        if faltantes:
            return {
                'success': False,
                'errores': [f'Producto con ID {pid} no disponible' for pid in sorted(faltantes)],
                'pedido': None
            }

        total_calculado = calcular_total_lineas(lineas)
        try:
            with transaction.atomic():
                pedido = Pedido.objects.create(
                    nombre_cliente=nombre_cliente.strip(),
                    usuario=usuario if usuario is not None and usuario.is_authenticated else None,
                    total=total_calculado,
                    estado=ESTADO_INICIAL,
                    notas=(notas or '').strip() or None,
                )
                PedidoItem.objects.bulk_create([
                    PedidoItem(
                        pedido=pedido,
                        producto=productos[linea['producto_id']],
                        cantidad=linea['cantidad'],
                        precio_unitario=Decimal(str(linea['precio_unitario'])),
                        total_linea=Decimal(str(linea['precio_unitario'])) * linea['cantidad'],
                    )
                    for linea in lineas
                ])
                transaction.on_commit(
                    lambda: notificar_cambio(TABLA_PEDIDO_ITEMS, usuario=pedido.usuario_id)
                )
        except DatabaseError:
            logger.exception('Error guardando el pedido de %s', nombre_cliente)
            return {
                'success': False,
                'error_datos': True,
                'errores': ['No se pudo registrar el pedido. Intenta de nuevo.'],
                'pedido': None
            }

        logger.info('Pedido #%s creado para %s por %s', pedido.id, pedido.nombre_cliente, total_calculado)
        return {
            'success': True,
            'pedido': pedido,
            'mensaje': f'Tu pedido #{pedido.id} ha sido enviado a cocina.'
        }

    def crear_desde_carrito(self, carrito, nombre_cliente, usuario=None, notas=''):
        """Confirma el carrito como pedido. El carrito solo se vacía si el pedido quedó guardado."""
        resultado = self.crear_pedido(
            nombre_cliente, list(carrito.snapshot()), usuario=usuario,
            notas=notas, total=carrito.total
        )
        if resultado['success']:
            carrito.vaciar()
        return resultado

    # === TRANSICIONES DE ESTADO ===

    def actualizar_estado(self, pedido_id, nuevo_estado):
        """
        Escribe el nuevo estado solo si el pedido está exactamente un paso antes.
        Es una única escritura condicional: dos avances simultáneos no saltan estados.
        """
        try:
            nuevo_estado = como_estado(nuevo_estado)
        except ValueError as e:
            return {'success': False, 'errores': [str(e)]}

        anterior = estado_anterior(nuevo_estado)
        if anterior is None:
            return {'success': False, 'errores': [f'No se puede pasar a {nuevo_estado.value}']}

        try:
            actualizados = Pedido.objects.filter(pk=pedido_id, estado=anterior).update(
                estado=nuevo_estado, actualizado_en=timezone.now()
            )
        except DatabaseError:
            logger.exception('Error actualizando el estado del pedido %s', pedido_id)
            return {'success': False, 'error_datos': True, 'errores': ['No se pudo actualizar el estado del pedido']}

        if actualizados == 0:
            actual = Pedido.objects.filter(pk=pedido_id).values_list('estado', flat=True).first()
            if actual is None:
                return {'success': False, 'no_encontrado': True, 'errores': ['Pedido no encontrado']}
            return {
                'success': False,
                'conflicto': True,
                'estado_actual': actual,
                'errores': [f'El pedido está en estado {actual}; no puede pasar a {nuevo_estado.value}']
            }

        usuario_id = Pedido.objects.filter(pk=pedido_id).values_list('usuario_id', flat=True).first()
        notificar_cambio(TABLA_PEDIDOS, usuario=usuario_id)
        return {'success': True, 'estado': nuevo_estado.value}

    def avanzar_estado(self, pedido_id, usuario):
        """
        Avanza un pedido un paso. Solo cocineros y administradores.
        Desde el estado terminal no hay transición: no cambia nada.
        """
        if resolver_acceso(ROLES_COCINA, obtener_rol(usuario)) != Acceso.CONCEDIDO:
            return {'success': False, 'no_autorizado': True, 'errores': ['No autorizado']}

        estado = Pedido.objects.filter(pk=pedido_id).values_list('estado', flat=True).first()
        if estado is None:
            return {'success': False, 'no_encontrado': True, 'errores': ['Pedido no encontrado']}

        siguiente = siguiente_estado(estado)
        if siguiente is None:
            return {
                'success': True,
                'sin_cambios': True,
                'estado': estado,
                'mensaje': f'El pedido #{pedido_id} ya fue entregado'
            }

        resultado = self.actualizar_estado(pedido_id, siguiente)
        if resultado['success']:
            logger.info('Pedido #%s: %s -> %s por %s', pedido_id, estado, siguiente.value, usuario.pk)
            resultado['mensaje'] = f'Pedido actualizado a: {siguiente.value}'
        return resultado

    def actualizar_notas(self, pedido_id, notas):
        try:
            actualizados = Pedido.objects.filter(pk=pedido_id).update(
                notas=(notas or '').strip() or None, actualizado_en=timezone.now()
            )
        except DatabaseError:
            logger.exception('Error actualizando notas del pedido %s', pedido_id)
            return {'success': False, 'error_datos': True, 'errores': ['No se pudieron guardar las notas']}
        if not actualizados:
            return {'success': False, 'no_encontrado': True, 'errores': ['Pedido no encontrado']}
        notificar_cambio(TABLA_PEDIDOS)
        return {'success': True}

    # === CONSULTAS ===

    def listar_pedidos(self, usuario_id=None, estados=None, ascendente=True):
        """Pedidos con sus items y nombres de producto, ordenados por fecha de creación."""
        pedidos = Pedido.objects.prefetch_related('items__producto')
        if usuario_id is not None:
            pedidos = pedidos.filter(usuario_id=usuario_id)
        if estados is not None:
            pedidos = pedidos.filter(estado__in=[como_estado(e) for e in estados])
        orden = ('creado_en', 'id') if ascendente else ('-creado_en', '-id')
        return list(pedidos.order_by(*orden))

    def listar_pedidos_datos(self, **filtros):
        return [obtener_datos_completos_pedido(p) for p in self.listar_pedidos(**filtros)]

    # === ADMINISTRACIÓN ===

    def eliminar_pedido_seguro(self, pedido_id, usuario):
        """Borrado administrativo: items y pedido en una transacción. Solo administradores."""
        if obtener_rol(usuario) != NombreRol.ADMIN:
            return {'success': False, 'no_autorizado': True, 'errores': ['No autorizado']}
        try:
            with transaction.atomic():
                pedido = Pedido.objects.select_for_update().filter(pk=pedido_id).first()
                if pedido is None:
                    return {'success': False, 'no_encontrado': True, 'errores': ['Pedido no encontrado']}
                PedidoItem.objects.filter(pedido=pedido).delete()
                pedido.delete()
        except DatabaseError:
            logger.exception('Error eliminando el pedido %s', pedido_id)
            return {'success': False, 'error_datos': True, 'errores': ['No se pudo eliminar el pedido']}

        logger.warning('Pedido #%s eliminado por el administrador %s', pedido_id, usuario.pk)
        registrar_evento_seguridad(
            usuario.pk, 'pedido_eliminado', f'Pedido #{pedido_id} eliminado de forma segura'
        )
        return {'success': True, 'mensaje': f'Pedido #{pedido_id} eliminado'}
