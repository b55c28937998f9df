# restaurante/services/admin_service.py
"""
Servicio de negocio para el administrador.
Gestión del catálogo, roles de usuario, estadísticas y configuración de factura.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.db import DatabaseError, transaction
from django.db.models import Sum

from ..models import ConfiguracionFactura, NombreRol, Pedido, Producto, Rol, Usuario
from .auth_service import registrar_evento_seguridad

logger = logging.getLogger(__name__)


class AdminService:
    """Servicio que maneja toda la lógica de negocio específica del administrador."""

    # === CATÁLOGO ===

    def guardar_producto(self, datos, admin, producto=None):
        """
        Crea o actualiza un producto a partir de datos ya validados (ProductoForm.cleaned_data).

        Returns:
            dict: {'success': bool, 'producto': Producto, 'errores': list}
        """
        creando = producto is None
        producto = producto or Producto(creado_por=admin)
        for campo, valor in datos.items():
            setattr(producto, campo, valor)
        try:
            producto.save()
        except DatabaseError:
            logger.exception('Error guardando el producto %s', datos.get('nombre'))
            return {'success': False, 'error_datos': True, 'errores': ['No se pudo guardar el producto'], 'producto': None}

        accion = 'creado' if creando else 'actualizado'
        logger.info('Producto %s %s por %s', producto.id, accion, admin.pk)
        return {'success': True, 'producto': producto, 'mensaje': f'Producto {producto.nombre} {accion}'}

    def _actualizar_producto(self, producto_id, **campos):
        try:
            producto = Producto.objects.get(pk=producto_id)
        except Producto.DoesNotExist:
            return {'success': False, 'no_encontrado': True, 'errores': ['Producto no encontrado']}
        for campo, valor in campos.items():
            setattr(producto, campo, valor)
        try:
            # save() para que las señales notifiquen el cambio al catálogo
            producto.save(update_fields=list(campos) + ['actualizado_en'])
        except DatabaseError:
            logger.exception('Error actualizando el producto %s', producto_id)
            return {'success': False, 'error_datos': True, 'errores': ['No se pudo actualizar el producto']}
        return {'success': True, 'producto': producto}

    def cambiar_activo(self, producto_id, activo):
        """Borrado lógico: los productos nunca se eliminan físicamente."""
        return self._actualizar_producto(producto_id, is_active=bool(activo))

    def cambiar_destacado(self, producto_id, destacado):
        return self._actualizar_producto(producto_id, is_featured=bool(destacado))

    def cambiar_calificacion(self, producto_id, calificacion):
        try:
            valor = Decimal(str(calificacion))
        except (InvalidOperation, ValueError, TypeError):
            return {'success': False, 'errores': ['La calificación debe ser un número']}
        if not valor.is_finite() or valor < 0 or valor > 5:
            return {'success': False, 'errores': ['La calificación debe estar entre 0.0 y 5.0']}
        return self._actualizar_producto(producto_id, calificacion=valor.quantize(Decimal('0.1')))

    # === USUARIOS Y ROLES ===

    def listar_usuarios(self):
        return list(Usuario.objects.select_related('rol').order_by('nombre_completo'))

    @transaction.atomic
    def actualizar_rol_usuario(self, usuario_id, nombre_rol, admin):
        """Asigna un único rol. El cambio se ve en la próxima petición del usuario afectado."""
        if nombre_rol not in NombreRol.values:
            return {'success': False, 'errores': [f'Rol desconocido: {nombre_rol}']}
        try:
            rol = Rol.objects.get(nombre=nombre_rol)
        except Rol.DoesNotExist:
            return {'success': False, 'errores': [f'El rol {nombre_rol} no está configurado']}

        actualizados = Usuario.objects.filter(pk=usuario_id).update(rol=rol)
        if not actualizados:
            return {'success': False, 'no_encontrado': True, 'errores': ['Usuario no encontrado']}

        registrar_evento_seguridad(
            admin.pk, 'cambio_rol', f'Usuario {usuario_id} ahora tiene rol {nombre_rol}',
            metadata={'usuario_id': usuario_id, 'rol': nombre_rol}
        )
        return {'success': True, 'mensaje': f'Rol actualizado a {nombre_rol}'}

    # === ESTADÍSTICAS ===

    def obtener_estadisticas(self):
        pedidos = Pedido.objects.all()
        return {
            'total_pedidos': pedidos.count(),
            'total_productos': Producto.objects.count(),
            'total_usuarios': Usuario.objects.count(),
            'ventas_totales': str(pedidos.aggregate(total=Sum('total'))['total'] or Decimal('0')),
        }

    # === CONFIGURACIÓN DE FACTURA ===

    def guardar_configuracion_factura(self, datos):
        configuracion = ConfiguracionFactura.actual()
        for campo, valor in datos.items():
            setattr(configuracion, campo, valor)
        try:
            configuracion.save()
        except DatabaseError:
            logger.exception('Error guardando la configuración de factura')
            return {'success': False, 'error_datos': True, 'errores': ['No se pudo guardar la configuración']}
        return {'success': True, 'configuracion': configuracion}
