# restaurante/signals.py
from django.contrib.auth.signals import user_logged_in, user_logged_out, user_login_failed
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .models import Pedido, PedidoItem, Producto
from .services.auth_service import registrar_evento_seguridad
from .tiempo_real import TABLA_PEDIDOS, TABLA_PEDIDO_ITEMS, TABLA_PRODUCTOS, notificar_cambio
from .utils import obtener_ip_cliente


# === CAMBIOS EN TIEMPO REAL ===
# Las escrituras con QuerySet.update()/bulk_create() no disparan estas señales;
# los servicios que las usan notifican por su cuenta.

@receiver(post_save, sender=Pedido)
@receiver(post_delete, sender=Pedido)
def pedido_cambiado(sender, instance, **kwargs):
    transaction.on_commit(lambda: notificar_cambio(TABLA_PEDIDOS, usuario=instance.usuario_id))


@receiver(post_delete, sender=PedidoItem)
def pedido_item_eliminado(sender, instance, **kwargs):
    transaction.on_commit(lambda: notificar_cambio(TABLA_PEDIDO_ITEMS))


@receiver(post_save, sender=Producto)
@receiver(post_delete, sender=Producto)
def producto_cambiado(sender, instance, **kwargs):
    transaction.on_commit(lambda: notificar_cambio(TABLA_PRODUCTOS))


# === AUDITORÍA DE SESIÓN ===

@receiver(user_logged_in)
def registrar_inicio_sesion(sender, request, user, **kwargs):
    registrar_evento_seguridad(
        user.pk, 'inicio_sesion', f'Inicio de sesión de {user.email}',
        direccion_ip=obtener_ip_cliente(request) if request else None
    )


@receiver(user_logged_out)
def registrar_cierre_sesion(sender, request, user, **kwargs):
    if user is None:
        return
    registrar_evento_seguridad(
        user.pk, 'cierre_sesion', f'Cierre de sesión de {user.email}',
        direccion_ip=obtener_ip_cliente(request) if request else None
    )


@receiver(user_login_failed)
def registrar_inicio_fallido(sender, credentials, request=None, **kwargs):
    registrar_evento_seguridad(
        None, 'inicio_sesion_fallido', f"Intento fallido para {credentials.get('email') or credentials.get('username', '')}",
        direccion_ip=obtener_ip_cliente(request) if request else None
    )
