# restaurante/utils.py

from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from .estados import etiqueta_accion, siguiente_estado


def calcular_total_lineas(lineas):
    """Suma de cantidad × precio unitario sobre líneas {'cantidad', 'precio_unitario'}."""
    return sum(
        (Decimal(str(linea['precio_unitario'])) * int(linea['cantidad']) for linea in lineas),
        Decimal('0')
    )


def obtener_datos_completos_pedido(pedido):
    """Obtiene todos los datos de un pedido para enviar al frontend"""
    items_data = []
    for item in pedido.items.all():
        items_data.append({
            'id': item.id,
            'producto_id': item.producto_id,
            'nombre': item.producto.nombre,
            'cantidad': item.cantidad,
            'precio_unitario': str(item.precio_unitario),
            'total_linea': str(item.total_linea),
        })

    siguiente = siguiente_estado(pedido.estado)
    return {
        'id': pedido.id,
        'nombre_cliente': pedido.nombre_cliente,
        'usuario_id': pedido.usuario_id,
        'total': str(pedido.total),
        'estado': pedido.estado,
        'siguiente_estado': siguiente.value if siguiente else None,
        'accion': etiqueta_accion(pedido.estado),
        'notas': pedido.notas or '',
        'items': items_data,
        'creado_en': pedido.creado_en.isoformat(),
        'actualizado_en': pedido.actualizado_en.isoformat(),
        'tiempo_transcurrido': calcular_tiempo_transcurrido(pedido.creado_en),
    }


def obtener_datos_producto(producto):
    return {
        'id': producto.id,
        'nombre': producto.nombre,
        'descripcion': producto.descripcion or '',
        'ingredientes': list(producto.ingredientes or []),
        'categoria': producto.categoria,
        'precio': str(producto.precio),
        'imagen_url': producto.imagen_url or '',
        'is_active': producto.is_active,
        'is_featured': producto.is_featured,
        'calificacion': float(producto.calificacion),
    }


def calcular_tiempo_transcurrido(fecha_creacion):
    """Calcula el tiempo transcurrido desde la creación"""
    ahora = timezone.now()
    if timezone.is_naive(fecha_creacion):
        fecha_creacion = timezone.make_aware(fecha_creacion)

    delta = ahora - fecha_creacion
    minutos = int(delta.total_seconds() / 60)

    if minutos < 60:
        return f"{minutos}min"
    else:
        horas = minutos // 60
        mins = minutos % 60
        return f"{horas}h {mins}m"


def filtrar_por_busqueda(pedidos, termino):
    """Filtra por id o nombre de cliente, sin distinguir mayúsculas."""
    if not termino:
        return list(pedidos)
    termino = termino.strip().lower()
    return [
        p for p in pedidos
        if termino in str(p.id).lower() or termino in p.nombre_cliente.lower()
    ]


def filtrar_por_fecha(pedidos, rango, ahora=None):
    """
    Filtra pedidos por rango de fecha: 'today', 'week', 'month' o 'all'.
    Los rangos desconocidos no filtran.
    """
    ahora = timezone.localtime(ahora or timezone.now())
    if rango == 'today':
        return [p for p in pedidos if timezone.localtime(p.creado_en).date() == ahora.date()]
    if rango == 'week':
        limite = ahora - timedelta(days=7)
        return [p for p in pedidos if p.creado_en >= limite]
    if rango == 'month':
        return [
            p for p in pedidos
            if timezone.localtime(p.creado_en).month == ahora.month
            and timezone.localtime(p.creado_en).year == ahora.year
        ]
    return list(pedidos)


def obtener_ip_cliente(request):
    reenviada = request.META.get('HTTP_X_FORWARDED_FOR')
    if reenviada:
        return reenviada.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')
