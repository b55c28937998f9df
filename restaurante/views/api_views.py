# restaurante/views/api_views.py
"""
APIs del sistema de restaurante.
Contiene las APIs de cocina, del panel del cliente, facturas, administración de pedidos y long polling.
"""

import logging

from django.db import DatabaseError
from django.http import HttpResponse, JsonResponse, Http404
from django.utils import timezone
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_POST, require_http_methods

from ..acceso import ROLES_COCINA, NombreRol
from ..decorators import rol_requerido, debounce_request
from ..estados import ESTADOS_COCINA, ESTADOS_ENTREGA
from ..services import cocina_service, pedido_service, usuario_service
from ..tiempo_real import TABLA_PEDIDOS, esperar_cambio
from ..utils import filtrar_por_busqueda, obtener_datos_completos_pedido

logger = logging.getLogger(__name__)


def _respuesta_error(resultado):
    """Convierte un resultado fallido de servicio en JsonResponse con el status adecuado."""
    if resultado.get('error_datos'):
        status = 500
    elif resultado.get('no_encontrado') or resultado.get('no_autorizado'):
        status = 404
    elif resultado.get('conflicto'):
        status = 409
    else:
        status = 400
    cuerpo = {'error': resultado['errores'][0], 'errores': resultado['errores']}
    if 'estado_actual' in resultado:
        cuerpo['estado_actual'] = resultado['estado_actual']
    return JsonResponse(cuerpo, status=status)


def _version_param(request):
    valor = request.GET.get('version')
    try:
        return int(valor) if valor not in (None, '') else None
    except ValueError:
        return None


# === API COCINA ===

@rol_requerido(ROLES_COCINA)
@require_http_methods(["GET"])
def api_get_pedidos_cocina(request):
    """Pedidos activos de cocina; ?q= busca por id o cliente, ?estado= filtra."""
    resultado = cocina_service.obtener_pedidos_activos(
        busqueda=request.GET.get('q', ''), estado=request.GET.get('estado')
    )
    if not resultado['success']:
        return _respuesta_error(resultado)
    return JsonResponse(resultado)


@rol_requerido(ROLES_COCINA)
@require_http_methods(["GET"])
def api_get_pendientes_entrega(request):
    return JsonResponse(cocina_service.obtener_pendientes_entrega(busqueda=request.GET.get('q', '')))


@rol_requerido(ROLES_COCINA)
@require_POST
@debounce_request(delay=0.8, error_message="Acción muy rápida. Espera un momento.")
def api_avanzar_pedido(request, pedido_id):
    """Avanza el pedido un paso en su ciclo de vida."""
    resultado = cocina_service.avanzar_pedido(pedido_id, request.user)
    if not resultado['success']:
        return _respuesta_error(resultado)
    return JsonResponse(resultado)


@rol_requerido(ROLES_COCINA)
@require_POST
@debounce_request(delay=1.5, error_message="Entrega en proceso. Espera antes de marcar otra.")
def api_marcar_pedido_entregado(request, pedido_id):
    resultado = cocina_service.marcar_entregado(pedido_id, request.user)
    if not resultado['success']:
        return _respuesta_error(resultado)
    return JsonResponse(resultado)


# === API PANEL DEL CLIENTE ===

@rol_requerido([NombreRol.USUARIO])
@require_http_methods(["GET"])
def api_mis_pedidos(request):
    """Historial propio; ?q= búsqueda, ?fecha=today|week|month|all."""
    return JsonResponse(usuario_service.historial(
        request.user, busqueda=request.GET.get('q', ''), rango=request.GET.get('fecha', 'all')
    ))


@rol_requerido([NombreRol.USUARIO])
@require_http_methods(["GET"])
def api_mi_resumen(request):
    return JsonResponse(usuario_service.resumen(request.user))


# === API FACTURAS ===

@rol_requerido()
@require_http_methods(["GET"])
def descargar_factura(request, pedido_id):
    """Descarga la factura en texto de un pedido propio."""
    contenido = usuario_service.generar_factura_texto(request.user, pedido_id)
    if contenido is None:
        raise Http404('Pedido no encontrado')
    respuesta = HttpResponse(contenido, content_type='text/plain; charset=utf-8')
    respuesta['Content-Disposition'] = f'attachment; filename="factura-pedido-{pedido_id}.txt"'
    return respuesta


# === API ADMINISTRACIÓN DE PEDIDOS ===

@rol_requerido([NombreRol.ADMIN])
@require_http_methods(["GET"])
def api_pedidos_admin(request):
    """Pedidos para el panel de administración; ?estado= y ?q= opcionales."""
    estado = request.GET.get('estado')
    estados = [estado] if estado and estado != 'all' else None
    try:
        pedidos = pedido_service.listar_pedidos(estados=estados, ascendente=False)
    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    pedidos = [obtener_datos_completos_pedido(p) for p in filtrar_por_busqueda(pedidos, request.GET.get('q', ''))]
    return JsonResponse({'success': True, 'pedidos': pedidos, 'total_pedidos': len(pedidos)})


@rol_requerido([NombreRol.ADMIN])
@require_POST
def api_actualizar_notas_pedido(request, pedido_id):
    resultado = pedido_service.actualizar_notas(pedido_id, request.POST.get('notas', ''))
    if not resultado['success']:
        return _respuesta_error(resultado)
    return JsonResponse(resultado)


@rol_requerido([NombreRol.ADMIN])
@require_POST
@debounce_request(delay=1.0, critical=True, error_message="Eliminación en proceso. Espera un momento.")
def api_eliminar_pedido(request, pedido_id):
    resultado = pedido_service.eliminar_pedido_seguro(pedido_id, request.user)
    if not resultado['success']:
        return _respuesta_error(resultado)
    return JsonResponse(resultado)


# === LONG POLLING (TIEMPO REAL) ===
# Cada respuesta trae la colección completa del ámbito; el cliente reemplaza, no mezcla.

def _long_polling(request, consultar, **ambitos):
    try:
        hubo_cambio, version = esperar_cambio(TABLA_PEDIDOS, _version_param(request), **ambitos)
        resultado = {'cambios': hubo_cambio, 'version': version, 'timestamp': timezone.now().isoformat()}
        if hubo_cambio:
            resultado['pedidos'] = consultar()
        return JsonResponse(resultado)
    except DatabaseError:
        logger.exception('Error en long polling de %s', request.path)
        return JsonResponse({
            'error': 'No se pudieron cargar los pedidos',
            'cambios': False,
            'timestamp': timezone.now().isoformat()
        }, status=500)


@never_cache
@rol_requerido(ROLES_COCINA)
def api_longpolling_cocina(request):
    """Long polling para el tablero de cocina (pedidos en preparación)."""
    return _long_polling(
        request, lambda: pedido_service.listar_pedidos_datos(estados=ESTADOS_COCINA, ascendente=True)
    )


@never_cache
@rol_requerido(ROLES_COCINA)
def api_longpolling_entregas(request):
    """Long polling para los pedidos listos para entregar."""
    return _long_polling(
        request, lambda: pedido_service.listar_pedidos_datos(estados=ESTADOS_ENTREGA, ascendente=True)
    )


@never_cache
@rol_requerido([NombreRol.USUARIO])
def api_longpolling_mis_pedidos(request):
    """Long polling del cliente: solo despierta y responde con sus propios pedidos."""
    usuario_id = request.user.pk
    return _long_polling(
        request,
        lambda: pedido_service.listar_pedidos_datos(usuario_id=usuario_id, ascendente=False),
        usuario=usuario_id,
    )
