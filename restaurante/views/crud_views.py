# restaurante/views/crud_views.py
"""
Vistas CRUD de administración: productos, roles de usuario y configuración de factura.
"""

import json

from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods, require_POST

from ..decorators import debounce_request, rol_requerido
from ..forms import ConfiguracionFacturaForm, ProductoForm
from ..models import NombreRol, Producto
from ..services import admin_service, catalogo_service
from ..utils import obtener_datos_producto

solo_admin = rol_requerido([NombreRol.ADMIN])


def _cargar_json(cuerpo):
    """Objeto JSON del cuerpo, o None si no es JSON válido o no es un objeto."""
    try:
        datos = json.loads(cuerpo or b'{}')
    except ValueError:
        return None
    return datos if isinstance(datos, dict) else None


def _datos_request(request):
    if request.content_type == 'application/json':
        return _cargar_json(request.body)
    return request.POST


def _json_invalido():
    return JsonResponse({'error': 'Formato JSON inválido'}, status=400)


def _errores_formulario(form):
    return JsonResponse({
        'error': 'Datos inválidos',
        'errores': {campo: [str(e) for e in lista] for campo, lista in form.errors.items()}
    }, status=400)


# === API PRODUCTOS (CRUD BÁSICO) ===

@solo_admin
@require_http_methods(["GET", "POST"])
@debounce_request(delay=0.5, include_data=True, error_message="Operación muy rápida en productos.")
def api_productos_list_create(request):
    """API para listar (GET, incluye inactivos) o crear (POST) productos."""
    if request.method == 'GET':
        productos = catalogo_service.listar_productos(
            solo_activos=request.GET.get('activos') == '1',
            solo_destacados=request.GET.get('destacados') == '1',
            orden=request.GET.get('orden', 'nombre'),
        )
        return JsonResponse([obtener_datos_producto(p) for p in productos], safe=False)

    data = _datos_request(request)
    if data is None:
        return _json_invalido()
    form = ProductoForm(data)
    if not form.is_valid():
        return _errores_formulario(form)

    resultado = admin_service.guardar_producto(form.cleaned_data, request.user)
    if not resultado['success']:
        return JsonResponse({'error': resultado['errores'][0]}, status=500)
    return JsonResponse(obtener_datos_producto(resultado['producto']), status=201)


@solo_admin
@require_http_methods(["GET", "PUT", "DELETE"])
def api_producto_detail(request, pk):
    """API para ver (GET), actualizar (PUT) o desactivar (DELETE) un producto específico."""
    producto = get_object_or_404(Producto, pk=pk)

    if request.method == 'GET':
        return JsonResponse(obtener_datos_producto(producto))

    elif request.method == 'PUT':
        data = _cargar_json(request.body)
        if data is None:
            return _json_invalido()

        # Los campos no enviados conservan su valor actual
        actuales = obtener_datos_producto(producto)
        actuales['ingredientes'] = '\n'.join(actuales['ingredientes'])
        actuales.update(data)
        if isinstance(actuales.get('ingredientes'), list):
            actuales['ingredientes'] = '\n'.join(actuales['ingredientes'])
        form = ProductoForm(actuales, instance=producto)
        if not form.is_valid():
            return _errores_formulario(form)

        resultado = admin_service.guardar_producto(form.cleaned_data, request.user, producto=producto)
        if not resultado['success']:
            return JsonResponse({'error': resultado['errores'][0]}, status=500)
        return JsonResponse(dict(obtener_datos_producto(resultado['producto']), mensaje='Producto actualizado exitosamente'))

    # Soft delete - marcar como inactivo en lugar de eliminar
    resultado = admin_service.cambiar_activo(producto.pk, False)
    if not resultado['success']:
        return JsonResponse({'error': resultado['errores'][0]}, status=500)
    return JsonResponse({'mensaje': f'Producto {producto.nombre} desactivado exitosamente'})


def _estado_http(resultado):
    if resultado.get('error_datos'):
        return 500
    return 404 if resultado.get('no_encontrado') else 400


def _respuesta_producto(resultado):
    if resultado['success']:
        return JsonResponse({'success': True, 'producto': obtener_datos_producto(resultado['producto'])})
    return JsonResponse({'error': resultado['errores'][0], 'errores': resultado['errores']}, status=_estado_http(resultado))


@solo_admin
@require_POST
def api_producto_activo(request, pk):
    data = _datos_request(request)
    if data is None:
        return _json_invalido()
    return _respuesta_producto(admin_service.cambiar_activo(pk, str(data.get('activo', '')).lower() in ('1', 'true')))


@solo_admin
@require_POST
def api_producto_destacado(request, pk):
    data = _datos_request(request)
    if data is None:
        return _json_invalido()
    return _respuesta_producto(admin_service.cambiar_destacado(pk, str(data.get('destacado', '')).lower() in ('1', 'true')))


@solo_admin
@require_POST
def api_producto_calificacion(request, pk):
    data = _datos_request(request)
    if data is None:
        return _json_invalido()
    return _respuesta_producto(admin_service.cambiar_calificacion(pk, data.get('calificacion')))


# === API USUARIOS ===

@solo_admin
@require_http_methods(["GET"])
def api_usuarios(request):
    usuarios = [
        {
            'id': u.id,
            'email': u.email,
            'nombre_completo': u.nombre_completo,
            'rol': u.rol.nombre if u.rol else None,
        }
        for u in admin_service.listar_usuarios()
    ]
    return JsonResponse(usuarios, safe=False)


@solo_admin
@require_POST
@debounce_request(delay=1.0, include_data=True)
def api_usuario_rol(request, usuario_id):
    data = _datos_request(request)
    if data is None:
        return _json_invalido()
    resultado = admin_service.actualizar_rol_usuario(usuario_id, data.get('rol'), request.user)
    if not resultado['success']:
        return JsonResponse({'error': resultado['errores'][0]}, status=_estado_http(resultado))
    return JsonResponse(resultado)


# === API CONFIGURACIÓN DE FACTURA ===

@solo_admin
@require_POST
def api_configuracion_factura(request):
    data = _datos_request(request)
    if data is None:
        return _json_invalido()
    form = ConfiguracionFacturaForm(data)
    if not form.is_valid():
        return _errores_formulario(form)
    resultado = admin_service.guardar_configuracion_factura(form.cleaned_data)
    if not resultado['success']:
        return JsonResponse({'error': resultado['errores'][0]}, status=500)
    return JsonResponse({'success': True, 'mensaje': 'Configuración guardada'})
