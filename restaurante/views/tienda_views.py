# restaurante/views/tienda_views.py
"""
Vistas públicas: menú, carrito y confirmación del pedido.
El carrito se construye por request sobre la sesión del navegador.
"""

import json

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST, require_http_methods

from ..carrito import Carrito
from ..decorators import critical_operation
from ..forms import CarritoCheckoutForm
from ..models import CategoriaProducto, Producto
from ..services import catalogo_service, pedido_service
from ..utils import obtener_datos_producto


def _leer_json(request):
    if request.content_type == 'application/json':
        try:
            datos = json.loads(request.body or b'{}')
        except ValueError:
            return None
        return datos if isinstance(datos, dict) else None
    return request.POST


# === MENÚ ===

def menu_view(request):
    """Menú público con destacados y filtro por categoría."""
    categoria = request.GET.get('categoria') or None
    context = {
        'destacados': catalogo_service.listar_productos(solo_destacados=True, orden='calificacion'),
        'productos': catalogo_service.listar_productos(categoria=categoria),
        'categorias': CategoriaProducto.choices,
        'categoria_actual': categoria,
    }
    return render(request, 'menu.html', context)


@require_http_methods(["GET"])
def api_productos_menu(request):
    """API del menú: solo productos activos; ?destacados=1 y ?categoria= opcionales."""
    productos = catalogo_service.listar_productos(
        solo_destacados=request.GET.get('destacados') == '1',
        categoria=request.GET.get('categoria') or None,
        orden=request.GET.get('orden', 'nombre'),
    )
    return JsonResponse([obtener_datos_producto(p) for p in productos], safe=False)


# === CARRITO ===

def carrito_view(request):
    return render(request, 'carrito.html', {'form': CarritoCheckoutForm()})


@require_http_methods(["GET"])
def api_carrito(request):
    return JsonResponse(Carrito(request.session).a_dict())


@require_POST
def api_carrito_agregar(request):
    data = _leer_json(request)
    if data is None:
        return JsonResponse({'error': 'Formato JSON inválido'}, status=400)
    try:
        producto_id = int(data.get('producto_id'))
    except (TypeError, ValueError):
        return JsonResponse({'error': 'Producto inválido'}, status=400)
    producto = get_object_or_404(Producto, pk=producto_id, is_active=True)
    carrito = Carrito(request.session)
    carrito.agregar(producto)
    return JsonResponse(dict(carrito.a_dict(), mensaje=f'{producto.nombre} ha sido agregado al carrito.'))


@require_POST
def api_carrito_actualizar(request):
    data = _leer_json(request)
    if data is None:
        return JsonResponse({'error': 'Formato JSON inválido'}, status=400)
    carrito = Carrito(request.session)
    carrito.actualizar_cantidad(data.get('producto_id'), data.get('cantidad'))
    return JsonResponse(carrito.a_dict())


@require_POST
def api_carrito_eliminar(request):
    data = _leer_json(request)
    if data is None:
        return JsonResponse({'error': 'Formato JSON inválido'}, status=400)
    carrito = Carrito(request.session)
    carrito.eliminar(data.get('producto_id'))
    return JsonResponse(dict(carrito.a_dict(), mensaje='El producto ha sido eliminado del carrito.'))


@require_POST
def api_carrito_vaciar(request):
    carrito = Carrito(request.session)
    carrito.vaciar()
    return JsonResponse(carrito.a_dict())


# === CONFIRMACIÓN DEL PEDIDO ===

@require_POST
@critical_operation(delay=2.0, error_message="Pedido en proceso. Espera 2 segundos antes de enviar otro.")
def api_checkout(request):
    """Confirma el carrito como pedido. Única vía de creación de pedidos de clientes."""
    data = _leer_json(request)
    if data is None:
        return JsonResponse({'error': 'Formato JSON inválido'}, status=400)

    form = CarritoCheckoutForm(data)
    carrito = Carrito(request.session)
    if not form.is_valid():
        errores = [e for lista in form.errors.values() for e in lista]
        return JsonResponse({'error': 'Nombre requerido', 'errores': errores}, status=400)
    if carrito.esta_vacio():
        return JsonResponse({
            'error': 'Carrito vacío',
            'errores': ['Agrega productos al carrito antes de hacer el pedido.']
        }, status=400)

    resultado = pedido_service.crear_desde_carrito(
        carrito, form.cleaned_data['nombre_cliente'],
        usuario=request.user, notas=form.cleaned_data['notas']
    )
    if not resultado['success']:
        status = 500 if resultado.get('error_datos') else 400
        return JsonResponse({'error': resultado['errores'][0], 'errores': resultado['errores']}, status=status)

    pedido = resultado['pedido']
    return JsonResponse({
        'success': True,
        'pedido_id': pedido.id,
        'total': str(pedido.total),
        'mensaje': resultado['mensaje'],
    }, status=201)


@require_POST
def checkout_form_view(request):
    """Versión HTML de la confirmación, para el formulario de la página del carrito."""
    respuesta = api_checkout(request)
    datos = json.loads(respuesta.content)
    if respuesta.status_code == 201:
        messages.success(request, datos['mensaje'])
        return redirect('menu')
    for error in datos.get('errores') or [datos.get('error')]:
        messages.error(request, error)
    return redirect('carrito')
