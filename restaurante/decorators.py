# restaurante/decorators.py

import time
import hashlib
import json
import logging
from functools import wraps

from django.core.cache import cache
from django.http import JsonResponse
from django.shortcuts import redirect, render

from .acceso import Acceso, evaluar_sesion, ruta_inicio, sesion_desde_request, EstadoSesion

logger = logging.getLogger(__name__)


def rol_requerido(roles_permitidos=()):
    """
    Decorador que verifica si el rol del usuario está entre los roles permitidos.
    Sin roles, basta con estar autenticado.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            sesion = sesion_desde_request(request)

            # 1. Si el usuario no está autenticado, lo enviamos al login (sin "next").
            if sesion.estado == EstadoSesion.SIN_AUTENTICAR:
                return redirect('login')

            acceso = evaluar_sesion(sesion, roles_permitidos)

            # 2. Identidad aún no resuelta: solo un indicador neutro de espera.
            if acceso == Acceso.CARGANDO:
                return render(request, 'cargando.html', status=202)

            # 3. Rol permitido.
            if acceso == Acceso.CONCEDIDO:
                request.sesion_usuario = sesion
                return view_func(request, *args, **kwargs)

            # 4. Sin permiso: a su propio panel, sin revelar la superficie pedida.
            return redirect(ruta_inicio(sesion.rol))
        return wrapper
    return decorator


# === CONFIGURACIÓN DEL SISTEMA DE DEBOUNCE ===
DEBOUNCE_CONFIG = {
    'DEFAULT_DELAY': 0.5,      # 500ms por defecto
    'CRITICAL_DELAY': 2.0,     # 2 segundos para operaciones críticas
    'FORM_DELAY': 1.0,         # 1 segundo para formularios
    'MAX_CACHE_TIME': 300,     # 5 minutos máximo en cache
    'CACHE_PREFIX': 'debounce_'
}

def generate_debounce_key(user_id, view_name, request_data=None):
    """
    Genera una clave única para el debounce basada en:
    - ID del usuario
    - Nombre de la vista
    - Datos de la request (opcional)
    """
    base_string = f"{user_id}:{view_name}"

    if request_data:
        data_string = json.dumps(request_data, sort_keys=True, default=str)
        data_hash = hashlib.md5(data_string.encode()).hexdigest()[:8]
        base_string += f":{data_hash}"

    return f"{DEBOUNCE_CONFIG['CACHE_PREFIX']}{base_string}"

def _datos_request(request):
    if request.method == 'POST':
        try:
            return json.loads(request.body.decode('utf-8'))
        except (ValueError, UnicodeDecodeError):
            return {k: request.POST.getlist(k) for k in request.POST if k != 'csrfmiddlewaretoken'}
    return dict(request.GET)

def debounce_request(delay=None, include_data=False, critical=False, error_message=None):
    """
    Decorador para prevenir requests duplicados en el backend.

    Args:
        delay: Tiempo en segundos para el debounce (por defecto usa DEBOUNCE_CONFIG)
        include_data: Si incluir los datos del request en la clave del debounce
        critical: Si es una operación crítica (usa CRITICAL_DELAY)
        error_message: Mensaje personalizado de error
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            # Solo se controlan las escrituras
            if request.method in ('GET', 'HEAD', 'OPTIONS'):
                return view_func(request, *args, **kwargs)

            if delay is not None:
                debounce_delay = delay
            elif critical:
                debounce_delay = DEBOUNCE_CONFIG['CRITICAL_DELAY']
            else:
                debounce_delay = DEBOUNCE_CONFIG['DEFAULT_DELAY']

            # Usuario autenticado, o la sesión del navegador para pedidos anónimos
            user_id = request.user.id if request.user.is_authenticated else request.session.session_key
            if not user_id:
                user_id = f"anonymous_{request.META.get('REMOTE_ADDR', 'unknown')}"

            request_data = _datos_request(request) if include_data else None
            debounce_key = generate_debounce_key(user_id, view_func.__name__, request_data)

            last_request_time = cache.get(debounce_key)
            current_time = time.time()

            if last_request_time:
                time_since_last = current_time - last_request_time
                if time_since_last < debounce_delay:
                    remaining_time = debounce_delay - time_since_last
                    default_message = f"Operación muy rápida. Espera {remaining_time:.1f} segundos antes de intentar nuevamente."
                    logger.info('Request duplicado bloqueado en %s para %s', view_func.__name__, user_id)
                    return JsonResponse({
                        'error': error_message or default_message,
                        'debounce_remaining': round(remaining_time, 1),
                        'retry_after': round(remaining_time, 1)
                    }, status=429)  # Too Many Requests

            cache.set(debounce_key, current_time, timeout=DEBOUNCE_CONFIG['MAX_CACHE_TIME'])

            try:
                response = view_func(request, *args, **kwargs)
            except Exception:
                # Si hay error, limpiar el cache para permitir reintento inmediato
                cache.delete(debounce_key)
                raise
            if response.status_code >= 400:
                cache.delete(debounce_key)
            return response

        return wrapper
    return decorator

# === DECORADOR ESPECÍFICO PARA OPERACIONES CRÍTICAS ===
def critical_operation(delay=None, error_message=None):
    """Decorador para operaciones críticas como confirmar pedidos."""
    return debounce_request(
        delay=delay or DEBOUNCE_CONFIG['CRITICAL_DELAY'],
        critical=True,
        error_message=error_message or "Operación en proceso. No envíes múltiples requests."
    )

# === DECORADOR PARA FORMULARIOS ===
def form_debounce(delay=None):
    """Decorador específico para envío de formularios."""
    return debounce_request(
        delay=delay or DEBOUNCE_CONFIG['FORM_DELAY'],
        include_data=True,
        error_message="Formulario enviado recientemente. Espera un momento antes de enviar nuevamente."
    )
