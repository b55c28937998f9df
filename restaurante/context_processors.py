# restaurante/context_processors.py

from .acceso import obtener_rol
from .carrito import Carrito


def carrito(request):
    """Expone el carrito y el rol actual a todas las plantillas."""
    if not hasattr(request, 'session'):
        return {}
    usuario = getattr(request, 'user', None)
    rol = obtener_rol(usuario) if usuario is not None and usuario.is_authenticated else None
    return {
        'carrito': Carrito(request.session),
        'rol_actual': rol.value if rol else None,
    }
