# restaurante/acceso.py
"""
Modelo de autorización por rol.
Cada superficie protegida declara los roles que la pueden ver; el rol del principal se
lee del perfil en cada request, así un cambio de rol se ve en la siguiente petición.
"""

import enum
import logging
from dataclasses import dataclass

from django.db import DatabaseError

from .models import NombreRol, Usuario

logger = logging.getLogger(__name__)


class EstadoSesion(enum.Enum):
    SIN_AUTENTICAR = 'sin_autenticar'
    AUTENTICANDO = 'autenticando'
    AUTENTICADO = 'autenticado'


class Acceso(enum.Enum):
    CONCEDIDO = 'concedido'
    DENEGADO = 'denegado'
    CARGANDO = 'cargando'


# Rutas (nombres de URL) de aterrizaje por rol
RUTAS_POR_ROL = {
    NombreRol.ADMIN: 'dashboard_admin',
    NombreRol.CAJERO: 'dashboard_cajero',
    NombreRol.COCINERO: 'dashboard_cocinero',
    NombreRol.MESERO: 'dashboard_mesero',
    NombreRol.USUARIO: 'dashboard_usuario',
}
RUTA_PUBLICA = 'menu'

# Roles que pueden avanzar el estado de un pedido
ROLES_COCINA = (NombreRol.COCINERO, NombreRol.ADMIN)


@dataclass(frozen=True)
class SesionUsuario:
    estado: EstadoSesion
    usuario_id: object = None
    rol: NombreRol = None

    @property
    def autenticada(self):
        return self.estado == EstadoSesion.AUTENTICADO


def como_rol(valor):
    """Convierte un nombre de rol en NombreRol, o None si no es un rol conocido."""
    if valor is None:
        return None
    try:
        return NombreRol(valor)
    except ValueError:
        return None


def resolver_acceso(roles_requeridos, rol_actual):
    """
    Concede si el rol actual está entre los requeridos, o si no se exige ningún rol
    (cualquier principal autenticado). Un rol desconocido (None) nunca obtiene acceso
    a una superficie con roles.
    """
    if not roles_requeridos:
        return Acceso.CONCEDIDO
    if rol_actual is not None and rol_actual in roles_requeridos:
        return Acceso.CONCEDIDO
    return Acceso.DENEGADO


def evaluar_sesion(sesion, roles_requeridos):
    """Mientras la identidad no se conoce el resultado es CARGANDO, nunca concedido ni denegado."""
    if sesion.estado == EstadoSesion.AUTENTICANDO:
        return Acceso.CARGANDO
    if sesion.estado == EstadoSesion.SIN_AUTENTICAR:
        return Acceso.DENEGADO
    return resolver_acceso(roles_requeridos, sesion.rol)


def ruta_inicio(rol):
    """Nombre de la URL de aterrizaje del rol; los roles desconocidos van al menú público."""
    return RUTAS_POR_ROL.get(como_rol(rol), RUTA_PUBLICA)


def obtener_rol(usuario):
    """Lee el rol actual del perfil. Un fallo al leer el perfil equivale a rol desconocido."""
    try:
        nombre = (
            Usuario.objects.filter(pk=usuario.pk)
            .values_list('rol__nombre', flat=True).first()
        )
    except DatabaseError:
        logger.exception('No se pudo leer el perfil del usuario %s', usuario.pk)
        return None
    return como_rol(nombre)


def sesion_desde_request(request):
    usuario = getattr(request, 'user', None)
    if usuario is None or not usuario.is_authenticated:
        return SesionUsuario(EstadoSesion.SIN_AUTENTICAR)
    return SesionUsuario(EstadoSesion.AUTENTICADO, usuario.pk, obtener_rol(usuario))
