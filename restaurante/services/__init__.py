# restaurante/services/__init__.py
"""
Servicios de negocio del sistema de restaurante.
Contiene la lógica de negocio organizada por roles y responsabilidades.
"""

from .pedido_service import PedidoService
from .cocina_service import CocinaService
from .usuario_service import UsuarioService
from .admin_service import AdminService
from .auth_service import AuthService, registrar_evento_seguridad
from .catalogo_service import CatalogoService

# Instancias de los servicios; no guardan estado entre requests
pedido_service = PedidoService()
cocina_service = CocinaService(pedido_service)
usuario_service = UsuarioService(pedido_service)
admin_service = AdminService()
auth_service = AuthService()
catalogo_service = CatalogoService()

__all__ = [
    'PedidoService',
    'CocinaService',
    'UsuarioService',
    'AdminService',
    'AuthService',
    'CatalogoService',
    'registrar_evento_seguridad',
    'pedido_service',
    'cocina_service',
    'usuario_service',
    'admin_service',
    'auth_service',
    'catalogo_service',
]
