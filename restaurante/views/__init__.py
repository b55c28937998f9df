# restaurante/views/__init__.py
"""
Importaciones centralizadas para que urls.py use `views.<nombre>`.
"""

# Autenticación y dashboards
from .auth_views import (
    UserLoginView,
    UserLogoutView,
    registro_view,
    dashboard_redirect,
    dashboard_admin,
    dashboard_cajero,
    dashboard_cocinero,
    dashboard_mesero,
    dashboard_usuario,
    perfil_view,
    cambiar_password_view,
)

# Menú, carrito y confirmación
from .tienda_views import (
    menu_view,
    api_productos_menu,
    carrito_view,
    api_carrito,
    api_carrito_agregar,
    api_carrito_actualizar,
    api_carrito_eliminar,
    api_carrito_vaciar,
    api_checkout,
    checkout_form_view,
)

# CRUD de administración
from .crud_views import (
    api_productos_list_create,
    api_producto_detail,
    api_producto_activo,
    api_producto_destacado,
    api_producto_calificacion,
    api_usuarios,
    api_usuario_rol,
    api_configuracion_factura,
)

# APIs de pedidos y tiempo real
from .api_views import (
    # Cocina
    api_get_pedidos_cocina,
    api_get_pendientes_entrega,
    api_avanzar_pedido,
    api_marcar_pedido_entregado,

    # Cliente
    api_mis_pedidos,
    api_mi_resumen,
    descargar_factura,

    # Administración
    api_pedidos_admin,
    api_actualizar_notas_pedido,
    api_eliminar_pedido,

    # Long polling
    api_longpolling_cocina,
    api_longpolling_entregas,
    api_longpolling_mis_pedidos,
)

__all__ = [
    'UserLoginView',
    'UserLogoutView',
    'registro_view',
    'dashboard_redirect',
    'dashboard_admin',
    'dashboard_cajero',
    'dashboard_cocinero',
    'dashboard_mesero',
    'dashboard_usuario',
    'perfil_view',
    'cambiar_password_view',

    'menu_view',
    'api_productos_menu',
    'carrito_view',
    'api_carrito',
    'api_carrito_agregar',
    'api_carrito_actualizar',
    'api_carrito_eliminar',
    'api_carrito_vaciar',
    'api_checkout',
    'checkout_form_view',

    'api_productos_list_create',
    'api_producto_detail',
    'api_producto_activo',
    'api_producto_destacado',
    'api_producto_calificacion',
    'api_usuarios',
    'api_usuario_rol',
    'api_configuracion_factura',

    'api_get_pedidos_cocina',
    'api_get_pendientes_entrega',
    'api_avanzar_pedido',
    'api_marcar_pedido_entregado',
    'api_mis_pedidos',
    'api_mi_resumen',
    'descargar_factura',
    'api_pedidos_admin',
    'api_actualizar_notas_pedido',
    'api_eliminar_pedido',
    'api_longpolling_cocina',
    'api_longpolling_entregas',
    'api_longpolling_mis_pedidos',
]
