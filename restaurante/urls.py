# restaurante/urls.py

from django.urls import path
from . import views

urlpatterns = [
    # === PÚBLICO ===
    path('', views.menu_view, name='menu'),
    path('carrito/', views.carrito_view, name='carrito'),
    path('carrito/confirmar/', views.checkout_form_view, name='checkout_form'),

    # === AUTENTICACIÓN ===
    path('login/', views.UserLoginView.as_view(), name='login'),
    path('logout/', views.UserLogoutView.as_view(), name='logout'),
    path('registro/', views.registro_view, name='registro'),
    path('perfil/', views.perfil_view, name='perfil'),
    path('perfil/password/', views.cambiar_password_view, name='cambiar_password'),

    # === DASHBOARDS POR ROL ===
    path('dashboard/', views.dashboard_redirect, name='dashboard'),
    path('admin/', views.dashboard_admin, name='dashboard_admin'),
    path('cajero/', views.dashboard_cajero, name='dashboard_cajero'),
    path('cocinero/', views.dashboard_cocinero, name='dashboard_cocinero'),
    path('mesero/', views.dashboard_mesero, name='dashboard_mesero'),
    path('usuario/', views.dashboard_usuario, name='dashboard_usuario'),

    # === API MENÚ Y CARRITO ===
    path('api/menu/', views.api_productos_menu, name='api_productos_menu'),
    path('api/carrito/', views.api_carrito, name='api_carrito'),
    path('api/carrito/agregar/', views.api_carrito_agregar, name='api_carrito_agregar'),
    path('api/carrito/actualizar/', views.api_carrito_actualizar, name='api_carrito_actualizar'),
    path('api/carrito/eliminar/', views.api_carrito_eliminar, name='api_carrito_eliminar'),
    path('api/carrito/vaciar/', views.api_carrito_vaciar, name='api_carrito_vaciar'),
    path('api/carrito/confirmar/', views.api_checkout, name='api_checkout'),

    # === API PRODUCTOS (CRUD BÁSICO) ===
    path('api/productos/', views.api_productos_list_create, name='api_productos_list_create'),
    path('api/productos/<int:pk>/', views.api_producto_detail, name='api_producto_detail'),
    path('api/productos/<int:pk>/activo/', views.api_producto_activo, name='api_producto_activo'),
    path('api/productos/<int:pk>/destacado/', views.api_producto_destacado, name='api_producto_destacado'),
    path('api/productos/<int:pk>/calificacion/', views.api_producto_calificacion, name='api_producto_calificacion'),

    # === API USUARIOS Y CONFIGURACIÓN ===
    path('api/usuarios/', views.api_usuarios, name='api_usuarios'),
    path('api/usuarios/<int:usuario_id>/rol/', views.api_usuario_rol, name='api_usuario_rol'),
    path('api/configuracion/factura/', views.api_configuracion_factura, name='api_configuracion_factura'),

    # === API COCINA ===
    path('api/cocina/pedidos/', views.api_get_pedidos_cocina, name='api_get_pedidos_cocina'),
    path('api/cocina/entregas/', views.api_get_pendientes_entrega, name='api_get_pendientes_entrega'),
    path('api/cocina/pedido/<int:pedido_id>/avanzar/', views.api_avanzar_pedido, name='api_avanzar_pedido'),
    path('api/cocina/pedido/<int:pedido_id>/entregar/', views.api_marcar_pedido_entregado, name='api_marcar_pedido_entregado'),

    # === API CLIENTE ===
    path('api/mis-pedidos/', views.api_mis_pedidos, name='api_mis_pedidos'),
    path('api/mis-pedidos/resumen/', views.api_mi_resumen, name='api_mi_resumen'),
    path('factura/pedido/<int:pedido_id>/', views.descargar_factura, name='descargar_factura'),

    # === API ADMINISTRACIÓN DE PEDIDOS ===
    path('api/admin/pedidos/', views.api_pedidos_admin, name='api_pedidos_admin'),
    path('api/admin/pedidos/<int:pedido_id>/notas/', views.api_actualizar_notas_pedido, name='api_actualizar_notas_pedido'),
    path('api/admin/pedidos/<int:pedido_id>/eliminar/', views.api_eliminar_pedido, name='api_eliminar_pedido'),

    # === LONG POLLING (TIEMPO REAL) ===
    path('api/longpolling/cocina/', views.api_longpolling_cocina, name='api_longpolling_cocina'),
    path('api/longpolling/entregas/', views.api_longpolling_entregas, name='api_longpolling_entregas'),
    path('api/longpolling/mis-pedidos/', views.api_longpolling_mis_pedidos, name='api_longpolling_mis_pedidos'),
]
