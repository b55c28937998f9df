# restaurante/services/catalogo_service.py
"""
Consultas del catálogo de productos.
"""

from ..models import CategoriaProducto, Producto

ORDENES_PERMITIDOS = {
    'nombre': 'nombre',
    'precio': 'precio',
    '-precio': '-precio',
    'calificacion': '-calificacion',
    'recientes': '-creado_en',
}


class CatalogoService:
    """Servicio de lectura del menú."""

    def listar_productos(self, solo_activos=True, solo_destacados=False, categoria=None, orden='nombre'):
        productos = Producto.objects.all()
        if solo_activos:
            productos = productos.filter(is_active=True)
        if solo_destacados:
            productos = productos.filter(is_featured=True)
        if categoria:
            if categoria not in CategoriaProducto.values:
                return []
            productos = productos.filter(categoria=categoria)
        return list(productos.order_by(ORDENES_PERMITIDOS.get(orden, 'nombre'), 'id'))
