# restaurante/carrito.py
"""
Carrito de compras del cliente.

Vive en la sesión del navegador (nunca se comparte entre principales) y se persiste
en cada mutación. Se construye explícitamente por request: Carrito(request.session).
"""

import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings

logger = logging.getLogger(__name__)


class Carrito:
    """Colección de productos elegidos antes de confirmar un pedido."""

    def __init__(self, session, clave=None):
        self.session = session
        self.clave = clave or settings.CARRITO_SESSION_KEY
        self._items = self._cargar()

    # === PERSISTENCIA ===

    def _cargar(self):
        """Rehidrata el carrito desde la sesión; los datos corruptos se descartan."""
        guardado = self.session.get(self.clave)
        if not guardado:
            return []
        try:
            items = []
            for item in guardado:
                cantidad = int(item['quantity'])
                if cantidad <= 0:
                    continue
                items.append({
                    'id': str(int(item['id'])),
                    'name': item['name'],
                    'price': str(Decimal(str(item['price']))),
                    'quantity': cantidad,
                    'description': item.get('description') or '',
                    'image': item.get('image') or '',
                })
            return items
        except (KeyError, TypeError, ValueError, InvalidOperation):
            logger.warning('Carrito guardado en sesión corrupto, se descarta')
            self.session.pop(self.clave, None)
            return []

    def _guardar(self):
        self.session[self.clave] = [dict(item) for item in self._items]
        self.session.modified = True

    def _buscar(self, producto_id):
        producto_id = str(producto_id)
        for item in self._items:
            if item['id'] == producto_id:
                return item
        return None

    # === OPERACIONES ===

    def agregar(self, producto):
        """Suma una unidad del producto; si no estaba, guarda una copia de sus datos visibles."""
        item = self._buscar(producto.id)
        if item:
            item['quantity'] += 1
        else:
            self._items.append({
                'id': str(producto.id),
                'name': producto.nombre,
                'price': str(producto.precio),
                'quantity': 1,
                'description': producto.descripcion or '',
                'image': producto.imagen_url or '',
            })
        self._guardar()

    def eliminar(self, producto_id):
        producto_id = str(producto_id)
        restantes = [item for item in self._items if item['id'] != producto_id]
        if len(restantes) != len(self._items):
            self._items = restantes
            self._guardar()

    def actualizar_cantidad(self, producto_id, cantidad):
        """Fija la cantidad. Cero, negativos o valores no enteros equivalen a eliminar."""
        try:
            valor = Decimal(str(cantidad))
        except (InvalidOperation, ValueError, TypeError):
            valor = None
        if valor is None or not valor.is_finite() or valor <= 0 or valor != valor.to_integral_value():
            self.eliminar(producto_id)
            return
        item = self._buscar(producto_id)
        if item:
            item['quantity'] = int(valor)
            self._guardar()

    def vaciar(self):
        self._items = []
        self.session.pop(self.clave, None)
        self.session.modified = True

    # === DERIVADOS ===

    @property
    def items(self):
        return [dict(item) for item in self._items]

    @property
    def total(self):
        return sum((Decimal(item['price']) * item['quantity'] for item in self._items), Decimal('0'))

    @property
    def cantidad_items(self):
        return sum(item['quantity'] for item in self._items)

    def esta_vacio(self):
        return not self._items

    def snapshot(self):
        """Copia inmutable de las líneas para enviar como pedido."""
        return tuple(
            {
                'producto_id': int(item['id']),
                'cantidad': item['quantity'],
                'precio_unitario': Decimal(item['price']),
            }
            for item in self._items
        )

    def a_dict(self):
        return {
            'items': [
                dict(item, subtotal=str(Decimal(item['price']) * item['quantity']))
                for item in self._items
            ],
            'total': str(self.total),
            'cantidad_items': self.cantidad_items,
        }

    def __len__(self):
        return len(self._items)
