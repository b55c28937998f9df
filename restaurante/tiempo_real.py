# restaurante/tiempo_real.py
"""
Notificación de cambios en tiempo real.

Cada tabla observada tiene un contador de versión en cache que se incrementa con cada
escritura (ver signals.py). Los observadores no reciben deltas: cuando la versión cambia,
vuelven a consultar la colección completa que les corresponde.
"""

import logging
import time
from dataclasses import dataclass

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

logger = logging.getLogger(__name__)

TABLA_PEDIDOS = 'pedidos'
TABLA_PEDIDO_ITEMS = 'pedido_items'
TABLA_PRODUCTOS = 'productos'
TABLAS = (TABLA_PEDIDOS, TABLA_PEDIDO_ITEMS, TABLA_PRODUCTOS)

CACHE_PREFIX = 'tiempo_real_'
# Los contadores no deben expirar mientras haya observadores
CACHE_TIMEOUT = None


@dataclass(frozen=True)
class CambioTabla:
    tabla: str
    version: int
    timestamp: str


def clave_version(tabla, **ambitos):
    if tabla not in TABLAS:
        raise ValueError(f'Tabla no observable: {tabla}')
    clave = f'{CACHE_PREFIX}{tabla}'
    for nombre in sorted(ambitos):
        clave += f':{nombre}={ambitos[nombre]}'
    return clave


def version_actual(tabla, **ambitos):
    return cache.get(clave_version(tabla, **ambitos), 0)


def _incrementar(clave):
    # add() es atómico: solo inicializa si la clave no existe
    cache.add(clave, 0, timeout=CACHE_TIMEOUT)
    try:
        return cache.incr(clave)
    except ValueError:
        # La clave expiró o fue desalojada entre add() e incr()
        cache.set(clave, 1, timeout=CACHE_TIMEOUT)
        return 1


def notificar_cambio(tabla, **ambitos):
    """
    Marca un cambio en `tabla`. Se incrementa la versión global de la tabla y la de cada
    ámbito recibido (p. ej. usuario=7), de modo que los observadores filtrados también despierten.
    """
    version = _incrementar(clave_version(tabla))
    for nombre, valor in ambitos.items():
        if valor is not None:
            _incrementar(clave_version(tabla, **{nombre: valor}))
    logger.debug('Cambio notificado en %s (versión %s) %s', tabla, version, ambitos)
    return version


def esperar_cambio(tabla, version_anterior=None, timeout=None, intervalo=None, **ambitos):
    """
    Espera hasta que la versión de la tabla difiera de `version_anterior` o se agote el timeout.

    Sin versión anterior (primera conexión o reconexión) responde de inmediato con la
    versión vigente, para que el observador haga una recarga completa.

    Returns:
        tuple: (hubo_cambio: bool, version: int)
    """
    timeout = settings.LONGPOLL_TIMEOUT if timeout is None else timeout
    intervalo = settings.LONGPOLL_INTERVALO if intervalo is None else intervalo

    version = version_actual(tabla, **ambitos)
    if version_anterior is None or version != version_anterior:
        return True, version

    inicio = time.monotonic()
    while time.monotonic() - inicio < timeout:
        time.sleep(intervalo)
        version = version_actual(tabla, **ambitos)
        if version != version_anterior:
            return True, version

    return False, version_anterior


class Suscripcion:
    """
    Suscripción a los cambios de una tabla, opcionalmente filtrada por ámbito.

    Iterar sobre la suscripción produce una secuencia perezosa e infinita de CambioTabla.
    El consumidor solo debe volver a consultar su colección en cada evento.
    La primera iteración (y la siguiente a reiniciar()) emite un evento inmediato.
    """

    def __init__(self, tabla, timeout=None, intervalo=None, **ambitos):
        clave_version(tabla, **ambitos)
        self.tabla = tabla
        self.ambitos = ambitos
        self.timeout = timeout
        self.intervalo = intervalo
        self.activa = True
        self._version = None

    def __iter__(self):
        return self

    def __next__(self):
        while self.activa:
            hubo_cambio, version = esperar_cambio(
                self.tabla, self._version, timeout=self.timeout,
                intervalo=self.intervalo, **self.ambitos
            )
            if hubo_cambio and self.activa:
                self._version = version
                return CambioTabla(self.tabla, version, timezone.now().isoformat())
        raise StopIteration

    def siguiente(self):
        """Devuelve el próximo cambio o None si el timeout se agotó sin cambios."""
        if not self.activa:
            return None
        hubo_cambio, version = esperar_cambio(
            self.tabla, self._version, timeout=self.timeout,
            intervalo=self.intervalo, **self.ambitos
        )
        if not hubo_cambio:
            return None
        self._version = version
        return CambioTabla(self.tabla, version, timezone.now().isoformat())

    def reiniciar(self):
        """Olvida la versión vista; el próximo paso fuerza una recarga completa."""
        self._version = None
        self.activa = True

    def cancelar(self):
        self.activa = False
