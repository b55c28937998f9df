# restaurante/estados.py
"""
Ciclo de vida de un pedido.
Los estados avanzan estrictamente hacia adelante, un paso a la vez, por acción explícita del personal.
"""

from django.db import models


class EstadoPedido(models.TextChoices):
    PENDIENTE = 'pendiente', 'Pendiente'
    RECIBIDO = 'recibido', 'Recibido'
    EN_ESPERA = 'en_espera', 'En espera'
    COCINANDO = 'cocinando', 'Cocinando'
    PENDIENTE_ENTREGA = 'pendiente_entrega', 'Pendiente de entrega'
    ENTREGADO = 'entregado', 'Entregado'


# Orden de la secuencia; el último es terminal
SECUENCIA_ESTADOS = (
    EstadoPedido.PENDIENTE,
    EstadoPedido.RECIBIDO,
    EstadoPedido.EN_ESPERA,
    EstadoPedido.COCINANDO,
    EstadoPedido.PENDIENTE_ENTREGA,
    EstadoPedido.ENTREGADO,
)

ESTADO_INICIAL = EstadoPedido.PENDIENTE
ESTADO_TERMINAL = EstadoPedido.ENTREGADO

# Subconjuntos observados por las vistas de cocina
ESTADOS_COCINA = (
    EstadoPedido.PENDIENTE,
    EstadoPedido.RECIBIDO,
    EstadoPedido.EN_ESPERA,
    EstadoPedido.COCINANDO,
)
ESTADOS_ENTREGA = (EstadoPedido.PENDIENTE_ENTREGA,)

ETIQUETAS_ACCION = {
    EstadoPedido.PENDIENTE: 'Marcar como Recibido',
    EstadoPedido.RECIBIDO: 'Marcar En Espera',
    EstadoPedido.EN_ESPERA: 'Iniciar Cocción',
    EstadoPedido.COCINANDO: 'Marcar Listo',
    EstadoPedido.PENDIENTE_ENTREGA: 'Marcar Entregado',
    EstadoPedido.ENTREGADO: None,
}


def como_estado(valor):
    """Convierte un string en EstadoPedido. Lanza ValueError si no es un estado conocido."""
    try:
        return EstadoPedido(valor)
    except ValueError:
        raise ValueError(f'Estado de pedido desconocido: {valor!r}') from None


def siguiente_estado(estado):
    """
    Devuelve el estado que sigue a `estado`, o None si es el estado terminal.

    No existe transición hacia atrás ni salto de estados.
    """
    estado = como_estado(estado)
    posicion = SECUENCIA_ESTADOS.index(estado)
    if posicion == len(SECUENCIA_ESTADOS) - 1:
        return None
    return SECUENCIA_ESTADOS[posicion + 1]


def estado_anterior(estado):
    """Estado desde el que se llega a `estado`, o None para el estado inicial."""
    estado = como_estado(estado)
    posicion = SECUENCIA_ESTADOS.index(estado)
    if posicion == 0:
        return None
    return SECUENCIA_ESTADOS[posicion - 1]


def es_terminal(estado):
    return como_estado(estado) == ESTADO_TERMINAL


def etiqueta_accion(estado):
    return ETIQUETAS_ACCION[como_estado(estado)]
