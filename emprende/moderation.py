# emprende/moderation.py
"""Visibility and promotion flags shared by every content type.

Listings move between PENDIENTE (`activo=False`) and ACTIVO (`activo=True`).
Articles use `publicado` and reviews use `aprobada` for the same gate.
`destacado` and `verificado` are independent of the state and can be
flipped at any time by an admin.
"""
import enum
from typing import Any, Dict

from .models import Articulo, Empleo, Evento, Profesional, Resena
from .utils import logger


class Estado(enum.Enum):
    PENDIENTE = "pendiente"
    ACTIVO = "activo"


VISIBILITY_FIELD = {
    Empleo: "activo",
    Evento: "activo",
    Profesional: "activo",
    Articulo: "publicado",
    Resena: "aprobada",
}

FLAG_FIELDS = {
    Empleo: ("destacado",),
    Evento: ("destacado",),
    Profesional: ("destacado", "verificado"),
    Articulo: ("destacado",),
    Resena: (),
}


def visibility_field(model) -> str:
    return VISIBILITY_FIELD[model]


def state_of(item) -> Estado:
    visible = getattr(item, visibility_field(type(item)))
    return Estado.ACTIVO if visible else Estado.PENDIENTE


def _flip(item, field: str, value: bool) -> None:
    old = bool(getattr(item, field))
    setattr(item, field, bool(value))
    if old != bool(value):
        logger.info("%s #%s: %s %s -> %s", item.__tablename__, item.id, field, old, bool(value))


def _move(item, target: Estado) -> Estado:
    """Put `item` in `target` state and return the state it left."""
    previous = state_of(item)
    setattr(item, visibility_field(type(item)), target is Estado.ACTIVO)
    if previous is not target:
        logger.info("%s #%s: %s -> %s", item.__tablename__, item.id, previous.value, target.value)
    return previous


def approve(item) -> Estado:
    return _move(item, Estado.ACTIVO)


def deactivate(item) -> Estado:
    return _move(item, Estado.PENDIENTE)


def set_destacado(item, value: bool) -> None:
    if "destacado" not in FLAG_FIELDS[type(item)]:
        raise ValueError("Este contenido no admite destacado")
    _flip(item, "destacado", value)


def set_verificado(item, value: bool) -> None:
    if "verificado" not in FLAG_FIELDS[type(item)]:
        raise ValueError("Solo el directorio admite verificado")
    _flip(item, "verificado", value)


def apply_flags(item, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Route moderation flags in `changes` through the transitions above.

    Returns the remaining (content) changes untouched.
    """
    rest = dict(changes)
    field = visibility_field(type(item))
    if field in rest:
        value = rest.pop(field)
        if value is None:
            raise ValueError(f"{field} no puede ser nulo")
        if value:
            approve(item)
        else:
            deactivate(item)
    for flag, setter in (("destacado", set_destacado), ("verificado", set_verificado)):
        if flag in rest:
            value = rest.pop(flag)
            if value is None:
                raise ValueError(f"{flag} no puede ser nulo")
            setter(item, value)
    return rest


def public_filter(model):
    return getattr(model, visibility_field(model)).is_(True)


def public_order(model) -> list:
    """ORDER BY for public listings: promoted first, then a per-type key."""
    if model is Resena:
        return [Resena.created_at.desc(), Resena.id.desc()]
    order = [model.destacado.desc()]
    if model is Evento:
        order += [Evento.fecha.asc()]
    elif model is Profesional:
        order += [Profesional.puntuacion_promedio.desc().nulls_last(), Profesional.created_at.desc()]
    else:
        order += [model.created_at.desc()]
    return order + [model.id.desc()]
