# emprende/crud.py
"""Table-scoped database helpers shared by every content type.

Each helper takes the model class it works on, so the same filter/order/count
code serves empleos, eventos, profesionales, reseñas and artículos.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from . import moderation
from .models import Empleo, Evento, Profesional

# columns matched by the free-text `busqueda` filter
SEARCH_FIELDS = {
    Empleo: ("titulo", "empresa", "descripcion"),
    Evento: ("titulo", "lugar", "organizador", "descripcion"),
    Profesional: ("nombre", "profesion", "descripcion"),
}


def get_by_id(db: Session, model, item_id: int):
    return db.get(model, item_id)

def get_by_slug(db: Session, model, slug: str, visible_only: bool = True):
    q = db.query(model).filter(model.slug == slug)
    if visible_only:
        q = q.filter(moderation.public_filter(model))
    return q.first()

def slug_exists(db: Session, model, slug: str, exclude_id: Optional[int] = None) -> bool:
    q = db.query(model.id).filter(model.slug == slug)
    if exclude_id is not None:
        q = q.filter(model.id != exclude_id)
    return q.first() is not None

def list_rows(
    db: Session,
    model,
    filters: Optional[Dict[str, Any]] = None,
    visible_only: bool = True,
    order_by: Optional[List] = None,
    limit: Optional[int] = None,
    conditions: Optional[List] = None,
    busqueda: Optional[str] = None,
):
    q = db.query(model)
    if visible_only:
        q = q.filter(moderation.public_filter(model))
    conds = list(conditions or [])
    if filters:
        for column, value in filters.items():
            if value is not None:
                conds.append(getattr(model, column) == value)
    if busqueda and busqueda.strip():
        pattern = f"%{busqueda.strip()}%"
        conds.append(or_(*(getattr(model, c).ilike(pattern) for c in SEARCH_FIELDS[model])))
    if conds:
        q = q.filter(and_(*conds))
    q = q.order_by(*(order_by if order_by is not None else moderation.public_order(model)))
    if limit:
        q = q.limit(limit)
    return q.all()

def insert_row(db: Session, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj

def update_row(db: Session, obj, updates: Dict[str, Any]):
    for k, v in updates.items():
        setattr(obj, k, v)
    db.commit()
    db.refresh(obj)
    return obj

def delete_row(db: Session, model, item_id: int) -> bool:
    obj = db.get(model, item_id)
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True

def count_by(db: Session, model, column: str, visible_only: bool = True) -> Dict[str, int]:
    """Row counts grouped by `column`, skipping NULL groups."""
    col = getattr(model, column)
    q = db.query(col, func.count(model.id))
    if visible_only:
        q = q.filter(moderation.public_filter(model))
    return {key: int(n) for key, n in q.group_by(col).all() if key is not None}

def count_rows(db: Session, model, *conditions) -> int:
    return int(db.query(func.count(model.id)).filter(*conditions).scalar() or 0)

def visibility_counts(db: Session, model) -> Dict[str, int]:
    field = getattr(model, moderation.visibility_field(model))
    counts = {bool(k): int(n) for k, n in db.query(field, func.count(model.id)).group_by(field).all()}
    return {"activos": counts.get(True, 0), "pendientes": counts.get(False, 0)}
