# emprende/ratings.py
"""Directory ratings computed from approved reviews only."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .models import Profesional, Resena

SIN_RESENAS = "Sin reseñas todavía"


def _round(avg) -> Optional[float]:
    if avg is None:
        return None
    return float(Decimal(str(avg)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def etiqueta(promedio: Optional[float], total: int) -> str:
    if not total:
        return SIN_RESENAS
    palabra = "reseña" if total == 1 else "reseñas"
    return f"{promedio:.1f} ({total} {palabra})"


def rating_summary(db: Session, profesional_id: int) -> dict:
    avg, total = (
        db.query(func.avg(Resena.puntuacion), func.count(Resena.id))
        .filter(Resena.profesional_id == profesional_id, Resena.aprobada.is_(True))
        .one()
    )
    total = int(total or 0)
    promedio = _round(avg) if total else None
    return {
        "profesional_id": profesional_id,
        "puntuacion_promedio": promedio,
        "total_resenas": total,
        "etiqueta": etiqueta(promedio, total),
    }


def refresh_profesional(db: Session, profesional: Profesional) -> None:
    """Copy the current summary onto the stored columns. Caller commits."""
    db.flush()
    summary = rating_summary(db, profesional.id)
    profesional.puntuacion_promedio = summary["puntuacion_promedio"]
    profesional.total_resenas = summary["total_resenas"]
