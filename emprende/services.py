# emprende/services.py
"""Submission, moderation and aggregation flows behind the API routes.

Validation problems raise ValueError with the message shown to the user;
routes turn them into 400 responses. Unknown parents raise LookupError (404).
"""
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from . import crud, moderation, ratings
from .models import Articulo, Empleo, Evento, Profesional, Resena
from .renderer import render_markdown
from .schemas import ArticuloOut
from .slugs import CollisionStrategy, resolve_slug
from .utils import logger

TIPOS_EMPLEO = ("Tiempo completo", "Part-time", "Temporal", "Pasantía", "Freelance")
MODALIDADES = ("Presencial", "Remoto", "Híbrido")
CATEGORIAS_EVENTO = (
    "Capacitación", "Taller", "Curso", "Feria", "Cultural",
    "Deportivo", "Social", "Networking", "Charla", "Otro",
)
TIPOS_DIRECTORIO = ("servicio", "negocio")
ESTADOS_EVENTO = ("proximos", "pasados", "todos")
UBICACION_DEFAULT = "Famaillá"

SLUG_STRATEGY = {
    Empleo: CollisionStrategy.SUFFIX_ON_COLLISION,
    Evento: CollisionStrategy.SUFFIX_ON_COLLISION,
    Profesional: CollisionStrategy.ALWAYS_SUFFIX,
    Articulo: CollisionStrategy.NONE,
}
SLUG_SOURCE = {Empleo: "titulo", Evento: "titulo", Profesional: "nombre", Articulo: "titulo"}

# columns an admin edit may not blank out
REQUIRED_FIELDS = {
    Empleo: ("titulo", "empresa", "whatsapp", "tipo"),
    Evento: ("titulo", "categoria", "fecha", "lugar", "organizador", "cupo_actual"),
    Profesional: ("tipo", "categoria", "profesion", "nombre", "whatsapp"),
    Articulo: ("titulo",),
    Resena: ("nombre_cliente",),
}


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _require(value, message: str):
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(message)
    return value


def make_slug(db: Session, model, text: str, exclude_id: Optional[int] = None) -> str:
    return resolve_slug(
        text,
        SLUG_STRATEGY[model],
        exists=lambda s: crud.slug_exists(db, model, s, exclude_id=exclude_id),
    )


# --- Empleos ---

def _normalize_whatsapp(whatsapp: str) -> str:
    digits = re.sub(r"\D", "", whatsapp)
    if len(digits) < 10:
        raise ValueError("El número de WhatsApp no es válido")
    return digits


def _mensaje_whatsapp(titulo: str) -> str:
    return f'Hola, me interesa la oferta de "{titulo}" publicada en Famaillá Emprende.'


def _check_salarios(salario_min, salario_max) -> None:
    if salario_min is not None and salario_max is not None and salario_min > salario_max:
        raise ValueError("El salario mínimo no puede superar al máximo")


def submit_empleo(db: Session, payload: Dict[str, Any], admin: bool = False) -> Empleo:
    titulo = _require(_clean(payload.get("titulo")), "El título del puesto es obligatorio")
    empresa = _require(_clean(payload.get("empresa")), "El nombre de la empresa es obligatorio")
    whatsapp = _require(_clean(payload.get("whatsapp")), "El número de WhatsApp es obligatorio")
    whatsapp = _normalize_whatsapp(whatsapp)
    tipo = payload.get("tipo") or TIPOS_EMPLEO[0]
    if tipo not in TIPOS_EMPLEO:
        raise ValueError("Tipo de empleo inválido")
    modalidad = payload.get("modalidad")
    if modalidad and modalidad not in MODALIDADES:
        raise ValueError("Modalidad inválida")
    _check_salarios(payload.get("salario_min"), payload.get("salario_max"))

    slug_source = (admin and _clean(payload.get("slug"))) or titulo
    empleo = Empleo(
        titulo=titulo,
        slug=make_slug(db, Empleo, slug_source),
        descripcion=_clean(payload.get("descripcion")),
        tipo=tipo,
        categoria=_clean(payload.get("categoria")),
        modalidad=modalidad,
        empresa=empresa,
        ubicacion=_clean(payload.get("ubicacion")) or UBICACION_DEFAULT,
        whatsapp=whatsapp,
        mensaje_whatsapp=_mensaje_whatsapp(titulo),
        salario_min=payload.get("salario_min"),
        salario_max=payload.get("salario_max"),
        logo_url=_clean(payload.get("logo_url")),
        # public submissions always wait for moderation
        activo=bool(payload.get("activo", True)) if admin else False,
        destacado=bool(payload.get("destacado", False)) if admin else False,
    )
    crud.insert_row(db, empleo)
    logger.info("Empleo %s created (%s, activo=%s)", empleo.slug, "admin" if admin else "public", empleo.activo)
    return empleo


def empleos_resumen(db: Session) -> Dict[str, Any]:
    return {
        "total": crud.count_rows(db, Empleo, moderation.public_filter(Empleo)),
        "categorias": crud.count_by(db, Empleo, "categoria"),
        "tipos": crud.count_by(db, Empleo, "tipo"),
    }


# --- Eventos ---

def submit_evento(db: Session, payload: Dict[str, Any], admin: bool = False) -> Evento:
    titulo = _require(_clean(payload.get("titulo")), "El título es obligatorio")
    categoria = _require(payload.get("categoria"), "La categoría es obligatoria")
    if categoria not in CATEGORIAS_EVENTO:
        raise ValueError("Categoría de evento inválida")
    fecha = _require(payload.get("fecha"), "La fecha es obligatoria")
    lugar = _require(_clean(payload.get("lugar")), "El lugar es obligatorio")
    organizador = _require(_clean(payload.get("organizador")), "El organizador es obligatorio")
    whatsapp = _clean(payload.get("whatsapp"))
    email = _clean(payload.get("email"))
    if not whatsapp and not email:
        raise ValueError("Ingresá al menos un medio de contacto")

    slug_source = (admin and _clean(payload.get("slug"))) or titulo
    evento = Evento(
        titulo=titulo,
        slug=make_slug(db, Evento, slug_source),
        descripcion=_clean(payload.get("descripcion")),
        categoria=categoria,
        fecha=fecha,
        hora_inicio=payload.get("hora_inicio"),
        hora_fin=payload.get("hora_fin"),
        lugar=lugar,
        direccion=_clean(payload.get("direccion")),
        organizador=organizador,
        whatsapp=whatsapp,
        email=email,
        link_inscripcion=_clean(payload.get("link_inscripcion")),
        cupo_maximo=payload.get("cupo_maximo") or None,
        cupo_actual=0,
        precio=payload.get("precio"),
        imagen_url=_clean(payload.get("imagen_url")),
        activo=bool(payload.get("activo", True)) if admin else False,
        destacado=bool(payload.get("destacado", False)) if admin else False,
    )
    crud.insert_row(db, evento)
    logger.info("Evento %s created (%s, activo=%s)", evento.slug, "admin" if admin else "public", evento.activo)
    return evento


def evento_window(estado: Optional[str], today: Optional[date] = None):
    """Conditions and ORDER BY for the public events list.

    Upcoming events (the default) put featured ones first and run soonest
    first; past and all events run newest first.
    """
    estado = estado or "proximos"
    if estado not in ESTADOS_EVENTO:
        raise ValueError("Estado inválido. Usá proximos, pasados o todos.")
    today = today or date.today()
    if estado == "proximos":
        return [Evento.fecha >= today], moderation.public_order(Evento)
    newest_first = [Evento.fecha.desc(), Evento.id.desc()]
    if estado == "pasados":
        return [Evento.fecha < today], newest_first
    return [], newest_first


def eventos_resumen(db: Session, today: Optional[date] = None) -> Dict[str, Any]:
    today = today or date.today()
    visible = moderation.public_filter(Evento)
    return {
        "total": crud.count_rows(db, Evento, visible),
        "proximos": crud.count_rows(db, Evento, visible, Evento.fecha >= today),
        "pasados": crud.count_rows(db, Evento, visible, Evento.fecha < today),
        "categorias": crud.count_by(db, Evento, "categoria"),
    }


# --- Directorio ---

def submit_profesional(db: Session, payload: Dict[str, Any]) -> Profesional:
    tipo = payload.get("tipo") or "servicio"
    if tipo not in TIPOS_DIRECTORIO:
        raise ValueError("Tipo inválido")
    categoria = _require(_clean(payload.get("categoria")), "La categoría es obligatoria")
    profesion = _require(_clean(payload.get("profesion")), "La profesión/rubro es obligatoria")
    nombre = _require(_clean(payload.get("nombre")), "El nombre es obligatorio")
    whatsapp = _require(_clean(payload.get("whatsapp")), "El WhatsApp es obligatorio")

    profesional = Profesional(
        tipo=tipo,
        categoria=categoria,
        profesion=profesion,
        nombre=nombre,
        slug=make_slug(db, Profesional, nombre),
        descripcion=_clean(payload.get("descripcion")),
        experiencia=_clean(payload.get("experiencia")) if tipo == "servicio" else None,
        horarios=_clean(payload.get("horarios")) if tipo == "negocio" else None,
        sitio_web=_clean(payload.get("sitio_web")) if tipo == "negocio" else None,
        whatsapp=whatsapp,
        email=_clean(payload.get("email")),
        instagram=_clean(payload.get("instagram")),
        direccion=_clean(payload.get("direccion")),
        foto_url=_clean(payload.get("foto_url")),
        activo=False,
        destacado=False,
        verificado=False,
        puntuacion_promedio=None,
        total_resenas=0,
    )
    crud.insert_row(db, profesional)
    logger.info("Profesional %s registered, pending moderation", profesional.slug)
    return profesional


def directorio_resumen(db: Session) -> Dict[str, Any]:
    return {
        "total": crud.count_rows(db, Profesional, moderation.public_filter(Profesional)),
        "tipos": crud.count_by(db, Profesional, "tipo"),
        "categorias": crud.count_by(db, Profesional, "categoria"),
    }


# --- Reseñas ---

def submit_resena(db: Session, payload: Dict[str, Any]) -> Resena:
    profesional_id = payload.get("profesional_id")
    nombre_cliente = _clean(payload.get("nombre_cliente"))
    puntuacion = payload.get("puntuacion")
    if not profesional_id or not nombre_cliente or puntuacion is None:
        raise ValueError("Faltan campos requeridos")
    if puntuacion < 1 or puntuacion > 5:
        raise ValueError("La puntuación debe ser entre 1 y 5")
    if crud.get_by_id(db, Profesional, profesional_id) is None:
        raise LookupError("Profesional no encontrado")

    resena = Resena(
        profesional_id=profesional_id,
        nombre_cliente=nombre_cliente,
        puntuacion=puntuacion,
        comentario=_clean(payload.get("comentario")),
        aprobada=False,
    )
    crud.insert_row(db, resena)
    logger.info("Review #%s for profesional #%s awaiting approval", resena.id, profesional_id)
    return resena


# --- Artículos ---

def create_articulo(db: Session, payload: Dict[str, Any]) -> Articulo:
    titulo = _require(_clean(payload.get("titulo")), "El título es obligatorio")
    slug = payload.get("slug") or make_slug(db, Articulo, titulo)
    articulo = Articulo(
        titulo=titulo,
        slug=slug,
        extracto=payload.get("extracto"),
        contenido=payload.get("contenido"),
        categoria=payload.get("categoria"),
        autor=payload.get("autor"),
        imagen_url=payload.get("imagen_url"),
        imagen_alt=payload.get("imagen_alt"),
        publicado=bool(payload.get("publicado", False)),
        destacado=bool(payload.get("destacado", False)),
    )
    crud.insert_row(db, articulo)
    logger.info("Articulo %s created (publicado=%s)", articulo.slug, articulo.publicado)
    return articulo


def articulo_detalle(articulo: Articulo) -> Dict[str, Any]:
    data = ArticuloOut.model_validate(articulo).model_dump()
    data["contenido_html"] = render_markdown(articulo.contenido or "")
    return data


def articulo_destacado(db: Session) -> Optional[Articulo]:
    rows = crud.list_rows(
        db, Articulo,
        filters={"destacado": True},
        order_by=[Articulo.created_at.desc(), Articulo.id.desc()],
        limit=1,
    )
    return rows[0] if rows else None


# --- Admin edits ---

def _prepare_changes(db: Session, model, obj, changes: Dict[str, Any]) -> Dict[str, Any]:
    changes = dict(changes)
    for field in REQUIRED_FIELDS[model]:
        if field not in changes:
            continue
        value = changes[field]
        if isinstance(value, str):
            value = changes[field] = value.strip()
        if value is None or value == "":
            raise ValueError(f"El campo {field} es obligatorio")

    if "slug" in changes and not changes["slug"]:
        # cleared slug: derive a new one from the (possibly edited) title
        source = changes.get(SLUG_SOURCE[model]) or getattr(obj, SLUG_SOURCE[model])
        changes["slug"] = make_slug(db, model, source, exclude_id=obj.id)
        logger.info("%s #%s slug regenerated as %s", model.__tablename__, obj.id, changes["slug"])

    if model is Empleo:
        if "whatsapp" in changes:
            changes["whatsapp"] = _normalize_whatsapp(changes["whatsapp"])
        if "tipo" in changes and changes["tipo"] not in TIPOS_EMPLEO:
            raise ValueError("Tipo de empleo inválido")
        if changes.get("modalidad") and changes["modalidad"] not in MODALIDADES:
            raise ValueError("Modalidad inválida")
        _check_salarios(
            changes.get("salario_min", obj.salario_min),
            changes.get("salario_max", obj.salario_max),
        )
        if "titulo" in changes:
            changes["mensaje_whatsapp"] = _mensaje_whatsapp(changes["titulo"])
    elif model is Evento:
        if "categoria" in changes and changes["categoria"] not in CATEGORIAS_EVENTO:
            raise ValueError("Categoría de evento inválida")
    elif model is Profesional:
        if "tipo" in changes and changes["tipo"] not in TIPOS_DIRECTORIO:
            raise ValueError("Tipo inválido")
    elif model is Resena:
        if "comentario" in changes:
            changes["comentario"] = _clean(changes["comentario"])
    elif model is Articulo:
        changes["updated_at"] = datetime.now(timezone.utc)
    return changes


def update_item(db: Session, model, item_id: int, changes: Dict[str, Any]):
    """Apply an admin edit. Returns None when the row does not exist."""
    obj = crud.get_by_id(db, model, item_id)
    if obj is None:
        return None
    changes = _prepare_changes(db, model, obj, changes)
    rest = moderation.apply_flags(obj, changes)
    if model is Resena:
        for k, v in rest.items():
            setattr(obj, k, v)
        ratings.refresh_profesional(db, obj.profesional)
        rest = {}
    return crud.update_row(db, obj, rest)


def delete_item(db: Session, model, item_id: int) -> bool:
    if model is not Resena:
        deleted = crud.delete_row(db, model, item_id)
        if deleted:
            logger.info("%s #%s deleted", model.__tablename__, item_id)
        return deleted
    resena = crud.get_by_id(db, Resena, item_id)
    if resena is None:
        return False
    profesional = resena.profesional
    db.delete(resena)
    ratings.refresh_profesional(db, profesional)
    db.commit()
    logger.info("resenas #%s deleted", item_id)
    return True


def admin_stats(db: Session, today: Optional[date] = None) -> Dict[str, Any]:
    today = today or date.today()
    articulos = crud.visibility_counts(db, Articulo)
    return {
        "empleos": crud.visibility_counts(db, Empleo),
        "eventos": crud.visibility_counts(db, Evento),
        "eventos_proximos": crud.count_rows(
            db, Evento, moderation.public_filter(Evento), Evento.fecha >= today
        ),
        "profesionales": crud.visibility_counts(db, Profesional),
        "resenas": crud.visibility_counts(db, Resena),
        "articulos_publicados": articulos["activos"],
        "articulos_borradores": articulos["pendientes"],
    }


def site_stats(db: Session) -> Dict[str, int]:
    """Public counts for the home page."""
    return {
        "empleos": crud.count_rows(db, Empleo, moderation.public_filter(Empleo)),
        "eventos": crud.count_rows(db, Evento, moderation.public_filter(Evento)),
        "directorio": crud.count_rows(db, Profesional, moderation.public_filter(Profesional)),
        "articulos": crud.count_rows(db, Articulo, moderation.public_filter(Articulo)),
    }
