# emprende/api/routes.py
"""Public endpoints: listings, submissions, reviews, blog and image upload."""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from .. import crud, ratings, schemas, services
from ..db import get_db
from ..models import Articulo, Empleo, Evento, Profesional, Resena
from ..storage import StorageError, build_file_name, get_storage, validate_image

router = APIRouter()

MAX_LIMIT = 100


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/api/stats", response_model=schemas.SiteStats)
def site_stats(db: Session = Depends(get_db)):
    return services.site_stats(db)


def _one_or_404(db: Session, model, slug: str, schema, message: str):
    obj = crud.get_by_slug(db, model, slug)
    if not obj:
        raise HTTPException(status_code=404, detail=message)
    return schema.model_validate(obj)


# --- Empleos ---

@router.get("/api/empleos")
def empleos(
    slug: Optional[str] = Query(None),
    categoria: Optional[str] = Query(None),
    tipo: Optional[str] = Query(None),
    destacado: Optional[bool] = Query(None),
    q: Optional[str] = Query(None),
    busqueda: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=MAX_LIMIT),
    db: Session = Depends(get_db),
):
    if slug:
        return _one_or_404(db, Empleo, slug, schemas.EmpleoOut, "Empleo no encontrado")
    rows = crud.list_rows(
        db, Empleo,
        filters={"categoria": categoria, "tipo": tipo, "destacado": destacado},
        busqueda=q or busqueda,
        limit=limit,
    )
    return [schemas.EmpleoOut.model_validate(r) for r in rows]


@router.get("/api/empleos/resumen", response_model=schemas.EmpleoResumen)
def empleos_resumen(db: Session = Depends(get_db)):
    return services.empleos_resumen(db)


@router.post("/api/empleos", status_code=201, response_model=schemas.EmpleoCreated)
def publicar_empleo(payload: schemas.EmpleoCreate, db: Session = Depends(get_db)):
    try:
        empleo = services.submit_empleo(db, payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "success": True,
        "message": "Empleo enviado para revisión",
        "empleo": schemas.EmpleoOut.model_validate(empleo),
    }


# --- Eventos ---

@router.get("/api/eventos")
def eventos(
    slug: Optional[str] = Query(None),
    categoria: Optional[str] = Query(None),
    estado: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    busqueda: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=MAX_LIMIT),
    db: Session = Depends(get_db),
):
    if slug:
        return _one_or_404(db, Evento, slug, schemas.EventoOut, "Evento no encontrado")
    try:
        conditions, order_by = services.evento_window(estado)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    rows = crud.list_rows(
        db, Evento,
        filters={"categoria": categoria},
        conditions=conditions,
        order_by=order_by,
        busqueda=q or busqueda,
        limit=limit,
    )
    return [schemas.EventoOut.model_validate(r) for r in rows]


@router.get("/api/eventos/resumen", response_model=schemas.EventoResumen)
def eventos_resumen(db: Session = Depends(get_db)):
    return services.eventos_resumen(db)


@router.post("/api/eventos", status_code=201, response_model=schemas.EventoOut)
def publicar_evento(payload: schemas.EventoCreate, db: Session = Depends(get_db)):
    try:
        evento = services.submit_evento(db, payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return schemas.EventoOut.model_validate(evento)


# --- Directorio de profesionales y negocios ---

@router.get("/api/profesionales")
@router.get("/api/directorio")
def directorio(
    slug: Optional[str] = Query(None),
    tipo: Optional[str] = Query(None),
    categoria: Optional[str] = Query(None),
    destacado: Optional[bool] = Query(None),
    q: Optional[str] = Query(None),
    busqueda: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=MAX_LIMIT),
    db: Session = Depends(get_db),
):
    if slug:
        return _one_or_404(db, Profesional, slug, schemas.ProfesionalOut, "Profesional no encontrado")
    rows = crud.list_rows(
        db, Profesional,
        filters={"tipo": tipo, "categoria": categoria, "destacado": destacado},
        busqueda=q or busqueda,
        limit=limit,
    )
    return [schemas.ProfesionalOut.model_validate(r) for r in rows]


@router.get("/api/profesionales/resumen", response_model=schemas.DirectorioResumen)
@router.get("/api/directorio/resumen", response_model=schemas.DirectorioResumen)
def directorio_resumen(db: Session = Depends(get_db)):
    return services.directorio_resumen(db)


@router.post("/api/profesionales", status_code=201, response_model=schemas.ProfesionalOut)
@router.post("/api/directorio", status_code=201, response_model=schemas.ProfesionalOut)
def registrar_profesional(payload: schemas.ProfesionalCreate, db: Session = Depends(get_db)):
    try:
        profesional = services.submit_profesional(db, payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return schemas.ProfesionalOut.model_validate(profesional)


# --- Reseñas ---

@router.get("/api/resenas", response_model=List[schemas.ResenaOut])
def resenas(profesional_id: Optional[int] = Query(None), db: Session = Depends(get_db)):
    if not profesional_id:
        raise HTTPException(status_code=400, detail="profesional_id requerido")
    rows = crud.list_rows(db, Resena, filters={"profesional_id": profesional_id})
    return [schemas.ResenaOut.model_validate(r) for r in rows]


@router.get("/api/resenas/resumen", response_model=schemas.ResumenResenas)
def resumen_resenas(profesional_id: Optional[int] = Query(None), db: Session = Depends(get_db)):
    if not profesional_id:
        raise HTTPException(status_code=400, detail="profesional_id requerido")
    if crud.get_by_id(db, Profesional, profesional_id) is None:
        raise HTTPException(status_code=404, detail="Profesional no encontrado")
    return ratings.rating_summary(db, profesional_id)


@router.post("/api/resenas", status_code=201, response_model=schemas.ResenaOut)
def enviar_resena(payload: schemas.ResenaCreate, db: Session = Depends(get_db)):
    try:
        resena = services.submit_resena(db, payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return schemas.ResenaOut.model_validate(resena)


# --- Blog ---

@router.get("/api/articulos")
def articulos(
    slug: Optional[str] = Query(None),
    categoria: Optional[str] = Query(None),
    destacado: Optional[bool] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=MAX_LIMIT),
    db: Session = Depends(get_db),
):
    if slug:
        obj = crud.get_by_slug(db, Articulo, slug)
        if not obj:
            raise HTTPException(status_code=404, detail="Artículo no encontrado")
        return services.articulo_detalle(obj)
    rows = crud.list_rows(
        db, Articulo, filters={"categoria": categoria, "destacado": destacado}, limit=limit
    )
    return [schemas.ArticuloOut.model_validate(r) for r in rows]


@router.get("/api/articulos/destacado", response_model=schemas.ArticuloOut)
def articulo_destacado(db: Session = Depends(get_db)):
    obj = services.articulo_destacado(db)
    if not obj:
        raise HTTPException(status_code=404, detail="No hay artículo destacado")
    return schemas.ArticuloOut.model_validate(obj)


@router.get("/api/articulos/categorias", response_model=List[str])
def articulo_categorias(db: Session = Depends(get_db)):
    return sorted(crud.count_by(db, Articulo, "categoria"))


# --- Uploads ---

@router.post("/api/upload", response_model=schemas.UploadOut)
def upload(file: Optional[UploadFile] = File(None), storage=Depends(get_storage)):
    if file is None:
        raise HTTPException(status_code=400, detail="No se recibió ningún archivo")
    data = file.file.read()
    try:
        validate_image(file.content_type, len(data))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    file_name = build_file_name(file.filename, file.content_type)
    try:
        url = storage.upload(file_name, data, file.content_type)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error al subir la imagen. Intentá de nuevo.")
    return {"success": True, "url": url, "fileName": file_name}
