# emprende/api/admin.py
"""Admin console endpoints. Everything except login/logout sits behind
`require_admin`."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from .. import crud, schemas, services
from ..auth import (
    check_password, clear_session_cookie, issue_token, require_admin, set_session_cookie,
)
from ..db import get_db
from ..models import Articulo, Empleo, Evento, Profesional, Resena
from ..utils import logger

router = APIRouter(prefix="/api/admin")
guarded = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])


# --- Sesión ---

@router.post("/auth")
def login(payload: schemas.LoginRequest, response: Response):
    if not payload.password:
        raise HTTPException(status_code=400, detail="Contraseña requerida")
    if not check_password(payload.password):
        logger.warning("Failed admin login attempt")
        raise HTTPException(status_code=401, detail="Contraseña incorrecta")
    set_session_cookie(response, issue_token())
    logger.info("Admin logged in")
    return {"success": True}


@router.delete("/auth")
def logout(response: Response):
    clear_session_cookie(response)
    return {"success": True}


@guarded.get("/auth")
def session_status():
    return {"autenticado": True}


# --- Listados, ediciones y borrados ---

def _register(path: str, model, out_schema, update_schema, order_by):
    """GET (all rows, pending included), PATCH by id and DELETE ?id= for one table."""

    def listar(db: Session = Depends(get_db)):
        rows = crud.list_rows(db, model, visible_only=False, order_by=order_by)
        return [out_schema.model_validate(r) for r in rows]

    def actualizar(payload: update_schema, db: Session = Depends(get_db)):
        changes = payload.model_dump(exclude_unset=True)
        item_id = changes.pop("id", None)
        if not item_id:
            raise HTTPException(status_code=400, detail="ID requerido")
        try:
            obj = services.update_item(db, model, item_id, changes)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if obj is None:
            raise HTTPException(status_code=404, detail="No encontrado")
        return out_schema.model_validate(obj)

    def eliminar(id: Optional[int] = Query(None), db: Session = Depends(get_db)):
        if not id:
            raise HTTPException(status_code=400, detail="ID requerido")
        if not services.delete_item(db, model, id):
            raise HTTPException(status_code=404, detail="No encontrado")
        return {"success": True}

    guarded.add_api_route(path, listar, methods=["GET"], name=f"admin_{path.strip('/')}_list")
    guarded.add_api_route(path, actualizar, methods=["PATCH"], name=f"admin_{path.strip('/')}_update")
    guarded.add_api_route(path, eliminar, methods=["DELETE"], name=f"admin_{path.strip('/')}_delete")
    return actualizar


_register("/empleos", Empleo, schemas.EmpleoOut, schemas.EmpleoUpdate,
          [Empleo.created_at.desc(), Empleo.id.desc()])
_register("/eventos", Evento, schemas.EventoOut, schemas.EventoUpdate,
          [Evento.fecha.asc(), Evento.id.asc()])
_register("/profesionales", Profesional, schemas.ProfesionalOut, schemas.ProfesionalUpdate,
          [Profesional.created_at.desc(), Profesional.id.desc()])
_actualizar_directorio = _register(
    "/directorio", Profesional, schemas.ProfesionalOut, schemas.ProfesionalUpdate,
    [Profesional.created_at.desc(), Profesional.id.desc()])
_register("/articulos", Articulo, schemas.ArticuloOut, schemas.ArticuloUpdate,
          [Articulo.created_at.desc(), Articulo.id.desc()])
_register("/resenas", Resena, schemas.ResenaAdminOut, schemas.ResenaUpdate,
          [Resena.created_at.desc(), Resena.id.desc()])

# the directory admin screen saves with PUT
guarded.add_api_route("/directorio", _actualizar_directorio, methods=["PUT"], name="admin_directorio_put")


# --- Altas desde el panel ---

@guarded.post("/empleos", status_code=201, response_model=schemas.EmpleoOut)
def crear_empleo(payload: schemas.EmpleoAdminCreate, db: Session = Depends(get_db)):
    try:
        empleo = services.submit_empleo(db, payload.model_dump(), admin=True)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return schemas.EmpleoOut.model_validate(empleo)


@guarded.post("/eventos", status_code=201, response_model=schemas.EventoOut)
def crear_evento(payload: schemas.EventoAdminCreate, db: Session = Depends(get_db)):
    try:
        evento = services.submit_evento(db, payload.model_dump(), admin=True)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return schemas.EventoOut.model_validate(evento)


@guarded.post("/articulos", status_code=201, response_model=schemas.ArticuloOut)
def crear_articulo(payload: schemas.ArticuloCreate, db: Session = Depends(get_db)):
    try:
        articulo = services.create_articulo(db, payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return schemas.ArticuloOut.model_validate(articulo)


# --- Panel ---

@guarded.get("/stats", response_model=schemas.AdminStats)
def stats(db: Session = Depends(get_db)):
    return services.admin_stats(db)
