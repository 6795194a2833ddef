# emprende/schemas.py
from datetime import date, datetime, time
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class PatchModel(BaseModel):
    """Admin partial updates: `id` plus only the fields being changed."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = None


# --- Empleos ---

class EmpleoBase(BaseModel):
    titulo: Optional[str] = None
    descripcion: Optional[str] = None
    tipo: Optional[str] = None
    categoria: Optional[str] = None
    modalidad: Optional[str] = None
    empresa: Optional[str] = None
    ubicacion: Optional[str] = None
    whatsapp: Optional[str] = None
    salario_min: Optional[float] = None
    salario_max: Optional[float] = None
    logo_url: Optional[str] = None

class EmpleoCreate(EmpleoBase):
    pass

class EmpleoAdminCreate(EmpleoBase):
    slug: Optional[str] = None
    activo: bool = True
    destacado: bool = False

class EmpleoUpdate(EmpleoBase, PatchModel):
    slug: Optional[str] = None
    activo: Optional[bool] = None
    destacado: Optional[bool] = None

class EmpleoOut(ORMModel):
    id: int
    titulo: str
    slug: str
    descripcion: Optional[str] = None
    tipo: Optional[str] = None
    categoria: Optional[str] = None
    modalidad: Optional[str] = None
    empresa: str
    ubicacion: Optional[str] = None
    whatsapp: str
    mensaje_whatsapp: Optional[str] = None
    salario_min: Optional[float] = None
    salario_max: Optional[float] = None
    logo_url: Optional[str] = None
    activo: bool
    destacado: bool
    created_at: Optional[datetime] = None

class EmpleoCreated(BaseModel):
    success: bool = True
    message: str
    empleo: EmpleoOut

class EmpleoResumen(BaseModel):
    total: int
    categorias: Dict[str, int]
    tipos: Dict[str, int]


# --- Eventos ---

class EventoBase(BaseModel):
    titulo: Optional[str] = None
    descripcion: Optional[str] = None
    categoria: Optional[str] = None
    fecha: Optional[date] = None
    hora_inicio: Optional[time] = None
    hora_fin: Optional[time] = None
    lugar: Optional[str] = None
    direccion: Optional[str] = None
    organizador: Optional[str] = None
    whatsapp: Optional[str] = None
    email: Optional[str] = None
    link_inscripcion: Optional[str] = None
    cupo_maximo: Optional[int] = None
    precio: Optional[float] = None
    imagen_url: Optional[str] = None

class EventoCreate(EventoBase):
    pass

class EventoAdminCreate(EventoBase):
    slug: Optional[str] = None
    activo: bool = True
    destacado: bool = False

class EventoUpdate(EventoBase, PatchModel):
    slug: Optional[str] = None
    cupo_actual: Optional[int] = None
    activo: Optional[bool] = None
    destacado: Optional[bool] = None

class EventoOut(ORMModel):
    id: int
    titulo: str
    slug: str
    descripcion: Optional[str] = None
    categoria: str
    fecha: date
    hora_inicio: Optional[time] = None
    hora_fin: Optional[time] = None
    lugar: str
    direccion: Optional[str] = None
    organizador: str
    whatsapp: Optional[str] = None
    email: Optional[str] = None
    link_inscripcion: Optional[str] = None
    cupo_maximo: Optional[int] = None
    cupo_actual: int = 0
    precio: Optional[float] = None
    imagen_url: Optional[str] = None
    activo: bool
    destacado: bool
    created_at: Optional[datetime] = None


class EventoResumen(BaseModel):
    total: int
    proximos: int
    pasados: int
    categorias: Dict[str, int]


# --- Directorio / profesionales ---

class ProfesionalBase(BaseModel):
    tipo: Optional[str] = None
    categoria: Optional[str] = None
    profesion: Optional[str] = None
    nombre: Optional[str] = None
    descripcion: Optional[str] = None
    experiencia: Optional[str] = None
    horarios: Optional[str] = None
    sitio_web: Optional[str] = None
    whatsapp: Optional[str] = None
    email: Optional[str] = None
    instagram: Optional[str] = None
    direccion: Optional[str] = None
    foto_url: Optional[str] = None

class ProfesionalCreate(ProfesionalBase):
    pass

class ProfesionalUpdate(ProfesionalBase, PatchModel):
    slug: Optional[str] = None
    activo: Optional[bool] = None
    destacado: Optional[bool] = None
    verificado: Optional[bool] = None

class ProfesionalOut(ORMModel):
    id: int
    tipo: str
    categoria: str
    profesion: str
    nombre: str
    slug: str
    descripcion: Optional[str] = None
    experiencia: Optional[str] = None
    horarios: Optional[str] = None
    sitio_web: Optional[str] = None
    whatsapp: str
    email: Optional[str] = None
    instagram: Optional[str] = None
    direccion: Optional[str] = None
    foto_url: Optional[str] = None
    activo: bool
    destacado: bool
    verificado: bool
    puntuacion_promedio: Optional[float] = None
    total_resenas: int = 0
    created_at: Optional[datetime] = None

class ProfesionalRef(ORMModel):
    nombre: str
    profesion: str

class DirectorioResumen(BaseModel):
    total: int
    tipos: Dict[str, int]
    categorias: Dict[str, int]


# --- Reseñas ---

class ResenaCreate(BaseModel):
    profesional_id: Optional[int] = None
    nombre_cliente: Optional[str] = None
    puntuacion: Optional[int] = None
    comentario: Optional[str] = None

class ResenaUpdate(PatchModel):
    nombre_cliente: Optional[str] = None
    comentario: Optional[str] = None
    aprobada: Optional[bool] = None

class ResenaOut(ORMModel):
    id: int
    profesional_id: int
    nombre_cliente: str
    puntuacion: int
    comentario: Optional[str] = None
    aprobada: bool
    created_at: Optional[datetime] = None

class ResenaAdminOut(ResenaOut):
    profesional: Optional[ProfesionalRef] = None

class ResumenResenas(BaseModel):
    profesional_id: int
    puntuacion_promedio: Optional[float] = None
    total_resenas: int
    etiqueta: str


# --- Artículos ---

class ArticuloBase(BaseModel):
    extracto: Optional[str] = None
    contenido: Optional[str] = None
    categoria: Optional[str] = None
    autor: Optional[str] = None
    imagen_url: Optional[str] = None
    imagen_alt: Optional[str] = None

class ArticuloCreate(ArticuloBase):
    titulo: Optional[str] = None
    slug: Optional[str] = None
    publicado: bool = False
    destacado: bool = False

class ArticuloUpdate(ArticuloBase, PatchModel):
    titulo: Optional[str] = None
    slug: Optional[str] = None
    publicado: Optional[bool] = None
    destacado: Optional[bool] = None

class ArticuloOut(ORMModel):
    id: int
    titulo: str
    slug: str
    extracto: Optional[str] = None
    contenido: Optional[str] = None
    categoria: Optional[str] = None
    autor: Optional[str] = None
    imagen_url: Optional[str] = None
    imagen_alt: Optional[str] = None
    publicado: bool
    destacado: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ArticuloDetalle(ArticuloOut):
    contenido_html: str = ""


# --- Admin / misc ---

class LoginRequest(BaseModel):
    password: Optional[str] = None

class VisibilityCounts(BaseModel):
    activos: int
    pendientes: int

class AdminStats(BaseModel):
    empleos: VisibilityCounts
    eventos: VisibilityCounts
    eventos_proximos: int
    profesionales: VisibilityCounts
    resenas: VisibilityCounts
    articulos_publicados: int
    articulos_borradores: int

class SiteStats(BaseModel):
    empleos: int
    eventos: int
    directorio: int
    articulos: int

class UploadOut(BaseModel):
    success: bool = True
    url: str
    fileName: str
