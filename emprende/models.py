# emprende/models.py
"""SQLAlchemy ORM models for the job board, events calendar, directory and blog.

Every listing table carries the same moderation columns (`activo`,
`destacado`) and a unique `slug`. Reviews hang off directory entries and are
removed with them.
"""
from sqlalchemy import (
    Column, Integer, Text, Numeric, Boolean, Date, Time, TIMESTAMP,
    ForeignKey, CheckConstraint, func, Index,
)
from sqlalchemy.orm import relationship
from .db import Base


class Empleo(Base):
    __tablename__ = "empleos"
    id = Column(Integer, primary_key=True, index=True)
    titulo = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True, index=True)
    descripcion = Column(Text)
    tipo = Column(Text, nullable=False, default="Tiempo completo")
    categoria = Column(Text)
    modalidad = Column(Text)
    empresa = Column(Text, nullable=False)
    ubicacion = Column(Text, default="Famaillá")
    whatsapp = Column(Text, nullable=False)
    mensaje_whatsapp = Column(Text)
    salario_min = Column(Numeric)
    salario_max = Column(Numeric)
    logo_url = Column(Text)
    activo = Column(Boolean, nullable=False, default=False)
    destacado = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())


class Evento(Base):
    __tablename__ = "eventos"
    id = Column(Integer, primary_key=True, index=True)
    titulo = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True, index=True)
    descripcion = Column(Text)
    categoria = Column(Text, nullable=False)
    fecha = Column(Date, nullable=False)
    hora_inicio = Column(Time)
    hora_fin = Column(Time)
    lugar = Column(Text, nullable=False)
    direccion = Column(Text)
    organizador = Column(Text, nullable=False)
    whatsapp = Column(Text)
    email = Column(Text)
    link_inscripcion = Column(Text)
    cupo_maximo = Column(Integer)
    cupo_actual = Column(Integer, nullable=False, default=0)
    precio = Column(Numeric)
    imagen_url = Column(Text)
    activo = Column(Boolean, nullable=False, default=False)
    destacado = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())


class Profesional(Base):
    __tablename__ = "profesionales"
    id = Column(Integer, primary_key=True, index=True)
    tipo = Column(Text, nullable=False, default="servicio")
    categoria = Column(Text, nullable=False)
    profesion = Column(Text, nullable=False)
    nombre = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True, index=True)
    descripcion = Column(Text)
    experiencia = Column(Text)
    horarios = Column(Text)
    sitio_web = Column(Text)
    whatsapp = Column(Text, nullable=False)
    email = Column(Text)
    instagram = Column(Text)
    direccion = Column(Text)
    foto_url = Column(Text)
    activo = Column(Boolean, nullable=False, default=False)
    destacado = Column(Boolean, nullable=False, default=False)
    verificado = Column(Boolean, nullable=False, default=False)
    # denormalized from approved reviews, see ratings.refresh_profesional
    puntuacion_promedio = Column(Numeric(2, 1))
    total_resenas = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    resenas = relationship(
        "Resena",
        back_populates="profesional",
        cascade="all, delete-orphan",
    )


class Resena(Base):
    __tablename__ = "resenas"
    __table_args__ = (
        CheckConstraint("puntuacion BETWEEN 1 AND 5", name="ck_resenas_puntuacion"),
    )
    id = Column(Integer, primary_key=True, index=True)
    profesional_id = Column(
        Integer,
        ForeignKey("profesionales.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    nombre_cliente = Column(Text, nullable=False)
    puntuacion = Column(Integer, nullable=False)
    comentario = Column(Text)
    aprobada = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    profesional = relationship("Profesional", back_populates="resenas")


class Articulo(Base):
    __tablename__ = "articulos"
    id = Column(Integer, primary_key=True, index=True)
    titulo = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True, index=True)
    extracto = Column(Text)
    contenido = Column(Text)
    categoria = Column(Text)
    autor = Column(Text)
    imagen_url = Column(Text)
    imagen_alt = Column(Text)
    publicado = Column(Boolean, nullable=False, default=False)
    destacado = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

Index("idx_eventos_fecha", Evento.fecha)
Index("idx_profesionales_puntuacion", Profesional.puntuacion_promedio)
