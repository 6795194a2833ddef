# tests/test_slugs.py
import re

import pytest

from emprende import slugs
from emprende.slugs import CollisionStrategy, resolve_slug, slugify
from emprende.utils import to_base36

SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


@pytest.mark.parametrize("text, expected", [
    ("Feria de Emprendedores", "feria-de-emprendedores"),
    ("Peluquería Ñandú", "peluqueria-nandu"),
    ("  ¡Gran  Apertura!  ", "gran-apertura"),
    ("Taller --- de   Cerámica", "taller-de-ceramica"),
    ("Café & Té: 2x1", "cafe-te-2x1"),
    ("-ya-limpio-", "ya-limpio"),
    ("Línea\tNueva\nTexto", "linea-nueva-texto"),
])
def test_slugify(text, expected):
    assert slugify(text) == expected


@pytest.mark.parametrize("text", ["¡¿?!", "", "---", "   "])
def test_slugify_without_eligible_characters_is_empty(text):
    assert slugify(text) == ""


@pytest.mark.parametrize("text", [
    "Árbol Ñoño", "ÉXITO total!!!", "a_b_c", "Día del Niño 2025", "über-straße",
])
def test_slugify_shape_and_idempotence(text):
    slug = slugify(text)
    assert slug == "" or SLUG_RE.match(slug)
    assert slugify(slug) == slug


def test_none_strategy_keeps_base():
    assert resolve_slug("Mi Artículo", CollisionStrategy.NONE) == "mi-articulo"


def test_suffix_on_collision_only_when_taken(monkeypatch):
    monkeypatch.setattr(slugs, "now_ms", lambda: 1700000000123)
    assert resolve_slug("Feria", CollisionStrategy.SUFFIX_ON_COLLISION, exists=lambda s: False) == "feria"
    assert resolve_slug("Feria", CollisionStrategy.SUFFIX_ON_COLLISION, exists=lambda s: True) == "feria-1700000000123"


def test_suffix_on_collision_requires_existence_check():
    with pytest.raises(ValueError):
        resolve_slug("Feria", CollisionStrategy.SUFFIX_ON_COLLISION)


def test_always_suffix_uses_base36_time(monkeypatch):
    monkeypatch.setattr(slugs, "now_ms", lambda: 1700000000123)
    slug = resolve_slug("Juan Gómez", CollisionStrategy.ALWAYS_SUFFIX)
    assert slug == "juan-gomez-" + to_base36(1700000000123)
    assert SLUG_RE.match(slug)


def test_empty_base_falls_back_to_suffix(monkeypatch):
    monkeypatch.setattr(slugs, "now_ms", lambda: 42)
    assert resolve_slug("!!!", CollisionStrategy.ALWAYS_SUFFIX) == "16"
    assert resolve_slug("!!!", CollisionStrategy.SUFFIX_ON_COLLISION, exists=lambda s: False) == "42"


def test_to_base36():
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
    with pytest.raises(ValueError):
        to_base36(-1)
