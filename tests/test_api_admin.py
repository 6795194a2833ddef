# tests/test_api_admin.py
import dataclasses
import re
import time
from datetime import datetime

from itsdangerous import TimestampSigner

from emprende import auth
from emprende.auth import COOKIE_NAME, SESSION_MAX_AGE, issue_token, verify_token
from emprende.models import Articulo, Evento, Resena


def test_admin_routes_need_a_session(client, db, make_evento):
    evento = make_evento()
    assert client.get("/api/admin/eventos").status_code == 401
    res = client.patch("/api/admin/eventos", json={"id": evento["id"], "activo": True})
    assert res.status_code == 401
    assert res.json() == {"error": "No autorizado"}
    assert client.delete("/api/admin/eventos", params={"id": evento["id"]}).status_code == 401
    assert db.get(Evento, evento["id"]).activo is False


def test_forged_cookie_is_rejected(client):
    client.cookies.set(COOKIE_NAME, "admin")
    assert client.get("/api/admin/auth").status_code == 401
    assert client.get("/api/admin/stats").status_code == 401


def test_login_and_logout(client):
    res = client.post("/api/admin/auth", json={"password": "otra"})
    assert res.status_code == 401
    assert res.json() == {"error": "Contraseña incorrecta"}
    assert client.post("/api/admin/auth", json={}).status_code == 400

    res = client.post("/api/admin/auth", json={"password": "clave-de-prueba"})
    assert res.json() == {"success": True}
    assert COOKIE_NAME in res.cookies
    assert client.get("/api/admin/auth").json() == {"autenticado": True}

    client.delete("/api/admin/auth")
    assert client.get("/api/admin/auth").status_code == 401


def test_approve_feature_and_deactivate_event(admin, make_evento):
    first = make_evento(titulo="Taller de costura", categoria="Taller", fecha="2030-01-01")
    second = make_evento(titulo="Expo Limón", fecha="2030-06-01")

    for e in (first, second):
        res = admin.patch("/api/admin/eventos", json={"id": e["id"], "activo": True})
        assert res.status_code == 200
        assert res.json()["activo"] is True
    assert [e["slug"] for e in admin.get("/api/eventos").json()] == ["taller-de-costura", "expo-limon"]

    # featured items come first regardless of date
    admin.patch("/api/admin/eventos", json={"id": second["id"], "destacado": True})
    assert [e["slug"] for e in admin.get("/api/eventos").json()] == ["expo-limon", "taller-de-costura"]
    assert admin.get("/api/eventos", params={"slug": "expo-limon"}).json()["destacado"] is True

    admin.patch("/api/admin/eventos", json={"id": second["id"], "activo": False})
    assert [e["slug"] for e in admin.get("/api/eventos").json()] == ["taller-de-costura"]
    # still listed for the admin
    assert len(admin.get("/api/admin/eventos").json()) == 2


def test_verify_profesional_through_directory_put(admin, make_profesional):
    p = make_profesional()
    res = admin.put("/api/admin/directorio", json={"id": p["id"], "activo": True, "verificado": True})
    assert res.status_code == 200
    assert res.json()["verificado"] is True
    listed = admin.get("/api/directorio").json()
    assert [x["id"] for x in listed] == [p["id"]]


def test_patch_errors(admin, make_evento):
    evento = make_evento()
    res = admin.patch("/api/admin/eventos", json={"activo": True})
    assert res.status_code == 400
    assert res.json() == {"error": "ID requerido"}

    res = admin.patch("/api/admin/eventos", json={"id": 999, "activo": True})
    assert res.status_code == 404

    res = admin.patch("/api/admin/eventos", json={"id": evento["id"], "inventado": 1})
    assert res.status_code == 400

    res = admin.patch("/api/admin/eventos", json={"id": evento["id"], "titulo": ""})
    assert res.status_code == 400

    res = admin.patch("/api/admin/eventos", json={"id": evento["id"], "activo": None})
    assert res.status_code == 400

    assert admin.delete("/api/admin/eventos").status_code == 400
    assert admin.delete("/api/admin/eventos", params={"id": 999}).status_code == 404


def test_cleared_slug_is_regenerated_from_title(admin, make_evento):
    evento = make_evento()
    res = admin.patch("/api/admin/eventos", json={
        "id": evento["id"], "titulo": "Feria de Invierno", "slug": "",
    })
    assert res.status_code == 200
    assert res.json()["slug"] == "feria-de-invierno"

    # its own slug never counts as a collision
    res = admin.patch("/api/admin/eventos", json={"id": evento["id"], "slug": None})
    assert res.json()["slug"] == "feria-de-invierno"


def test_admin_created_content(admin):
    res = admin.post("/api/admin/eventos", json={
        "titulo": "Torneo de fútbol", "categoria": "Deportivo", "fecha": "2030-02-02",
        "lugar": "Polideportivo", "organizador": "Club", "email": "club@example.com",
    })
    assert res.status_code == 201
    assert res.json()["activo"] is True
    assert res.json()["slug"] == "torneo-de-futbol"

    res = admin.post("/api/admin/empleos", json={
        "titulo": "Mozo", "empresa": "Bar", "whatsapp": "3863555666", "activo": False,
    })
    assert res.status_code == 201
    assert res.json()["activo"] is False

    res = admin.post("/api/admin/articulos", json={"titulo": "Novedades", "slug": "Mi Slug"})
    assert res.json()["slug"] == "Mi Slug"
    assert res.json()["publicado"] is False


def test_review_moderation_updates_rating(admin, make_profesional):
    p = make_profesional()
    ids = []
    for nombre, score in [("Juan", 5), ("Marta", 5), ("Luis", 4), ("Troll", 1)]:
        res = admin.post("/api/resenas", json={
            "profesional_id": p["id"], "nombre_cliente": nombre, "puntuacion": score,
        })
        ids.append(res.json()["id"])

    for rid in ids[:3]:
        assert admin.patch("/api/admin/resenas", json={"id": rid, "aprobada": True}).status_code == 200

    admin.patch("/api/admin/directorio", json={"id": p["id"], "activo": True})
    listed = admin.get("/api/profesionales").json()[0]
    assert listed["puntuacion_promedio"] == 4.7
    assert listed["total_resenas"] == 3

    resumen = admin.get("/api/resenas/resumen", params={"profesional_id": p["id"]}).json()
    assert resumen["etiqueta"] == "4.7 (3 reseñas)"
    assert len(admin.get("/api/resenas", params={"profesional_id": p["id"]}).json()) == 3

    reviews = admin.get("/api/admin/resenas").json()
    assert len(reviews) == 4
    assert reviews[0]["profesional"] == {"nombre": "Ana Pérez", "profesion": "Electricista"}

    # removing an approved review recomputes the average
    assert admin.delete("/api/admin/resenas", params={"id": ids[2]}).json() == {"success": True}
    listed = admin.get("/api/profesionales").json()[0]
    assert listed["puntuacion_promedio"] == 5.0
    assert listed["total_resenas"] == 2


def test_deleting_profesional_removes_reviews(admin, db, make_profesional):
    p = make_profesional()
    admin.post("/api/resenas", json={"profesional_id": p["id"], "nombre_cliente": "Juan", "puntuacion": 5})
    res = admin.delete("/api/admin/profesionales", params={"id": p["id"]})
    assert res.status_code == 200
    assert db.query(Resena).count() == 0


def test_stats(admin, make_evento, make_profesional):
    e = make_evento()
    make_evento(titulo="Viejo evento", fecha="2001-01-01")
    make_profesional()
    admin.patch("/api/admin/eventos", json={"id": e["id"], "activo": True})

    stats = admin.get("/api/admin/stats").json()
    assert stats["eventos"] == {"activos": 1, "pendientes": 1}
    assert stats["eventos_proximos"] == 1
    assert stats["profesionales"] == {"activos": 0, "pendientes": 1}
    assert stats["empleos"] == {"activos": 0, "pendientes": 0}
    assert stats["articulos_publicados"] == 0


def test_admin_listing_includes_pending_rows(admin, make_profesional):
    make_profesional()
    rows = admin.get("/api/admin/profesionales").json()
    assert len(rows) == 1
    assert re.match(r"ana-perez-", rows[0]["slug"])


def test_empleos_resumen_counts_active_jobs(admin):
    for titulo, tipo, activo in [("Mozo", "Part-time", True), ("Cajera", "Part-time", True),
                                 ("Chofer", "Temporal", False)]:
        admin.post("/api/admin/empleos", json={
            "titulo": titulo, "empresa": "Bar", "whatsapp": "3863555666",
            "categoria": "Gastronomía", "tipo": tipo, "activo": activo,
        })
    resumen = admin.get("/api/empleos/resumen").json()
    assert resumen == {"total": 2, "categorias": {"Gastronomía": 2}, "tipos": {"Part-time": 2}}


def test_session_cookie_attributes(client):
    res = client.post("/api/admin/auth", json={"password": "clave-de-prueba"})
    name, *attrs = [part.strip() for part in res.headers["set-cookie"].split(";")]
    assert name.startswith(f"{COOKIE_NAME}=")
    assert "HttpOnly" in attrs
    assert "SameSite=strict" in attrs
    assert f"Max-Age={SESSION_MAX_AGE}" in attrs
    assert "Path=/" in attrs
    assert "Secure" not in attrs


def test_session_cookie_is_secure_in_production(client, monkeypatch):
    settings = dataclasses.replace(auth.get_settings(), environment="production")
    monkeypatch.setattr(auth, "get_settings", lambda: settings)
    res = client.post("/api/admin/auth", json={"password": "clave-de-prueba"})
    assert res.status_code == 200
    attrs = [part.strip() for part in res.headers["set-cookie"].split(";")[1:]]
    assert "Secure" in attrs


def test_session_expires_after_a_day(client, monkeypatch):
    with monkeypatch.context() as m:
        m.setattr(TimestampSigner, "get_timestamp", lambda self: int(time.time()) - SESSION_MAX_AGE - 60)
        token = issue_token()
    assert verify_token(token) is False
    assert verify_token(issue_token()) is True

    client.cookies.set(COOKIE_NAME, token)
    assert client.get("/api/admin/auth").status_code == 401


def test_article_edit_touches_updated_at(admin, db):
    created = admin.post("/api/admin/articulos", json={"titulo": "Nota", "publicado": True}).json()
    db.query(Articulo).filter(Articulo.id == created["id"]).update(
        {"updated_at": datetime(2020, 1, 1)}
    )
    db.commit()

    res = admin.patch("/api/admin/articulos", json={"id": created["id"], "extracto": "Resumen"})
    assert res.status_code == 200
    assert res.json()["extracto"] == "Resumen"
    assert not res.json()["updated_at"].startswith("2020")


def test_deactivating_keeps_reviews_and_rating(admin, db, make_profesional):
    p = make_profesional()
    admin.patch("/api/admin/directorio", json={"id": p["id"], "activo": True})
    rid = admin.post("/api/resenas", json={
        "profesional_id": p["id"], "nombre_cliente": "Juan", "puntuacion": 4,
    }).json()["id"]
    admin.patch("/api/admin/resenas", json={"id": rid, "aprobada": True})

    res = admin.patch("/api/admin/directorio", json={"id": p["id"], "activo": False})
    assert res.json()["activo"] is False
    assert res.json()["puntuacion_promedio"] == 4.0
    assert res.json()["total_resenas"] == 1
    assert db.query(Resena).filter(Resena.profesional_id == p["id"]).count() == 1
    assert admin.get("/api/profesionales").json() == []

    admin.patch("/api/admin/directorio", json={"id": p["id"], "activo": True})
    listed = admin.get("/api/profesionales").json()
    assert listed[0]["puntuacion_promedio"] == 4.0


def test_blank_required_fields_are_rejected_after_trimming(admin, make_evento, make_profesional):
    evento = make_evento()
    res = admin.patch("/api/admin/eventos", json={"id": evento["id"], "titulo": "   "})
    assert res.status_code == 400
    assert res.json() == {"error": "El campo titulo es obligatorio"}

    res = admin.patch("/api/admin/eventos", json={"id": evento["id"], "titulo": "  Feria Nueva  "})
    assert res.json()["titulo"] == "Feria Nueva"

    p = make_profesional()
    assert admin.patch("/api/admin/directorio", json={"id": p["id"], "nombre": " "}).status_code == 400

    rid = admin.post("/api/resenas", json={
        "profesional_id": p["id"], "nombre_cliente": "Juan", "puntuacion": 5,
    }).json()["id"]
    res = admin.patch("/api/admin/resenas", json={"id": rid, "nombre_cliente": "   "})
    assert res.status_code == 400
    reviews = admin.get("/api/admin/resenas").json()
    assert reviews[0]["nombre_cliente"] == "Juan"
