# emprende/main.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from emprende.db import Base, engine
import emprende.models  # noqa: F401 ensure models are imported so tables are known
from emprende.api.admin import guarded as admin_router, router as auth_router
from emprende.api.routes import router as api_router
from emprende.utils import logger

# create FastAPI instance
app = FastAPI(title="Famaillá Emprende")

app.include_router(api_router)
app.include_router(auth_router)
app.include_router(admin_router)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ())[1:])
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Datos inválidos"
    return JSONResponse({"error": message}, status_code=400)


@app.exception_handler(SQLAlchemyError)
async def database_error(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": str(getattr(exc, "orig", None) or exc)}, status_code=500)


@app.on_event("startup")
def on_startup_create_tables():
    # Ensure database tables are created on startup
    Base.metadata.create_all(bind=engine)
