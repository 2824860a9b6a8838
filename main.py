# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from app.domain.errors import (
    ExecutionConflict,
    NotFound,
    StorageUnavailable,
    Unsupported,
    ValidationFailed,
)
# Importamos los routers de la capa de infraestructura
from app.infrastructure.api.routers import invoices_router
from app.infrastructure.persistence.database import init_db

logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s - %(levelname)s - [%(funcName)s] - %(message)s')


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title="API de Facturas de Proveedores",
    description="Alta, consulta y edición de facturas de proveedores.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(invoices_router.router)


# --- Traducción de errores de negocio a HTTP ---

@app.exception_handler(ValidationFailed)
def validation_failed_handler(request: Request, exc: ValidationFailed):
    return JSONResponse(status_code=422, content={"message": exc.summary(), "errors": exc.violations})


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        # loc = ('body' | 'query' | 'path', campo, ...)
        loc = error['loc']
        if loc[0] == 'body' and (len(loc) == 1 or not isinstance(loc[1], str)):
            # cuerpo ilegible o que no es un objeto JSON
            field = 'payload'
        else:
            field = str(loc[-1])
        errors.setdefault(field, []).append(error['msg'])
    return JSONResponse(status_code=422, content={"message": ValidationFailed(errors).summary(), "errors": errors})


@app.exception_handler(NotFound)
def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"message": str(exc)})


@app.exception_handler(Unsupported)
def unsupported_handler(request: Request, exc: Unsupported):
    return JSONResponse(status_code=405, content={"message": str(exc)})


@app.exception_handler(ExecutionConflict)
def execution_conflict_handler(request: Request, exc: ExecutionConflict):
    logging.error(f"Conflicto de escritura sin resolver: {exc}")
    return JSONResponse(status_code=500, content={"message": str(exc)})


@app.exception_handler(StorageUnavailable)
def storage_unavailable_handler(request: Request, exc: StorageUnavailable):
    return JSONResponse(status_code=503, content={"message": str(exc)})


@app.get("/", tags=["Health Check"])
def read_root():
    return {"status": "ok", "message": "Supplier invoices API"}
