import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


async def integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    """Restricciones únicas violadas por escrituras concurrentes"""
    logger.warning(f"Integrity error: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content={"detail": "El registro entra en conflicto con uno existente"}
    )


async def database_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Database error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Error de base de datos"}
    )


def setup_exception_handlers(app: FastAPI):
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
