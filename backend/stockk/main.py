"""
Module principal de l'application FastAPI Stockk.

Ce module configure le logging, instancie FastAPI, enregistre les handlers
d'erreurs applicatives et inclut les routeurs (ingrédients, produits, commandes).
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from stockk.config import get_settings
from stockk.core.exceptions import InternalException, StockkException, ValidationException
from stockk.core.logging import configure_logging
from stockk.core.schemas import ErrorResponse
from stockk.database import dispose_engine

# --- Importer les routeurs ---
from stockk.ingredients.interfaces.api import ingredient_router
from stockk.products.interfaces.api import product_router
from stockk.orders.interfaces.api import order_router

settings = get_settings()

# Configurer le logging
configure_logging(settings.ENVIRONMENT)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Démarrage de l'API Stockk (env={settings.ENVIRONMENT}).")
    yield
    await dispose_engine()
    logger.info("Arrêt de l'API Stockk.")


app = FastAPI(
    title="Stockk API",
    description="API de gestion des stocks d'ingrédients et des commandes d'un restaurant.",
    version="1.0.0",
    lifespan=lifespan,
)


# ======================================================
# Handlers d'erreurs
# ======================================================
def error_response(exc: StockkException) -> JSONResponse:
    # Le détail d'une erreur interne n'est jamais exposé
    detail = None if isinstance(exc, InternalException) else exc.detail
    body = ErrorResponse(code=exc.status_code, message=exc.message, detail=detail)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(StockkException)
async def stockk_exception_handler(request: Request, exc: StockkException):
    if exc.status_code >= 500:
        logger.error(f"Erreur interne sur {request.method} {request.url.path}: {exc}", exc_info=exc)
    else:
        logger.warning(f"Requête {request.method} {request.url.path} refusée ({exc.status_code}): {exc}")
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    # Corps JSON illisible ou champ manquant: même format qu'une erreur de validation métier
    errors = "; ".join(
        f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    logger.warning(f"Requête {request.method} {request.url.path} invalide: {errors}")
    return error_response(ValidationException(f"Corps de requête invalide: {errors}"))


# ======================================================
# Inclure les routeurs
# ======================================================
app.include_router(ingredient_router, prefix=settings.API_V1_PREFIX)
app.include_router(product_router, prefix=settings.API_V1_PREFIX)
app.include_router(order_router, prefix=settings.API_V1_PREFIX)


@app.get("/health", response_class=PlainTextResponse, status_code=status.HTTP_200_OK, tags=["Health"])
async def health_check():
    return "OK"


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("stockk.main:app", host=settings.HTTP_HOST, port=settings.HTTP_PORT)
