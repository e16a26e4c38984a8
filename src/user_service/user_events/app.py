"""
FastAPI Application - User Service
"""
from fastapi import FastAPI, Body, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

# Importar módulos locales
from .builder import EventBuilder
from .config import Settings, get_settings
from .errors import UpstreamError
from .github_client import GitHubClient, create_http_client
from .models import (
    ProfileUpdateRequest, UserInfoEvent,
    HealthCheckResponse, HealthStatus, ErrorResponse
)
from .pulsar_client import EventPublisher

settings = get_settings()

# Configurar logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Recursos compartidos del proceso (sin estado por request)
http_client: Optional[httpx.AsyncClient] = None
event_publisher: Optional[EventPublisher] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestión del ciclo de vida de la aplicación"""
    global http_client, event_publisher
    
    # Startup
    logger.info("🚀 Iniciando User Service...")
    http_client = create_http_client(settings)
    
    if settings.publish_enabled:
        publisher = EventPublisher(settings)
        try:
            await publisher.connect()
        except Exception as e:
            logger.error(f"❌ Error conectando a Pulsar: {e}")
        event_publisher = publisher
    
    logger.info(f"✅ User Service iniciado (GitHub API: {settings.github_api_url})")
    
    yield
    
    # Shutdown
    logger.info("🛑 Cerrando User Service...")
    if event_publisher:
        await event_publisher.disconnect()
        event_publisher = None
    await http_client.aclose()
    http_client = None
    logger.info("✅ User Service cerrado correctamente")


# Crear aplicación FastAPI
app = FastAPI(
    title="User Service",
    description="Genera eventos UserInfoChanged a partir de perfiles de GitHub",
    version=settings.service_version,
    lifespan=lifespan
)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Dependencies

def get_github_client(settings: Settings = Depends(get_settings)) -> GitHubClient:
    """Cliente de GitHub sobre el httpx.AsyncClient del proceso"""
    if http_client is None:
        raise RuntimeError("HTTP client not initialized")
    return GitHubClient(
        http_client,
        max_retries=settings.upstream_max_retries,
        retry_backoff=settings.upstream_retry_backoff_seconds
    )


def get_event_builder(
    github: GitHubClient = Depends(get_github_client),
    settings: Settings = Depends(get_settings)
) -> EventBuilder:
    return EventBuilder(github, settings)


def get_publisher() -> Optional[EventPublisher]:
    """Obtener el publicador de eventos (None si está deshabilitado)"""
    return event_publisher


def _error_response(status_code: int, error_code: str, message: str, trace_id: str,
                    details: Optional[Dict[str, Any]] = None) -> JSONResponse:
    error_response = ErrorResponse(
        error_code=error_code,
        error_message=message,
        details=details,
        timestamp=datetime.now(timezone.utc),
        trace_id=trace_id
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json")
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


# Exception handlers

@app.exception_handler(UpstreamError)
async def upstream_exception_handler(request: Request, exc: UpstreamError):
    """Errores de la API de GitHub mapeados a status HTTP"""
    trace_id = str(uuid.uuid4())
    logger.warning(
        f"{exc.error_code} en {request.method} {request.url.path} "
        f"[trace_id: {trace_id}]: {exc}"
    )
    return _error_response(exc.status_code, exc.error_code, str(exc), trace_id)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Payload de entrada malformado"""
    trace_id = str(uuid.uuid4())
    logger.warning(f"Request inválido en {request.url.path} [trace_id: {trace_id}]: {exc.errors()}")
    return _error_response(
        400, "BAD_REQUEST", "Malformed request body", trace_id,
        details={"errors": jsonable_errors(exc)}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Manejo global de excepciones"""
    trace_id = str(uuid.uuid4())
    logger.error(f"Global exception [trace_id: {trace_id}]: {exc}", exc_info=True)
    return _error_response(500, "INTERNAL_ERROR", "Internal server error", trace_id)


# Health Check Endpoints
@app.get("/health", response_model=HealthCheckResponse)
async def health_check(publisher: Optional[EventPublisher] = Depends(get_publisher)):
    """Health check endpoint"""
    checks = {"github": {"api_url": settings.github_api_url}}
    overall_status = HealthStatus.HEALTHY
    
    if settings.publish_enabled:
        if publisher:
            publisher_health = publisher.get_health_status()
            checks["pulsar"] = publisher_health
            if not publisher_health.get("connected", False):
                overall_status = HealthStatus.DEGRADED
        else:
            checks["pulsar"] = {"status": "not_connected"}
            overall_status = HealthStatus.DEGRADED
    else:
        checks["pulsar"] = {"status": "disabled"}
    
    return HealthCheckResponse(
        service_name=settings.service_name,
        status=overall_status,
        version=settings.service_version,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
        metadata={
            "environment": "development" if settings.debug else "production"
        }
    )


@app.get("/health/ready")
async def readiness_check():
    """Readiness check para Kubernetes"""
    return {"status": "ready"}


@app.get("/health/live")
async def liveness_check():
    """Liveness check para Kubernetes"""
    return {"status": "alive"}


# Event Endpoints
@app.post("/produce/{user_id}", response_model=UserInfoEvent)
async def produce_user(
    user_id: str,
    github: GitHubClient = Depends(get_github_client),
    builder: EventBuilder = Depends(get_event_builder),
    publisher: Optional[EventPublisher] = Depends(get_publisher)
):
    """
    Generar el evento UserInfoChanged con los datos de GitHub
    
    - **user_id**: login (o id) del usuario en GitHub
    """
    logger.info(f"Endpoint Hit: produceUser ({user_id})")
    
    profile = await github.get_user(user_id)
    event = await builder.build(profile)
    
    if publisher:
        await publisher.publish(event)
    return event


@app.put("/users/{user_id}", response_model=UserInfoEvent)
async def update_user(
    user_id: str,
    update: Optional[ProfileUpdateRequest] = Body(None),
    github: GitHubClient = Depends(get_github_client),
    builder: EventBuilder = Depends(get_event_builder),
    publisher: Optional[EventPublisher] = Depends(get_publisher)
):
    """
    Actualizar los datos locales del perfil y re-emitir el evento
    
    - **email**, **first_name**, **last_name**, **time_zone_id**: reemplazan
      los valores de GitHub en el payload (campos ausentes quedan vacíos)
    """
    logger.info(f"Endpoint Hit: updateUser ({user_id})")
    
    overrides = update or ProfileUpdateRequest()
    profile = await github.get_user(user_id)
    event = await builder.build(profile, overrides)
    
    if publisher:
        await publisher.publish(event)
    return event


# Información de la aplicación
@app.get("/")
async def root():
    """Información básica del servicio"""
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "produce_user": "POST /produce/{user_id}",
            "update_user": "PUT /users/{user_id}"
        }
    }
