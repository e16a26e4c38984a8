"""
Modelos Pydantic para validación de requests/responses
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Any, List
from datetime import datetime
from enum import Enum


class HealthStatus(str, Enum):
    """Estados de salud del servicio"""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


# Modelos de la API de GitHub (solo los campos que se consumen)

class GitHubUser(BaseModel):
    """Perfil de usuario de GitHub"""
    login: str
    id: int
    name: Optional[str] = None
    email: Optional[str] = None


class GitHubRepo(BaseModel):
    """Repositorio de GitHub"""
    name: str


# Requests

class ProfileUpdateRequest(BaseModel):
    """Request para actualizar los datos locales del perfil"""
    email: str = Field(default="", description="Email del usuario")
    first_name: str = Field(default="", description="Nombre")
    last_name: str = Field(default="", description="Apellido")
    time_zone_id: str = Field(default="", description="ID de la zona horaria")
    
    @field_validator('email', 'first_name', 'last_name', 'time_zone_id', mode='before')
    @classmethod
    def null_as_empty(cls, v):
        # null y campo ausente son equivalentes
        if v is None:
            return ""
        return v


# Evento UserInfoChanged

class EventMeta(BaseModel):
    """Metadatos (envelope) del evento"""
    type: str
    event_id: str
    created_at: int = Field(..., description="Epoch en nanosegundos")
    trace_id: str
    service_id: str


class UserInfoPayload(BaseModel):
    """Datos de negocio del evento"""
    id: int
    username: str
    followers: List[str] = Field(default_factory=list)
    repos: List[str] = Field(default_factory=list)
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    time_zone_id: str = ""


class UserInfoEvent(BaseModel):
    """Evento UserInfoChanged"""
    meta: EventMeta
    payload: UserInfoPayload


# Responses

class HealthCheckResponse(BaseModel):
    """Response del health check"""
    service_name: str
    status: HealthStatus
    version: str
    timestamp: datetime
    checks: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, str] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Response de error estándar"""
    error_code: str
    error_message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime
    trace_id: Optional[str] = None
