"""
Configuración del User Service
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Configuración del servicio de eventos de usuario"""
    
    # Información del servicio
    service_name: str = "user-service"
    service_version: str = "1.0.0"
    
    # FastAPI settings
    host: str = "0.0.0.0"
    port: int = 8081
    debug: bool = False
    
    # GitHub API
    github_api_url: str = "https://api.github.com"
    github_timeout_seconds: float = 10.0
    github_user_agent: str = "user-service/1.0.0"
    upstream_max_retries: int = 0
    upstream_retry_backoff_seconds: float = 0.5
    
    # Evento
    event_type: str = "UserInfoChanged"
    legacy_repo_routing: bool = False
    
    # Security
    allowed_origins: List[str] = ["*"]
    
    # Observability
    log_level: str = "INFO"
    
    # Pulsar (emisión opcional del evento)
    publish_enabled: bool = False
    pulsar_url: str = "pulsar://localhost:6650"
    user_info_changed_topic: str = "evt.user.userInfoChanged.v1"
    producer_send_timeout_ms: int = 5000
    
    # Circuit breaker settings
    circuit_breaker_failure_threshold: int = 5
    circuit_breaker_recovery_timeout: int = 60
    
    model_config = {
        "env_prefix": "USER_SERVICE_",
        "case_sensitive": False
    }


# Instancia global de configuración
settings = Settings()


def get_settings() -> Settings:
    """Obtener configuración (útil para dependency injection en FastAPI)"""
    return settings
