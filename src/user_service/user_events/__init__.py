"""
User Events Microservice
========================

Microservicio Python (FastAPI) que genera eventos UserInfoChanged.

Responsabilidades:
- Recibir requests HTTP (produce / update de usuarios)
- Consultar perfil, followers y repos en la API REST de GitHub
- Armar el evento UserInfoChanged y devolverlo como JSON
- Publicar opcionalmente el evento en Apache Pulsar
- Proveer endpoints para health checks

Patrones aplicados:
- Estado local por request (sin variables globales de trabajo)
- Errores de la API externa mapeados a status HTTP
- Circuit breaker para Pulsar
"""

from .app import app
from .builder import EventBuilder, assemble_user_info_event
from .config import Settings
from .github_client import GitHubClient
from .models import ProfileUpdateRequest, UserInfoEvent
from .pulsar_client import EventPublisher

__all__ = [
    'app',
    'EventBuilder',
    'assemble_user_info_event',
    'Settings',
    'GitHubClient',
    'ProfileUpdateRequest',
    'UserInfoEvent',
    'EventPublisher'
]
