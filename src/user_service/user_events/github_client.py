"""
Cliente HTTP de la API REST de GitHub
"""
import asyncio
import httpx
import logging
from typing import Any, List, Optional, Type
from urllib.parse import quote

from pydantic import TypeAdapter, ValidationError

from .config import Settings
from .errors import UpstreamDecodeError, UpstreamStatusError, UpstreamUnavailable, UserNotFound
from .models import GitHubRepo, GitHubUser


logger = logging.getLogger(__name__)

_FOLLOWERS_ADAPTER = TypeAdapter(List[GitHubUser])
_REPOS_ADAPTER = TypeAdapter(List[GitHubRepo])


def create_http_client(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Crear el httpx.AsyncClient compartido para GitHub"""
    return httpx.AsyncClient(
        base_url=settings.github_api_url,
        timeout=settings.github_timeout_seconds,
        headers={
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": settings.github_user_agent,
        },
        transport=transport,
    )


class GitHubClient:
    """
    Cliente de los endpoints /users de GitHub.
    
    Recibe el httpx.AsyncClient ya construido; el ciclo de vida del cliente
    lo gestiona quien lo crea (lifespan de la app o los tests).
    """
    
    def __init__(self, client: httpx.AsyncClient, max_retries: int = 0, retry_backoff: float = 0.5):
        self._client = client
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
    
    async def get_user(self, user_id: str) -> GitHubUser:
        """GET /users/{user_id}"""
        # "." y ".." no llegan como segmento: se resolverían a otro recurso
        if not user_id.strip("."):
            raise UserNotFound(f"Invalid GitHub user id: {user_id!r}", url=f"/users/{user_id}")
        data = await self._get_json(f"/users/{quote(user_id, safe='')}")
        return self._decode(GitHubUser, data)
    
    async def get_followers(self, login: str) -> List[GitHubUser]:
        """GET /users/{login}/followers"""
        data = await self._get_json(f"/users/{quote(login, safe='')}/followers")
        return self._decode_list(_FOLLOWERS_ADAPTER, data)
    
    async def get_repos(self, login: str) -> List[GitHubRepo]:
        """GET /users/{login}/repos"""
        data = await self._get_json(f"/users/{quote(login, safe='')}/repos")
        return self._decode_list(_REPOS_ADAPTER, data)
    
    async def _get_json(self, path: str) -> Any:
        attempt = 0
        while True:
            try:
                response = await self._client.get(path)
                break
            except httpx.TransportError as e:
                if attempt >= self.max_retries:
                    logger.error(f"Error de transporte en GET {path}: {e}")
                    raise UpstreamUnavailable(f"GitHub API unreachable: {e}", url=path) from e
                attempt += 1
                delay = self.retry_backoff * 2 ** (attempt - 1)
                logger.warning(f"Reintentando GET {path} en {delay:.2f}s ({attempt}/{self.max_retries}): {e}")
                await asyncio.sleep(delay)
        
        logger.info(f"GET {path} -> {response.status_code}")
        
        if response.status_code == 404:
            raise UserNotFound(f"GitHub resource not found: {path}", url=path)
        if response.is_error:
            raise UpstreamStatusError(
                f"GitHub API responded {response.status_code} for {path}",
                url=path,
                upstream_status=response.status_code,
            )
        
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamDecodeError(f"Invalid JSON from {path}: {e}", url=path) from e
    
    @staticmethod
    def _decode(model: Type[GitHubUser], data: Any) -> GitHubUser:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise UpstreamDecodeError(f"Unexpected user shape: {e.error_count()} errors") from e
    
    @staticmethod
    def _decode_list(adapter: TypeAdapter, data: Any) -> list:
        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            raise UpstreamDecodeError(f"Unexpected list shape: {e.error_count()} errors") from e
