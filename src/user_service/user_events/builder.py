"""
Construcción del evento UserInfoChanged
"""
import logging
import time
import uuid
from typing import List, Optional, Sequence

from .config import Settings
from .github_client import GitHubClient
from .models import (
    EventMeta, GitHubRepo, GitHubUser, ProfileUpdateRequest,
    UserInfoEvent, UserInfoPayload
)


logger = logging.getLogger(__name__)


def split_name(name: Optional[str]) -> tuple:
    """Separar el nombre completo en (nombre, apellido) por el primer espacio"""
    first_name, _, last_name = (name or "").partition(" ")
    return first_name, last_name


def route_repos(followers: List[str], repo_names: List[str], legacy: bool = False) -> List[str]:
    """Lista de repos del payload.
    
    Con ``legacy`` se reproduce la salida del servicio anterior: los logins
    de los followers seguidos solo del último repo.
    """
    if not legacy:
        return list(repo_names)
    if not repo_names:
        return []
    return followers + [repo_names[-1]]


def assemble_user_info_event(
    profile: GitHubUser,
    followers: Sequence[GitHubUser],
    repos: Sequence[GitHubRepo],
    overrides: Optional[ProfileUpdateRequest] = None,
    *,
    event_type: str = "UserInfoChanged",
    service_id: str = "user-service",
    legacy_repo_routing: bool = False
) -> UserInfoEvent:
    """Armar el evento a partir de los datos ya obtenidos de GitHub"""
    meta = EventMeta(
        type=event_type,
        event_id=str(uuid.uuid4()),
        created_at=time.time_ns(),
        trace_id=str(uuid.uuid4()),
        service_id=service_id
    )
    
    if overrides is None:
        first_name, last_name = split_name(profile.name)
        email = profile.email or ""
        time_zone_id = ""
    else:
        first_name = overrides.first_name
        last_name = overrides.last_name
        email = overrides.email
        time_zone_id = overrides.time_zone_id
    
    follower_logins = [follower.login for follower in followers]
    repo_names = [repo.name for repo in repos]
    
    payload = UserInfoPayload(
        id=profile.id,
        username=profile.login,
        followers=follower_logins,
        repos=route_repos(follower_logins, repo_names, legacy=legacy_repo_routing),
        email=email,
        first_name=first_name,
        last_name=last_name,
        time_zone_id=time_zone_id
    )
    return UserInfoEvent(meta=meta, payload=payload)


class EventBuilder:
    """Obtiene followers y repos de GitHub y arma el evento"""
    
    def __init__(self, github: GitHubClient, settings: Settings):
        self.github = github
        self.settings = settings
    
    async def build(
        self,
        profile: GitHubUser,
        overrides: Optional[ProfileUpdateRequest] = None
    ) -> UserInfoEvent:
        followers = await self.github.get_followers(profile.login)
        repos = await self.github.get_repos(profile.login)
        
        event = assemble_user_info_event(
            profile,
            followers,
            repos,
            overrides,
            event_type=self.settings.event_type,
            service_id=self.settings.service_name,
            legacy_repo_routing=self.settings.legacy_repo_routing
        )
        logger.info(
            f"Evento {event.meta.type} generado: {event.meta.event_id} "
            f"(user={profile.login}, followers={len(followers)}, repos={len(repos)})"
        )
        return event
