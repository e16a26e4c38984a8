"""
Errores al consultar la API de GitHub
"""
from typing import Optional


class UpstreamError(Exception):
    """Error base al consultar la API externa"""
    
    status_code = 502
    error_code = "UPSTREAM_ERROR"
    
    def __init__(self, message: str, *, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class UpstreamUnavailable(UpstreamError):
    """Fallo de transporte (conexión, timeout)"""
    
    status_code = 503
    error_code = "UPSTREAM_UNAVAILABLE"


class UpstreamStatusError(UpstreamError):
    """La API respondió con un status no exitoso"""
    
    def __init__(self, message: str, *, url: Optional[str] = None, upstream_status: int):
        self.upstream_status = upstream_status
        super().__init__(message, url=url)


class UpstreamDecodeError(UpstreamError):
    """El body no coincide con el JSON esperado"""
    
    error_code = "UPSTREAM_DECODE_ERROR"


class UserNotFound(UpstreamError):
    """El usuario no existe en GitHub"""
    
    status_code = 404
    error_code = "NOT_FOUND"
