"""
Publicador de eventos en Apache Pulsar con circuit breaker
"""
import logging
import time
from enum import Enum
from typing import Any, Dict, Optional

from .config import Settings
from .models import UserInfoEvent


logger = logging.getLogger(__name__)


class CircuitBreakerState(Enum):
    """Estados del circuit breaker"""
    CLOSED = "closed"      # Funcionando normalmente
    OPEN = "open"          # Fallos detectados, envíos rechazados
    HALF_OPEN = "half_open"  # Probando si el broker se recuperó


class CircuitBreakerOpen(Exception):
    """El circuit breaker rechaza la llamada"""


class CircuitBreaker:
    """Circuit breaker simple para Pulsar"""
    
    def __init__(self, failure_threshold: int = 5, recovery_timeout: int = 60):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.last_failure_time: Optional[float] = None
        self.state = CircuitBreakerState.CLOSED
    
    def call(self, func, *args, **kwargs):
        """Ejecutar función con circuit breaker"""
        if self.state == CircuitBreakerState.OPEN:
            if self._should_attempt_reset():
                self.state = CircuitBreakerState.HALF_OPEN
            else:
                raise CircuitBreakerOpen("Circuit breaker is OPEN")
        
        try:
            result = func(*args, **kwargs)
        except Exception:
            self._on_failure()
            raise
        self._on_success()
        return result
    
    def _should_attempt_reset(self) -> bool:
        return (time.time() - self.last_failure_time) > self.recovery_timeout
    
    def _on_success(self):
        self.failure_count = 0
        self.state = CircuitBreakerState.CLOSED
    
    def _on_failure(self):
        self.failure_count += 1
        self.last_failure_time = time.time()
        if self.failure_count >= self.failure_threshold:
            self.state = CircuitBreakerState.OPEN


class EventPublisher:
    """Emite eventos UserInfoChanged en Pulsar (best effort, sin garantías de entrega)"""
    
    def __init__(self, settings: Settings, client: Any = None):
        self.settings = settings
        self.client = client
        self.producer = None
        self.circuit_breaker = CircuitBreaker(
            failure_threshold=settings.circuit_breaker_failure_threshold,
            recovery_timeout=settings.circuit_breaker_recovery_timeout
        )
        self._connected = False
    
    async def connect(self):
        """Conectar a Pulsar y crear el producer del topic"""
        logger.info(f"Conectando a Pulsar: {self.settings.pulsar_url}")
        
        if self.client is None:
            # pulsar-client es una dependencia opcional (extra "pulsar")
            import pulsar
            self.client = pulsar.Client(
                self.settings.pulsar_url,
                connection_timeout_ms=10000,
                operation_timeout_seconds=30
            )
        
        try:
            self.producer = self.client.create_producer(
                self.settings.user_info_changed_topic,
                send_timeout_millis=self.settings.producer_send_timeout_ms
            )
        except Exception:
            self.client.close()
            logger.error(f"Error creando producer para {self.settings.user_info_changed_topic}")
            raise
        self._connected = True
        logger.info(f"Producer creado para topic: {self.settings.user_info_changed_topic}")
    
    async def disconnect(self):
        """Desconectar de Pulsar"""
        if not self._connected:
            return
        try:
            if self.producer:
                self.producer.close()
            if self.client:
                self.client.close()
                logger.info("Cliente Pulsar cerrado")
        except Exception as e:
            logger.error(f"Error desconectando de Pulsar: {e}")
        finally:
            self._connected = False
    
    async def publish(self, event: UserInfoEvent) -> bool:
        """Publicar el evento; devuelve False si no se pudo enviar"""
        if not self._connected:
            logger.warning(f"Evento no publicado, Pulsar desconectado: {event.meta.event_id}")
            return False
        
        data = event.model_dump_json().encode("utf-8")
        partition_key = event.payload.username
        
        def send_message():
            self.producer.send(data, partition_key=partition_key)
        
        try:
            self.circuit_breaker.call(send_message)
        except Exception as e:
            logger.error(f"Error publicando evento {event.meta.event_id}: {e}")
            return False
        
        logger.info(f"Evento publicado: {event.meta.event_id}")
        return True
    
    def get_health_status(self) -> Dict[str, Any]:
        """Obtener estado de salud del publicador"""
        return {
            "connected": self._connected,
            "circuit_breaker_state": self.circuit_breaker.state.value,
            "failure_count": self.circuit_breaker.failure_count,
            "topic": self.settings.user_info_changed_topic
        }
