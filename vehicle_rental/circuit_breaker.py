import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

CLOSED = "CLOSED"
OPEN = "OPEN"
HALF_OPEN = "HALF_OPEN"


class CircuitOpenError(Exception):
    pass


@dataclass
class CircuitBreakerStats:
    failures: int = 0
    successes: int = 0
    last_failure_time: Optional[float] = None
    state: str = CLOSED


class CircuitBreaker:
    """
    Guards calls to an unreliable dependency.

    After ``failure_threshold`` consecutive failures the breaker opens and
    short-circuits to ``fallback`` (or raises ``CircuitOpenError``) until
    ``reset_timeout`` seconds have passed; the next call is then let through
    as a trial in the HALF_OPEN state.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        reset_timeout: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.clock = clock
        self.stats = CircuitBreakerStats()

    @property
    def state(self) -> str:
        return self.stats.state

    async def call(self, func: Callable, *args, fallback: Optional[Callable] = None, **kwargs) -> Any:
        if self.stats.state == OPEN:
            if self._should_attempt_reset():
                logger.info(f"Circuit breaker {self.name} half-open, trying a call")
                self.stats.state = HALF_OPEN
            else:
                if fallback is not None:
                    return await _invoke(fallback)
                raise CircuitOpenError(f"Circuit breaker {self.name} is OPEN")

        try:
            result = await _invoke(func, *args, **kwargs)
        except Exception as e:
            self._on_failure(e)
            if fallback is not None:
                return await _invoke(fallback)
            raise

        self._on_success()
        return result

    def _on_success(self):
        self.stats.successes += 1
        self.stats.failures = 0
        if self.stats.state == HALF_OPEN:
            logger.info(f"Circuit breaker {self.name} closed")
            self.stats.state = CLOSED

    def _on_failure(self, error: Exception):
        self.stats.failures += 1
        self.stats.last_failure_time = self.clock()
        logger.warning(
            f"Call through circuit breaker {self.name} failed "
            f"({self.stats.failures}/{self.failure_threshold}): {str(error)}"
        )

        if self.stats.state == HALF_OPEN or self.stats.failures >= self.failure_threshold:
            if self.stats.state != OPEN:
                logger.error(f"Circuit breaker {self.name} opened")
            self.stats.state = OPEN

    def _should_attempt_reset(self) -> bool:
        if self.stats.last_failure_time is None:
            return False
        return (self.clock() - self.stats.last_failure_time) >= self.reset_timeout

    def get_state(self) -> dict:
        return {
            "name": self.name,
            "state": self.stats.state,
            "failures": self.stats.failures,
            "last_failure_time": self.stats.last_failure_time,
        }


async def _invoke(func: Callable, *args, **kwargs) -> Any:
    if inspect.iscoroutinefunction(func):
        return await func(*args, **kwargs)
    return func(*args, **kwargs)


class CircuitBreakerManager:
    def __init__(self):
        self.breakers: Dict[str, CircuitBreaker] = {}

    def get_breaker(self, name: str, failure_threshold: int = 5, reset_timeout: float = 60.0) -> CircuitBreaker:
        if name not in self.breakers:
            self.breakers[name] = CircuitBreaker(
                name=name,
                failure_threshold=failure_threshold,
                reset_timeout=reset_timeout,
            )
        return self.breakers[name]

    def get_all_states(self) -> dict:
        return {name: breaker.get_state() for name, breaker in self.breakers.items()}


circuit_breaker_manager = CircuitBreakerManager()
