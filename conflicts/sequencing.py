"""
Last-write-wins bookkeeping for live (debounced) form validation.

Each validation run takes a ticket from its channel. The latest generation per
(scope, channel) lives in the Django cache so every request from the same
caller sees it, whichever worker serves it. When a newer run starts on the same
channel the older ticket goes stale and its result is dropped instead of being
shown. In-flight lookups are never cancelled.
"""
from dataclasses import dataclass
from typing import Any, Callable, Optional

from django.conf import settings
from django.core.cache import cache


@dataclass(frozen=True)
class ValidationTicket:
    channel: str
    generation: int


class ValidationSequencer:
    def __init__(self, scope: str = "default", cache_backend=None, timeout: Optional[int] = None):
        self.scope = scope
        self.cache = cache_backend or cache
        self.timeout = timeout if timeout is not None else getattr(settings, "LIVE_VALIDATION_TIMEOUT", 15 * 60)

    def _key(self, channel: str) -> str:
        return f"conflicts:live:{self.scope}:{channel}"

    def current_generation(self, channel: str = "default") -> int:
        return int(self.cache.get(self._key(channel)) or 0)

    def begin(self, channel: str = "default", generation: Optional[int] = None) -> ValidationTicket:
        """
        Start a validation run.

        Without ``generation`` the channel counter is bumped. Callers that number
        their own keystrokes pass ``generation``; it only moves the counter
        forward, so a late request carrying an older number is stale at once.
        """
        key = self._key(channel)
        if generation is None:
            self.cache.add(key, 0, timeout=self.timeout)
            try:
                generation = self.cache.incr(key)
            except ValueError:
                # Evicted between add() and incr().
                generation = 1
                self.cache.set(key, generation, timeout=self.timeout)
        elif generation > self.current_generation(channel):
            self.cache.set(key, generation, timeout=self.timeout)
        return ValidationTicket(channel=channel, generation=generation)

    def is_current(self, ticket: ValidationTicket) -> bool:
        return self.current_generation(ticket.channel) == ticket.generation

    def resolve(self, ticket: ValidationTicket, result: Any) -> Optional[Any]:
        return result if self.is_current(ticket) else None

    def run(self, channel: str, func: Callable, *args, generation: Optional[int] = None, **kwargs) -> Optional[Any]:
        ticket = self.begin(channel, generation)
        if not self.is_current(ticket):
            return None
        return self.resolve(ticket, func(*args, **kwargs))
