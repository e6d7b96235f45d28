"""
Lifecycle hooks for identity events.

Observers subscribe to named events without the workflows knowing about them.
A failing observer is logged and recorded on the HookResult; it never undoes
the committed operation that triggered it.

Events emitted by the application:
- app.startup / app.shutdown
- auth.signup: account created (user_id, email)
- auth.login: successful sign-in (user_id)
- auth.failed: rejected sign-in (email)
- auth.email_verified: verification token consumed (user_id)
- auth.verification_resent: verification email re-dispatched (user_id)
- user.deleted: account soft-deleted (user_id)
- user.purged: account hard-deleted (user_id)

Usage:
    from rbac_api.core.hooks import hooks

    @hooks.on("auth.signup")
    async def audit_signup(user_id, email, **_):
        ...
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Awaitable, Callable

import structlog

logger = structlog.get_logger()

Handler = Callable[..., Awaitable[Any]]


class HookPriority(IntEnum):
    """Hook execution priority (lower runs first)."""

    FIRST = 0
    NORMAL = 50
    LAST = 100


@dataclass
class Hook:
    """Registered hook information."""

    name: str
    handler: Handler
    priority: HookPriority = HookPriority.NORMAL
    once: bool = False


@dataclass
class HookResult:
    """Result from running hooks."""

    hook_name: str
    results: list[Any] = field(default_factory=list)
    errors: list[tuple[str, Exception]] = field(default_factory=list)


class HookManager:
    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = defaultdict(list)

    def register(
        self,
        name: str,
        handler: Handler,
        *,
        priority: HookPriority = HookPriority.NORMAL,
        once: bool = False,
    ) -> Hook:
        """Register a hook handler."""
        hook = Hook(name=name, handler=handler, priority=priority, once=once)
        self._hooks[name].append(hook)
        self._hooks[name].sort(key=lambda h: h.priority)
        logger.debug("hook.registered", hook=name, priority=int(priority))
        return hook

    def unregister(self, name: str, handler: Handler) -> bool:
        """Unregister a hook handler."""
        registered = self._hooks.get(name, [])
        for i, hook in enumerate(registered):
            if hook.handler is handler:
                del registered[i]
                return True
        return False

    def on(
        self,
        name: str,
        *,
        priority: HookPriority = HookPriority.NORMAL,
        once: bool = False,
    ) -> Callable[[Handler], Handler]:
        """Decorator to register a hook handler."""

        def decorator(func: Handler) -> Handler:
            self.register(name, func, priority=priority, once=once)
            return func

        return decorator

    async def trigger(self, name: str, **payload: Any) -> HookResult:
        """Run every handler for ``name`` in priority order."""
        result = HookResult(hook_name=name)
        spent: list[Hook] = []

        for hook in list(self._hooks.get(name, [])):
            try:
                result.results.append(await hook.handler(**payload))
            except Exception as e:
                result.errors.append((getattr(hook.handler, "__qualname__", repr(hook.handler)), e))
                logger.error("hook.handler_failed", hook=name, error=str(e))
            if hook.once:
                spent.append(hook)

        for hook in spent:
            self._hooks[name].remove(hook)

        return result

    def has_hooks(self, name: str) -> bool:
        """Check if any hooks are registered for name."""
        return bool(self._hooks.get(name))

    def clear(self, name: str | None = None) -> None:
        """Clear hooks. If name given, clear only that hook."""
        if name:
            self._hooks.pop(name, None)
        else:
            self._hooks.clear()


# Global hook manager instance
hooks = HookManager()
