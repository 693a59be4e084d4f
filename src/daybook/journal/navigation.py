"""List/detail navigation.

Two destinations: ``main`` (the entry list) and ``edit/{id}`` (the editor
for one entry). Entering an editor opens an editing session; leaving it
closes the session, which runs its save-or-delete reconciliation.
"""

from __future__ import annotations

from loguru import logger

from .reconciler import DraftReconciler
from .session import SessionManager

MAIN_ROUTE = "main"
EDIT_ROUTE = "edit/{id}"
INVALID_ENTRY_ID = 0


def edit_route(entry_id: int) -> str:
    return f"edit/{entry_id}"


def parse_route(route: str) -> tuple[str, int | None]:
    """Split a route into its pattern and entry id.

    ``"edit/42"`` -> ``("edit/{id}", 42)``. A malformed id falls back to
    :data:`INVALID_ENTRY_ID`. Unknown routes raise ValueError.
    """
    route = route.strip().strip("/")
    if route == MAIN_ROUTE:
        return MAIN_ROUTE, None
    name, sep, arg = route.partition("/")
    if name == "edit" and sep:
        try:
            return EDIT_ROUTE, int(arg)
        except ValueError:
            logger.warning(f"Malformed entry id in route '{route}'")
            return EDIT_ROUTE, INVALID_ENTRY_ID
    raise ValueError(f"Unknown route: {route}")


class Navigator:
    """Back stack of routes, starting at ``main``."""

    def __init__(self, sessions: SessionManager):
        self.sessions = sessions
        self._stack: list[str] = [MAIN_ROUTE]

    @property
    def current_route(self) -> str:
        return self._stack[-1]

    @property
    def current_destination(self) -> str:
        return parse_route(self.current_route)[0]

    @property
    def back_stack(self) -> list[str]:
        return list(self._stack)

    @property
    def editor(self) -> DraftReconciler | None:
        return self.sessions.active if self.current_destination == EDIT_ROUTE else None

    async def navigate(self, route: str) -> DraftReconciler | None:
        """Push *route*. Editor routes open a session and return it."""
        destination, entry_id = parse_route(route)
        if destination == EDIT_ROUTE:
            self._stack.append(edit_route(entry_id))
            return await self.sessions.open(entry_id)
        if self.current_destination == EDIT_ROUTE:
            await self.sessions.close()
        self._stack.append(MAIN_ROUTE)
        return None

    async def pop_back(self) -> bool:
        """Leave the current destination, opening a session if that lands on an editor.

        Returns False at the start destination.
        """
        if len(self._stack) <= 1:
            return False
        left = self._stack.pop()
        if parse_route(left)[0] == EDIT_ROUTE:
            await self.sessions.close()
        destination, entry_id = parse_route(self.current_route)
        if destination == EDIT_ROUTE:
            active = self.sessions.active
            if active is None or active.entry_id != entry_id:
                await self.sessions.open(entry_id)
        return True
