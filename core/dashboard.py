# core/dashboard.py
"""
Loads the lessons and clients of the signed-in user into view state.

Both reads are independent: any lessons failure is notified to the user and
keeps the last good list; a clients failure is only logged.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from auth.errors import BackendError
from core.models import Client, Lesson

logger = logging.getLogger(__name__)

Notify = Callable[[str, str], None]


@dataclass
class DashboardState:
    user_id: Optional[str] = None
    lessons: list[Lesson] = field(default_factory=list)
    clients: list[Client] = field(default_factory=list)
    lessons_loading: bool = False
    clients_loading: bool = False
    error: Optional[str] = None


class DashboardLoader:
    def __init__(
        self,
        fetch_lessons: Callable[[str], list[Lesson]],
        fetch_clients: Callable[[str], list[Client]],
        notify: Notify,
    ):
        self._fetch_lessons = fetch_lessons
        self._fetch_clients = fetch_clients
        self._notify = notify
        self.state = DashboardState()
        self._alive = True
        # bumped on every refresh; results of an older refresh are dropped
        self._generation = 0

    @property
    def alive(self) -> bool:
        return self._alive

    def close(self) -> None:
        self._alive = False

    def _current(self, generation: int) -> bool:
        return self._alive and generation == self._generation

    def set_user(self, user_id: Optional[str]) -> None:
        if user_id == self.state.user_id:
            return

        self._generation += 1
        self.state = DashboardState(user_id=user_id)

        if user_id is not None:
            self.refresh()

    def refresh(self) -> None:
        user_id = self.state.user_id
        if user_id is None or not self._alive:
            return

        self._generation += 1
        generation = self._generation

        self._load_lessons(user_id, generation)
        self._load_clients(user_id, generation)

    # =====================================================
    # Reads
    # =====================================================
    def _load_lessons(self, user_id: str, generation: int) -> None:
        self.state.lessons_loading = True
        self.state.error = None
        try:
            lessons = self._fetch_lessons(user_id)
        except BackendError as e:
            if not self._current(generation):
                return
            logger.error("Lessons fetch failed for %s: %s", user_id, e.message)
            self.state.error = e.message or "Failed to load dashboard data."
            self._notify("Load failed", self.state.error)
        except Exception:
            if not self._current(generation):
                return
            logger.exception("Lessons fetch failed for %s", user_id)
            self.state.error = "Failed to load dashboard data."
            self._notify("Load failed", self.state.error)
        else:
            if self._current(generation):
                self.state.lessons = list(lessons or [])
        finally:
            if self._current(generation):
                self.state.lessons_loading = False

    def _load_clients(self, user_id: str, generation: int) -> None:
        self.state.clients_loading = True
        try:
            clients = self._fetch_clients(user_id)
        except BackendError as e:
            if self._current(generation):
                logger.warning("Clients fetch failed for %s: %s", user_id, e.message)
        except Exception as e:
            if self._current(generation):
                logger.warning("Clients fetch failed for %s: %s", user_id, e)
        else:
            if self._current(generation):
                self.state.clients = list(clients or [])
        finally:
            if self._current(generation):
                self.state.clients_loading = False
