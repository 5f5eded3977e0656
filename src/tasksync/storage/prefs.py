# src/tasksync/storage/prefs.py

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.ports import KeyValueBackend
from ..tasks.task_models import DEFAULT_PROJECTS, Project
from .keys import ONBOARDED_KEY, PROJECTS_KEY, SETTINGS_KEY

logger = logging.getLogger(__name__)

DEFAULT_APP_SETTINGS: dict[str, Any] = {"haptic_enabled": True}


class PreferencesStore:
    """
    Small local slots next to the task collection: project list, onboarding
    flag and the user settings blob. Same fail-open policy as the task store.
    """

    def __init__(self, backend: KeyValueBackend) -> None:
        self._backend = backend

    def _get_json(self, key: str) -> Any:
        try:
            raw = self._backend.get(key)
            return None if raw is None else json.loads(raw)
        except Exception:
            logger.exception("Failed to load key=%s", key)
            return None

    def _set_json(self, key: str, value: Any) -> None:
        try:
            self._backend.set(key, json.dumps(value, ensure_ascii=False))
        except Exception:
            logger.exception("Failed to save key=%s", key)

    # ---- projects ----

    def get_projects(self) -> list[Project]:
        data = self._get_json(PROJECTS_KEY)
        if not isinstance(data, list):
            return list(DEFAULT_PROJECTS)
        out: list[Project] = []
        for item in data:
            try:
                out.append(Project.from_dict(item))
            except ValueError as e:
                logger.warning("Skipping undecodable project: %s", e)
        return out

    def save_projects(self, projects: list[Project]) -> None:
        self._set_json(PROJECTS_KEY, [p.to_dict() for p in projects])

    # ---- onboarding ----

    def is_onboarded(self) -> bool:
        try:
            return self._backend.get(ONBOARDED_KEY) == "1"
        except Exception:
            logger.exception("Failed to read onboarding flag")
            return False

    def mark_onboarded(self) -> None:
        try:
            self._backend.set(ONBOARDED_KEY, "1")
        except Exception:
            logger.exception("Failed to save onboarding flag")

    # ---- settings blob ----

    def load_app_settings(self) -> dict[str, Any]:
        data = self._get_json(SETTINGS_KEY)
        out = dict(DEFAULT_APP_SETTINGS)
        if isinstance(data, dict):
            out.update(data)
        return out

    def save_app_settings(self, values: dict[str, Any]) -> None:
        self._set_json(SETTINGS_KEY, values)
