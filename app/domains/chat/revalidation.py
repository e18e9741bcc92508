"""Hooks for invalidating rendered views after chat mutations."""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

ROOT_PATH = "/"


class PathRevalidator(ABC):
    """Invalidates whatever rendered view is keyed by a route path."""

    @abstractmethod
    async def revalidate(self, path: str) -> None:
        pass


class LoggingPathRevalidator(PathRevalidator):
    """Default revalidator for deployments without a rendering layer."""

    async def revalidate(self, path: str) -> None:
        logger.debug("Revalidate view %s", path)
