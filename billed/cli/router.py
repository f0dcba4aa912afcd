import logging

from billed.constants import ROUTES_PATH

logger = logging.getLogger(__name__)


class Router:
    def __init__(self, initial: str = ROUTES_PATH["Bills"]) -> None:
        self.current = initial

    def navigate(self, route: str) -> None:
        if route not in ROUTES_PATH.values():
            raise ValueError(f"Unknown route: {route}")
        logger.debug("Navigate %s -> %s", self.current, route)
        self.current = route
