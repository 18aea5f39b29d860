"""Registry of supported clients."""

import logging
from functools import cache
from pathlib import Path

from skillvault.clients.base import Client
from skillvault.clients.claude_code import ClaudeCodeClient
from skillvault.clients.codex import CodexClient
from skillvault.clients.cursor import CursorClient
from skillvault.clients.gemini import GeminiClient
from skillvault.core.config import SkillvaultConfig
from skillvault.core.errors import UnknownClientError

logger = logging.getLogger(__name__)


@cache
def _all_clients(home: Path) -> tuple[Client, ...]:
    """Return all registered clients for a home directory.

    Cached per home so each client instance is created once.
    """
    return (
        ClaudeCodeClient(home),
        CodexClient(home),
        CursorClient(home),
        GeminiClient(home),
    )


class ClientRegistry:
    """Lookup and selection over a fixed set of clients."""

    def __init__(self, clients: tuple[Client, ...]) -> None:
        self._clients = tuple(sorted(clients, key=lambda c: c.client_id))

    @staticmethod
    def default(home: Path) -> "ClientRegistry":
        return ClientRegistry(_all_clients(home))

    def list_clients(self) -> list[Client]:
        return list(self._clients)

    def client_ids(self) -> list[str]:
        return [client.client_id for client in self._clients]

    def get_client(self, client_id: str) -> Client:
        """Look up a client by id.

        Raises:
            UnknownClientError: If no client has this id
        """
        for client in self._clients:
            if client.client_id == client_id:
                return client
        raise UnknownClientError(client_id, self.client_ids())

    def find_client(self, client_id: str) -> Client | None:
        for client in self._clients:
            if client.client_id == client_id:
                return client
        return None

    def detect_installed(self) -> list[Client]:
        return [client for client in self._clients if client.is_detected()]

    def select_clients(self, config: SkillvaultConfig, requested: list[str] | None) -> list[Client]:
        """Choose the clients a run operates on.

        Detected clients plus config force-enabled ones, minus config-disabled
        ones, restricted to requested when given.

        Raises:
            UnknownClientError: If config or requested names an unknown client
        """
        for client_id in (*config.enabled_clients, *config.disabled_clients, *(requested or [])):
            self.get_client(client_id)

        detected = {client.client_id for client in self.detect_installed()}
        selected: list[Client] = []
        for client in self._clients:
            enabled = client.client_id in detected or client.client_id in config.enabled_clients
            if not enabled or client.client_id in config.disabled_clients:
                continue
            if requested is not None and client.client_id not in requested:
                continue
            selected.append(client)

        if requested is not None:
            # Explicitly requested clients are honored even when not detected
            for client_id in requested:
                client = self.get_client(client_id)
                if client not in selected and client_id not in config.disabled_clients:
                    logger.debug("Client %s requested but not detected", client_id)
                    selected.append(client)
            selected.sort(key=lambda c: c.client_id)
        return selected


def parse_client_list(value: str | None) -> list[str] | None:
    """Split a --clients CSV into ids; None means no restriction."""
    if value is None:
        return None
    ids = [part.strip() for part in value.split(",") if part.strip()]
    return ids
