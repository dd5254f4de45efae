"""Client/user registry loading.

The registry is two JSON arrays read once at startup:

  clients.json  [{"client_id", "client_secret", "redirect_uris", ...}]
  users.json    [{"id", "name", "email", ...}]

Anything beyond the required keys is carried along untouched.  A malformed
file stops the server from starting rather than serving a partial registry.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mock_oauth.models.client import Client
from mock_oauth.models.user import User
from mock_oauth.repos.client_repo import InMemoryClientRepo
from mock_oauth.repos.user_repo import InMemoryUserRepo

logger = logging.getLogger(__name__)


class RegistryError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class Registry:
    clients: InMemoryClientRepo
    users: InMemoryUserRepo


def _read_array(path: Path) -> list[Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RegistryError(f"cannot read {path}: {e}") from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise RegistryError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise RegistryError(f"{path} must contain a JSON array")
    return data


def build_registry(
    client_records: list[Any], user_records: list[Any]
) -> Registry:
    """Validate raw records and load them into fresh in-memory repos."""
    clients = InMemoryClientRepo()
    for i, record in enumerate(client_records):
        if not isinstance(record, dict):
            raise RegistryError(f"client #{i} must be an object")
        client_id = record.get("client_id")
        client_secret = record.get("client_secret")
        redirect_uris = record.get("redirect_uris")
        if not isinstance(client_id, str) or not client_id:
            raise RegistryError(f"client #{i} has no client_id")
        if not isinstance(client_secret, str):
            raise RegistryError(f"client {client_id!r} has no client_secret")
        if not isinstance(redirect_uris, list) or not all(
            isinstance(uri, str) for uri in redirect_uris
        ):
            raise RegistryError(
                f"client {client_id!r} redirect_uris must be a list of strings"
            )
        try:
            clients.register(
                Client.new(
                    client_id=client_id,
                    client_secret=client_secret,
                    redirect_uris=redirect_uris,
                    name=record.get("name"),
                )
            )
        except ValueError as e:
            raise RegistryError(str(e)) from e

    users = InMemoryUserRepo()
    for i, record in enumerate(user_records):
        if not isinstance(record, dict):
            raise RegistryError(f"user #{i} must be an object")
        if not isinstance(record.get("id"), (str, int)) or isinstance(
            record.get("id"), bool
        ):
            raise RegistryError(f"user #{i} needs a string or integer id")
        try:
            users.add(User.from_record(record))
        except ValueError as e:
            raise RegistryError(str(e)) from e

    return Registry(clients=clients, users=users)


def load_registry(clients_path: Path, users_path: Path) -> Registry:
    registry = build_registry(_read_array(clients_path), _read_array(users_path))
    logger.info(
        "Registry loaded  clients=%d users=%d  (%s, %s)",
        len(registry.clients),
        len(registry.users),
        clients_path,
        users_path,
    )
    return registry
