"""Database migrations that create indexes and seed each service's data."""

from __future__ import annotations

import logging
import sys
from datetime import datetime

from pymongo import IndexModel
from pymongo.errors import PyMongoError

from itemshop.accounts import Player, PlayerRole, PlayerTransaction, Role
from itemshop.config import ConfigError, load_config
from itemshop.database import DatabaseError, db_conn
from itemshop.models import Item
from itemshop.utils import local_time

logger = logging.getLogger(__name__)

_IMAGE_URL = "https://i.imgur.com/1Y8tQZM.png"


def _create_indexes(collection, key_sets) -> list:
    """Create indexes; failures are logged and ignored."""
    try:
        names = collection.create_indexes([IndexModel(keys) for keys in key_sets])
    except PyMongoError as exc:
        logger.warning("Index creation failed: %s", exc)
        return []
    for name in names:
        logger.info("Index: %s", name)
    return names


def role_documents() -> list:
    """Seed roles."""
    roles = [Role(title="player", code=0), Role(title="admin", code=1)]
    return [role.to_document() for role in roles]


def item_documents(now: datetime) -> list:
    """Seed items stamped with ``now``."""
    seeds = [("Diamond Sword", 1000, 100), ("Iron Sword", 500, 50), ("Wooden Sword", 100, 20)]
    return [
        Item(
            title=title,
            price=float(price),
            image_url=_IMAGE_URL,
            usage_status=True,
            damage=damage,
            created_at=now,
            updated_at=now,
        ).to_document()
        for title, price, damage in seeds
    ]


def player_documents(now: datetime) -> list:
    """Seed players stamped with ``now``."""
    password = "password"
    player_role = PlayerRole(role_title="player", role_code=0)
    seeds = [
        ("player001@example.com", "Player001", [player_role]),
        ("player002@example.com", "Player002", [player_role]),
        ("player003@example.com", "Player003", [player_role]),
        ("admin003@example.com", "Admin003", [player_role, PlayerRole(role_title="admin", role_code=0)]),
    ]
    return [
        Player(
            email=email,
            password=password,
            username=username,
            player_roles=list(roles),
            created_at=now,
            updated_at=now,
        ).to_document()
        for email, username, roles in seeds
    ]


def player_transaction_documents(player_ids, now: datetime) -> list:
    """Opening transactions of 1000 for each player id."""
    return [
        PlayerTransaction(player_id=f"player:{player_id}", amount=1000, created_at=now).to_document()
        for player_id in player_ids
    ]


def auth_migrate(client):
    db = client["auth_db"]
    _create_indexes(db["auth"], [[("_id", 1)], [("player_id", 1)], [("refresh_token", 1)]])
    roles = db["roles"]
    _create_indexes(roles, [[("_id", 1)], [("code", 1)]])
    result = roles.insert_many(role_documents())
    logger.info("Migrate completed: %s", result)
    return result


def inventory_migrate(client):
    db = client["inventory_db"]
    _create_indexes(db["players_inventory"], [[("player_id", 1), ("item_id", 1)]])
    result = db["players_inventory_queue"].insert_one({"offset": -1})
    logger.info("Migrate inventory completed: %s", result)
    return result


def item_migrate(client):
    db = client["item_db"]
    items = db["items"]
    _create_indexes(items, [[("_id", 1)], [("title", 1)]])
    result = items.insert_many(item_documents(local_time()))
    logger.info("Migrate completed: %s", result)
    return result


def payment_migrate(client):
    db = client["payment_db"]
    result = db["payment_queue"].insert_one({"offset": -1})
    logger.info("Migrate payment completed: %s", result)
    return result


def player_migrate(client):
    db = client["player_db"]
    _create_indexes(db["player_transactions"], [[("_id", 1)], [("player_id", 1)]])
    players = db["players"]
    _create_indexes(players, [[("_id", 1)], [("email", 1)]])

    result = players.insert_many(player_documents(local_time()))
    logger.info("Migrate completed: %s", result)

    transactions = player_transaction_documents(result.inserted_ids, local_time())
    tx_result = db["player_transactions"].insert_many(transactions)
    logger.info("Migrate player_transactions completed: %s", tx_result)

    queue_result = db["player_transactions_queue"].insert_one({"offset": -1})
    logger.info("Migrate player_transaction_queue completed: %s", queue_result)
    return result


_MIGRATIONS = {
    "player": player_migrate,
    "auth": auth_migrate,
    "item": item_migrate,
    "inventory": inventory_migrate,
    "payment": payment_migrate,
}


def migrate(config, client):
    """Run the migration for the configured app; unknown names do nothing."""
    run = _MIGRATIONS.get(config.app.name)
    return None if run is None else run(client)


def main(argv=None) -> int:
    """Load the env file named on the command line and migrate its service."""
    logging.basicConfig(level=logging.INFO)
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        logger.error("Error: .env path is required")
        return 1
    try:
        config = load_config(args[0])
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1
    if config.app.name not in _MIGRATIONS:
        return 0
    try:
        client = db_conn(config)
    except DatabaseError as exc:
        logger.error("%s", exc)
        return 1
    try:
        migrate(config, client)
    finally:
        client.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())