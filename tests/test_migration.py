import logging
from collections import defaultdict
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure, PyMongoError

from itemshop.config import AppConfig, Config
from itemshop.migration import (
    auth_migrate,
    inventory_migrate,
    item_documents,
    item_migrate,
    main,
    migrate,
    payment_migrate,
    player_documents,
    player_migrate,
    player_transaction_documents,
    role_documents,
)

NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


class FakeCollection:
    def __init__(self):
        self.indexes = []
        self.documents = []
        self.fail_indexes = False
        self.fail_insert = False

    def create_indexes(self, models):
        if self.fail_indexes:
            raise OperationFailure("index failed")
        self.indexes.extend(list(m.document["key"].items()) for m in models)
        return [m.document["name"] for m in models]

    def insert_many(self, docs):
        if self.fail_insert:
            raise PyMongoError("insert failed")
        for doc in docs:
            doc.setdefault("_id", ObjectId())
        self.documents.extend(docs)
        return SimpleNamespace(inserted_ids=[doc["_id"] for doc in docs])

    def insert_one(self, doc):
        result = self.insert_many([doc])
        return SimpleNamespace(inserted_id=result.inserted_ids[0])


class FakeClient:
    def __init__(self):
        self.dbs = defaultdict(lambda: defaultdict(FakeCollection))

    def __getitem__(self, name):
        return self.dbs[name]


def test_role_documents():
    assert role_documents() == [{"title": "player", "code": 0}, {"title": "admin", "code": 1}]


def test_item_documents():
    docs = item_documents(NOW)
    assert [(d["title"], d["price"], d["damage"]) for d in docs] == [
        ("Diamond Sword", 1000, 100),
        ("Iron Sword", 500, 50),
        ("Wooden Sword", 100, 20),
    ]
    assert all(d["usage_status"] and d["created_at"] == NOW == d["updated_at"] for d in docs)
    assert all("_id" not in d for d in docs)


def test_player_documents():
    docs = player_documents(NOW)
    assert [d["username"] for d in docs] == ["Player001", "Player002", "Player003", "Admin003"]
    assert all(d["email"].endswith("@example.com") for d in docs)
    assert docs[3]["player_roles"] == [
        {"role_title": "player", "role_code": 0},
        {"role_title": "admin", "role_code": 0},
    ]


def test_player_transaction_documents():
    oid = ObjectId()
    docs = player_transaction_documents([oid], NOW)
    assert docs == [{"player_id": "player:" + str(oid), "amount": 1000, "created_at": NOW}]


def test_auth_migrate():
    client = FakeClient()
    auth_migrate(client)
    db = client.dbs["auth_db"]
    assert db["auth"].indexes == [[("_id", 1)], [("player_id", 1)], [("refresh_token", 1)]]
    assert db["roles"].indexes == [[("_id", 1)], [("code", 1)]]
    assert [d["title"] for d in db["roles"].documents] == ["player", "admin"]


def test_index_failure_is_ignored():
    client = FakeClient()
    client["auth_db"]["auth"].fail_indexes = True
    auth_migrate(client)
    assert len(client.dbs["auth_db"]["roles"].documents) == 2


def test_insert_failure_propagates():
    client = FakeClient()
    client["item_db"]["items"].fail_insert = True
    with pytest.raises(PyMongoError):
        item_migrate(client)


def test_inventory_and_payment_queues():
    client = FakeClient()
    inventory_migrate(client)
    payment_migrate(client)
    inv = client.dbs["inventory_db"]
    assert inv["players_inventory"].indexes == [[("player_id", 1), ("item_id", 1)]]
    assert inv["players_inventory_queue"].documents[0]["offset"] == -1
    assert client.dbs["payment_db"]["payment_queue"].documents[0]["offset"] == -1


def test_player_migrate_links_transactions():
    client = FakeClient()
    result = player_migrate(client)
    db = client.dbs["player_db"]
    assert len(result.inserted_ids) == 4
    tx_ids = [d["player_id"] for d in db["player_transactions"].documents]
    assert tx_ids == ["player:" + str(i) for i in result.inserted_ids]
    assert db["players"].indexes == [[("_id", 1)], [("email", 1)]]
    assert db["player_transactions_queue"].documents[0]["offset"] == -1


def test_migrate_dispatches_on_app_name():
    client = FakeClient()
    migrate(Config(app=AppConfig(name="item")), client)
    assert set(client.dbs) == {"item_db"}
    assert len(client.dbs["item_db"]["items"].documents) == 3


def test_migrate_unknown_name_does_nothing():
    client = FakeClient()
    assert migrate(Config(app=AppConfig(name="shipping")), client) is None
    assert client.dbs == {}


def test_main_requires_env_path(caplog):
    with caplog.at_level(logging.ERROR):
        assert main([]) == 1
    assert "env path" in caplog.text


def test_main_missing_env_file(tmp_path):
    assert main([str(tmp_path / "missing.env")]) == 1


def test_main_runs_payment_migration(tmp_path, monkeypatch, mocker):
    values = {
        "APP_NAME": "payment",
        "DB_URL": "mongodb://localhost:27017",
        "JWT_ACCESS_DURATION": "86400",
        "JWT_REFRESH_DURATION": "604800",
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    env = tmp_path / "dev.env"
    env.write_text("".join(f"{k}={v}\n" for k, v in values.items()))
    mongo = mocker.patch("itemshop.database.MongoClient")

    assert main([str(env)]) == 0
    client = mongo.return_value
    client.__getitem__.assert_called_with("payment_db")
    assert client.close.call_count == 1