import logging

import pytest

from itemshop.accounts import CreatePlayerReq, InsertPlayerRole, PlayerLoginReq
from itemshop.models import CreateItemReq, Inventory, ItemSearchReq, ItemServiceReq, PaginateReq
from itemshop.request import ValidationError, bind, validate


def test_valid_item_passes():
    req = CreateItemReq(title="Iron Sword", price=500, image_url="http://localhost/a.png", damage=50)
    validate(req)
    assert req.title == "Iron Sword"


def test_required_fields_reported():
    with pytest.raises(ValidationError) as info:
        validate(CreateItemReq())
    assert len(info.value.errors) == 4


def test_max_length():
    with pytest.raises(ValidationError, match="title"):
        validate(CreateItemReq(title="x" * 65, price=1, image_url="u", damage=1))


@pytest.mark.parametrize("limit,ok", [(1, False), (2, True), (10, True), (11, False)])
def test_paginate_limit_bounds(limit, ok):
    req = PaginateReq(limit=limit)
    if ok:
        validate(req)
        assert req.limit == limit
    else:
        with pytest.raises(ValidationError, match="limit"):
            validate(req)


def test_search_req_validates_inherited_fields():
    with pytest.raises(ValidationError, match="limit"):
        validate(ItemSearchReq(title="Sword"))


def test_email_rule():
    password = "password"
    with pytest.raises(ValidationError, match="email"):
        validate(PlayerLoginReq(email="not-an-email", password=password))
    req = PlayerLoginReq(email="a@example.com", password=password)
    validate(req)
    assert req.email == "a@example.com"


def test_missing_password_reported():
    with pytest.raises(ValidationError, match="password"):
        validate(PlayerLoginReq(email="a@example.com"))


def test_username_too_long():
    password = "password"
    with pytest.raises(ValidationError, match="username"):
        validate(CreatePlayerReq(email="a@example.com", password=password, username="u" * 65))


def test_required_list_none_fails_empty_passes():
    with pytest.raises(ValidationError):
        validate(ItemServiceReq())
    validate(ItemServiceReq(items=[]))
    assert ItemServiceReq(items=[]).items == []


def test_validate_rejects_non_dataclass():
    with pytest.raises(TypeError):
        validate({"title": "x"})


def test_bind_uses_json_names():
    inv = bind(Inventory, {"_id": "i1", "player_id": "p1", "item_id": "x", "other": 1})
    assert (inv.id, inv.player_id, inv.item_id) == ("i1", "p1", "x")
    role = bind(InsertPlayerRole, {"player_id": "p1", "role_id": [0, 1]})
    assert role.role_code == [0, 1]


def test_bind_logs_validation_failure_and_returns(caplog):
    with caplog.at_level(logging.ERROR):
        req = bind(CreateItemReq, {"title": "Sword"})
    assert req.title == "Sword"
    assert "Validate data failed" in caplog.text


def test_bind_non_mapping_gives_default(caplog):
    with caplog.at_level(logging.ERROR):
        req = bind(Inventory, ["bad"])
    assert req == Inventory()
    assert "Error binding data" in caplog.text