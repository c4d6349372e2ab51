"""Player and auth models."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from bson import ObjectId

_REQUIRED = "required"
_REQUIRED_EMAIL_MAX255 = "required,email,max=255"
_REQUIRED_MAX32 = "required,max=32"
_REQUIRED_MAX64 = "required,max=64"
_REQUIRED_MAX255 = "required,max=255"
_REQUIRED_MAX500 = "required,max=500"


def _f(default=None, *, factory=None, json=None, validate=None):
    meta = {}
    if json:
        meta["json"] = json
    if validate:
        meta["validate"] = validate
    if factory is not None:
        return field(default_factory=factory, metadata=meta)
    return field(default=default, metadata=meta)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return None if value is None else value.isoformat()


@dataclass
class PlayerRole:
    role_title: str = ""
    role_code: int = 0


@dataclass
class Player:
    id: Optional[ObjectId] = _f(None, json="_id")
    email: str = ""
    password: str = field(default_factory=str)
    username: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    player_roles: list = _f(factory=list, json="PlayerRole")

    def to_document(self) -> dict:
        """Return the stored document; ``_id`` is left out when unset."""
        doc = {} if self.id is None else {"_id": self.id}
        doc.update(
            email=self.email,
            password=self.password,
            username=self.username,
            created_at=self.created_at,
            updated_at=self.updated_at,
            player_roles=[dataclasses.asdict(role) for role in self.player_roles],
        )
        return doc


@dataclass
class PlayerProfileBson:
    id: Optional[ObjectId] = _f(None, json="_id")
    email: str = ""
    username: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class PlayerSavingAccount:
    player_id: str = ""
    balance: float = 0.0


@dataclass
class PlayerTransaction:
    player_id: str = ""
    amount: int = 0
    created_at: Optional[datetime] = None

    def to_document(self) -> dict:
        return {"player_id": self.player_id, "amount": self.amount, "created_at": self.created_at}


@dataclass
class PlayerProfile:
    id: str = _f("", json="_id")
    email: str = ""
    username: str = ""
    create_at: Optional[datetime] = _f(None, json="created_at")
    update_at: Optional[datetime] = _f(None, json="updated_at")


@dataclass
class PlayerClaims:
    id: str = ""
    role_code: int = 0


@dataclass
class CreatePlayerReq:
    email: str = _f(factory=str, validate=_REQUIRED_EMAIL_MAX255)
    password: str = _f(factory=str, validate=_REQUIRED_MAX32)
    username: str = _f(factory=str, validate=_REQUIRED_MAX64)


@dataclass
class CreatePlayerTransactionReq:
    player_id: str = _f(factory=str, validate=_REQUIRED_MAX32)
    amount: float = _f(0.0, validate=_REQUIRED)


@dataclass
class Credential:
    id: Optional[ObjectId] = _f(None, json="_id")
    player_id: str = ""
    role_code: int = 0
    access_token: str = field(default_factory=str)
    refresh_token: str = field(default_factory=str)
    create_at: Optional[datetime] = _f(None, json="created_at")
    update_at: Optional[datetime] = _f(None, json="updated_at")


@dataclass
class Role:
    id: Optional[ObjectId] = _f(None, json="_id")
    title: str = ""
    code: int = 0

    def to_document(self) -> dict:
        doc = {} if self.id is None else {"_id": self.id}
        doc.update(title=self.title, code=self.code)
        return doc


@dataclass
class PlayerLoginReq:
    email: str = _f(factory=str, validate=_REQUIRED_EMAIL_MAX255)
    password: str = _f(factory=str, validate=_REQUIRED_MAX255)


@dataclass
class RefreshTokenReq:
    refresh_token: str = _f(factory=str, validate=_REQUIRED_MAX500)


@dataclass
class InsertPlayerRole:
    player_id: str = _f(factory=str, validate=_REQUIRED)
    role_code: list = _f(factory=list, json="role_id")


@dataclass
class CredentialRes:
    id: str = _f("", json="_id")
    player_id: str = ""
    role_code: int = 0
    access_token: str = field(default_factory=str)
    refresh_token: str = field(default_factory=str)
    create_at: Optional[datetime] = _f(None, json="created_at")
    update_at: Optional[datetime] = _f(None, json="updated_at")


@dataclass
class ProfileInterceptor:
    profile: Optional[PlayerProfile] = None
    credential: Optional[CredentialRes] = None

    def to_dict(self) -> dict:
        """Return the JSON shape: profile fields inlined plus ``credential``."""
        out = {}
        if self.profile is not None:
            p = self.profile
            out.update({
                "_id": p.id,
                "email": p.email,
                "username": p.username,
                "created_at": _iso(p.create_at),
                "updated_at": _iso(p.update_at),
            })
        c = self.credential
        out["credential"] = None if c is None else {
            "_id": c.id,
            "player_id": c.player_id,
            "role_code": c.role_code,
            "access_token": c.access_token,
            "refresh_token": c.refresh_token,
            "created_at": _iso(c.create_at),
            "updated_at": _iso(c.update_at),
        }
        return out