"""Unit tests for column descriptors and annotation-derived columns."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import pytest
from pydantic import BaseModel

from row_map.core.enums import FieldKind
from row_map.core.metadata import blank_factory, column, derive_columns


@dataclass
class UserDC:
    id: int
    username: str
    email: str
    last_login: datetime | None = None


class UserPydantic(BaseModel):
    id: int
    username: str
    balance: float


class UserPlain:
    id: int
    username: str


class TestColumn:
    def test_defaults_to_attribute_of_same_name(self) -> None:
        col = column("username", FieldKind.TEXT)
        user = UserDC(id=1, username="trader1", email="t@ex.com")
        assert col.attribute == "username"
        assert col.getter(user) == "trader1"

    def test_attr_maps_column_to_other_attribute(self) -> None:
        col = column("userName", FieldKind.TEXT, attr="username")
        user = UserDC(id=1, username="trader1", email="t@ex.com")
        col.setter(user, "admin1")
        assert user.username == "admin1"
        assert col.getter(user) == "admin1"

    def test_custom_accessors(self) -> None:
        store: dict[str, str] = {}
        col = column(
            "email",
            FieldKind.TEXT,
            getter=lambda obj: store.get("email", ""),
            setter=lambda obj, value: store.__setitem__("email", value),
        )
        col.setter(object(), "a@ex.com")
        assert col.getter(object()) == "a@ex.com"

    def test_nullable_flag(self) -> None:
        assert column("email", FieldKind.TEXT).nullable is False
        assert column("email", FieldKind.TEXT, nullable=True).nullable is True


class TestDeriveColumns:
    def test_dataclass(self) -> None:
        cols = derive_columns(UserDC)
        assert [c.name for c in cols] == ["id", "username", "email", "last_login"]
        assert [c.kind for c in cols] == [
            FieldKind.INT64,
            FieldKind.TEXT,
            FieldKind.TEXT,
            FieldKind.TIMESTAMP,
        ]

    def test_optional_is_nullable(self) -> None:
        cols = {c.name: c for c in derive_columns(UserDC)}
        assert cols["last_login"].nullable is True
        assert cols["id"].nullable is False

    def test_pydantic_model(self) -> None:
        cols = derive_columns(UserPydantic)
        assert [c.name for c in cols] == ["id", "username", "balance"]
        assert cols[2].kind is FieldKind.FLOAT

    def test_plain_annotated_class(self) -> None:
        cols = derive_columns(UserPlain)
        assert [c.name for c in cols] == ["id", "username"]

    def test_unsupported_annotation(self) -> None:
        @dataclass
        class Basket:
            id: int
            items: list

        with pytest.raises(TypeError, match="items"):
            derive_columns(Basket)


class TestBlankFactory:
    def test_dataclass_without_init_args(self) -> None:
        obj = blank_factory(UserDC)()
        assert isinstance(obj, UserDC)
        obj.id = 5
        assert obj.id == 5

    def test_pydantic_uses_model_construct(self) -> None:
        obj = blank_factory(UserPydantic)()
        assert isinstance(obj, UserPydantic)
        obj.username = "trader1"
        assert obj.username == "trader1"
