# tests/test_allow_list.py
import pytest

from app.core.errors import FieldNotAllowed, UnknownModel
from app.services.allow_list import AllowList, AllowListEntry


def test_validate_preserves_requested_order(allow_list):
    assert allow_list.validate("items", ["price_ugx", "name", "id"]) == ["price_ugx", "name", "id"]


def test_empty_fields_mean_full_column_list(allow_list):
    assert allow_list.validate("items", []) == ["id", "name", "category", "price_ugx", "available"]


def test_unknown_model(allow_list):
    with pytest.raises(UnknownModel) as excinfo:
        allow_list.validate("secrets", ["id"])
    assert excinfo.value.status_code == 400


def test_field_not_allowed_names_offending_field(allow_list):
    with pytest.raises(FieldNotAllowed) as excinfo:
        allow_list.validate("users", ["id", "password_hash"])
    assert excinfo.value.field == "password_hash"
    assert "password_hash" in excinfo.value.message


def test_injection_attempt_in_field_is_rejected(allow_list):
    with pytest.raises(FieldNotAllowed):
        allow_list.validate("items", ["name; DROP TABLE items"])


def test_from_config_accepts_plain_column_lists():
    allow_list = AllowList.from_config({"products": ["id", "name", "category"]})
    entry = allow_list.get("products")
    assert entry.columns == ("id", "name", "category")
    assert entry.search_columns == ("name", "category")


def test_search_columns_must_be_permitted_columns():
    with pytest.raises(ValueError):
        AllowListEntry(model="users", columns=("id", "email"), search_columns=("name",))


def test_duplicate_models_rejected():
    entry = AllowListEntry(model="items", columns=("name", "category"))
    with pytest.raises(ValueError):
        AllowList([entry, entry])


def test_entries_are_read_only(allow_list):
    with pytest.raises(TypeError):
        allow_list._entries["evil"] = None
    assert "evil" not in allow_list


@pytest.mark.parametrize(
    "raw",
    [
        {"items": "name"},
        {"items": {"columns": "name,category"}},
        {"items": {"columns": ["name", "category"], "search_columns": "name"}},
        {"items": ["name", 3]},
    ],
)
def test_from_config_rejects_non_list_columns(raw):
    with pytest.raises(ValueError):
        AllowList.from_config(raw)
