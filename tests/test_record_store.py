import os
import pytest

from services.errors import StorageError
from services import products as store


def make(product_id, active=True):
    return {
        "productId": product_id,
        "productName": f"Ford {product_id}",
        "productDescription": "Racing car",
        "productImage": None,
        "isActive": active,
    }


def test_save_then_load_keeps_order(tmp_path):
    path = str(tmp_path / "products.json")
    products = [make("3"), make("1", active=False), make("2")]

    store.save_all(products, path)

    assert store.load_all(path) == products


def test_save_leaves_no_temp_files(tmp_path):
    path = str(tmp_path / "products.json")
    store.save_all([make("1")], path)
    store.save_all([make("1"), make("2")], path)

    assert os.listdir(tmp_path) == ["products.json"]


def test_load_missing_file(tmp_path):
    with pytest.raises(StorageError):
        store.load_all(str(tmp_path / "nope.json"))


def test_load_malformed_file(tmp_path):
    path = tmp_path / "products.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageError):
        store.load_all(str(path))


def test_load_rejects_non_list_document(tmp_path):
    path = tmp_path / "products.json"
    path.write_text('{"productId": "1"}', encoding="utf-8")

    with pytest.raises(StorageError):
        store.load_all(str(path))


def test_failed_save_keeps_old_file(tmp_path):
    path = str(tmp_path / "products.json")
    store.save_all([make("1")], path)

    with pytest.raises(StorageError):
        store.save_all([{"productId": object()}], path)

    assert store.load_all(path) == [make("1")]
    assert os.listdir(tmp_path) == ["products.json"]


def test_init_store_creates_empty_collection(tmp_path):
    path = str(tmp_path / "nested" / "products.json")
    store.init_store(path)

    assert store.load_all(path) == []


def test_init_store_keeps_existing_data(tmp_path):
    path = str(tmp_path / "products.json")
    store.save_all([make("1")], path)
    store.init_store(path)

    assert store.load_all(path) == [make("1")]


def test_find_by_id():
    products = [make("1"), make("2")]

    assert store.find_index(products, "2") == 1
    assert store.find_index(products, "9") == -1
    assert store.find_by_id(products, "1") is products[0]
    assert store.find_by_id(products, "9") is None


def test_in_memory_mutations():
    products = [make("1"), make("2")]

    store.append(products, make("3"))
    store.replace_at(products, 0, make("10"))
    removed = store.remove_at(products, 1)

    assert removed["productId"] == "2"
    assert [p["productId"] for p in products] == ["10", "3"]


def test_active_page():
    products = [make(str(i), active=(i % 2 == 0)) for i in range(30)]

    first = store.active_page(products, 1)
    second = store.active_page(products, 2)

    assert [p["productId"] for p in first] == [str(i) for i in range(0, 20, 2)]
    assert [p["productId"] for p in second] == [str(i) for i in range(20, 30, 2)]
    assert store.active_page(products, 3) == []
    assert store.active_page(products, 0) == []


def test_active_page_ignores_string_flags():
    products = [make("1", active="true"), make("2")]

    assert [p["productId"] for p in store.active_page(products, 1)] == ["2"]


@pytest.mark.parametrize("value, expected", [
    ("true", True),
    ("false", False),
    ("yes", False),
    (True, True),
    (False, False),
])
def test_to_bool(value, expected):
    assert store.to_bool(value) is expected


def test_missing_fields_uses_presence():
    fields = {"productId": "1", "productName": "", "isActive": "false"}

    assert store.missing_fields(fields) == ["productName", "productDescription"]


def test_merge_keeps_omitted_fields():
    existing = make("1")
    existing["productImage"] = "/public/images/old.jpg"

    merged = store.merge_product(existing, {"productName": "New", "productId": "99"})

    assert merged == dict(existing, productName="New")
    assert existing["productName"] == "Ford 1"
