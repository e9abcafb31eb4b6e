import json
import pytest

from app import create_app


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "products.json"


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "public" / "images"


@pytest.fixture
def app(store_path, upload_dir):
    app = create_app({
        "TESTING": True,
        "PRODUCTS_FILE": str(store_path),
        "UPLOAD_FOLDER": str(upload_dir),
        "PAGE_SIZE": 10,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def read_store(store_path):
    def _read():
        with open(store_path, encoding="utf-8") as f:
            return json.load(f)
    return _read


@pytest.fixture
def write_store(store_path):
    def _write(products):
        with open(store_path, "w", encoding="utf-8") as f:
            json.dump(products, f)
    return _write
