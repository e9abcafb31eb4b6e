import os
import json
import logging
import tempfile
import threading
from flask import current_app
from services.errors import StorageError

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ("productId", "productName", "productDescription", "isActive")

# Held around every load -> mutate -> save cycle in this process
store_lock = threading.Lock()


# --------------------------------
# Datei Helper
# --------------------------------
def _data_file(path=None):
    return path or current_app.config["PRODUCTS_FILE"]


def init_store(path=None):
    path = _data_file(path)
    if os.path.exists(path):
        return
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    save_all([], path)
    logger.info(f"Leere Produktdatei angelegt: {path}")


# --------------------------------
# Laden / Speichern
# --------------------------------
def load_all(path=None):
    path = _data_file(path)
    try:
        with open(path, encoding="utf-8") as f:
            products = json.load(f)
    except FileNotFoundError as e:
        raise StorageError(f"Products file not found: {os.path.basename(path)}") from e
    except (OSError, ValueError) as e:
        logger.error(f"Produktdatei {path} konnte nicht gelesen werden: {e}")
        raise StorageError("Products file could not be read") from e

    if not isinstance(products, list):
        raise StorageError("Products file does not contain a list")
    return products


def save_all(products, path=None):
    """
    Schreibt die komplette Produktliste.

    Es wird zuerst in eine temporäre Datei im selben Ordner geschrieben und
    diese dann per os.replace über die alte Datei gelegt. Schlägt etwas fehl,
    bleibt die alte Datei unverändert.
    """
    path = _data_file(path)
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".products-", suffix=".json", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(products, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)
    except (OSError, TypeError, ValueError) as e:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        logger.error(f"Produktdatei {path} konnte nicht geschrieben werden: {e}")
        raise StorageError("Products file could not be written") from e


# --------------------------------
# Suche
# --------------------------------
def find_index(products, product_id):
    target = str(product_id)
    for i, p in enumerate(products):
        if str(p.get("productId")) == target:
            return i
    return -1


def find_by_id(products, product_id):
    index = find_index(products, product_id)
    if index == -1:
        return None
    return products[index]


def active_page(products, page, page_size=10):
    if page < 1:
        return []
    active = [p for p in products if p.get("isActive") is True]
    start = (page - 1) * page_size
    return active[start:start + page_size]


# --------------------------------
# Mutationen (nur im Speicher)
# --------------------------------
def append(products, product):
    products.append(product)
    return product


def replace_at(products, index, product):
    products[index] = product
    return product


def remove_at(products, index):
    return products.pop(index)


# --------------------------------
# Datensatz bauen
# --------------------------------
def to_bool(value):
    if isinstance(value, bool):
        return value
    return value == "true"


def is_present(value):
    return value is not None and value != ""


def missing_fields(fields):
    return [name for name in PRODUCT_FIELDS if not is_present(fields.get(name))]


def build_product(fields, image_url=None):
    return {
        "productId": str(fields["productId"]),
        "productName": fields["productName"],
        "productDescription": fields["productDescription"],
        "productImage": image_url,
        "isActive": to_bool(fields["isActive"]),
    }


def merge_product(existing, fields, image_url=None):
    updated = dict(existing)

    for name in ("productName", "productDescription"):
        if is_present(fields.get(name)):
            updated[name] = fields[name]

    if image_url:
        updated["productImage"] = image_url

    if is_present(fields.get("isActive")):
        updated["isActive"] = to_bool(fields["isActive"])

    return updated
