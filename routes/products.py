from flask import Blueprint, request, jsonify, current_app, send_from_directory
from services.errors import ValidationError, NotFoundError, StorageError
from services.products import (
    store_lock, load_all, save_all, find_index, find_by_id, active_page,
    append, replace_at, remove_at, missing_fields, build_product, merge_product,
)
from services.uploads import pick_image, save_image, discard_image
import logging

logger = logging.getLogger(__name__)

products_bp = Blueprint("products", __name__)


# ----------------------------
# Request Helper
# ----------------------------
def request_fields():
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form.to_dict()


def persist(products, image_url=None):
    # Ein gerade hochgeladenes Bild wieder entfernen, wenn die Liste nicht geschrieben werden kann
    try:
        save_all(products)
    except StorageError:
        discard_image(image_url)
        raise


# ----------------------------
# Neues Produkt
# ----------------------------
@products_bp.route("/api/products", methods=["POST"])
def create_product():
    fields = request_fields()
    logger.debug(f"Formularfelder: {fields}")
    logger.debug(f"Dateien: {list(request.files.keys())}")

    missing = missing_fields(fields)
    if missing:
        logger.warning(f"Produkt abgelehnt, fehlende Felder: {missing}")
        raise ValidationError()

    image = pick_image(request.files)

    with store_lock:
        products = load_all()
        image_url = save_image(image) if image else None
        product = build_product(fields, image_url)
        append(products, product)
        persist(products, image_url)

    logger.info(f"Produkt {product['productId']} angelegt")
    return jsonify(product), 201


# ----------------------------
# Produkt Detail
# ----------------------------
@products_bp.route("/api/products/<product_id>", methods=["GET"])
def get_product(product_id):
    product = find_by_id(load_all(), product_id)
    if product is None:
        raise NotFoundError()
    return jsonify(product)


# ----------------------------
# Aktive Produkte, seitenweise
# ----------------------------
@products_bp.route("/api/products", methods=["GET"])
def list_products():
    page = request.args.get("page", 1, type=int)
    products = active_page(load_all(), page, current_app.config["PAGE_SIZE"])
    return jsonify(products)


# ----------------------------
# Produkt ändern
# ----------------------------
@products_bp.route("/api/products/<product_id>", methods=["PUT"])
def update_product(product_id):
    fields = request_fields()
    image = pick_image(request.files)

    with store_lock:
        products = load_all()
        index = find_index(products, product_id)
        if index == -1:
            logger.warning(f"Produkt {product_id} zum Ändern nicht gefunden")
            raise NotFoundError()

        image_url = save_image(image) if image else None
        updated = merge_product(products[index], fields, image_url)
        replace_at(products, index, updated)
        persist(products, image_url)

    logger.info(f"Produkt {product_id} geändert")
    return jsonify(updated)


# ----------------------------
# Produkt löschen
# ----------------------------
@products_bp.route("/api/products/<product_id>", methods=["DELETE"])
def delete_product(product_id):
    with store_lock:
        products = load_all()
        index = find_index(products, product_id)
        if index == -1:
            logger.warning(f"Produkt {product_id} zum Löschen nicht gefunden")
            raise NotFoundError()

        remove_at(products, index)
        save_all(products)

    logger.info(f"Produkt {product_id} gelöscht")
    return "", 204


# ----------------------------
# Hochgeladene Bilder
# ----------------------------
@products_bp.route("/public/images/<path:filename>", methods=["GET"])
def product_image(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
