from flask import Flask, jsonify, request
import os
from dotenv import load_dotenv
import logging
from werkzeug.exceptions import HTTPException

from routes.products import products_bp
from services.errors import ProductError, StorageError
from services.products import init_store

# ---------- SETUP ----------
load_dotenv()


def log_level(name):
    # Unbekannte Namen fallen auf DEBUG zurück
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.DEBUG


logging.basicConfig(level=log_level(os.getenv("LOG_LEVEL", "DEBUG")))
logger = logging.getLogger(__name__)

basedir = os.path.abspath(os.path.dirname(__file__))


# ---------- CONFIG ----------
def load_config():
    return {
        "PRODUCTS_FILE": os.path.join(basedir, os.getenv("PRODUCTS_FILE", os.path.join("data", "products.json"))),
        "UPLOAD_FOLDER": os.path.join(basedir, os.getenv("UPLOAD_FOLDER", os.path.join("public", "images"))),
        "PAGE_SIZE": int(os.getenv("PAGE_SIZE", 10)),
        "MAX_CONTENT_LENGTH": int(os.getenv("MAX_UPLOAD_MB", 16)) * 1024 * 1024,
    }


# ---------- FEHLERBEHANDLUNG ----------
def register_error_handlers(app):

    @app.errorhandler(ProductError)
    def handle_product_error(e):
        if isinstance(e, StorageError):
            logger.error(f"Speicherfehler bei {request.method} {request.path}: {e.message}")
        return jsonify({"message": e.message}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if not request.path.startswith("/api/"):
            return e
        return jsonify({"message": e.description}), e.code


# ---------- APP ----------
def create_app(test_config=None):
    app = Flask(__name__, static_folder=None)
    app.config.update(load_config())
    if test_config:
        app.config.update(test_config)

    init_store(app.config["PRODUCTS_FILE"])
    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    app.register_blueprint(products_bp)
    register_error_handlers(app)

    logger.info(f"Produktdatei: {app.config['PRODUCTS_FILE']}")
    return app


app = create_app()

# ---------- START ----------
if __name__ == '__main__':
    port = int(os.environ.get("PORT", 3000))
    app.run(debug=True, port=port)
