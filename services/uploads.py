import os
import uuid
import logging
from flask import current_app
from werkzeug.utils import secure_filename
from services.errors import ValidationError, StorageError

logger = logging.getLogger(__name__)

IMAGE_FIELD = "productImage"
IMAGE_URL_PREFIX = "/public/images/"


def _upload_folder(folder=None):
    return folder or current_app.config["UPLOAD_FOLDER"]


# --------------------------------
# Datei aus dem Request holen
# --------------------------------
def pick_image(files):
    uploads = [f for f in files.getlist(IMAGE_FIELD) if f and f.filename]

    if len(uploads) > 1:
        raise ValidationError("Only one product image may be uploaded")

    return uploads[0] if uploads else None


def unique_filename(original):
    token = str(uuid.uuid4())
    safe_name = secure_filename(original or "")
    if not safe_name:
        return token
    return f"{token}-{safe_name}"


# --------------------------------
# Speichern / Entfernen
# --------------------------------
def save_image(file, folder=None):
    folder = _upload_folder(folder)
    filename = unique_filename(file.filename)

    try:
        os.makedirs(folder, exist_ok=True)
        file.save(os.path.join(folder, filename))
    except OSError as e:
        logger.error(f"Bild {file.filename} konnte nicht gespeichert werden: {e}")
        raise StorageError("Product image could not be stored") from e

    logger.info(f"Bild gespeichert: {filename}")
    return f"{IMAGE_URL_PREFIX}{filename}"


def discard_image(url, folder=None):
    if not url or not url.startswith(IMAGE_URL_PREFIX):
        return

    filepath = os.path.join(_upload_folder(folder), os.path.basename(url))
    try:
        if os.path.exists(filepath):
            os.remove(filepath)
            logger.info(f"Bild entfernt: {filepath}")
    except OSError:
        logger.exception(f"Bild {filepath} konnte nicht entfernt werden")
