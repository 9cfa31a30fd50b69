from flask import Blueprint, current_app, jsonify, request

from catalog_admin import db
from catalog_admin.errors import ValidationError, field_error
from catalog_admin.models import Book, Category
from catalog_admin.repository import Repository
from catalog_admin.utils.uploads import discard_upload
from catalog_admin.validation import CategoryBody, validate_form

categories_bp = Blueprint("categories", __name__, url_prefix="/categories")


def _validate_name(name):
    if not name or not str(name).strip():
        raise ValidationError("name wajib", [field_error("name", "name wajib")])
    return validate_form(CategoryBody, {"name": str(name)}).name


def _json_body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


@categories_bp.route("", methods=["GET"])
def list_categories():
    rows = Repository(Category).find_all(order_by=[Category.name.asc()])
    return jsonify([row.to_dict() for row in rows])


@categories_bp.route("", methods=["POST"])
def create_category():
    if not request.is_json:
        return jsonify({"ok": False, "message": "Content-Type harus application/json"}), 415

    body = _json_body()
    name = _validate_name(body.get("name"))

    created = Repository(Category).create(name=name)
    current_app.logger.info("✅ Categoría creada: %s (ID: %s)", created.name, created.id)
    return jsonify({"ok": True, "data": created.to_dict()}), 201


@categories_bp.route("/<int:category_id>", methods=["GET"])
def get_category(category_id):
    row = Repository(Category).find_by_id(category_id)
    return jsonify({"ok": True, "data": row.to_dict()})


@categories_bp.route("/<int:category_id>", methods=["PUT"])
def update_category(category_id):
    categories = Repository(Category)
    row = categories.find_by_id(category_id)

    body = _json_body()
    name = _validate_name(body["name"]) if body.get("name") is not None else row.name

    categories.update(row, name=name)
    current_app.logger.info("✅ Categoría actualizada: %s", row.id)
    return jsonify({"ok": True, "data": row.to_dict()})


@categories_bp.route("/<int:category_id>", methods=["DELETE"])
def delete_category(category_id):
    categories = Repository(Category)
    row = categories.find_by_id(category_id)

    # Los libros se eliminan por cascade; guardamos sus imágenes antes
    image_urls = db.session.scalars(
        db.select(Book.image_url).where(Book.category_id == row.id)
    ).all()

    categories.destroy(row)
    current_app.logger.info("🗑️ Categoría eliminada: %s (%s libros)", category_id, len(image_urls))

    for image_url in image_urls:
        discard_upload(image_url)

    return jsonify({"ok": True})
