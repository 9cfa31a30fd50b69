from flask import Blueprint, current_app, jsonify, request

from catalog_admin.errors import ValidationError, field_error
from catalog_admin.models import Book, Category
from catalog_admin.repository import Repository
from catalog_admin.utils.list_query import ListQueryBuilder, ListQueryParams
from catalog_admin.utils.uploads import (
    discard_upload,
    get_upload_store,
    uploaded_file_from_storage,
)
from catalog_admin.validation import BookForm, validate_form

books_bp = Blueprint("books", __name__, url_prefix="/books")

FORM_FIELDS = {
    "title": "title",
    "author": "author",
    "publicationDate": "publication_date",
    "publisher": "publisher",
    "pages": "pages",
    "categoryId": "category_id",
}
IMAGE_REQUIRED = "Field 'image' wajib diupload (multipart/form-data)."


def _raw_form(book=None):
    """Collect the form fields, falling back to ``book``'s stored values."""
    raw = {}
    for field, attribute in FORM_FIELDS.items():
        value = request.form.get(field)
        if value is None and book is not None:
            value = getattr(book, attribute)
            value = value.isoformat() if hasattr(value, "isoformat") else str(value)
        raw[field] = value if value is not None else ""
    return raw


def _validated_book(book=None):
    form = validate_form(BookForm, _raw_form(book))
    values = form.to_values()
    if Repository(Category).count([Category.id == values["category_id"]]) == 0:
        message = "Category tidak ditemukan"
        raise ValidationError("Validasi gagal", [field_error("categoryId", message)])
    return values


def _image_upload():
    # Ignora inputs vacíos del formulario
    storage = request.files.get("image")
    if storage is None or not storage.filename:
        return None
    return uploaded_file_from_storage(storage)


@books_bp.route("", methods=["GET"])
def list_books():
    params = ListQueryParams.from_args(
        request.args, default_length=current_app.config["DEFAULT_PAGE_LENGTH"]
    )
    result = ListQueryBuilder().query(params)
    return jsonify({
        "draw": params.draw,
        "recordsTotal": result.total_count,
        "recordsFiltered": result.filtered_count,
        "data": result.rows,
    })


@books_bp.route("", methods=["POST"])
def create_book():
    values = _validated_book()

    upload = _image_upload()
    if upload is None:
        raise ValidationError(IMAGE_REQUIRED, [field_error("image", IMAGE_REQUIRED)])

    stored = get_upload_store().save(upload)

    try:
        created = Repository(Book).create(image_url=stored.reference_path, **values)
    except Exception:
        # No dejar archivos huérfanos si falla la base de datos
        discard_upload(stored.reference_path)
        raise

    current_app.logger.info("✅ Libro creado: %s (ID: %s)", created.title, created.id)
    return jsonify({"ok": True, "data": created.to_dict()}), 201


@books_bp.route("/<int:book_id>", methods=["GET"])
def get_book(book_id):
    book = Repository(Book).find_by_id(book_id)
    return jsonify({"ok": True, "data": book.to_dict()})


@books_bp.route("/<int:book_id>", methods=["PUT"])
def update_book(book_id):
    books = Repository(Book)
    book = books.find_by_id(book_id)
    values = _validated_book(book)

    old_image_url = book.image_url
    upload = _image_upload()
    stored = None
    if upload is not None and upload.size > 0:
        stored = get_upload_store().save(upload)
        values["image_url"] = stored.reference_path

    try:
        books.update(book, **values)
    except Exception:
        if stored is not None:
            discard_upload(stored.reference_path)
        raise

    # La imagen anterior solo se borra después de guardar en la base de datos
    if stored is not None and old_image_url != stored.reference_path:
        discard_upload(old_image_url)

    current_app.logger.info("✅ Libro actualizado: %s", book.id)
    return jsonify({"ok": True, "data": book.to_dict()})


@books_bp.route("/<int:book_id>", methods=["DELETE"])
def delete_book(book_id):
    books = Repository(Book)
    book = books.find_by_id(book_id)
    image_url = book.image_url

    books.destroy(book)
    discard_upload(image_url)

    current_app.logger.info("🗑️ Libro eliminado: %s", book_id)
    return jsonify({"ok": True})
