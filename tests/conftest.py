from datetime import date

import pytest

from catalog_admin import create_app, db
from catalog_admin.config import TestingConfig
from catalog_admin.models import Book, Category


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def app(upload_dir):
    app = create_app(TestingConfig, UPLOAD_FOLDER=str(upload_dir))
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def categories(app):
    """Two categories: Fiction (id 1) and Science (id 2)."""
    fiction = Category(name="Fiction")
    science = Category(name="Science")
    db.session.add_all([fiction, science])
    db.session.commit()
    return fiction, science


@pytest.fixture
def make_book(app, categories):
    def _make_book(**overrides):
        values = {
            "title": "Laut Bercerita",
            "author": "Leila S. Chudori",
            "publication_date": date(2017, 10, 19),
            "publisher": "Kepustakaan Populer Gramedia",
            "pages": 390,
            "category_id": categories[0].id,
            "image_url": "/uploads/laut-bercerita.jpeg",
        }
        values.update(overrides)
        book = Book(**values)
        db.session.add(book)
        db.session.commit()
        return book

    return _make_book
