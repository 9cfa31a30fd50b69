# init_db.py
from datetime import date

from catalog_admin import create_app, db
from catalog_admin.models import Book, Category

SAMPLE_CATEGORIES = ["Fiksi", "Sains", "Sejarah", "Klasik"]

SAMPLE_BOOKS = [
    {
        "title": "Laut Bercerita",
        "author": "Leila S. Chudori",
        "publication_date": date(2017, 10, 19),
        "publisher": "Kepustakaan Populer Gramedia",
        "image_url": "/uploads/laut-bercerita.jpeg",
        "pages": 390,
        "category": "Fiksi",
    },
    {
        "title": "White Nights",
        "author": "Fyodor Dostoevsky",
        "publication_date": date(2016, 3, 3),
        "publisher": "Penguin Classics",
        "image_url": "/uploads/white-nights.jpeg",
        "pages": 240,
        "category": "Klasik",
    },
]

app = create_app()

with app.app_context():
    # Crear todas las tablas
    db.create_all()

    if Category.query.first() is None:
        categories = {name: Category(name=name) for name in SAMPLE_CATEGORIES}
        db.session.add_all(categories.values())

        for sample in SAMPLE_BOOKS:
            values = dict(sample)
            values["category"] = categories[values["category"]]
            db.session.add(Book(**values))

        db.session.commit()
        print(f"✅ {len(SAMPLE_CATEGORIES)} categorías y {len(SAMPLE_BOOKS)} libros creados")
    else:
        print("⚠️ La base de datos ya tiene datos")

    print("🎯 Accede en: http://localhost:5000/dashboard/")
