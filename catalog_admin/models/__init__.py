from catalog_admin.models.category import Category
from catalog_admin.models.book import Book

__all__ = ["Category", "Book"]
