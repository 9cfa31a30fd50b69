"""Server-side paging, sorting and filtering for the book grid.

``ListQueryParams.from_args`` turns the grid widget's query string into a
typed object; every malformed value falls back to a safe default instead of
raising.  ``ListQueryBuilder.query`` runs it through a :class:`Repository`.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import joinedload

from catalog_admin.models import Book
from catalog_admin.repository import Repository

SORTABLE_COLUMNS = {
    "title": Book.title,
    "author": Book.author,
    "publisher": Book.publisher,
    "publicationDate": Book.publication_date,
    "pages": Book.pages,
    "createdAt": Book.created_at,
}
DEFAULT_SORT_COLUMN = "createdAt"
SEARCH_COLUMNS = (Book.title, Book.author, Book.publisher)
MISSING_CATEGORY_NAME = "-"
ALL_ROWS = -1
MAX_SQL_INT = 2 ** 63 - 1


def _to_int(value, default):
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    # Fuera del rango INTEGER de la base de datos
    if not -MAX_SQL_INT - 1 <= number <= MAX_SQL_INT:
        return default
    return number


def _to_date(value):
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def _to_category_id(value):
    category_id = _to_int(value, None)
    if category_id is None or category_id <= 0:
        return None
    return category_id


@dataclass
class ListQueryParams:
    draw: int = 1
    start: int = 0
    length: int = 10
    search: str = ""
    category_id: Optional[int] = None
    pub_date_from: Optional[date] = None
    pub_date_to: Optional[date] = None
    sort_column: str = DEFAULT_SORT_COLUMN
    sort_direction: str = "asc"

    def __post_init__(self):
        self.start = max(self.start, 0)
        if self.sort_column not in SORTABLE_COLUMNS:
            self.sort_column = DEFAULT_SORT_COLUMN
        self.sort_direction = "desc" if str(self.sort_direction).lower() == "desc" else "asc"
        self.search = (self.search or "").strip()

    @classmethod
    def from_args(cls, args, default_length=10):
        """Build params from a grid request (``draw``, ``start``, ``length``,
        ``search[value]``, ``order[0][column]``/``order[0][dir]`` resolved
        through ``columns[<i>][data]``) plus ``categoryId``, ``pubDateFrom``
        and ``pubDateTo``.
        """
        length = _to_int(args.get("length"), default_length)
        if length <= 0 and length != ALL_ROWS:
            length = default_length

        sort_column = DEFAULT_SORT_COLUMN
        column_index = args.get("order[0][column]")
        if column_index:
            sort_column = args.get(f"columns[{column_index}][data]") or DEFAULT_SORT_COLUMN

        return cls(
            draw=_to_int(args.get("draw"), 1),
            start=_to_int(args.get("start"), 0),
            length=length,
            search=args.get("search[value]", ""),
            category_id=_to_category_id(args.get("categoryId")),
            pub_date_from=_to_date(args.get("pubDateFrom")),
            pub_date_to=_to_date(args.get("pubDateTo")),
            sort_column=sort_column,
            sort_direction=args.get("order[0][dir]") or "asc",
        )


@dataclass
class ListResult:
    rows: List[dict]
    total_count: int
    filtered_count: int


def serialize_row(book):
    return {
        "id": book.id,
        "title": book.title,
        "author": book.author,
        "publisher": book.publisher,
        "publicationDate": book.publication_date.isoformat(),
        "pages": book.pages,
        "categoryId": book.category_id,
        "categoryName": book.category.name if book.category is not None else MISSING_CATEGORY_NAME,
        "imageUrl": book.image_url,
    }


class ListQueryBuilder:
    def __init__(self, repository=None):
        self.repository = repository or Repository(Book)

    def filters(self, params):
        where = []
        if params.category_id is not None:
            where.append(Book.category_id == params.category_id)
        # Rango inclusivo; cualquiera de los extremos puede faltar
        if params.pub_date_from is not None:
            where.append(Book.publication_date >= params.pub_date_from)
        if params.pub_date_to is not None:
            where.append(Book.publication_date <= params.pub_date_to)
        if params.search:
            where.append(or_(*[
                column.icontains(params.search, autoescape=True) for column in SEARCH_COLUMNS
            ]))
        return where

    def ordering(self, params):
        column = SORTABLE_COLUMNS[params.sort_column]
        primary = column.desc() if params.sort_direction == "desc" else column.asc()
        return [primary, Book.id.asc()]

    def query(self, params):
        where = self.filters(params)
        total_count = self.repository.count()
        filtered_count = self.repository.count(where)
        books = self.repository.find_all(
            where=where,
            order_by=self.ordering(params),
            offset=params.start,
            limit=None if params.length == ALL_ROWS else params.length,
            options=[joinedload(Book.category)],
        )
        return ListResult(
            rows=[serialize_row(book) for book in books],
            total_count=total_count,
            filtered_count=filtered_count,
        )
