from datetime import date

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from catalog_admin.errors import ValidationError, field_error

DIGITS_PATTERN = r"^\d+$"
MAX_INTEGER = 2 ** 31 - 1


class BookForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    author: str = Field(min_length=1, max_length=255)
    publication_date: date = Field(alias="publicationDate")
    publisher: str = Field(min_length=1, max_length=255)
    pages: str = Field(pattern=DIGITS_PATTERN)
    category_id: str = Field(alias="categoryId", pattern=DIGITS_PATTERN)

    @field_validator("pages")
    @classmethod
    def pages_positive(cls, value):
        if int(value) <= 0:
            raise ValueError("pages harus lebih dari 0")
        return value

    @field_validator("pages", "category_id")
    @classmethod
    def fits_integer_column(cls, value):
        if int(value) > MAX_INTEGER:
            raise ValueError(f"nilai maksimal {MAX_INTEGER}")
        return value

    def to_values(self):
        """Column values for the ``Book`` model."""
        return {
            "title": self.title,
            "author": self.author,
            "publication_date": self.publication_date,
            "publisher": self.publisher,
            "pages": int(self.pages),
            "category_id": int(self.category_id),
        }


class CategoryBody(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=150)


def _field_name(schema, loc):
    if not loc:
        return ""
    field = schema.model_fields.get(loc[0])
    head = field.alias if field is not None and field.alias else str(loc[0])
    return ".".join([head] + [str(part) for part in loc[1:]])


def validate_form(schema, raw, message="Validasi gagal"):
    """Validate ``raw`` against ``schema`` or raise :class:`ValidationError`
    with one ``{field, message}`` pair per problem."""
    try:
        return schema.model_validate(raw)
    except pydantic.ValidationError as exc:
        errors = [field_error(_field_name(schema, error["loc"]), error["msg"])
                  for error in exc.errors()]
        raise ValidationError(message, errors) from exc
