from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from catalog_admin import db
from catalog_admin.errors import NotFoundError, StorageError


class Repository:
    """Narrow persistence interface the route handlers talk to."""

    def __init__(self, model, session=None):
        self.model = model
        self.session = session if session is not None else db.session

    def find_by_id(self, row_id):
        row = self.session.get(self.model, row_id)
        if row is None:
            raise NotFoundError()
        return row

    def _select(self, statement, where):
        for clause in where or ():
            statement = statement.where(clause)
        return statement

    def find_all(self, where=None, order_by=None, offset=None, limit=None, options=None):
        statement = self._select(select(self.model), where)
        if options:
            statement = statement.options(*options)
        if order_by is not None:
            statement = statement.order_by(*order_by)
        if offset:
            statement = statement.offset(offset)
        if limit is not None:
            statement = statement.limit(limit)
        return list(self.session.scalars(statement))

    def count(self, where=None):
        statement = self._select(select(func.count()).select_from(self.model), where)
        return self.session.scalar(statement)

    def _commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(str(exc.orig) if getattr(exc, "orig", None) else str(exc)) from exc

    def create(self, **values):
        row = self.model(**values)
        self.session.add(row)
        self._commit()
        return row

    def update(self, row, **values):
        for key, value in values.items():
            setattr(row, key, value)
        self._commit()
        return row

    def destroy(self, row):
        self.session.delete(row)
        self._commit()
