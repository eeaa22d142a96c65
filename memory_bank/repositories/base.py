"""Base repository with shared session handling and error translation.

Subclasses set ``model_class``. Every database error leaving a repository
is re-raised as ``StorageError`` so callers never see driver exceptions.
"""

from contextlib import contextmanager
from typing import TypeVar, Generic, Iterator, Type

import sqlalchemy.exc
from sqlalchemy.orm import Session, Query

from ..database import Base
from ..exceptions import StorageError

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Shared repository logic for SQLAlchemy models."""

    model_class: Type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self) -> Query:
        return self.db.query(self.model_class)

    @contextmanager
    def _storage_errors(self, message: str) -> Iterator[None]:
        """Translate SQLAlchemy failures inside the block into StorageError."""
        try:
            yield
        except sqlalchemy.exc.SQLAlchemyError as e:
            raise StorageError(message, e) from e

