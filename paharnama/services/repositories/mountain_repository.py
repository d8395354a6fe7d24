"""Mountain data access layer."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from paharnama.models import Mountain, MountainTranslation

from .exceptions import DuplicateError

logger = logging.getLogger(__name__)


class MountainRepository:
    """Centralized mountain and translation data access.

    Naming conventions:
    - find_* : Query that may return None
    - create_* : Insert new record
    - upsert_* : Insert or update keyed by a natural key
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, mountain_id: int) -> Mountain | None:
        """Find mountain by primary key, translations loaded."""
        return (
            self._db.query(Mountain)
            .options(selectinload(Mountain.translations))
            .filter(Mountain.id == mountain_id)
            .first()
        )

    def find_by_key(self, key: str) -> Mountain | None:
        """Find mountain by its unique key."""
        return self._db.query(Mountain).filter(Mountain.key == key).first()

    def find_all(self) -> list[Mountain]:
        """All mountains ordered by id, translations loaded."""
        return (
            self._db.query(Mountain)
            .options(selectinload(Mountain.translations))
            .order_by(Mountain.id)
            .all()
        )

    def create(self, key: str, translations: list[dict[str, Any]], **fields: Any) -> Mountain:
        """Insert a mountain with its translations.

        Raises:
            DuplicateError: If the key is already taken.
        """
        mountain = Mountain(key=key, **fields)
        mountain.translations = [MountainTranslation(**t) for t in translations]
        self._db.add(mountain)
        try:
            self._db.flush()
        except IntegrityError as e:
            raise DuplicateError("Mountain", "key", key) from e
        return mountain

    def update(self, mountain: Mountain, **fields: Any) -> Mountain:
        """Set scalar attributes on a mountain and flush."""
        for field, value in fields.items():
            setattr(mountain, field, value)
        self._db.flush()
        return mountain

    def find_translation(self, mountain_id: int, language: str) -> MountainTranslation | None:
        """Find the translation of a mountain for one language."""
        return (
            self._db.query(MountainTranslation)
            .filter(
                MountainTranslation.mountain_id == mountain_id,
                MountainTranslation.language == language,
            )
            .first()
        )

    def upsert_translation(
        self, mountain: Mountain, language: str, **fields: Any
    ) -> MountainTranslation:
        """Create or update the (mountain, language) translation."""
        translation = self.find_translation(mountain.id, language)
        if translation is None:
            translation = MountainTranslation(language=language, **fields)
            mountain.translations.append(translation)
        else:
            for field, value in fields.items():
                setattr(translation, field, value)
        self._db.flush()
        return translation

    def delete(self, mountain: Mountain) -> None:
        """Delete a mountain and its translations."""
        self._db.delete(mountain)
        self._db.flush()
