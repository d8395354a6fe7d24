"""Mountain catalog: CRUD over mountains and their translations."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from sqlalchemy.orm import Session

from paharnama.exceptions import BadRequestError, ConflictError, NotFoundError
from paharnama.models.mountain import Mountain
from paharnama.schemas.mountain import Mountain as MountainSchema
from paharnama.schemas.mountain import MountainCreate, MountainUpdate
from paharnama.services.repositories import DuplicateError, MountainRepository

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


@dataclass
class SyncResult:
    """Counts from a catalog sync run."""

    rows: int = 0
    mountains_created: int = 0
    mountains_updated: int = 0


def parse_bool(value: Any) -> bool:
    """Spreadsheet booleans: real booleans or the string 'true' (any case)."""
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def parse_date(value: Any) -> date | None:
    """Spreadsheet dates: date/datetime objects or ISO strings. Invalid values become None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).strip()).date()
    except ValueError:
        return None


def _clean(value: Any) -> Any:
    """Empty spreadsheet cells become None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class MountainService:
    """Mountain catalog operations."""

    def __init__(self, db: Session) -> None:
        self._db = db
        self._mountains = MountainRepository(db)

    @staticmethod
    def localize(mountain: Mountain, language: str) -> MountainSchema:
        """Response view of a mountain with translations restricted to one language."""
        schema = MountainSchema.model_validate(mountain)
        schema.translations = [t for t in schema.translations if t.language == language]
        return schema

    def create(self, data: MountainCreate) -> MountainSchema:
        """Create a mountain with its translations.

        Raises:
            ConflictError: If the key already exists.
            BadRequestError: If a language appears twice in the translations.
        """
        translations = [t.model_dump() for t in data.translations]
        self._check_unique_languages(translations)

        if self._mountains.find_by_key(data.key):
            raise ConflictError(f"Mountain with key '{data.key}' already exists")

        try:
            mountain = self._mountains.create(
                data.key,
                translations,
                **data.model_dump(exclude={"key", "translations"}),
            )
        except DuplicateError as e:
            self._db.rollback()
            raise ConflictError(f"Mountain with key '{data.key}' already exists") from e
        self._db.commit()

        logger.info(f"Mountain created: {mountain.key} (id={mountain.id})")
        return MountainSchema.model_validate(mountain)

    def list_all(self, language: str = DEFAULT_LANGUAGE) -> list[MountainSchema]:
        """All mountains with translations in the requested language."""
        return [self.localize(m, language) for m in self._mountains.find_all()]

    def get(self, mountain_id: int, language: str = DEFAULT_LANGUAGE) -> MountainSchema:
        """One mountain with translations in the requested language.

        Raises:
            NotFoundError: If the mountain does not exist.
        """
        return self.localize(self._get_or_raise(mountain_id), language)

    def update(
        self, mountain_id: int, data: MountainUpdate, language: str = DEFAULT_LANGUAGE
    ) -> MountainSchema:
        """Partially update scalar fields and upsert translations by language.

        Raises:
            NotFoundError: If the mountain does not exist.
            BadRequestError: If a language appears twice in the translations.
        """
        mountain = self._get_or_raise(mountain_id)
        update_data = data.model_dump(exclude_unset=True, exclude={"translations"})
        # Non-nullable column: an explicit null means "leave as is"
        if update_data.get("has_death_zone", False) is None:
            del update_data["has_death_zone"]
        if update_data:
            self._mountains.update(mountain, **update_data)

        if data.translations:
            translations = [t.model_dump() for t in data.translations]
            self._check_unique_languages(translations)
            for translation in translations:
                language_code = translation.pop("language")
                self._mountains.upsert_translation(mountain, language_code, **translation)

        self._db.commit()
        self._db.refresh(mountain)
        return self.localize(mountain, language)

    def delete(self, mountain_id: int) -> None:
        """Delete a mountain and its translations.

        Raises:
            NotFoundError: If the mountain does not exist.
        """
        mountain = self._get_or_raise(mountain_id)
        self._mountains.delete(mountain)
        self._db.commit()
        logger.info(f"Mountain deleted: {mountain.key} (id={mountain_id})")

    def sync_rows(self, rows: Iterable[Mapping[str, Any]]) -> SyncResult:
        """Upsert catalog rows (one per mountain and language) in one transaction.

        Each row needs ``key`` and ``language``. The translation name is the key.
        Re-running with the same rows changes nothing.
        """
        result = SyncResult()
        touched: set[str] = set()
        try:
            for row in rows:
                key = _clean(row.get("key"))
                language = _clean(row.get("language"))
                if not key or not language:
                    raise BadRequestError(f"Row {result.rows + 1} is missing key or language")

                fields = {
                    "altitude": _clean(row.get("altitude")),
                    "has_death_zone": parse_bool(row.get("has_death_zone")),
                    "first_climbed_date": parse_date(_clean(row.get("first_climbed_date"))),
                    "mountain_img": _clean(row.get("mountain_img")),
                    "country_flag_img": _clean(row.get("country_flag_img")),
                }
                mountain = self._mountains.find_by_key(key)
                if mountain is None:
                    mountain = self._mountains.create(key, [], **fields)
                    result.mountains_created += 1
                else:
                    self._mountains.update(mountain, **fields)
                    if key not in touched:
                        result.mountains_updated += 1
                touched.add(key)

                self._mountains.upsert_translation(
                    mountain,
                    language,
                    name=key,
                    description=_clean(row.get("description")),
                    location=_clean(row.get("location")),
                    first_climber=_clean(row.get("first_climber")),
                )
                result.rows += 1
        except Exception:
            self._db.rollback()
            raise

        self._db.commit()
        logger.info(
            f"Mountain sync completed: {result.rows} rows, "
            f"{result.mountains_created} created, {result.mountains_updated} updated"
        )
        return result

    def _get_or_raise(self, mountain_id: int) -> Mountain:
        mountain = self._mountains.find_by_id(mountain_id)
        if mountain is None:
            raise NotFoundError(f"Mountain with id {mountain_id} not found")
        return mountain

    @staticmethod
    def _check_unique_languages(translations: list[dict[str, Any]]) -> None:
        languages = [t["language"] for t in translations]
        if len(languages) != len(set(languages)):
            raise BadRequestError("Each language may appear only once in translations")
