"""Shopping list repository (file persistence).

One JSON document per list. Writes go to a temp file in the same directory
and are moved over the old file, so a crash mid-write leaves the previously
saved version intact.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from basket.domain.ShoppingList import ShoppingList
from basket.domain.errors import PersistenceFailure

logger = logging.getLogger(__name__)


class ShoppingListRepository:
    """load() / save() contract consumed by the ShoppingListStore."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Optional[ShoppingList]:
        """Return the persisted list, or None when nothing was saved yet."""
        if not self.path.exists():
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in shopping list file %s: %s", self.path, e)
            raise PersistenceFailure(f"Corrupt shopping list file {self.path}: {e}") from e
        except OSError as e:
            logger.error("Cannot read shopping list file %s: %s", self.path, e)
            raise PersistenceFailure(f"Cannot read {self.path}: {e}") from e
        try:
            shopping_list = ShoppingList.from_dict(data)
        except (TypeError, ValueError) as e:
            logger.error("Invalid shopping list record in %s: %s", self.path, e)
            raise PersistenceFailure(f"Invalid shopping list record in {self.path}: {e}") from e
        logger.info("Loaded shopping list %s (version %s, %s entries)",
                    self.path.name, shopping_list.version, len(shopping_list))
        return shopping_list

    def save(self, shopping_list: ShoppingList) -> None:
        """Atomically write the list. Raises PersistenceFailure on any I/O error."""
        payload = shopping_list.to_dict()
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=f".{self.path.stem}_", suffix=".json")
            with os.fdopen(fd, 'w', encoding='utf-8') as tmp:
                json.dump(payload, tmp, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            logger.error("Failed to save shopping list %s: %s", self.path, e)
            raise PersistenceFailure(f"Cannot write {self.path}: {e}") from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.warning("Could not remove temp file %s", tmp_path)
        logger.debug("Saved shopping list %s (version %s)", self.path.name, shopping_list.version)

    def delete(self) -> bool:
        """Remove the persisted file. Returns False when there was nothing to remove."""
        try:
            self.path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceFailure(f"Cannot delete {self.path}: {e}") from e

    def __repr__(self) -> str:
        return f"ShoppingListRepository({str(self.path)!r})"
