from pathlib import Path

from basket.utilities.config import DATA_DIR as _CONFIGURED_DATA_DIR

# Centralized paths for data files (single source of truth)
DATA_DIR = Path(_CONFIGURED_DATA_DIR)
RECIPES_FILE = DATA_DIR / 'recipes.json'
AISLE_FILE = DATA_DIR / 'aisle.conf'
PANTRY_FILE = DATA_DIR / 'pantry.json'
SHOPPING_LISTS_DIR = DATA_DIR / 'shopping_lists'


def shopping_list_file(user: str, base_dir: Path = None) -> Path:
    """Path of the persisted list for one user (user ids are reduced to safe file names)."""
    safe = ''.join(ch if ch.isalnum() or ch in '-_.' else '_' for ch in user).strip('.') or 'default'
    return (Path(base_dir) if base_dir else SHOPPING_LISTS_DIR) / f'{safe}.json'


__all__ = ['DATA_DIR', 'RECIPES_FILE', 'AISLE_FILE', 'PANTRY_FILE', 'SHOPPING_LISTS_DIR', 'shopping_list_file']
