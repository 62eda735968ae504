"""Pantry configuration loader (pantry.json in the data directory).

Accepted shapes:
  {"mode": "hide" | "mark", "items": ["salt", "olive oil", ...]}
  [{"name": "Salt", "default_quantity": 500, "unit": "g"}, ...]   (pantry inventory)
  ["salt", "pepper"]
Inventory records with a zero quantity are not treated as in stock.
"""
import json
import logging
from pathlib import Path
from typing import Optional

from basket.infra.paths import PANTRY_FILE
from basket.logic.pantry.pantry_filter import PantryConfig
from basket.utilities.constants import PANTRY_MODE_MARK

logger = logging.getLogger(__name__)


def _item_names(items):
    for item in items or []:
        if isinstance(item, str):
            yield item
        elif isinstance(item, dict):
            qty = item.get('default_quantity', item.get('quantity'))
            if qty is not None:
                try:
                    if float(qty) <= 0:
                        continue
                except (TypeError, ValueError):
                    pass
            if item.get('name'):
                yield item['name']


def reading_pantry_config(path=None, default_mode: str = PANTRY_MODE_MARK) -> Optional[PantryConfig]:
    """Load the pantry config. Returns None (filter disabled) when the file is absent or invalid."""
    path = Path(path) if path else PANTRY_FILE
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.info("Pantry file not found: %s. Pantry filter disabled.", path)
        return None
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in pantry file %s: %s", path, e)
        return None
    except OSError as e:
        logger.error("Error reading pantry file %s: %s", path, e)
        return None
    if isinstance(data, dict):
        mode = data.get('mode') or default_mode
        items = data.get('items', [])
    else:
        mode, items = default_mode, data
    try:
        config = PantryConfig.from_names(_item_names(items), mode)
    except ValueError as e:
        logger.error("Invalid pantry configuration in %s: %s", path, e)
        return None
    logger.info("Loaded %s pantry items (mode=%s) from %s", len(config), config.mode, path)
    return config
