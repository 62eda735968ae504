"""Aisle configuration loader (aisle.conf in the data directory)."""
import logging
from pathlib import Path

from basket.infra.paths import AISLE_FILE
from basket.logic.shopping.categorizer import AisleConfig, parse_aisle_conf

logger = logging.getLogger(__name__)


def reading_aisle_config(path=None) -> AisleConfig:
    """Load the aisle mapping. A missing or unreadable file yields an empty config (single 'Other' aisle)."""
    path = Path(path) if path else AISLE_FILE
    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = parse_aisle_conf(f.read())
        logger.info("Loaded %s aisles (%s ingredient names) from %s",
                    len(config.order), len(config.mapping), path)
        return config
    except FileNotFoundError:
        logger.info("Aisle file not found: %s. Using a single default aisle.", path)
        return AisleConfig()
    except ValueError as e:
        logger.error("Invalid aisle file %s: %s", path, e)
        return AisleConfig()
    except OSError as e:
        logger.error("Error reading aisle file %s: %s", path, e)
        return AisleConfig()
