"""
Utility modules for the tier router.
"""

from .formatting import format_currency
from .config import (
    Config,
    load_tier_configuration,
    get_tier_configuration,
    install_tier_configuration,
)

__all__ = [
    "format_currency",
    "Config",
    "load_tier_configuration",
    "get_tier_configuration",
    "install_tier_configuration",
]
