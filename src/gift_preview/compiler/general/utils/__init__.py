# gift_preview/compiler/general/utils/__init__.py
"""

Does: Provide lexicon table loading and topic-gated trace logging for the compiler.
Returns: Public API via load_config/clear_config_cache and debug/reload_topics.
Used by: Lexicon builder, notes extractor, rule composer, session controller, tests.
"""

from __future__ import annotations

from .load_config import (
    ConfigFileNotFound,
    ConfigParseError,
    ConfigTypeError,
    clear_config_cache,
    load_config,
    temp_data_dir,
)
from .log import (
    debug,
    reload_topics,
    topic_enabled,
)

__all__ = [
    # Config loading
    "load_config",
    "clear_config_cache",
    "temp_data_dir",
    "ConfigFileNotFound",
    "ConfigParseError",
    "ConfigTypeError",
    # Logging helpers
    "debug",
    "reload_topics",
    "topic_enabled",
]
