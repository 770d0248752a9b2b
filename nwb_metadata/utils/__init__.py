"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - YAML codec and atomic I/O (fs)
    - Tool config validation (validators)
    - Schema provenance hashing (hashing)
    - Form-text parsing (strings)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (validation, ntrode, features).

Convenience imports:
    from nwb_metadata.utils import fs, validators
    from nwb_metadata.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import hashing
from . import logging_config
from . import strings
from . import validators

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'fs',
    'hashing',
    'logging_config',
    'strings',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]
