"""Validation configuration."""

import logging
from typing import Any, Callable, Dict, Optional

from schemacheck.constants import SCHEMA
from schemacheck.drafts import DRAFTV4_LIBRARY, LIBRARIES
from schemacheck.library import Library
from schemacheck.report import LogLevel

logger = logging.getLogger(__name__)


def _dialect_key(uri: str) -> str:
    return uri.rstrip('#')


class ValidationConfiguration:
    """
    Settings shared by the validators built with it.

    Args:
        default_library (Library): Library used when a schema has no (or an
            unknown) $schema. Defaults to draft 4.
        libraries (dict): Extra libraries keyed by $schema URI.
        use_format (bool): Whether the format keyword is validated.
        deep_check (bool): Whether children of a container are validated
            even when the container itself failed validation.
        loader (Callable): Default loader for referenced documents.
        log_level (LogLevel): Messages below this level are not reported.
    """

    def __init__(self, default_library: Optional[Library] = None, libraries: Optional[Dict[str, Library]] = None,
                 use_format: bool = True, deep_check: bool = False,
                 loader: Optional[Callable[[str], Any]] = None, log_level: LogLevel = LogLevel.INFO):
        self.default_library = default_library if default_library is not None else DRAFTV4_LIBRARY
        self.libraries: Dict[str, Library] = {}
        for uri, library in LIBRARIES.items():
            self.libraries[_dialect_key(uri)] = library
        for uri, library in (libraries or {}).items():
            self.libraries[_dialect_key(uri)] = library
        self.use_format = use_format
        self.deep_check = deep_check
        self.loader = loader
        self.log_level = log_level

    def library_for(self, schema: Any) -> Library:
        """ Select the library for a root schema from its $schema. """
        dialect = schema.get(SCHEMA) if isinstance(schema, dict) else None
        if not isinstance(dialect, str):
            return self.default_library
        library = self.libraries.get(_dialect_key(dialect))
        if library is None:
            logger.warning("Unknown $schema %s, using default library %s", dialect, self.default_library.dialect)
            return self.default_library
        return library

    def prepare(self, library: Library) -> Library:
        """ Apply the configuration to a library, e.g. drop format validation. """
        if self.use_format or library.validator_constructor_for('format') is None:
            return library
        builder = library.thaw()
        builder.add_keyword('format', library.syntax_checker_for('format'))
        return builder.freeze()
