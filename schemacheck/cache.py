"""Cache of keyword validators, keyed by keyword digest."""

import logging
import threading
from typing import Any, Callable, Dict

from schemacheck.digest import KeywordDigest
from schemacheck.errors import UnknownKeywordConstructorError

logger = logging.getLogger(__name__)


class ValidatorCache:
    """
    Maps keyword digests to keyword validators.

    The cache only grows. When several threads miss on the same digest
    at once, exactly one of them builds the validator and all of them
    get that instance back.
    """

    def __init__(self):
        self._validators: Dict[KeywordDigest, Any] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_build(self, digest: KeywordDigest, constructor: Callable[[Any], Any]) -> Any:
        """
        Get the validator for a digest, building it on first request.

        Args:
            digest (KeywordDigest): The digest of the keyword.
            constructor (Callable): Builds a validator from the digest content.

        Returns:
            The keyword validator.

        Raises:
            UnknownKeywordConstructorError: If the constructor fails.
        """
        validator = self._validators.get(digest)
        if validator is not None:
            with self._lock:
                self.hits += 1
            return validator
        with self._lock:
            validator = self._validators.get(digest)
            if validator is not None:
                self.hits += 1
                return validator
            logger.debug("Building validator for %r", digest)
            try:
                validator = constructor(digest.content)
            except Exception as e:
                raise UnknownKeywordConstructorError(
                    f"failed to build keyword validator: {e}", digest.keyword) from e
            self._validators[digest] = validator
            self.misses += 1
            return validator

    def __contains__(self, digest: KeywordDigest) -> bool:
        return digest in self._validators

    def __len__(self) -> int:
        return len(self._validators)
