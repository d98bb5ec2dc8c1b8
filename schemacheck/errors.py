"""Exceptions raised by the schemacheck engine.

Validation findings are never raised: they end up as messages in a
report. The exceptions below signal a schema or configuration that the
engine cannot work with at all.
"""

from typing import Any


class SchemaCheckError(Exception):
    """Base class for all schemacheck errors."""

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ', '.join(f"{key}={value!r}" for key, value in sorted(self.context.items()))
        return f"{self.message} ({details})"


class RefResolutionError(SchemaCheckError):
    """A chain of $ref never reaches a schema, i.e. it loops."""

    def __init__(self, message: str, ref: str, chain=None):
        super().__init__(message, ref=ref, chain=list(chain or []))
        self.ref = ref
        self.chain = list(chain or [])


class DanglingRefError(SchemaCheckError):
    """A $ref points to a location that does not exist."""

    def __init__(self, message: str, ref: str):
        super().__init__(message, ref=ref)
        self.ref = ref


class LoadError(SchemaCheckError):
    """A document could not be fetched or decoded."""

    def __init__(self, message: str, uri: str):
        super().__init__(message, uri=uri)
        self.uri = uri


class UnknownKeywordConstructorError(SchemaCheckError):
    """A keyword registration is incomplete, or a validator failed to build."""

    def __init__(self, message: str, keyword: str):
        super().__init__(message, keyword=keyword)
        self.keyword = keyword


class RegexError(SchemaCheckError):
    """A regular expression is not a valid ECMA 262 regex."""

    def __init__(self, message: str, pattern: str):
        super().__init__(message, pattern=pattern)
        self.pattern = pattern


class InvalidSchemaError(SchemaCheckError):
    """The schema failed its syntax check; the report holds the details."""

    def __init__(self, message: str, report):
        super().__init__(message)
        self.report = report

    def __str__(self) -> str:
        return f"{self.message}\n{self.report}"
