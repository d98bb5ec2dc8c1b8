"""Processing messages and validation reports."""

import enum
from typing import Any, Dict, Iterator, List, Optional

from schemacheck.messages import render_message


class LogLevel(enum.IntEnum):
    """Severity of a processing message."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4

    def __str__(self) -> str:
        return self.name.lower()


class ProcessingMessage:
    """One finding of a syntax check or validation run."""

    def __init__(self, level: LogLevel, key: str, pointer: str, domain: str,
                 keyword: Optional[str] = None, schema: Optional[Dict[str, str]] = None,
                 args: Optional[Dict[str, Any]] = None, reports: Optional[Dict[str, 'ValidationReport']] = None):
        self.level = level
        self.key = key
        self.pointer = pointer
        self.domain = domain
        self.keyword = keyword
        self.schema = schema or {}
        self.args = args or {}
        self.reports = reports or {}
        self._message: Optional[str] = None

    @property
    def message(self) -> str:
        """ The rendered message text. """
        if self._message is None:
            self._message = render_message(self.key, keyword=self.keyword, **self.args)
        return self._message

    @property
    def fields(self) -> Dict[str, Any]:
        """ The structured fields of the message. """
        fields: Dict[str, Any] = {'domain': self.domain}
        if self.keyword is not None:
            fields['keyword'] = self.keyword
        if self.schema:
            fields['schema'] = dict(self.schema)
        fields.update(self.args)
        return fields

    def as_json(self) -> Dict[str, Any]:
        """ Get a JSON serializable view of the message. """
        result: Dict[str, Any] = {
            'level': str(self.level),
            'message': self.message,
            'pointer': self.pointer,
            'key': self.key,
        }
        result.update(self.fields)
        if self.reports:
            result['reports'] = {name: report.as_json() for name, report in self.reports.items()}
        return result

    def __str__(self) -> str:
        return f"{self.level}: {self.pointer or '/'}: {self.message}"

    def __repr__(self) -> str:
        return f"ProcessingMessage(level={self.level!s}, key={self.key!r}, pointer={self.pointer!r})"


class ValidationReport:
    """
    Ordered collection of processing messages.

    Messages below the report's log level are discarded. A report is
    successful if it holds no message at level error or above. Once
    frozen, a report no longer accepts messages.
    """

    def __init__(self, log_level: LogLevel = LogLevel.INFO):
        self.log_level = log_level
        self._messages: List[ProcessingMessage] = []
        self._error_count = 0
        self._frozen = False

    def add(self, message: ProcessingMessage) -> None:
        if self._frozen:
            raise RuntimeError("Cannot add messages to a frozen report")
        if message.level >= LogLevel.ERROR:
            self._error_count += 1
        if message.level >= self.log_level:
            self._messages.append(message)

    def extend(self, messages) -> None:
        for message in messages:
            self.add(message)

    def freeze(self) -> 'ValidationReport':
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def error_count(self) -> int:
        """ Number of messages at level error or above added so far. """
        return self._error_count

    @property
    def messages(self) -> List[ProcessingMessage]:
        return list(self._messages)

    def is_success(self) -> bool:
        return self._error_count == 0

    def errors(self) -> List[ProcessingMessage]:
        return [m for m in self._messages if m.level >= LogLevel.ERROR]

    def warnings(self) -> List[ProcessingMessage]:
        return [m for m in self._messages if m.level == LogLevel.WARNING]

    def as_json(self) -> List[Dict[str, Any]]:
        return [message.as_json() for message in self._messages]

    def __iter__(self) -> Iterator[ProcessingMessage]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def __str__(self) -> str:
        if not self._messages:
            return "success" if self.is_success() else "failure"
        return "\n".join(str(message) for message in self._messages)

    def __repr__(self) -> str:
        return f"ValidationReport(success={self.is_success()}, messages={len(self._messages)})"
