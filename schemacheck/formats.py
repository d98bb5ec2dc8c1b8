"""Format attributes for the format keyword."""

import datetime
import ipaddress
import re
from typing import Any, FrozenSet

from jsonpointer import JsonPointer, JsonPointerException

from schemacheck import ecmaregex
from schemacheck.constants import INTEGER, NUMBER, STRING
from schemacheck.report import LogLevel
from schemacheck.syntax import is_uri

# Patterns are applied with fullmatch; re.ASCII keeps \d to the digits 0-9
DATE_TIME_PATTERN = re.compile(
    r'(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(\.\d+)?([Zz]|[+-](\d{2}):(\d{2}))', re.ASCII
)
DATE_PATTERN = re.compile(r'(\d{4})-(\d{2})-(\d{2})', re.ASCII)
TIME_PATTERN = re.compile(r'(\d{2}):(\d{2}):(\d{2})', re.ASCII)
EMAIL_PATTERN = re.compile(r'[^@\s]+@[^@\s]+')
HOSTNAME_LABEL = re.compile(r'(?!-)[A-Za-z0-9-]{1,63}(?<!-)')
IPV4_PATTERN = re.compile(r'(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})', re.ASCII)
HEX_COLOR_PATTERN = re.compile(r'#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})')
RGB_COLOR_PATTERN = re.compile(
    r'rgb\(\s*(\d{1,3}%?)\s*,\s*(\d{1,3}%?)\s*,\s*(\d{1,3}%?)\s*\)', re.ASCII
)
PHONE_PATTERN = re.compile(r'\+?[0-9]+([ .-]?(\([0-9]+\)|[0-9]+))*')

CSS_COLOR_NAMES = frozenset([
    'aqua', 'black', 'blue', 'fuchsia', 'gray', 'green', 'lime', 'maroon', 'navy',
    'olive', 'orange', 'purple', 'red', 'silver', 'teal', 'white', 'yellow',
])


class FormatAttribute:
    """
    A named format which applies to instances of some JSON types.

    Subclasses implement is_valid(); validate() reports a failure.
    """

    def __init__(self, name: str, description: str, *types: str):
        self.name = name
        self.description = description
        self.types: FrozenSet[str] = frozenset(types) if types else frozenset([STRING])

    def is_valid(self, value: Any) -> bool:
        raise NotImplementedError

    def validate(self, context, data) -> None:
        if not self.is_valid(data.instance):
            key = 'format_invalid' if isinstance(data.instance, str) else 'format_invalid_number'
            context.report(data, 'format', key, value=data.instance, description=self.description,
                           attribute=self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


def _valid_date(year: str, month: str, day: str) -> bool:
    try:
        datetime.date(int(year), int(month), int(day))
    except ValueError:
        return False
    return True


def _valid_time(hour: str, minute: str, second: str) -> bool:
    # second 60 is a leap second
    return int(hour) < 24 and int(minute) < 60 and int(second) <= 60


class DateTimeAttribute(FormatAttribute):
    """RFC 3339 date-time."""

    def __init__(self):
        super().__init__('date-time', 'date/time format')

    def is_valid(self, value):
        match = DATE_TIME_PATTERN.fullmatch(value)
        if not match:
            return False
        year, month, day, hour, minute, second, _, _, offset_hour, offset_minute = match.groups()
        if not _valid_date(year, month, day) or not _valid_time(hour, minute, second):
            return False
        if offset_hour is not None and (int(offset_hour) >= 24 or int(offset_minute) >= 60):
            return False
        return True


class DateAttribute(FormatAttribute):

    def __init__(self):
        super().__init__('date', 'date format (YYYY-MM-DD)')

    def is_valid(self, value):
        match = DATE_PATTERN.fullmatch(value)
        return bool(match) and _valid_date(*match.groups())


class TimeAttribute(FormatAttribute):

    def __init__(self):
        super().__init__('time', 'time format (hh:mm:ss)')

    def is_valid(self, value):
        match = TIME_PATTERN.fullmatch(value)
        return bool(match) and _valid_time(*match.groups())


class UTCMillisecAttribute(FormatAttribute):
    """Milliseconds since the epoch; negative values only get a warning."""

    def __init__(self):
        super().__init__('utc-millisec', 'epoch time in milliseconds', INTEGER, NUMBER)

    def is_valid(self, value):
        return abs(value) < 2 ** 63

    def validate(self, context, data):
        if not self.is_valid(data.instance):
            super().validate(context, data)
        elif data.instance < 0:
            context.report(data, 'format', 'format_invalid_number', level=LogLevel.WARNING,
                           value=data.instance, description='non negative epoch time', attribute=self.name)


class EmailAttribute(FormatAttribute):

    def __init__(self):
        super().__init__('email', 'email address')

    def is_valid(self, value):
        return EMAIL_PATTERN.fullmatch(value) is not None


class HostnameAttribute(FormatAttribute):
    """RFC 1034 host name."""

    def __init__(self, name: str = 'hostname'):
        super().__init__(name, 'host name')

    def is_valid(self, value):
        if not value or len(value) > 255:
            return False
        host = value[:-1] if value.endswith('.') else value
        return all(HOSTNAME_LABEL.fullmatch(label) for label in host.split('.'))


class IPv4Attribute(FormatAttribute):

    def __init__(self, name: str = 'ipv4'):
        super().__init__(name, 'IPv4 address')

    def is_valid(self, value):
        match = IPV4_PATTERN.fullmatch(value)
        return bool(match) and all(int(octet) <= 255 for octet in match.groups())


class IPv6Attribute(FormatAttribute):

    def __init__(self):
        super().__init__('ipv6', 'IPv6 address')

    def is_valid(self, value):
        try:
            ipaddress.IPv6Address(value)
        except ValueError:
            return False
        return True


class URIAttribute(FormatAttribute):

    def __init__(self):
        super().__init__('uri', 'absolute URI')

    def is_valid(self, value):
        return is_uri(value) and bool(re.match(r'^[A-Za-z][A-Za-z0-9+.-]*:', value))


class URIReferenceAttribute(FormatAttribute):

    def __init__(self):
        super().__init__('uri-reference', 'URI reference')

    def is_valid(self, value):
        return is_uri(value)


class JsonPointerAttribute(FormatAttribute):

    def __init__(self):
        super().__init__('json-pointer', 'JSON Pointer')

    def is_valid(self, value):
        try:
            JsonPointer(value)
        except JsonPointerException:
            return False
        return True


class RegexAttribute(FormatAttribute):

    def __init__(self):
        super().__init__('regex', 'ECMA 262 regular expression')

    def is_valid(self, value):
        return ecmaregex.is_valid(value)


class ColorAttribute(FormatAttribute):
    """CSS 2.1 colors: a color name, #rgb, #rrggbb or rgb(...)."""

    def __init__(self):
        super().__init__('color', 'CSS 2.1 color')

    def is_valid(self, value):
        if value.lower() in CSS_COLOR_NAMES or HEX_COLOR_PATTERN.fullmatch(value):
            return True
        match = RGB_COLOR_PATTERN.fullmatch(value)
        if not match:
            return False
        components = match.groups()
        if len(set(component.endswith('%') for component in components)) != 1:
            return False
        limit = 100 if components[0].endswith('%') else 255
        return all(int(component.rstrip('%')) <= limit for component in components)


class PhoneAttribute(FormatAttribute):

    def __init__(self):
        super().__init__('phone', 'phone number')

    def is_valid(self, value):
        digits = re.sub(r'[^0-9]', '', value)
        return PHONE_PATTERN.fullmatch(value) is not None and 4 <= len(digits) <= 15


COMMON_FORMATS = [
    DateTimeAttribute(),
    EmailAttribute(),
    IPv6Attribute(),
    URIAttribute(),
    RegexAttribute(),
]

DRAFTV3_FORMATS = COMMON_FORMATS + [
    DateAttribute(),
    TimeAttribute(),
    UTCMillisecAttribute(),
    HostnameAttribute('host-name'),
    IPv4Attribute('ip-address'),
    ColorAttribute(),
    PhoneAttribute(),
]

DRAFTV4_FORMATS = COMMON_FORMATS + [
    HostnameAttribute(),
    IPv4Attribute(),
]

DRAFTV6_FORMATS = DRAFTV4_FORMATS + [
    URIReferenceAttribute(),
    JsonPointerAttribute(),
]
