"""Syntax checking of schemas.

Every keyword known to a library comes with a syntax checker. A
checker first makes sure the keyword value has one of the expected JSON
types, then applies its own rules, and finally names the subschemas the
keyword holds so that they get checked in turn. Unknown keywords are
reported once per schema, as a warning.
"""

import re
import threading
from typing import Any, Iterable, List, Set, Tuple
from urllib.parse import urlparse

from schemacheck import ecmaregex
from schemacheck.common import node_type, unique_items
from schemacheck.constants import (ALL_TYPES, ARRAY, BOOLEAN, DOMAIN_SYNTAX, INTEGER,
                                   NUMBER, OBJECT, STRING)
from schemacheck.report import LogLevel, ProcessingMessage
from schemacheck.tree import SchemaNode

Tokens = Tuple[Any, ...]

_URI_FORBIDDEN = re.compile(r'[\s<>"{}|\\^`\x00-\x1f]')


def type_matches(found: str, allowed: Iterable[str]) -> bool:
    """ True if a JSON type is allowed, integers being numbers too. """
    allowed = set(allowed)
    return found in allowed or (found == INTEGER and NUMBER in allowed)


def is_uri(value: str) -> bool:
    if _URI_FORBIDDEN.search(value):
        return False
    try:
        urlparse(value)
    except ValueError:
        return False
    return True


class SyntaxContext:
    """Collects the messages of one syntax check run."""

    def __init__(self, library):
        self.library = library
        self.messages: List[ProcessingMessage] = []

    @property
    def schema_types(self) -> List[str]:
        if self.library.boolean_schemas:
            return [BOOLEAN, OBJECT]
        return [OBJECT]

    def report(self, level: LogLevel, node: SchemaNode, keyword: str, key: str, **args) -> None:
        self.messages.append(ProcessingMessage(level, key, node.pointer, DOMAIN_SYNTAX,
                                               keyword=keyword, schema=node.as_json(), args=args))

    def error(self, node: SchemaNode, keyword: str, key: str, **args) -> None:
        self.report(LogLevel.ERROR, node, keyword, key, **args)

    def is_schema(self, value: Any) -> bool:
        return node_type(value) in self.schema_types


class SyntaxChecker:
    """Checks that a keyword value has one of the given JSON types."""

    def __init__(self, keyword: str, *types: str):
        self.keyword = keyword
        self.types = frozenset(types)

    def check(self, ctx: SyntaxContext, node: SchemaNode) -> List[Tokens]:
        """
        Check the keyword in a schema.

        Returns:
            List[Tokens]: Pointer tokens, relative to the schema, of the
            subschemas held by the keyword.
        """
        value = node.get(self.keyword)
        found = node_type(value)
        if not type_matches(found, self.types):
            ctx.error(node, self.keyword, 'incorrect_type', found=found, expected=sorted(self.types))
            return []
        pointers: List[Tokens] = []
        self.check_value(ctx, node, value, pointers)
        return pointers

    def check_value(self, ctx: SyntaxContext, node: SchemaNode, value: Any, pointers: List[Tokens]) -> None:
        pass


class NaturalNumberSyntaxChecker(SyntaxChecker):

    def __init__(self, keyword: str):
        super().__init__(keyword, INTEGER)

    def check_value(self, ctx, node, value, pointers):
        if value < 0:
            ctx.error(node, self.keyword, 'not_a_natural', value=value)


class DivisorSyntaxChecker(SyntaxChecker):

    def __init__(self, keyword: str):
        super().__init__(keyword, INTEGER, NUMBER)

    def check_value(self, ctx, node, value, pointers):
        if value <= 0:
            ctx.error(node, self.keyword, 'divisor_not_positive', value=value)


class URISyntaxChecker(SyntaxChecker):

    def __init__(self, keyword: str, absolute: bool = False):
        super().__init__(keyword, STRING)
        self.absolute = absolute

    def check_value(self, ctx, node, value, pointers):
        if not is_uri(value):
            ctx.error(node, self.keyword, 'invalid_uri', value=value)
        elif self.absolute and not urlparse(value).scheme:
            ctx.error(node, self.keyword, 'uri_not_absolute', value=value)


class PatternSyntaxChecker(SyntaxChecker):

    def __init__(self):
        super().__init__('pattern', STRING)

    def check_value(self, ctx, node, value, pointers):
        if not ecmaregex.is_valid(value):
            ctx.error(node, self.keyword, 'invalid_regex', value=value)


class EnumSyntaxChecker(SyntaxChecker):

    def __init__(self):
        super().__init__('enum', ARRAY)

    def check_value(self, ctx, node, value, pointers):
        if not value:
            ctx.error(node, self.keyword, 'enum_empty')
        elif not unique_items(value):
            ctx.error(node, self.keyword, 'enum_not_unique')


class ExclusiveLimitSyntaxChecker(SyntaxChecker):
    """Boolean exclusiveMinimum/exclusiveMaximum of drafts 3 and 4."""

    def __init__(self, keyword: str, limit_keyword: str):
        super().__init__(keyword, BOOLEAN)
        self.limit_keyword = limit_keyword

    def check_value(self, ctx, node, value, pointers):
        if not node.has(self.limit_keyword):
            ctx.error(node, self.keyword, 'exclusive_without_limit', required=self.limit_keyword)


class SchemaSyntaxChecker(SyntaxChecker):
    """The keyword value is a single schema: not, contains, propertyNames."""

    def __init__(self, keyword: str):
        super().__init__(keyword, OBJECT, BOOLEAN)

    def check(self, ctx, node):
        value = node.get(self.keyword)
        if not ctx.is_schema(value):
            ctx.error(node, self.keyword, 'incorrect_type', found=node_type(value), expected=ctx.schema_types)
            return []
        return [(self.keyword,)]


class AdditionalSyntaxChecker(SyntaxChecker):
    """additionalItems and additionalProperties: a boolean or a schema."""

    def __init__(self, keyword: str):
        super().__init__(keyword, BOOLEAN, OBJECT)

    def check_value(self, ctx, node, value, pointers):
        if isinstance(value, dict):
            pointers.append((self.keyword,))


class SchemaMapSyntaxChecker(SyntaxChecker):
    """An object whose member values are schemas: properties, definitions."""

    def __init__(self, keyword: str):
        super().__init__(keyword, OBJECT)

    def check_value(self, ctx, node, value, pointers):
        for name in sorted(value):
            member = value[name]
            if not ctx.is_schema(member):
                ctx.error(node, self.keyword, 'incorrect_type', found=node_type(member),
                          expected=ctx.schema_types, member=name)
                continue
            self.check_member(ctx, node, name)
            pointers.append((self.keyword, name))

    def check_member(self, ctx, node, name):
        pass


class PatternPropertiesSyntaxChecker(SchemaMapSyntaxChecker):

    def __init__(self):
        super().__init__('patternProperties')

    def check_member(self, ctx, node, name):
        if not ecmaregex.is_valid(name):
            ctx.error(node, self.keyword, 'invalid_regex_member', value=name)


class SchemaOrSchemaArraySyntaxChecker(SyntaxChecker):
    """items and extends: a schema or an array of schemas."""

    def __init__(self, keyword: str):
        super().__init__(keyword, OBJECT, ARRAY, BOOLEAN)

    def check(self, ctx, node):
        value = node.get(self.keyword)
        if isinstance(value, list):
            pointers = []
            for index, element in enumerate(value):
                if ctx.is_schema(element):
                    pointers.append((self.keyword, index))
                else:
                    ctx.error(node, self.keyword, 'array_element_type', index=index,
                              found=node_type(element), expected=ctx.schema_types)
            return pointers
        if not ctx.is_schema(value):
            ctx.error(node, self.keyword, 'incorrect_type', found=node_type(value),
                      expected=sorted([ARRAY] + ctx.schema_types))
            return []
        return [(self.keyword,)]


class SchemaArraySyntaxChecker(SyntaxChecker):
    """allOf, anyOf, oneOf: a non empty array of schemas."""

    def __init__(self, keyword: str):
        super().__init__(keyword, ARRAY)

    def check_value(self, ctx, node, value, pointers):
        if not value:
            ctx.error(node, self.keyword, 'array_empty')
            return
        for index, element in enumerate(value):
            if ctx.is_schema(element):
                pointers.append((self.keyword, index))
            else:
                ctx.error(node, self.keyword, 'array_element_type', index=index,
                          found=node_type(element), expected=ctx.schema_types)


class DependenciesSyntaxChecker(SyntaxChecker):
    """
    Dependencies map property names to a schema or to property names.

    Args:
        allow_strings (bool): A single property name is a valid value (draft 3).
        allow_empty (bool): An empty array of property names is valid (draft 6).
    """

    def __init__(self, allow_strings: bool = False, allow_empty: bool = False):
        super().__init__('dependencies', OBJECT)
        self.allow_strings = allow_strings
        self.allow_empty = allow_empty

    def check_value(self, ctx, node, value, pointers):
        expected = sorted(set([ARRAY] + ctx.schema_types + ([STRING] if self.allow_strings else [])))
        for name in sorted(value):
            dependency = value[name]
            found = node_type(dependency)
            if ctx.is_schema(dependency):
                pointers.append((self.keyword, name))
            elif found == STRING and self.allow_strings:
                if dependency == name:
                    ctx.error(node, self.keyword, 'dependency_self', property=name)
            elif found == ARRAY:
                self.check_property_names(ctx, node, name, dependency)
            else:
                ctx.error(node, self.keyword, 'dependency_value_type', property=name,
                          found=found, expected=expected)

    def check_property_names(self, ctx, node, name, names):
        if not names and not self.allow_empty:
            ctx.error(node, self.keyword, 'dependency_array_empty', property=name)
            return
        for index, element in enumerate(names):
            if not isinstance(element, str):
                ctx.error(node, self.keyword, 'dependency_element_type', property=name,
                          index=index, found=node_type(element))
                return
            if element == name:
                ctx.error(node, self.keyword, 'dependency_self', property=name)
        if not unique_items(names):
            ctx.error(node, self.keyword, 'dependency_array_not_unique', property=name)


class DraftV3TypeKeywordSyntaxChecker(SyntaxChecker):
    """type and disallow of draft 3: type names, "any", or schemas."""

    def __init__(self, keyword: str):
        super().__init__(keyword, STRING, ARRAY)

    def check_value(self, ctx, node, value, pointers):
        valid = sorted(ALL_TYPES | {'any'})
        if isinstance(value, str):
            if value not in valid:
                ctx.error(node, self.keyword, 'unknown_type_name', value=value, valid=valid)
            return
        if not unique_items(value):
            ctx.error(node, self.keyword, 'array_not_unique')
        for index, element in enumerate(value):
            found = node_type(element)
            if found == OBJECT:
                pointers.append((self.keyword, index))
            elif found == STRING:
                if element not in valid:
                    ctx.error(node, self.keyword, 'unknown_type_name', value=element, valid=valid)
            else:
                ctx.error(node, self.keyword, 'array_element_type', index=index,
                          found=found, expected=[OBJECT, STRING])


class DraftV4TypeSyntaxChecker(SyntaxChecker):

    def __init__(self):
        super().__init__('type', STRING, ARRAY)

    def check_value(self, ctx, node, value, pointers):
        valid = sorted(ALL_TYPES)
        if isinstance(value, str):
            value = [value]
        elif not value:
            ctx.error(node, self.keyword, 'array_empty')
            return
        elif not unique_items(value):
            ctx.error(node, self.keyword, 'array_not_unique')
        for index, element in enumerate(value):
            if not isinstance(element, str):
                ctx.error(node, self.keyword, 'array_element_type', index=index,
                          found=node_type(element), expected=[STRING])
            elif element not in valid:
                ctx.error(node, self.keyword, 'unknown_type_name', value=element, valid=valid)


class RequiredSyntaxChecker(SyntaxChecker):
    """required of draft 4 and later: an array of unique property names."""

    def __init__(self, allow_empty: bool = False):
        super().__init__('required', ARRAY)
        self.allow_empty = allow_empty

    def check_value(self, ctx, node, value, pointers):
        if not value and not self.allow_empty:
            ctx.error(node, self.keyword, 'array_empty')
            return
        for index, element in enumerate(value):
            if not isinstance(element, str):
                ctx.error(node, self.keyword, 'array_element_type', index=index,
                          found=node_type(element), expected=[STRING])
                return
        if not unique_items(value):
            ctx.error(node, self.keyword, 'array_not_unique')


class SyntaxProcessor:
    """
    Checks schemas against the syntax rules of a library.

    Each schema location is checked at most once; later requests for an
    already checked location return no messages.
    """

    def __init__(self, library):
        self.library = library
        self._checked: Set[SchemaNode] = set()
        self._lock = threading.Lock()

    def is_checked(self, node: SchemaNode) -> bool:
        return node in self._checked

    def check(self, node: SchemaNode) -> List[ProcessingMessage]:
        """
        Check a schema and every subschema it holds.

        Returns:
            List[ProcessingMessage]: The messages raised, in document order.
        """
        ctx = SyntaxContext(self.library)
        with self._lock:
            self._check_node(ctx, node)
        return ctx.messages

    def _check_node(self, ctx: SyntaxContext, node: SchemaNode) -> None:
        if node in self._checked:
            return
        self._checked.add(node)
        found = node_type(node.node)
        if found not in ctx.schema_types:
            ctx.messages.append(ProcessingMessage(LogLevel.ERROR, 'not_a_schema', node.pointer, DOMAIN_SYNTAX,
                                                  schema=node.as_json(),
                                                  args={'found': found, 'expected': ctx.schema_types}))
            return
        if found == BOOLEAN:
            return
        if node.is_ref():
            checker = self.library.syntax_checker_for('$ref')
            if checker is not None:
                checker.check(ctx, node)
            return
        keywords = node.keywords
        unknown = [keyword for keyword in keywords if self.library.syntax_checker_for(keyword) is None]
        if unknown:
            ctx.report(LogLevel.WARNING, node, None, 'unknown_keywords', ignored=unknown)
        children: List[Tokens] = []
        for keyword in keywords:
            checker = self.library.syntax_checker_for(keyword)
            if checker is not None:
                children.extend(checker.check(ctx, node))
        for tokens in children:
            self._check_node(ctx, node.append(*tokens))


def check_syntax(node: SchemaNode, library) -> List[ProcessingMessage]:
    """
    Syntax check a schema node and its subschemas against a library.

    Args:
        node (SchemaNode): The schema to check.
        library (Library): The keyword library.

    Returns:
        List[ProcessingMessage]: The messages raised; errors mean the schema
        must not be used for validation.
    """
    return SyntaxProcessor(library).check(node)
