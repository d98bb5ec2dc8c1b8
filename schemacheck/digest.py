"""Keyword digesters.

A digester reduces the part of a schema that a keyword depends on to a
canonical JSON value. Two schema fragments which would produce the same
validation behaviour for a keyword give the same digest, wherever they
live, so that one keyword validator can serve all of them.
"""

from typing import Any, Dict, FrozenSet, Iterable, Optional

from schemacheck.common import canonical_json, get_tree_hash, is_integral, normalize
from schemacheck.constants import (ALL_TYPES, ARRAY, INTEGER, NUMBER, NUMERIC_TYPES,
                                   OBJECT, STRING)


class KeywordDigest:
    """
    The canonical content of one keyword, plus the instance types it applies to.

    Equality and hashing only consider the SHA-256 fingerprint of the
    canonical serialization of keyword, types and content.
    """

    __slots__ = ('keyword', 'types', 'content', 'fingerprint')

    def __init__(self, keyword: str, types: Iterable[str], content: Any):
        self.keyword = keyword
        self.types: FrozenSet[str] = frozenset(types)
        self.content = normalize(content)
        self.fingerprint = get_tree_hash({
            'keyword': keyword,
            'types': sorted(self.types),
            'content': self.content,
        })

    def applies_to(self, instance_type: str) -> bool:
        return instance_type in self.types

    def __eq__(self, other) -> bool:
        if not isinstance(other, KeywordDigest):
            return NotImplemented
        return self.fingerprint == other.fingerprint

    def __hash__(self) -> int:
        return hash(self.fingerprint)

    def __repr__(self) -> str:
        return f"KeywordDigest({self.keyword!r}, {canonical_json(self.content)}, {sorted(self.types)})"


class Digester:
    """Base class of all digesters."""

    def __init__(self, keyword: str, *types: str):
        self.keyword = keyword
        self.types: FrozenSet[str] = frozenset(types) if types else ALL_TYPES

    def digest(self, schema: Dict[str, Any]) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.keyword!r})"


class SimpleDigester(Digester):
    """Digest is the keyword value itself."""

    def digest(self, schema: Dict[str, Any]) -> Any:
        return {self.keyword: schema[self.keyword]}


class NullDigester(Digester):
    """The validator reads what it needs from the schema at validation time."""

    def digest(self, schema: Dict[str, Any]) -> Any:
        return None


class NumericLimitDigester(Digester):
    """minimum and maximum, with their optional boolean exclusive modifier."""

    def __init__(self, keyword: str, exclusive_keyword: Optional[str] = None):
        super().__init__(keyword, INTEGER, NUMBER)
        self.exclusive_keyword = exclusive_keyword

    def digest(self, schema: Dict[str, Any]) -> Any:
        value = schema[self.keyword]
        exclusive = False
        if self.exclusive_keyword is not None:
            exclusive = schema.get(self.exclusive_keyword) is True
        return {self.keyword: value, 'exclusive': exclusive, 'valueIsLong': is_integral(value)}


class AdditionalItemsDigester(Digester):

    def __init__(self):
        super().__init__('additionalItems', ARRAY)

    def digest(self, schema: Dict[str, Any]) -> Any:
        items = schema.get('items')
        if schema.get('additionalItems') is not False or not isinstance(items, list):
            return {'additionalItems': True}
        return {'additionalItems': False, 'itemsSize': len(items)}


class AdditionalPropertiesDigester(Digester):
    """Only the member names of properties and patternProperties matter."""

    def __init__(self):
        super().__init__('additionalProperties', OBJECT)

    def digest(self, schema: Dict[str, Any]) -> Any:
        if schema.get('additionalProperties') is not False:
            return {'additionalProperties': True}
        properties = schema.get('properties')
        patterns = schema.get('patternProperties')
        return {
            'additionalProperties': False,
            'properties': sorted(properties) if isinstance(properties, dict) else [],
            'patternProperties': sorted(patterns) if isinstance(patterns, dict) else [],
        }


class RequiredDigester(Digester):

    def __init__(self):
        super().__init__('required', OBJECT)

    def digest(self, schema: Dict[str, Any]) -> Any:
        return {'required': sorted(set(schema['required']))}


class DraftV3PropertiesDigester(Digester):
    """Draft 3 declares required properties inside the property schemas."""

    def __init__(self):
        super().__init__('properties', OBJECT)

    def digest(self, schema: Dict[str, Any]) -> Any:
        properties = schema['properties']
        required = [name for name, subschema in properties.items()
                    if isinstance(subschema, dict) and subschema.get('required') is True]
        return {'required': sorted(required)}


class DependenciesDigester(Digester):
    """Splits dependencies into property dependencies and schema dependencies."""

    def __init__(self):
        super().__init__('dependencies', OBJECT)

    def digest(self, schema: Dict[str, Any]) -> Any:
        property_deps: Dict[str, Any] = {}
        schema_deps = []
        for name, value in schema['dependencies'].items():
            if isinstance(value, str):
                property_deps[name] = [value]
            elif isinstance(value, list):
                property_deps[name] = sorted(set(value))
            else:
                schema_deps.append(name)
        return {'propertyDeps': property_deps, 'schemaDeps': sorted(schema_deps)}


def _expand_types(names: Iterable[str]) -> list:
    types = set(names)
    if 'any' in types:
        return sorted(ALL_TYPES)
    if NUMBER in types:
        types.add(INTEGER)
    return sorted(types & ALL_TYPES)


class DraftV3TypeDigester(Digester):
    """type and disallow: primitive type names plus indices of schema elements."""

    def digest(self, schema: Dict[str, Any]) -> Any:
        value = schema[self.keyword]
        if not isinstance(value, list):
            value = [value]
        names = [element for element in value if isinstance(element, str)]
        indices = [index for index, element in enumerate(value) if isinstance(element, dict)]
        return {self.keyword: _expand_types(names), 'schemas': indices}


class DraftV4TypeDigester(Digester):

    def __init__(self):
        super().__init__('type')

    def digest(self, schema: Dict[str, Any]) -> Any:
        value = schema['type']
        if not isinstance(value, list):
            value = [value]
        return {'type': _expand_types(value)}


def digest_keyword(digester: Digester, schema: Dict[str, Any]) -> KeywordDigest:
    """
    Digest one keyword of a schema.

    Args:
        digester (Digester): The digester registered for the keyword.
        schema (dict): The schema object holding the keyword.

    Returns:
        KeywordDigest: The digest.
    """
    return KeywordDigest(digester.keyword, digester.types, digester.digest(schema))


def numeric(keyword: str) -> SimpleDigester:
    return SimpleDigester(keyword, *NUMERIC_TYPES)


def string(keyword: str) -> SimpleDigester:
    return SimpleDigester(keyword, STRING)


def array(keyword: str) -> SimpleDigester:
    return SimpleDigester(keyword, ARRAY)


def object_(keyword: str) -> SimpleDigester:
    return SimpleDigester(keyword, OBJECT)
