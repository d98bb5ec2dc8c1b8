"""Keyword libraries.

A Library is a frozen set of keyword registrations: for each keyword a
syntax checker and, for keywords which take part in validation, a
digester plus a validator constructor. Libraries are never modified;
thaw() returns a LibraryBuilder initialized from a library, and the
builder's freeze() produces a new library from a copy of its tables.
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from schemacheck.digest import Digester
from schemacheck.errors import UnknownKeywordConstructorError

ValidatorConstructor = Callable[[Any], Any]


class Library:
    """
    A frozen keyword library.

    Args:
        dialect (str): The $schema URI of the draft the library implements.
        id_keyword (str): The keyword which changes resolution scope.
        boolean_schemas (bool): True if true and false are valid schemas.
    """

    def __init__(self, syntax_checkers: Mapping[str, Any], digesters: Mapping[str, Digester],
                 validators: Mapping[str, ValidatorConstructor], format_attributes: Mapping[str, Any],
                 dialect: str = '', id_keyword: str = 'id', boolean_schemas: bool = False):
        self._syntax_checkers = MappingProxyType(dict(syntax_checkers))
        self._digesters = MappingProxyType(dict(digesters))
        self._validators = MappingProxyType(dict(validators))
        self._format_attributes = MappingProxyType(dict(format_attributes))
        self.dialect = dialect
        self.id_keyword = id_keyword
        self.boolean_schemas = boolean_schemas

    @property
    def syntax_checkers(self) -> Mapping[str, Any]:
        return self._syntax_checkers

    @property
    def digesters(self) -> Mapping[str, Digester]:
        return self._digesters

    @property
    def validators(self) -> Mapping[str, ValidatorConstructor]:
        return self._validators

    @property
    def format_attributes(self) -> Mapping[str, Any]:
        return self._format_attributes

    @property
    def keywords(self):
        return sorted(self._syntax_checkers)

    def syntax_checker_for(self, keyword: str):
        return self._syntax_checkers.get(keyword)

    def digester_for(self, keyword: str) -> Optional[Digester]:
        return self._digesters.get(keyword)

    def validator_constructor_for(self, keyword: str) -> Optional[ValidatorConstructor]:
        return self._validators.get(keyword)

    def format_attribute_for(self, name: str):
        return self._format_attributes.get(name)

    def thaw(self) -> 'LibraryBuilder':
        return LibraryBuilder(self)

    def __repr__(self) -> str:
        return f"Library({self.dialect!r}, keywords={len(self._syntax_checkers)})"


class LibraryBuilder:
    """A thawed, mutable copy of a library."""

    def __init__(self, library: Optional[Library] = None):
        self.syntax_checkers: Dict[str, Any] = {}
        self.digesters: Dict[str, Digester] = {}
        self.validators: Dict[str, ValidatorConstructor] = {}
        self.format_attributes: Dict[str, Any] = {}
        self.dialect = ''
        self.id_keyword = 'id'
        self.boolean_schemas = False
        if library is not None:
            self.syntax_checkers.update(library.syntax_checkers)
            self.digesters.update(library.digesters)
            self.validators.update(library.validators)
            self.format_attributes.update(library.format_attributes)
            self.dialect = library.dialect
            self.id_keyword = library.id_keyword
            self.boolean_schemas = library.boolean_schemas

    def add_keyword(self, keyword: str, syntax_checker, digester: Optional[Digester] = None,
                    constructor: Optional[ValidatorConstructor] = None) -> 'LibraryBuilder':
        """
        Register a keyword, replacing any previous registration.

        Args:
            keyword (str): The keyword name.
            syntax_checker (SyntaxChecker): Checks the keyword value.
            digester (Digester): Digests the keyword for validation, if it validates.
            constructor (Callable): Builds a validator from a digest.

        Raises:
            UnknownKeywordConstructorError: If only one of digester and
                constructor is given.
        """
        if syntax_checker is None:
            raise UnknownKeywordConstructorError("a keyword needs a syntax checker", keyword)
        if (digester is None) != (constructor is None):
            raise UnknownKeywordConstructorError(
                "a keyword needs both a digester and a validator constructor, or neither", keyword)
        self.remove_keyword(keyword)
        self.syntax_checkers[keyword] = syntax_checker
        if digester is not None:
            self.digesters[keyword] = digester
            self.validators[keyword] = constructor
        return self

    def remove_keyword(self, keyword: str) -> 'LibraryBuilder':
        self.syntax_checkers.pop(keyword, None)
        self.digesters.pop(keyword, None)
        self.validators.pop(keyword, None)
        return self

    def add_format_attribute(self, name: str, attribute) -> 'LibraryBuilder':
        self.format_attributes[name] = attribute
        return self

    def remove_format_attribute(self, name: str) -> 'LibraryBuilder':
        self.format_attributes.pop(name, None)
        return self

    def freeze(self) -> Library:
        return Library(self.syntax_checkers, self.digesters, self.validators, self.format_attributes,
                       dialect=self.dialect, id_keyword=self.id_keyword, boolean_schemas=self.boolean_schemas)


def thaw(library: Library) -> LibraryBuilder:
    """ Get a builder initialized with the registrations of a library. """
    return library.thaw()
