"""Validation of instances against schemas.

The processor walks the instance depth first. At each instance node it
resolves the schema, runs the keyword validators which apply to the
instance type, and then, unless those validators raised errors, walks
into the children of arrays and objects with the subschemas selected
for each child. Nothing short-circuits: every applicable keyword runs
and every child is visited, so a report lists all the findings.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Set, Tuple

from jsonpointer import JsonPointer

from schemacheck import ecmaregex
from schemacheck.cache import ValidatorCache
from schemacheck.common import node_type
from schemacheck.config import ValidationConfiguration
from schemacheck.constants import ARRAY, DOMAIN_VALIDATION, OBJECT
from schemacheck.digest import KeywordDigest, digest_keyword
from schemacheck.errors import InvalidSchemaError
from schemacheck.library import Library
from schemacheck.report import LogLevel, ProcessingMessage, ValidationReport
from schemacheck.resolver import RefResolver, SchemaRegistry
from schemacheck.syntax import SyntaxProcessor
from schemacheck.tree import SchemaNode, SchemaTree

logger = logging.getLogger(__name__)

_SAME = object()


def _is_below(pointer: str, base: str) -> bool:
    return pointer == base or pointer.startswith(base + "/")


class InstanceData:
    """A schema node, the instance validated against it, and the instance's pointer."""

    __slots__ = ('schema', 'instance', 'pointer')

    def __init__(self, schema: SchemaNode, instance: Any, pointer: str):
        self.schema = schema
        self.instance = instance
        self.pointer = pointer

    def __repr__(self) -> str:
        return f"InstanceData({self.schema!r}, pointer={self.pointer!r})"


class ValidationContext:
    """
    State of one validation run.

    Keeps the instance pointer as a stack of reference tokens, the report
    currently receiving messages, and the (schema, instance pointer)
    pairs currently being validated.
    """

    def __init__(self, processor: 'ValidationProcessor', report: ValidationReport):
        self.processor = processor
        self.library = processor.library
        self.current_report = report
        self._tokens: List[str] = []
        self._in_progress: Set[Tuple[SchemaNode, str]] = set()

    @property
    def pointer(self) -> str:
        return JsonPointer.from_parts(self._tokens).path

    def push(self, token: Any) -> None:
        self._tokens.append(str(token))

    def pop(self) -> None:
        self._tokens.pop()

    def enter(self, schema: SchemaNode, pointer: str) -> bool:
        """ Mark a schema as being validated at a pointer; False if it already is. """
        key = (schema, pointer)
        if key in self._in_progress:
            return False
        self._in_progress.add(key)
        return True

    def leave(self, schema: SchemaNode, pointer: str) -> None:
        self._in_progress.discard((schema, pointer))

    def report(self, data: InstanceData, keyword: Optional[str], key: str, level: LogLevel = LogLevel.ERROR,
               reports: Optional[Dict[str, ValidationReport]] = None, **args) -> None:
        self.current_report.add(ProcessingMessage(level, key, data.pointer, DOMAIN_VALIDATION,
                                                  keyword=keyword, schema=data.schema.as_json(),
                                                  args=args, reports=reports))

    def process(self, schema: SchemaNode, data: InstanceData) -> None:
        """ Validate the current instance against another schema, into the current report. """
        self.processor.process(self, schema, data.instance)

    def subreport(self, schema: SchemaNode, data: InstanceData, instance: Any = _SAME,
                  token: Any = None) -> ValidationReport:
        """
        Validate against a schema into a separate report.

        Args:
            schema (SchemaNode): The schema to validate against.
            data (InstanceData): The data of the calling keyword.
            instance (Any): The instance to validate, the current one if omitted.
            token (Any): Reference token appended to the instance pointer, if any.

        Returns:
            ValidationReport: The frozen sub-report.
        """
        saved = self.current_report
        self.current_report = ValidationReport(saved.log_level)
        if token is not None:
            self.push(token)
        try:
            self.processor.process(self, schema, data.instance if instance is _SAME else instance)
        finally:
            if token is not None:
                self.pop()
            report = self.current_report
            self.current_report = saved
        return report.freeze()


class ValidationProcessor:
    """
    Drives keyword validators over an instance tree.

    Args:
        library (Library): The keyword library.
        resolver (RefResolver): Resolves $ref.
        syntax (SyntaxProcessor): Checks schemas met for the first time.
        cache (ValidatorCache): Keyword validators by digest.
        deep_check (bool): Validate children even when their container failed.
    """

    def __init__(self, library: Library, resolver: RefResolver, syntax: SyntaxProcessor,
                 cache: ValidatorCache, deep_check: bool = False):
        self.library = library
        self.resolver = resolver
        self.syntax = syntax
        self.cache = cache
        self.deep_check = deep_check
        self._validators: Dict[SchemaNode, List[Tuple[KeywordDigest, Any]]] = {}
        self._syntax_errors: Dict[SchemaNode, List[ProcessingMessage]] = {}
        self._tree_messages: Dict[SchemaTree, List[ProcessingMessage]] = {}
        self._lock = threading.Lock()

    def validators_for(self, schema: SchemaNode) -> List[Tuple[KeywordDigest, Any]]:
        """ Get the keyword validators of a schema, in keyword order. """
        validators = self._validators.get(schema)
        if validators is not None:
            return validators
        validators = []
        for keyword in schema.keywords:
            digester = self.library.digester_for(keyword)
            if digester is None:
                continue
            digest = digest_keyword(digester, schema.node)
            constructor = self.library.validator_constructor_for(keyword)
            validators.append((digest, self.cache.get_or_build(digest, constructor)))
        with self._lock:
            return self._validators.setdefault(schema, validators)

    def _check_syntax(self, schema: SchemaNode) -> List[ProcessingMessage]:
        """
        Get the syntax messages of a schema and everything below it.

        Documents other than the one the validator was built from are
        checked here, the first time validation reaches them. Messages are
        kept per tree so that a later $ref straight into a checked subtree
        still sees the errors raised at or below its target.
        """
        messages = self._syntax_errors.get(schema)
        if messages is not None:
            return messages
        with self._lock:
            messages = self._syntax_errors.get(schema)
            if messages is not None:
                return messages
            if not self.syntax.is_checked(schema):
                logger.debug("Checking syntax of %s", schema.location_uri)
                self._tree_messages.setdefault(schema.tree, []).extend(self.syntax.check(schema))
            messages = [message for message in self._tree_messages.get(schema.tree, [])
                        if _is_below(message.pointer, schema.pointer)]
            self._syntax_errors[schema] = messages
            return messages

    def process(self, context: ValidationContext, schema: SchemaNode, instance: Any) -> None:
        """
        Validate an instance against a schema, at the context's current pointer.

        Raises:
            RefResolutionError: If a $ref chain loops.
            DanglingRefError: If a $ref points nowhere.
            LoadError: If a referenced document cannot be loaded.
        """
        schema = self.resolver.resolve(schema)
        pointer = context.pointer
        data = InstanceData(schema, instance, pointer)
        messages = self._check_syntax(schema)
        if messages:
            context.current_report.extend(messages)
            if any(message.level >= LogLevel.ERROR for message in messages):
                return
        if not context.enter(schema, pointer):
            context.report(data, None, 'validation_loop', level=LogLevel.FATAL,
                           location=schema.location_uri, pointer=pointer)
            return
        try:
            self._validate(context, data)
        finally:
            context.leave(schema, pointer)

    def _validate(self, context: ValidationContext, data: InstanceData) -> None:
        schema = data.schema
        if schema.node is True:
            return
        if schema.node is False:
            context.report(data, None, 'false_schema')
            return
        instance_type = node_type(data.instance)
        errors = context.current_report.error_count
        for digest, validator in self.validators_for(schema):
            if digest.applies_to(instance_type):
                validator.validate(context, data)
        if instance_type not in (ARRAY, OBJECT) or not data.instance:
            return
        if context.current_report.error_count > errors and not self.deep_check:
            return
        if instance_type == ARRAY:
            self._validate_array(context, data)
        else:
            self._validate_object(context, data)

    def _is_schema(self, value: Any) -> bool:
        return isinstance(value, dict) or (self.library.boolean_schemas and isinstance(value, bool))

    def _validate_array(self, context: ValidationContext, data: InstanceData) -> None:
        schema = data.schema
        items = schema.get('items')
        additional = schema.get('additionalItems')
        for index, element in enumerate(data.instance):
            child = None
            if isinstance(items, list):
                if index < len(items):
                    child = schema.append('items', index)
                elif isinstance(additional, dict):
                    child = schema.append('additionalItems')
            elif self._is_schema(items):
                child = schema.append('items')
            if child is None:
                continue
            context.push(index)
            try:
                self.process(context, child, element)
            finally:
                context.pop()

    def _validate_object(self, context: ValidationContext, data: InstanceData) -> None:
        schema = data.schema
        properties = schema.get('properties')
        properties = properties if isinstance(properties, dict) else {}
        patterns = schema.get('patternProperties')
        patterns = patterns if isinstance(patterns, dict) else {}
        additional = schema.get('additionalProperties')
        for name in sorted(data.instance):
            children = []
            if name in properties:
                children.append(schema.append('properties', name))
            for pattern in sorted(patterns):
                if ecmaregex.matches(pattern, name):
                    children.append(schema.append('patternProperties', pattern))
            if not children and isinstance(additional, dict):
                children.append(schema.append('additionalProperties'))
            if not children:
                continue
            context.push(name)
            try:
                for child in children:
                    self.process(context, child, data.instance[name])
            finally:
                context.pop()


class SchemaValidator:
    """
    A schema ready for validating instances.

    The validator owns the caches of its session: resolved references,
    checked schemas and keyword validators. It can be shared between
    threads; each validate() call works on its own context and report.
    """

    def __init__(self, processor: ValidationProcessor, schema: SchemaNode, syntax_report: ValidationReport,
                 log_level: LogLevel = LogLevel.INFO):
        self.processor = processor
        self.schema = schema
        self.syntax_report = syntax_report
        self.log_level = log_level

    @property
    def library(self) -> Library:
        return self.processor.library

    @property
    def cache(self) -> ValidatorCache:
        return self.processor.cache

    def validate(self, instance: Any) -> ValidationReport:
        """
        Validate an instance.

        Args:
            instance (Any): The parsed JSON instance.

        Returns:
            ValidationReport: The frozen report.

        Raises:
            RefResolutionError: If a $ref chain loops.
            DanglingRefError: If a $ref points nowhere.
            LoadError: If a referenced document cannot be loaded.
        """
        report = ValidationReport(self.log_level)
        context = ValidationContext(self.processor, report)
        self.processor.process(context, self.schema, instance)
        return report.freeze()

    def is_valid(self, instance: Any) -> bool:
        return self.validate(instance).is_success()


def _syntax_report(library: Library, tree: SchemaTree, log_level: LogLevel,
                   syntax: Optional[SyntaxProcessor] = None) -> ValidationReport:
    syntax = syntax if syntax is not None else SyntaxProcessor(library)
    report = ValidationReport(log_level)
    report.extend(syntax.check(tree.root))
    return report.freeze()


def build_validator(schema: Any, library: Optional[Library] = None, loader=None,
                    config: Optional[ValidationConfiguration] = None,
                    cache: Optional[ValidatorCache] = None, uri: str = '') -> SchemaValidator:
    """
    Build a validator for a schema.

    The schema is syntax checked once, here; references into other
    documents are loaded and checked when validation first reaches them.

    Args:
        schema (Any): The parsed schema document.
        library (Library): The keyword library; selected from the schema's
            $schema by the configuration if omitted.
        loader (Callable): Loads referenced documents by URI.
        config (ValidationConfiguration): The configuration.
        cache (ValidatorCache): Validator cache to use, a new one if omitted.
            Only share a cache between validators using the same library.
        uri (str): The URI the schema was loaded from, if any.

    Returns:
        SchemaValidator: The validator.

    Raises:
        InvalidSchemaError: If the schema fails its syntax check.
    """
    config = config if config is not None else ValidationConfiguration()
    if library is None:
        library = config.library_for(schema)
    library = config.prepare(library)
    registry = SchemaRegistry(loader if loader is not None else config.loader, library.id_keyword)
    tree = registry.register(SchemaTree(schema, uri, library.id_keyword))
    syntax = SyntaxProcessor(library)
    syntax_report = _syntax_report(library, tree, config.log_level, syntax)
    if not syntax_report.is_success():
        raise InvalidSchemaError("schema failed syntax validation", syntax_report)
    processor = ValidationProcessor(library, RefResolver(registry), syntax,
                                    cache if cache is not None else ValidatorCache(),
                                    deep_check=config.deep_check)
    return SchemaValidator(processor, tree.root, syntax_report, config.log_level)


def validate_schema(schema: Any, library: Optional[Library] = None,
                    config: Optional[ValidationConfiguration] = None) -> ValidationReport:
    """
    Syntax check a schema without building a validator.

    Returns:
        ValidationReport: The syntax report.
    """
    config = config if config is not None else ValidationConfiguration()
    if library is None:
        library = config.library_for(schema)
    tree = SchemaTree(schema, '', library.id_keyword)
    return _syntax_report(library, tree, config.log_level)


def validate_instance(instance: Any, schema: Any, library: Optional[Library] = None,
                      loader=None, config: Optional[ValidationConfiguration] = None) -> ValidationReport:
    """ Build a validator for a schema and validate one instance with it. """
    return build_validator(schema, library=library, loader=loader, config=config).validate(instance)
