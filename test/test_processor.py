"""Tests for instance validation and container recursion."""

import os
import sys
import threading
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from schemacheck import digest, keywords, syntax
from schemacheck.config import ValidationConfiguration
from schemacheck.drafts import DRAFTV4_LIBRARY
from schemacheck.errors import DanglingRefError, InvalidSchemaError, RefResolutionError
from schemacheck.processor import build_validator, validate_instance, validate_schema
from schemacheck.report import LogLevel


def error_pointers(report):
    return [message.pointer for message in report.errors()]


class CountingConstructor:
    """Wraps a validator class and counts how many instances were built."""

    def __init__(self, validator_class):
        self.validator_class = validator_class
        self.calls = 0

    def __call__(self, content):
        self.calls += 1
        return self.validator_class(content)


def counting_library(keyword, checker, digester, validator_class):
    counter = CountingConstructor(validator_class)
    builder = DRAFTV4_LIBRARY.thaw()
    builder.add_keyword(keyword, checker, digester, counter)
    return builder.freeze(), counter


class TestScenarios(unittest.TestCase):
    """Validation scenarios with known outcomes."""

    def test_min_length_in_property(self):
        """A too short property value gives one error at the property pointer."""
        schema = {
            "type": "object",
            "properties": {"name": {"type": "string", "minLength": 3}},
        }
        report = validate_instance({"name": "ab"}, schema)
        self.assertFalse(report.is_success())
        self.assertEqual(["/name"], error_pointers(report))
        self.assertEqual("minLength", report.errors()[0].keyword)

    def test_array_items_type(self):
        """Every offending element is reported, in index order."""
        schema = {"type": "array", "items": {"type": "integer"}}
        report = validate_instance([1, "x", 3, "y"], schema)
        self.assertEqual(["/1", "/3"], error_pointers(report))
        self.assertTrue(all(message.keyword == "type" for message in report.errors()))

    def test_missing_required(self):
        """A missing required property gives exactly one error at the root."""
        schema = {
            "type": "object",
            "required": ["name"],
            "properties": {"name": {"type": "string"}},
        }
        report = validate_instance({}, schema)
        self.assertEqual([""], error_pointers(report))
        self.assertEqual("required", report.errors()[0].keyword)
        self.assertEqual(["name"], report.errors()[0].args["missing"])

    def test_valid_instance(self):
        schema = {
            "type": "object",
            "required": ["name"],
            "properties": {"name": {"type": "string", "minLength": 3}},
        }
        report = validate_instance({"name": "abc"}, schema)
        self.assertTrue(report.is_success())
        self.assertEqual(0, len(report))

    def test_shared_definition_builds_validator_once(self):
        """Two references to one definition share a single keyword validator."""
        library, counter = counting_library(
            "minLength", syntax.NaturalNumberSyntaxChecker("minLength"),
            digest.string("minLength"), keywords.MinLengthValidator)
        schema = {
            "definitions": {"str": {"type": "string", "minLength": 1}},
            "type": "object",
            "properties": {
                "a": {"$ref": "#/definitions/str"},
                "b": {"$ref": "#/definitions/str"},
            },
        }
        validator = build_validator(schema, library=library)
        report = validator.validate({"a": "x", "b": "y"})
        self.assertTrue(report.is_success())
        self.assertEqual(1, counter.calls)

    def test_equal_fragments_at_different_locations_share_validator(self):
        library, counter = counting_library(
            "minLength", syntax.NaturalNumberSyntaxChecker("minLength"),
            digest.string("minLength"), keywords.MinLengthValidator)
        schema = {
            "properties": {
                "a": {"minLength": 2},
                "b": {"minLength": 2},
                "c": {"minLength": 3},
            },
        }
        validator = build_validator(schema, library=library)
        report = validator.validate({"a": "x", "b": "yy", "c": "zzz"})
        self.assertEqual(["/a"], error_pointers(report))
        self.assertEqual(2, counter.calls)
        validator.validate({"a": "xx"})
        self.assertEqual(2, counter.calls)


class TestTypeDispatch(unittest.TestCase):
    """Keywords only apply to the instance types they are meant for."""

    def test_string_keyword_ignores_number(self):
        report = validate_instance(5, {"minLength": 3})
        self.assertTrue(report.is_success())
        self.assertEqual(0, len(report))

    def test_numeric_keyword_ignores_string(self):
        report = validate_instance("abc", {"minimum": 10, "multipleOf": 3})
        self.assertEqual(0, len(report))

    def test_object_keyword_ignores_array(self):
        report = validate_instance([1, 2], {"required": ["a"], "maxProperties": 0})
        self.assertEqual(0, len(report))

    def test_array_keyword_ignores_object(self):
        report = validate_instance({"a": 1}, {"minItems": 4, "uniqueItems": True})
        self.assertEqual(0, len(report))

    def test_boolean_is_not_an_integer(self):
        report = validate_instance(True, {"type": "integer"})
        self.assertEqual(["type"], [message.keyword for message in report.errors()])

    def test_integer_is_a_number(self):
        self.assertTrue(validate_instance(3, {"type": "number"}).is_success())


class TestContainerRecursion(unittest.TestCase):
    """Children are only validated when their container passed its own checks."""

    def test_container_failure_suppresses_children(self):
        schema = {
            "type": "object",
            "required": ["a"],
            "properties": {"b": {"type": "string"}},
        }
        report = validate_instance({"b": 5}, schema)
        self.assertEqual([""], error_pointers(report))

    def test_deep_check_validates_children_anyway(self):
        schema = {
            "type": "object",
            "required": ["a"],
            "properties": {"b": {"type": "string"}},
        }
        config = ValidationConfiguration(deep_check=True)
        report = validate_instance({"b": 5}, schema, config=config)
        self.assertEqual(["", "/b"], error_pointers(report))

    def test_child_failures_do_not_stop_siblings(self):
        schema = {
            "properties": {
                "a": {"type": "string"},
                "b": {"type": "string"},
                "c": {"type": "string"},
            },
        }
        report = validate_instance({"c": 3, "a": 1, "b": "ok"}, schema)
        self.assertEqual(["/a", "/c"], error_pointers(report))

    def test_pattern_properties_and_properties_both_apply(self):
        schema = {
            "properties": {"foo": {"maxLength": 2}},
            "patternProperties": {"^f": {"minLength": 5}},
        }
        report = validate_instance({"foo": "abc"}, schema)
        self.assertEqual(["maxLength", "minLength"], sorted(m.keyword for m in report.errors()))
        self.assertEqual(["/foo", "/foo"], error_pointers(report))

    def test_additional_properties_schema(self):
        schema = {
            "properties": {"a": {}},
            "patternProperties": {"^x-": {}},
            "additionalProperties": {"type": "integer"},
        }
        report = validate_instance({"a": "s", "x-b": "s", "c": "s", "d": 1}, schema)
        self.assertEqual(["/c"], error_pointers(report))

    def test_tuple_items_with_additional_items_schema(self):
        schema = {
            "items": [{"type": "string"}, {"type": "integer"}],
            "additionalItems": {"type": "boolean"},
        }
        report = validate_instance(["a", "b", True, 4], schema)
        self.assertEqual(["/1", "/3"], error_pointers(report))

    def test_nested_pointers_are_escaped(self):
        schema = {
            "properties": {
                "a/b": {"properties": {"c~d": {"type": "null"}}},
            },
        }
        report = validate_instance({"a/b": {"c~d": 1}}, schema)
        self.assertEqual(["/a~1b/c~0d"], error_pointers(report))


class TestReferences(unittest.TestCase):
    """$ref resolution during validation."""

    def test_ref_cycle_raises(self):
        schema = {"$ref": "#/a", "a": {"$ref": "#/a"}}
        with self.assertRaises(RefResolutionError):
            build_validator(schema).validate({})

    def test_multi_hop_ref_cycle_raises(self):
        schema = {
            "definitions": {
                "a": {"$ref": "#/definitions/b"},
                "b": {"$ref": "#/definitions/c"},
                "c": {"$ref": "#/definitions/a"},
            },
            "properties": {"x": {"$ref": "#/definitions/a"}},
        }
        validator = build_validator(schema)
        self.assertTrue(validator.validate({"y": 1}).is_success())
        with self.assertRaises(RefResolutionError):
            validator.validate({"x": 1})

    def test_dangling_ref_raises(self):
        schema = {"properties": {"x": {"$ref": "#/definitions/missing"}}}
        with self.assertRaises(DanglingRefError):
            build_validator(schema).validate({"x": 1})

    def test_recursive_schema(self):
        schema = {
            "type": "object",
            "properties": {
                "value": {"type": "integer"},
                "next": {"$ref": "#"},
            },
        }
        report = validate_instance({"value": 1, "next": {"value": 2, "next": {"value": "3"}}}, schema)
        self.assertEqual(["/next/next/value"], error_pointers(report))

    def test_validation_loop_is_fatal(self):
        schema = {"allOf": [{"$ref": "#"}]}
        report = validate_instance(1, schema)
        self.assertFalse(report.is_success())
        nested = report.errors()[0].reports["/allOf/0"]
        self.assertEqual(LogLevel.FATAL, nested.errors()[0].level)
        self.assertEqual("validation_loop", nested.errors()[0].key)

    def test_ref_siblings_are_ignored(self):
        schema = {
            "definitions": {"int": {"type": "integer"}},
            "properties": {"a": {"$ref": "#/definitions/int", "type": "string"}},
        }
        self.assertTrue(validate_instance({"a": 3}, schema).is_success())

    def test_remote_ref_through_loader(self):
        documents = {
            "http://example.com/defs.json": {
                "definitions": {"name": {"type": "string", "minLength": 2}},
            },
        }
        loaded = []

        def loader(uri):
            loaded.append(uri)
            return documents[uri]

        schema = {
            "id": "http://example.com/root.json",
            "properties": {
                "first": {"$ref": "defs.json#/definitions/name"},
                "last": {"$ref": "http://example.com/defs.json#/definitions/name"},
            },
        }
        validator = build_validator(schema, loader=loader)
        report = validator.validate({"first": "a", "last": "bb"})
        self.assertEqual(["/first"], error_pointers(report))
        validator.validate({"first": "aa"})
        self.assertEqual(["http://example.com/defs.json"], loaded)

    def test_invalid_remote_schema_is_reported(self):
        def loader(uri):
            return {"type": "object", "minProperties": -1}

        schema = {"properties": {"a": {"$ref": "http://example.com/bad.json"}}}
        report = build_validator(schema, loader=loader).validate({"a": {}})
        self.assertFalse(report.is_success())
        self.assertEqual("syntax", report.errors()[0].fields["domain"])
        self.assertEqual("minProperties", report.errors()[0].keyword)

    def test_refs_into_an_invalid_remote_subtree(self):
        def loader(uri):
            return {"definitions": {"a": {"minLength": "x"}}}

        whole = {"$ref": "http://example.com/d.json#"}
        part = {"$ref": "http://example.com/d.json#/definitions/a"}
        # the document root is reached first in one schema and last in the other
        for properties in ({"p": whole, "q": part}, {"p": part, "q": whole}):
            validator = build_validator({"properties": properties}, loader=loader)
            report = validator.validate({"p": "s", "q": "s"})
            self.assertFalse(report.is_success())
            self.assertEqual(["minLength", "minLength"], [m.keyword for m in report.errors()])
            self.assertEqual({"syntax"}, {m.fields["domain"] for m in report.errors()})
            self.assertEqual(["/definitions/a", "/definitions/a"], error_pointers(report))

    def test_sibling_of_an_invalid_remote_subtree_validates(self):
        def loader(uri):
            return {"definitions": {"bad": {"minLength": "x"}, "good": {"minLength": 2}}}

        schema = {"properties": {
            "a": {"$ref": "http://example.com/d.json#/definitions/bad"},
            "b": {"$ref": "http://example.com/d.json#/definitions/good"},
        }}
        validator = build_validator(schema, loader=loader)
        self.assertEqual(["/b"], [m.pointer for m in validator.validate({"b": "x"}).errors()])
        report = validator.validate({"a": "x", "b": "xy"})
        self.assertEqual(["syntax"], [m.fields["domain"] for m in report.errors()])

    def test_shared_validator_sees_remote_syntax_errors_in_every_thread(self):
        def loader(uri):
            return {"definitions": {"a": {"minLength": "x"}}}

        schema = {"properties": {
            "p": {"$ref": "http://example.com/d.json#"},
            "q": {"$ref": "http://example.com/d.json#/definitions/a"},
        }}
        validator = build_validator(schema, loader=loader)
        barrier = threading.Barrier(8)
        results = []
        lock = threading.Lock()

        def worker(name):
            barrier.wait()
            report = validator.validate({name: "s"})
            with lock:
                results.append(report.is_success())

        threads = [threading.Thread(target=worker, args=("pq"[i % 2],)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual([False] * 8, results)


class TestSchemaChecks(unittest.TestCase):
    """The schema is syntax checked when the validator is built."""

    def test_invalid_schema_raises(self):
        with self.assertRaises(InvalidSchemaError) as cm:
            build_validator({"type": "object", "minLength": "3"})
        self.assertFalse(cm.exception.report.is_success())
        self.assertEqual("minLength", cm.exception.report.errors()[0].keyword)

    def test_unknown_keyword_only_warns(self):
        validator = build_validator({"type": "string", "frobnicate": 1})
        warnings = validator.syntax_report.warnings()
        self.assertEqual(1, len(warnings))
        self.assertEqual(["frobnicate"], warnings[0].args["ignored"])
        self.assertTrue(validator.validate("x").is_success())

    def test_validate_schema(self):
        report = validate_schema({"properties": {"a": {"type": "strnig"}}})
        self.assertEqual(["/properties/a"], error_pointers(report))

    def test_schema_is_copied(self):
        schema = {"type": "string"}
        validator = build_validator(schema)
        schema["type"] = "integer"
        self.assertTrue(validator.validate("x").is_success())


class TestDeterminism(unittest.TestCase):

    def test_reports_are_identical_across_runs(self):
        schema = {
            "type": "object",
            "required": ["z", "y"],
            "properties": {
                "b": {"type": "array", "items": {"minimum": 3}},
                "a": {"anyOf": [{"type": "string"}, {"type": "integer"}]},
            },
            "additionalProperties": False,
        }
        instance = {"a": [], "b": [1, 5, 2], "q": None}
        validator = build_validator(schema)
        first = validator.validate(instance).as_json()
        second = validator.validate(instance).as_json()
        third = build_validator(schema).validate(instance).as_json()
        self.assertEqual(first, second)
        self.assertEqual(first, third)


if __name__ == '__main__':
    unittest.main()
