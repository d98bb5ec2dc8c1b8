"""Tests for reports, messages and JSON helpers."""

import os
import sys
import unittest
from decimal import Decimal

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from schemacheck.common import get_tree_hash, json_equals, node_type, normalize, unique_items
from schemacheck.constants import DOMAIN_VALIDATION
from schemacheck.processor import validate_instance
from schemacheck.report import LogLevel, ProcessingMessage, ValidationReport


def message(level, key='unique_items', pointer='', **args):
    return ProcessingMessage(level, key, pointer, DOMAIN_VALIDATION, keyword='uniqueItems', args=args)


class TestValidationReport(unittest.TestCase):

    def test_log_level_filters_but_errors_count(self):
        report = ValidationReport(LogLevel.FATAL)
        report.add(message(LogLevel.WARNING))
        report.add(message(LogLevel.ERROR))
        self.assertEqual(0, len(report))
        self.assertFalse(report.is_success())
        self.assertEqual(1, report.error_count)

    def test_errors_and_warnings(self):
        report = ValidationReport()
        report.add(message(LogLevel.DEBUG))
        report.add(message(LogLevel.WARNING))
        report.add(message(LogLevel.FATAL))
        self.assertEqual(2, len(report))
        self.assertEqual([LogLevel.FATAL], [m.level for m in report.errors()])
        self.assertEqual([LogLevel.WARNING], [m.level for m in report.warnings()])

    def test_frozen_report_rejects_messages(self):
        report = ValidationReport().freeze()
        self.assertTrue(report.frozen)
        with self.assertRaises(RuntimeError):
            report.add(message(LogLevel.ERROR))

    def test_str(self):
        report = ValidationReport()
        self.assertEqual("success", str(report))
        report.add(message(LogLevel.ERROR, pointer='/a/0'))
        self.assertEqual("error: /a/0: elements in the array are not unique", str(report))
        self.assertEqual("warning", str(LogLevel.WARNING))

    def test_message_rendering(self):
        msg = message(LogLevel.ERROR, 'min_length', '/name', value="ab", found=2, minLength=3)
        self.assertEqual('string "ab" is too short (length: 2, required minimum: 3)', msg.message)
        self.assertEqual({'domain': 'validation', 'keyword': 'uniqueItems', 'value': "ab", 'found': 2,
                          'minLength': 3}, msg.fields)

    def test_as_json_nests_reports(self):
        report = validate_instance("abc", {"anyOf": [{"maxLength": 2}]})
        [entry] = report.as_json()
        self.assertEqual('error', entry['level'])
        self.assertEqual('any_of', entry['key'])
        self.assertEqual('anyOf', entry['keyword'])
        self.assertEqual({'loadingURI': '', 'pointer': ''}, entry['schema'])
        nested = entry['reports']['/anyOf/0']
        self.assertEqual('maxLength', nested[0]['keyword'])
        self.assertEqual({'loadingURI': '', 'pointer': '/anyOf/0'}, nested[0]['schema'])

    def test_reports_are_frozen(self):
        report = validate_instance([], {"minItems": 1})
        self.assertTrue(report.frozen)
        self.assertEqual(['min_items'], [m.key for m in report])


class TestJsonHelpers(unittest.TestCase):

    def test_node_type(self):
        self.assertEqual('boolean', node_type(True))
        self.assertEqual('integer', node_type(3))
        self.assertEqual('number', node_type(3.0))
        self.assertEqual('number', node_type(Decimal("1.5")))
        self.assertEqual('null', node_type(None))
        self.assertEqual('array', node_type((1,)))
        with self.assertRaises(TypeError):
            node_type({1, 2})

    def test_json_equals(self):
        self.assertTrue(json_equals(1, 1.0))
        self.assertTrue(json_equals({"a": [1, {"b": 2}]}, {"a": [1.0, {"b": 2.0}]}))
        self.assertFalse(json_equals(True, 1))
        self.assertFalse(json_equals(0, False))
        self.assertFalse(json_equals([1, 2], [2, 1]))
        self.assertFalse(json_equals({"a": 1}, {"a": 1, "b": 2}))

    def test_normalize_and_hash(self):
        self.assertEqual({"a": [1, 2.5]}, normalize({"a": (1.0, 2.5)}))
        self.assertEqual(get_tree_hash({"b": 1, "a": [2.0]}), get_tree_hash({"a": [2], "b": 1.0}))
        self.assertNotEqual(get_tree_hash({"a": 1}), get_tree_hash({"a": True}))

    def test_unique_items(self):
        self.assertTrue(unique_items([1, "1", True, None, [1], {"a": 1}]))
        self.assertFalse(unique_items([{"a": 1, "b": 2}, {"b": 2, "a": 1}]))
        self.assertFalse(unique_items([[1], [1.0]]))


if __name__ == '__main__':
    unittest.main()
