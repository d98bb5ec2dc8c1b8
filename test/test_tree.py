"""Tests for schema trees, the registry and $ref resolution."""

import os
import sys
import unittest

from jsonpointer import JsonPointerException

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from schemacheck.errors import DanglingRefError, LoadError, RefResolutionError
from schemacheck.resolver import RefResolver, SchemaRegistry, normalize_ref
from schemacheck.tree import SchemaTree, resolve_uri

ID_SCHEMA = {
    "id": "http://example.com/root.json",
    "definitions": {
        "a": {"id": "#foo", "type": "integer"},
        "b": {"id": "other.json", "type": "string"},
        "c": {"enum": [{"id": "http://example.com/data.json"}]},
    },
}


class TestSchemaTree(unittest.TestCase):

    def test_nodes_are_shared(self):
        tree = SchemaTree({"properties": {"a": {}}})
        self.assertIs(tree.node_at("/properties/a"), tree.root.append("properties", "a"))
        self.assertEqual(tree.root, tree.node_at(""))
        self.assertNotEqual(tree.root, SchemaTree({}).root)

    def test_document_is_copied(self):
        document = {"type": "string"}
        tree = SchemaTree(document)
        document["type"] = "integer"
        self.assertEqual("string", tree.root.get("type"))

    def test_tokens_are_escaped(self):
        tree = SchemaTree({"properties": {"a/b": {}, "m~n": {}}})
        self.assertEqual("/properties/a~1b", tree.root.append("properties", "a/b").pointer)
        self.assertEqual("/properties/m~0n", tree.root.append("properties", "m~n").pointer)

    def test_missing_pointer(self):
        tree = SchemaTree({"items": [{}]})
        self.assertTrue(tree.contains("/items/0"))
        self.assertFalse(tree.contains("/items/1"))
        with self.assertRaises(JsonPointerException):
            tree.node_at("/items/1")

    def test_keywords_are_sorted(self):
        tree = SchemaTree({"type": "object", "required": ["a"], "additionalProperties": False})
        self.assertEqual(["additionalProperties", "required", "type"], tree.root.keywords)

    def test_ids_are_indexed(self):
        tree = SchemaTree(ID_SCHEMA, "", "id")
        self.assertEqual({
            "http://example.com/root.json": "",
            "http://example.com/root.json#foo": "/definitions/a",
            "http://example.com/other.json": "/definitions/b",
        }, tree.ids)

    def test_base_uri(self):
        tree = SchemaTree(ID_SCHEMA, "file:///schemas/main.json")
        self.assertEqual("file:///schemas/main.json", SchemaTree({}, "file:///schemas/main.json#").root.base_uri)
        self.assertEqual("http://example.com/root.json", tree.root.base_uri)
        self.assertEqual("http://example.com/other.json", tree.base_uri_for("/definitions/b/type"))
        self.assertEqual("http://example.com/root.json#foo", tree.base_uri_for("/definitions/a"))

    def test_ids_of_ref_nodes_are_ignored(self):
        tree = SchemaTree({"$ref": "#/definitions/a", "id": "http://example.com/x.json"})
        self.assertEqual({}, tree.ids)

    def test_member_names_matching_data_keywords(self):
        tree = SchemaTree({
            "properties": {"enum": {"id": "http://example.com/enum.json"}},
            "definitions": {"default": {"id": "http://example.com/default.json"}},
            "default": {"id": "http://example.com/data.json"},
        })
        self.assertEqual({
            "http://example.com/enum.json": "/properties/enum",
            "http://example.com/default.json": "/definitions/default",
        }, tree.ids)

    def test_dollar_id(self):
        tree = SchemaTree({"$id": "http://example.com/s.json", "id": "ignored.json"}, "", "$id")
        self.assertEqual({"http://example.com/s.json": ""}, tree.ids)

    def test_pointer_for_uri(self):
        tree = SchemaTree(ID_SCHEMA, "file:///schemas/main.json")
        self.assertEqual("/definitions/a", tree.pointer_for_uri("http://example.com/root.json#/definitions/a"))
        self.assertEqual("/definitions/a", tree.pointer_for_uri("http://example.com/root.json#foo"))
        self.assertEqual("/definitions/b/type", tree.pointer_for_uri("http://example.com/other.json#/type"))
        self.assertEqual("/definitions", tree.pointer_for_uri("file:///schemas/main.json#/definitions"))
        self.assertIsNone(tree.pointer_for_uri("http://example.com/data.json#"))
        self.assertIsNone(tree.pointer_for_uri("http://example.com/root.json#bar"))
        self.assertTrue(tree.declares("http://example.com/other.json"))

    def test_resolve_uri(self):
        self.assertEqual("#/a", resolve_uri("", "#/a"))
        self.assertEqual("b.json", resolve_uri("", "b.json"))
        self.assertEqual("http://example.com/b.json", resolve_uri("http://example.com/a.json", "b.json"))
        self.assertEqual("http://example.com/a.json#/x", resolve_uri("http://example.com/a.json#y", "#/x"))
        self.assertEqual("urn:example:a", resolve_uri("http://example.com/a.json", "urn:example:a"))
        self.assertEqual("http://example.com/a.json#", normalize_ref("http://example.com/a.json"))


class TestRefResolver(unittest.TestCase):

    def setUp(self):
        self.loads = []

    def loader(self, uri):
        self.loads.append(uri)
        documents = {
            "http://example.com/remote.json": {"definitions": {"x": {"type": "null"}}},
            "http://example.com/other.json": {"remote": True},
        }
        return documents[uri]

    def resolver(self, tree):
        registry = SchemaRegistry(self.loader)
        registry.register(tree)
        return RefResolver(registry)

    def test_plain_node_resolves_to_itself(self):
        tree = SchemaTree({"type": "string"})
        self.assertIs(tree.root, self.resolver(tree).resolve(tree.root))

    def test_chain(self):
        tree = SchemaTree({
            "$ref": "#/definitions/a",
            "definitions": {"a": {"$ref": "#/definitions/b"}, "b": {"type": "string"}},
        })
        resolver = self.resolver(tree)
        target = resolver.resolve(tree.root)
        self.assertEqual("/definitions/b", target.pointer)
        self.assertIs(target, resolver.resolve(tree.root))

    def test_loop(self):
        tree = SchemaTree({
            "$ref": "#/definitions/a",
            "definitions": {"a": {"$ref": "#/definitions/b"}, "b": {"$ref": "#/definitions/a"}},
        })
        with self.assertRaises(RefResolutionError) as cm:
            self.resolver(tree).resolve(tree.root)
        self.assertEqual("#/definitions/a", cm.exception.ref)
        self.assertEqual(["#/definitions/a", "#/definitions/b", "#/definitions/a"], cm.exception.chain)

    def test_self_reference(self):
        tree = SchemaTree({"$ref": "#"})
        with self.assertRaises(RefResolutionError):
            self.resolver(tree).resolve(tree.root)

    def test_dangling(self):
        for ref in ("#/definitions/missing", "#anchor"):
            tree = SchemaTree({"$ref": ref})
            with self.assertRaises(DanglingRefError):
                self.resolver(tree).resolve(tree.root)

    def test_id_anchor(self):
        tree = SchemaTree(ID_SCHEMA)
        node = SchemaTree({"$ref": "http://example.com/root.json#foo"})
        registry = SchemaRegistry(self.loader)
        registry.register(tree)
        registry.register(node)
        self.assertEqual("/definitions/a", RefResolver(registry).resolve(node.root).pointer)
        self.assertEqual([], self.loads)

    def test_remote_document_is_loaded_once(self):
        tree = SchemaTree({"items": [
            {"$ref": "http://example.com/remote.json#/definitions/x"},
            {"$ref": "http://example.com/remote.json#/definitions/x"},
        ]})
        resolver = self.resolver(tree)
        first = resolver.resolve(tree.root.append("items", 0))
        second = resolver.resolve(tree.root.append("items", 1))
        self.assertIs(first, second)
        self.assertEqual("http://example.com/remote.json", first.loading_uri)
        self.assertEqual(["http://example.com/remote.json"], self.loads)

    def test_relative_ref_uses_scope(self):
        tree = SchemaTree({"id": "http://example.com/base/", "items": {"$ref": "../remote.json"}})
        target = self.resolver(tree).resolve(tree.root.append("items"))
        self.assertEqual("http://example.com/remote.json", target.loading_uri)

    def test_loader_failure(self):
        tree = SchemaTree({"$ref": "http://example.com/missing.json"})
        with self.assertRaises(LoadError) as cm:
            self.resolver(tree).resolve(tree.root)
        self.assertEqual("http://example.com/missing.json", cm.exception.uri)


class TestSchemaRegistry(unittest.TestCase):

    def test_register_by_uri_and_id(self):
        registry = SchemaRegistry(lambda uri: {})
        tree = registry.register(SchemaTree(ID_SCHEMA, "file:///main.json"))
        self.assertIs(tree, registry.lookup("file:///main.json"))
        self.assertIs(tree, registry.lookup("http://example.com/root.json"))
        self.assertIs(tree, registry.get("http://example.com/other.json"))
        self.assertNotIn("http://example.com/root.json#foo", registry)
        self.assertEqual(1, len(registry))

    def test_get_loads_unknown(self):
        registry = SchemaRegistry(lambda uri: {"type": "string"})
        tree = registry.get("http://example.com/s.json")
        self.assertIn("http://example.com/s.json", registry)
        self.assertIs(tree, registry.get("http://example.com/s.json"))
        self.assertEqual("string", tree.root.get("type"))


if __name__ == '__main__':
    unittest.main()
