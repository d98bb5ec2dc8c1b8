"""Schema trees and the nodes that point into them.

A SchemaTree owns one schema document. SchemaNodes are lightweight
views identified by a JSON pointer into the tree; they never copy the
document. Nodes are kept in an index keyed by pointer so that asking
twice for the same location yields the same node.
"""

import copy
import threading
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urldefrag, urljoin, urlparse

from schemacheck import pointer as jp
from schemacheck.constants import REF

# Keywords whose values are data, not subschemas; ids found below them are ignored
DATA_KEYWORDS = frozenset(['enum', 'const', 'default', 'examples'])
# Keywords whose values map member names to subschemas
SCHEMA_MAP_KEYWORDS = frozenset(['properties', 'patternProperties', 'definitions', 'dependencies'])


def resolve_uri(base: str, ref: str) -> str:
    """
    Resolve a URI reference against a base URI.

    Args:
        base (str): The base URI, may be empty for anonymous documents.
        ref (str): The reference to resolve.

    Returns:
        str: The resolved URI.
    """
    if urlparse(ref).scheme:
        return ref
    if ref.startswith('#'):
        return urldefrag(base)[0] + ref
    if not base:
        return ref
    return urljoin(base, ref)


def split_uri(uri: str) -> Tuple[str, str]:
    """ Split a URI into its locator (no fragment) and its fragment. """
    locator, fragment = urldefrag(uri)
    return locator, fragment


class SchemaNode:
    """A location in a schema tree."""

    __slots__ = ('tree', 'pointer', 'node')

    def __init__(self, tree: 'SchemaTree', pointer: str, node: Any):
        self.tree = tree
        self.pointer = pointer
        self.node = node

    @property
    def loading_uri(self) -> str:
        return self.tree.loading_uri

    @property
    def base_uri(self) -> str:
        """ The resolution scope in effect at this node. """
        return self.tree.base_uri_for(self.pointer)

    @property
    def location(self) -> Tuple[str, str]:
        return (self.tree.loading_uri, self.pointer)

    @property
    def location_uri(self) -> str:
        return f"{self.tree.loading_uri}#{self.pointer}"

    def is_object(self) -> bool:
        return isinstance(self.node, dict)

    def has(self, keyword: str) -> bool:
        return isinstance(self.node, dict) and keyword in self.node

    def get(self, keyword: str, default: Any = None) -> Any:
        if isinstance(self.node, dict):
            return self.node.get(keyword, default)
        return default

    @property
    def keywords(self) -> List[str]:
        if isinstance(self.node, dict):
            return sorted(self.node.keys())
        return []

    def is_ref(self) -> bool:
        return isinstance(self.node, dict) and isinstance(self.node.get(REF), str)

    def append(self, *tokens: Any) -> 'SchemaNode':
        """ Get the node at this node's pointer extended by the given tokens. """
        return self.tree.node_at(jp.append(self.pointer, *tokens))

    def as_json(self) -> Dict[str, str]:
        return {'loadingURI': self.tree.loading_uri, 'pointer': self.pointer}

    def __eq__(self, other) -> bool:
        if not isinstance(other, SchemaNode):
            return NotImplemented
        return self.tree is other.tree and self.pointer == other.pointer

    def __hash__(self) -> int:
        return hash((id(self.tree), self.pointer))

    def __repr__(self) -> str:
        return f"SchemaNode({self.location_uri!r})"


class SchemaTree:
    """
    An immutable schema document plus indexes over it.

    Args:
        document (Any): The schema document. It is deep-copied.
        loading_uri (str): The URI the document was loaded from, empty for
            an anonymous document.
        id_keyword (str): The keyword which changes the resolution scope
            ("id" up to draft 4, "$id" afterwards).
    """

    def __init__(self, document: Any, loading_uri: str = '', id_keyword: str = 'id'):
        self.document = copy.deepcopy(document)
        self.loading_uri = split_uri(loading_uri)[0]
        self.id_keyword = id_keyword
        self._nodes: Dict[str, SchemaNode] = {}
        self._scopes: Dict[str, str] = {}
        self._ids: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._index_ids(self.document, jp.ROOT, self.loading_uri)

    def _index_ids(self, value: Any, pointer: str, scope: str, is_schema: bool = True) -> None:
        if isinstance(value, dict) and not is_schema:
            for key, item in value.items():
                self._index_ids(item, jp.append(pointer, key), scope)
        elif isinstance(value, dict):
            declared = value.get(self.id_keyword)
            if isinstance(declared, str) and not isinstance(value.get(REF), str):
                scope = resolve_uri(scope, declared)
                locator, fragment = split_uri(scope)
                key = scope if fragment else locator
                self._ids.setdefault(key, pointer)
            for key, item in value.items():
                if key in DATA_KEYWORDS:
                    continue
                self._index_ids(item, jp.append(pointer, key), scope, key not in SCHEMA_MAP_KEYWORDS)
        elif isinstance(value, list):
            for index, item in enumerate(value):
                self._index_ids(item, jp.append(pointer, index), scope)

    @property
    def root(self) -> SchemaNode:
        return self.node_at(jp.ROOT)

    @property
    def ids(self) -> Dict[str, str]:
        """ Absolute URIs declared by id keywords, mapped to the declaring pointer. """
        return dict(self._ids)

    def node_at(self, pointer: str) -> SchemaNode:
        """
        Get the node at a pointer.

        Raises:
            JsonPointerException: If the pointer does not resolve in this tree.
        """
        node = self._nodes.get(pointer)
        if node is not None:
            return node
        value = jp.resolve(self.document, pointer)
        with self._lock:
            return self._nodes.setdefault(pointer, SchemaNode(self, pointer, value))

    def contains(self, pointer: str) -> bool:
        return jp.exists(self.document, pointer)

    def base_uri_for(self, pointer: str) -> str:
        """ Compute the resolution scope at a pointer, following every id on the way down. """
        scope = self._scopes.get(pointer)
        if scope is not None:
            return scope
        scope = self.loading_uri
        value = self.document
        tokens = jp.parts(pointer)
        for index in range(len(tokens) + 1):
            if isinstance(value, dict):
                declared = value.get(self.id_keyword)
                if isinstance(declared, str) and not isinstance(value.get(REF), str):
                    scope = resolve_uri(scope, declared)
            if index == len(tokens):
                break
            token = tokens[index]
            if isinstance(value, dict):
                value = value.get(token)
            elif isinstance(value, list) and token.isdigit() and int(token) < len(value):
                value = value[int(token)]
            else:
                value = None
        self._scopes[pointer] = scope
        return scope

    def pointer_for_uri(self, uri: str) -> Optional[str]:
        """
        Find the pointer an absolute URI designates in this tree.

        Args:
            uri (str): A URI, usually the resolved value of a $ref.

        Returns:
            Optional[str]: The pointer, or None if the URI does not designate
            this document (or a subschema with a matching id).
        """
        locator, fragment = split_uri(uri)
        if not jp.is_pointer_fragment(fragment):
            return self._ids.get(uri)
        if locator == self.loading_uri:
            base = jp.ROOT
        elif locator in self._ids:
            base = self._ids[locator]
        else:
            return None
        return base + jp.from_fragment(fragment)

    def declares(self, locator: str) -> bool:
        return locator == self.loading_uri or locator in self._ids

    def __repr__(self) -> str:
        return f"SchemaTree({self.loading_uri!r})"
