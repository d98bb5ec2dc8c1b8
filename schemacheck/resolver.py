"""JSON Reference resolution across schema trees."""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from jsonpointer import JsonPointerException

from schemacheck.constants import REF
from schemacheck.errors import DanglingRefError, LoadError, RefResolutionError
from schemacheck.loader import URILoader
from schemacheck.tree import SchemaNode, SchemaTree, resolve_uri, split_uri

logger = logging.getLogger(__name__)

Loader = Callable[[str], Any]


def normalize_ref(uri: str) -> str:
    """ Normalize a resolved reference so that "a.json" and "a.json#" compare equal. """
    locator, fragment = split_uri(uri)
    return f"{locator}#{fragment}"


class SchemaRegistry:
    """
    Holds the schema trees known to a validation session.

    Trees are registered under their loading URI and under every absolute
    id they declare. Unknown documents are fetched through the loader on
    first use and kept for the lifetime of the registry.
    """

    def __init__(self, loader: Optional[Loader] = None, id_keyword: str = 'id'):
        self.loader: Loader = loader if loader is not None else URILoader()
        self.id_keyword = id_keyword
        self._trees: Dict[str, SchemaTree] = {}
        self._lock = threading.Lock()

    def register(self, tree: SchemaTree) -> SchemaTree:
        with self._lock:
            if tree.loading_uri:
                self._trees.setdefault(tree.loading_uri, tree)
            for uri in tree.ids:
                locator, fragment = split_uri(uri)
                if locator and not fragment:
                    self._trees.setdefault(locator, tree)
        return tree

    def lookup(self, locator: str) -> Optional[SchemaTree]:
        return self._trees.get(locator)

    def get(self, locator: str) -> SchemaTree:
        """
        Get the tree for a document URI, loading it if needed.

        Raises:
            LoadError: If the loader fails.
        """
        tree = self._trees.get(locator)
        if tree is not None:
            return tree
        logger.debug("Loading schema document %s", locator)
        try:
            document = self.loader(locator)
        except LoadError:
            raise
        except Exception as e:
            raise LoadError(f"cannot fetch content from URI: {e}", locator) from e
        self.register(SchemaTree(document, locator, self.id_keyword))
        return self._trees[locator]

    def __contains__(self, locator: str) -> bool:
        return locator in self._trees

    def __len__(self) -> int:
        return len(set(id(tree) for tree in self._trees.values()))


class RefResolver:
    """
    Follows chains of $ref until a node which is not a reference is reached.

    Results are cached per starting node. Resolution of one chain keeps
    an ordered list of the references already followed; meeting one of
    them again means the chain loops.
    """

    def __init__(self, registry: SchemaRegistry):
        self.registry = registry
        self._cache: Dict[SchemaNode, SchemaNode] = {}
        self._lock = threading.Lock()

    def resolve(self, node: SchemaNode) -> SchemaNode:
        """
        Resolve a schema node.

        Args:
            node (SchemaNode): The node to resolve.

        Returns:
            SchemaNode: The node itself if it holds no $ref, else the target
            of the reference chain.

        Raises:
            RefResolutionError: If the reference chain loops.
            DanglingRefError: If a reference points nowhere.
            LoadError: If a referenced document cannot be loaded.
        """
        if not node.is_ref():
            return node
        cached = self._cache.get(node)
        if cached is not None:
            return cached
        resolving: List[str] = []
        current = node
        while current.is_ref():
            uri = normalize_ref(resolve_uri(current.base_uri, current.get(REF)))
            if uri in resolving:
                resolving.append(uri)
                raise RefResolutionError("JSON Reference loop detected", ref=uri, chain=resolving)
            resolving.append(uri)
            current = self._lookup(current.tree, uri)
        with self._lock:
            return self._cache.setdefault(node, current)

    def _lookup(self, tree: SchemaTree, uri: str) -> SchemaNode:
        locator = split_uri(uri)[0]
        target = tree
        pointer = tree.pointer_for_uri(uri)
        if pointer is None:
            if not locator:
                raise DanglingRefError("unresolvable JSON Reference", ref=uri)
            target = self.registry.get(locator)
            pointer = target.pointer_for_uri(uri)
            if pointer is None:
                raise DanglingRefError("unresolvable JSON Reference", ref=uri)
        try:
            return target.node_at(pointer)
        except JsonPointerException as e:
            raise DanglingRefError("unresolvable JSON Reference", ref=uri) from e
