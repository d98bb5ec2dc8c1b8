"""Default document loader.

The validation engine never performs I/O on its own; it calls a loader,
which is any callable taking an absolute URI (without fragment) and
returning the parsed JSON document. URILoader is the loader used when
the caller does not supply one.
"""

import json
import logging
import os
import threading
from functools import lru_cache
from typing import Any, Dict, Optional
from urllib.parse import ParseResult, unquote, urlparse

import requests

from schemacheck.constants import DRAFTV3_URI, DRAFTV4_URI, DRAFTV6_URI
from schemacheck.errors import LoadError
from schemacheck.tree import resolve_uri, split_uri

logger = logging.getLogger(__name__)

META_SCHEMA_FILES = {
    DRAFTV3_URI: 'draft-03.json',
    DRAFTV4_URI: 'draft-04.json',
    DRAFTV6_URI: 'draft-06.json',
}


@lru_cache(maxsize=None)
def _read_meta_schema(file_name: str) -> str:
    meta_schema_path = os.path.join(os.path.dirname(__file__), 'metaschemas', file_name)
    with open(meta_schema_path, 'r', encoding='utf-8') as f:
        return f.read()


def load_meta_schemas() -> Dict[str, Any]:
    """Load the bundled draft meta-schemas, keyed by their URI without fragment."""
    return {split_uri(uri)[0]: json.loads(_read_meta_schema(file_name))
            for uri, file_name in META_SCHEMA_FILES.items()}


class URILoader:
    """
    Loads JSON documents from http(s) and file URIs.

    The draft 3, 4 and 6 meta-schemas are always preloaded, so references
    to them never go to the network.

    Args:
        namespace (str): Base URI against which relative URIs are resolved.
        preloaded (dict): Documents keyed by URI, served without any I/O.
            They take precedence over the bundled meta-schemas.
        timeout (int): Timeout in seconds for HTTP requests.
        redirects (dict): Maps URIs to the URIs their documents are actually
            loaded from. Applied before preloaded documents are looked up.
    """

    def __init__(self, namespace: str = '', preloaded: Optional[Dict[str, Any]] = None, timeout: int = 30,
                 redirects: Optional[Dict[str, str]] = None):
        self.namespace = namespace
        self.timeout = timeout
        self.preloaded: Dict[str, Any] = load_meta_schemas()
        for uri, document in (preloaded or {}).items():
            self.preloaded[split_uri(uri)[0]] = document
        self.redirects: Dict[str, str] = {}
        for source, target in (redirects or {}).items():
            self.add_redirect(source, target)
        self.content_cache: Dict[str, str] = {}
        self._lock = threading.Lock()

    def add_redirect(self, source: str, target: str) -> None:
        """
        Load the document at source from target instead.

        Raises:
            ValueError: If source and target designate the same document.
        """
        source = split_uri(resolve_uri(self.namespace, source) if self.namespace else source)[0]
        target = split_uri(resolve_uri(self.namespace, target) if self.namespace else target)[0]
        if source == target:
            raise ValueError(f"redirect of {source} to itself")
        self.redirects[source] = target

    def __call__(self, uri: str) -> Any:
        return self.load(uri)

    def load(self, uri: str) -> Any:
        """
        Load and parse the document at a URI.

        Raises:
            LoadError: If the document cannot be fetched or is not valid JSON.
        """
        if self.namespace:
            uri = resolve_uri(self.namespace, uri)
        uri = split_uri(uri)[0]
        if uri in self.redirects:
            logger.debug("Redirecting %s to %s", uri, self.redirects[uri])
            uri = self.redirects[uri]
        if uri in self.preloaded:
            return self.preloaded[uri]
        text = self.fetch_content(uri)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise LoadError(f"content at URI is not valid JSON: {e.msg}", uri) from e

    def fetch_content(self, url: str | ParseResult) -> str:
        """
        Fetches the content from the specified URL.

        Args:
            url (str or ParseResult): The URL to fetch the content from.

        Returns:
            str: The fetched content.

        Raises:
            LoadError: If the HTTP request fails, the file cannot be read or
                the URL scheme is not supported.
        """
        if isinstance(url, str):
            parsed_url = urlparse(url)
        else:
            parsed_url = url

        key = parsed_url.geturl()
        if key in self.content_cache:
            return self.content_cache[key]
        scheme = parsed_url.scheme

        if scheme in ['http', 'https']:
            logger.debug("Fetching %s", key)
            try:
                response = requests.get(key, timeout=self.timeout)
                response.raise_for_status()
            except requests.RequestException as e:
                raise LoadError(f"cannot fetch content from URI: {e}", key) from e
            text = response.text
        elif scheme in ['file', '']:
            file_path = unquote(parsed_url.path) if scheme == '' or not parsed_url.netloc else parsed_url.netloc + unquote(parsed_url.path)
            # On Windows, a file URL might start with a '/' but it's not part of the actual path
            if os.name == 'nt' and scheme == 'file' and file_path.startswith('/'):
                file_path = file_path[1:]
            logger.debug("Reading %s", file_path)
            try:
                with open(file_path, 'r', encoding='utf-8') as file:
                    text = file.read()
            except OSError as e:
                raise LoadError(f"cannot fetch content from URI: {e}", key) from e
        else:
            raise LoadError(f"unsupported URI scheme: {scheme}", key)

        with self._lock:
            self.content_cache.setdefault(key, text)
        return text
