import importlib

mod = "schemacheck"
class LazyLoader:
    """
    Lazy loader for the schemacheck functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        elif item.startswith('__'):
            raise AttributeError(f"module {mod!r} has no attribute {item!r}")
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "build_validator": (f"{mod}.processor", "build_validator"),
    "validate_schema": (f"{mod}.processor", "validate_schema"),
    "validate_instance": (f"{mod}.processor", "validate_instance"),
    "SchemaValidator": (f"{mod}.processor", "SchemaValidator"),
    "ValidationConfiguration": (f"{mod}.config", "ValidationConfiguration"),
    "ValidationReport": (f"{mod}.report", "ValidationReport"),
    "LogLevel": (f"{mod}.report", "LogLevel"),
    "thaw": (f"{mod}.library", "thaw"),
    "LibraryBuilder": (f"{mod}.library", "LibraryBuilder"),
    "DRAFTV3_LIBRARY": (f"{mod}.drafts", "DRAFTV3_LIBRARY"),
    "DRAFTV4_LIBRARY": (f"{mod}.drafts", "DRAFTV4_LIBRARY"),
    "DRAFTV6_LIBRARY": (f"{mod}.drafts", "DRAFTV6_LIBRARY"),
    "URILoader": (f"{mod}.loader", "URILoader"),
    "ValidatorCache": (f"{mod}.cache", "ValidatorCache"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)

