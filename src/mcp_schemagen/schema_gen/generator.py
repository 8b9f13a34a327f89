"""
Entry point of schema derivation: resolves a value to its record type,
consults the cache and reflects the record on a miss.
"""
import sys
import threading
from typing import Any, Optional, get_origin

import structlog

from ..config import Config, GenerationConfig
from ..exceptions import SchemaGenerationError
from ..models.schema import InputSchema
from .cache import DEFAULT_CACHE, SchemaCache
from .kinds import reduce_to_record
from .reflector import SchemaReflector

logger = structlog.get_logger(__name__)


def _is_type_hint(value: Any) -> bool:
    return (
        isinstance(value, type)
        or get_origin(value) is not None
        or hasattr(value, "__supertype__") # NewType
    )


def resolve_record_type(value: Any) -> type:
    """
    Resolves a record class, a type hint wrapping one (``Optional``,
    ``Annotated``, ``NewType``) or a record instance to the record class.

    Raises:
        InvalidTypeError: If no record type is reached.
    """
    tp = value if _is_type_hint(value) else type(value)
    return reduce_to_record(tp)


def _importable_as(record: type, module: str, qualname: str) -> bool:
    """Whether ``module.qualname`` looks up to exactly ``record``."""
    obj: Any = sys.modules.get(module)
    for part in qualname.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            return False
    return obj is record


def type_identity(record: type) -> str:
    """
    Stable cache key for a record type.

    Classes reachable by their qualified name use ``module.qualname``. Local
    classes and classes built with ``make_dataclass`` or ``create_model`` can
    share a qualified name with other classes, so they fall back to their repr
    plus object id. The cache keeps such classes alive, so the id is not reused
    while the entry exists.
    """
    module = getattr(record, "__module__", None)
    qualname = getattr(record, "__qualname__", None)
    if module and qualname and "<locals>" not in qualname and _importable_as(record, module, qualname):
        return f"{module}.{qualname}"
    return f"{record!r}@{id(record):#x}"


class SchemaGenerator:
    """Derives and caches root input schemas for record types."""

    def __init__(self, config: Optional[GenerationConfig] = None, cache: Optional[SchemaCache] = None):
        self.config = config or GenerationConfig()
        # An empty cache is falsy, so compare against None
        self.cache = cache if cache is not None else SchemaCache()
        self.logger = logger.bind(component="SchemaGenerator", name_tag=self.config.name_tag)

    def derive(self, value: Any) -> InputSchema:
        """
        Returns the root schema of ``value``'s record type.

        Args:
            value: A record class, a record instance, or a type hint wrapping a record class.

        Raises:
            SchemaGenerationError: On the first field that cannot be described.
                Failed derivations are not cached.
        """
        record = resolve_record_type(value)
        key = type_identity(record)

        cached = self.cache.lookup(key, record)
        if cached is not None:
            self.logger.debug("Schema cache hit.", type_key=key)
            return cached

        log = self.logger.bind(type_key=key)
        log.debug("Schema cache miss, reflecting record type.")
        try:
            obj = SchemaReflector(name_tag=self.config.name_tag).reflect_object(record)
        except SchemaGenerationError as e:
            log.warning("Schema derivation failed.", error=str(e), error_type=type(e).__name__)
            raise

        schema = InputSchema(properties=obj.properties, required=obj.required)
        self.cache.store(key, schema, record)
        log.debug("Schema stored in cache.", property_count=len(schema.properties))
        return schema

    def derive_json(self, value: Any) -> dict[str, Any]:
        """Derives the schema and returns its wire form."""
        return self.derive(value).to_json_schema(sort_properties=self.config.sort_properties)


_default_generator: Optional[SchemaGenerator] = None
_default_generator_lock = threading.Lock()


def get_default_generator() -> SchemaGenerator:
    """Process-wide generator configured from the environment, backed by DEFAULT_CACHE."""
    global _default_generator
    with _default_generator_lock:
        if _default_generator is None:
            _default_generator = SchemaGenerator(config=Config().generation, cache=DEFAULT_CACHE)
        return _default_generator


def derive_schema(value: Any) -> InputSchema:
    return get_default_generator().derive(value)
