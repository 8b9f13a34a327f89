"""
Unit tests for SchemaGenerator: type resolution, caching and the default entry point.
"""
import gc
import weakref
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, make_dataclass
from typing import Annotated, Callable, Optional

import pytest
from pydantic import create_model

from mcp_schemagen.config import GenerationConfig
from mcp_schemagen.exceptions import InvalidTypeError, UnsupportedKindError
from mcp_schemagen.models.schema import InputSchema
from mcp_schemagen.schema_gen import generator as generator_module
from mcp_schemagen.schema_gen.cache import DEFAULT_CACHE, SchemaCache
from mcp_schemagen.schema_gen.generator import (
    SchemaGenerator,
    derive_schema,
    get_default_generator,
    resolve_record_type,
    type_identity,
)
from mcp_schemagen.schema_gen.reflector import SchemaReflector
from mcp_schemagen.schema_gen.tags import schema_field


@dataclass
class CreateIssue:
    title: str = schema_field(description="Issue title")
    labels: list[str] = schema_field(omitempty=True)
    body: str = schema_field(name="body", omitempty=True)
    priority: int = field(default=0, metadata={"json": "priority,omitempty", "enum": "0,1,2", "default": "1"})


@dataclass
class Broken:
    name: str
    hook: Callable[[], None]


@pytest.fixture
def cache() -> SchemaCache:
    return SchemaCache()

@pytest.fixture
def generator(cache: SchemaCache) -> SchemaGenerator:
    return SchemaGenerator(cache=cache)

@pytest.fixture
def reflect_calls(monkeypatch: pytest.MonkeyPatch) -> list:
    """Records every record type the reflector is asked to reflect."""
    calls = []
    original = SchemaReflector.reflect_object

    def counting(self, record):
        calls.append(record)
        return original(self, record)

    monkeypatch.setattr(SchemaReflector, "reflect_object", counting)
    return calls


# --- Type resolution ---

def test_resolve_record_type_variants() -> None:
    assert resolve_record_type(CreateIssue) is CreateIssue
    assert resolve_record_type(CreateIssue(title="t", labels=[], body="")) is CreateIssue
    assert resolve_record_type(Optional[CreateIssue]) is CreateIssue
    assert resolve_record_type(Annotated[Optional[CreateIssue], "req"]) is CreateIssue


@pytest.mark.parametrize("value", [int, 5, "text", None, list[CreateIssue], dict[str, CreateIssue]])
def test_resolve_record_type_invalid(value) -> None:
    with pytest.raises(InvalidTypeError):
        resolve_record_type(value)


def test_type_identity_module_level() -> None:
    assert type_identity(CreateIssue) == f"{CreateIssue.__module__}.CreateIssue"


def test_type_identity_local_classes_differ() -> None:
    def make():
        @dataclass
        class Local:
            value: int
        return Local

    first, second = make(), make()
    assert first.__qualname__ == second.__qualname__
    assert type_identity(first) != type_identity(second)
    assert "<locals>" in type_identity(first)


# --- Derivation and caching ---

def test_derive_root_schema(generator: SchemaGenerator) -> None:
    schema = generator.derive(CreateIssue)

    assert isinstance(schema, InputSchema)
    assert schema.type == "object"
    assert list(schema.properties) == ["title", "labels", "body", "priority"]
    assert schema.required == ["title"]
    assert schema.properties["labels"].items.type == "string"
    assert schema.properties["priority"].enum == [0, 1, 2]
    assert schema.properties["priority"].default == 1


def test_derive_is_cached(generator: SchemaGenerator, cache: SchemaCache, reflect_calls: list) -> None:
    first = generator.derive(CreateIssue)
    second = generator.derive(CreateIssue(title="t", labels=[], body=""))

    assert second is first
    assert reflect_calls == [CreateIssue]
    assert len(cache) == 1
    assert type_identity(CreateIssue) in cache


def test_failed_derivation_is_not_cached(generator: SchemaGenerator, cache: SchemaCache, reflect_calls: list) -> None:
    for _ in range(2):
        with pytest.raises(UnsupportedKindError):
            generator.derive(Broken)

    assert reflect_calls == [Broken, Broken]
    assert len(cache) == 0


def test_local_classes_cached_separately(generator: SchemaGenerator, cache: SchemaCache) -> None:
    def make(annotation):
        @dataclass
        class Request:
            value: annotation
        return Request

    for i in range(20):
        annotation, expected = (int, "integer") if i % 2 == 0 else (str, "string")
        record = make(annotation)
        assert generator.derive(record).properties["value"].type == expected
        del record
        gc.collect()

    assert len(cache) == 20


def test_cache_keeps_record_alive(generator: SchemaGenerator) -> None:
    @dataclass
    class Request:
        value: int

    ref = weakref.ref(Request)
    generator.derive(Request)
    del Request
    gc.collect()

    assert ref() is not None


def test_cache_lookup_rejects_other_class(cache: SchemaCache) -> None:
    @dataclass
    class Other:
        value: int

    schema = InputSchema()
    cache.store("shared-key", schema, CreateIssue)

    assert cache.lookup("shared-key") is schema
    assert cache.lookup("shared-key", CreateIssue) is schema
    assert cache.lookup("shared-key", Other) is None


def test_dataclasses_made_at_runtime_cached_separately(generator: SchemaGenerator) -> None:
    first = make_dataclass("DynamicRequest", [("alpha", int)])
    second = make_dataclass("DynamicRequest", [("beta", str)])

    assert type_identity(first) != type_identity(second)
    assert list(generator.derive(first).properties) == ["alpha"]
    assert list(generator.derive(second).properties) == ["beta"]


def test_models_created_at_runtime_cached_separately(generator: SchemaGenerator) -> None:
    first = create_model("DynamicModel", alpha=(int, ...))
    second = create_model("DynamicModel", beta=(str, ...))

    assert type_identity(first) != type_identity(second)
    assert list(generator.derive(first).properties) == ["alpha"]
    assert list(generator.derive(second).properties) == ["beta"]


def test_generators_do_not_share_private_caches() -> None:
    first, second = SchemaGenerator(), SchemaGenerator()
    first.derive(CreateIssue)
    assert len(first.cache) == 1
    assert len(second.cache) == 0


def test_concurrent_derivation(generator: SchemaGenerator, cache: SchemaCache) -> None:
    with ThreadPoolExecutor(max_workers=16) as pool:
        schemas = list(pool.map(lambda _: generator.derive(CreateIssue), range(64)))

    expected = schemas[0].to_json_schema()
    assert all(schema.to_json_schema() == expected for schema in schemas)
    assert len(cache) == 1


def test_derive_json_sorted() -> None:
    generator = SchemaGenerator(config=GenerationConfig(sort_properties=True))
    result = generator.derive_json(CreateIssue)

    assert list(result["properties"]) == ["body", "labels", "priority", "title"]
    assert result["required"] == ["title"]
    assert result["properties"]["title"] == {"type": "string", "description": "Issue title"}


def test_derive_json_declaration_order(generator: SchemaGenerator) -> None:
    result = generator.derive_json(CreateIssue)
    assert list(result["properties"]) == ["title", "labels", "body", "priority"]


def test_configured_name_tag() -> None:
    @dataclass
    class Request:
        value: int = field(metadata={"mcp": "amount"})

    generator = SchemaGenerator(config=GenerationConfig(name_tag="mcp"))
    assert list(generator.derive(Request).properties) == ["amount"]


# --- Process-wide entry point ---

def test_derive_schema_uses_default_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(generator_module, "_default_generator", None)

    schema = derive_schema(CreateIssue)

    assert derive_schema(CreateIssue) is schema
    assert get_default_generator().cache is DEFAULT_CACHE
    assert DEFAULT_CACHE.lookup(type_identity(CreateIssue)) is schema


def test_default_generator_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(generator_module, "_default_generator", None)
    monkeypatch.setenv("MCP_SCHEMAGEN_GENERATION__SORT_PROPERTIES", "true")

    assert get_default_generator().config.sort_properties is True
    assert get_default_generator() is get_default_generator()
