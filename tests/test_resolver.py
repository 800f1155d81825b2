"""Tests for model identifier resolution."""

from unittest.mock import MagicMock

import pytest

from opensearch_sugar.catalog import ModelCatalog, ModelRecord
from opensearch_sugar.errors import InvalidIdentifierPattern, ModelNotFoundError
from opensearch_sugar.http import MLHttp
from opensearch_sugar.resolver import (
    ModelResolver,
    RegexMatcher,
    SubstringMatcher,
    lexical_version_key,
    natural_version_key,
)

from conftest import search_response


def make_resolver(*records: ModelRecord, **kwargs) -> ModelResolver:
    http = MagicMock(spec=MLHttp)
    http.search_models.return_value = search_response(*records)
    return ModelResolver(ModelCatalog(http), **kwargs)


class TestResolve:
    def test_exact_name(self, mock_http: MagicMock, minilm: ModelRecord) -> None:
        resolver = ModelResolver(ModelCatalog(mock_http))

        assert resolver.resolve(minilm.name) == minilm

    def test_exact_id(self, mock_http: MagicMock, mpnet: ModelRecord) -> None:
        resolver = ModelResolver(ModelCatalog(mock_http))

        assert resolver.resolve("mpnet-id") == mpnet

    def test_name_match_beats_id_match(self) -> None:
        by_id = ModelRecord(name="other", version="1", id="shared")
        by_name = ModelRecord(name="shared", version="1", id="x1")
        resolver = make_resolver(by_id, by_name)

        assert resolver.resolve("shared") == by_name

    def test_exact_name_is_case_sensitive(self) -> None:
        upper = ModelRecord(name="MiniLM", version="1", id="u")
        lower = ModelRecord(name="minilm", version="2", id="l")
        resolver = make_resolver(upper, lower)

        assert resolver.resolve("MiniLM") == upper
        assert resolver.resolve("minilm") == lower

    def test_nickname_is_case_insensitive(self, mock_http: MagicMock, mpnet: ModelRecord) -> None:
        resolver = ModelResolver(ModelCatalog(mock_http))

        assert resolver.resolve("MPNET") == mpnet

    def test_nickname_as_regex(self, mock_http: MagicMock, minilm: ModelRecord) -> None:
        resolver = ModelResolver(ModelCatalog(mock_http))

        assert resolver.resolve(r"all-mini.*v\d") == minilm

    def test_nickname_picks_highest_version(self) -> None:
        old = ModelRecord(name="e5-base", version="1.0.0", id="old")
        new = ModelRecord(name="e5-base-v2", version="1.0.2", id="new")
        mid = ModelRecord(name="E5-large", version="1.0.1", id="mid")
        resolver = make_resolver(old, new, mid)

        assert resolver.resolve("e5") == new

    def test_lexical_version_comparison_is_the_default(self) -> None:
        # "v2" > "v10" as strings; kept as the default ordering
        v1 = ModelRecord("a", "v1", "1")
        v2 = ModelRecord("a", "v2", "2")
        v10 = ModelRecord("a", "v10", "10")
        resolver = make_resolver(v1, v2, v10)

        assert resolver.resolve("A") == v2

    def test_natural_version_comparison(self) -> None:
        v1 = ModelRecord("a", "v1", "1")
        v2 = ModelRecord("a", "v2", "2")
        v10 = ModelRecord("a", "v10", "10")
        resolver = make_resolver(v1, v2, v10, version_key=natural_version_key)

        assert resolver.resolve("A") == v10

    def test_not_found(self, mock_http: MagicMock) -> None:
        resolver = ModelResolver(ModelCatalog(mock_http))

        assert resolver.resolve("bge") is None

    def test_invalid_pattern_is_an_error(self, mock_http: MagicMock) -> None:
        resolver = ModelResolver(ModelCatalog(mock_http))

        with pytest.raises(InvalidIdentifierPattern) as exc_info:
            resolver.resolve("all-(mpnet")

        assert "all-(mpnet" in str(exc_info.value)
        assert not isinstance(exc_info.value, ModelNotFoundError)

    def test_exact_match_does_not_compile_pattern(self) -> None:
        odd = ModelRecord(name="weird(name", version="1", id="w")
        resolver = make_resolver(odd)

        assert resolver.resolve("weird(name") == odd

    def test_substring_matcher_treats_pattern_literally(self) -> None:
        record = ModelRecord(name="model (v2)", version="1", id="m")
        resolver = make_resolver(record, matcher=SubstringMatcher())

        assert resolver.resolve("L (V") == record
        assert resolver.resolve("m.del") is None


class TestResolveOrFail:
    def test_returns_record(self, mock_http: MagicMock, minilm: ModelRecord) -> None:
        resolver = ModelResolver(ModelCatalog(mock_http))

        assert resolver.resolve_or_fail("minilm") == minilm

    def test_raises_with_identifier(self, mock_http: MagicMock) -> None:
        resolver = ModelResolver(ModelCatalog(mock_http))

        with pytest.raises(ModelNotFoundError, match="'bge-small'"):
            resolver.resolve_or_fail("bge-small")


class TestVersionKeys:
    @pytest.mark.parametrize(
        "lower,higher",
        [("1", "2"), ("v2", "v10"), ("1.9", "1.10"), ("1.0.1", "1.0.2"), ("1.0", "1.0.1")],
    )
    def test_natural_ordering(self, lower: str, higher: str) -> None:
        assert natural_version_key(ModelRecord("m", lower, "a")) < natural_version_key(ModelRecord("m", higher, "b"))

    def test_lexical_ordering_ambiguity(self) -> None:
        assert lexical_version_key(ModelRecord("m", "1.9", "a")) > lexical_version_key(ModelRecord("m", "1.10", "b"))

    def test_missing_version(self) -> None:
        assert lexical_version_key(ModelRecord("m", None, "a")) == ""
        assert natural_version_key(ModelRecord("m", None, "a")) == ()


class TestRegexMatcher:
    def test_searches_anywhere_in_name(self) -> None:
        matches = RegexMatcher().compile("mini")

        assert matches("all-MiniLM-L6-v2")
        assert not matches("mpnet")
        assert not matches(None)
