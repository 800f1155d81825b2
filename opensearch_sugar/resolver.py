# opensearch_sugar/resolver.py

"""
Resolve a user supplied model identifier to a ModelRecord.

Lookup order, first hit wins:
  1. exact (case-sensitive) name
  2. exact model id
  3. nickname: the identifier is matched case-insensitively against model
     names and the highest version among the matches is returned.

Version ordering is pluggable. The default, `lexical_version_key`, compares
the version strings as-is, so "1.10" sorts *before* "1.9" and "v10" before
"v2". Pass `natural_version_key` to compare digit runs numerically.
"""

import re

from typing import Callable, Iterable, Optional, Protocol

from opensearch_sugar.catalog import ModelCatalog, ModelRecord
from opensearch_sugar.errors import InvalidIdentifierPattern, ModelNotFoundError


class Matcher(Protocol):
    def compile(self, identifier: str) -> Callable[[str], bool]:
        """Return a predicate over model names; raise InvalidIdentifierPattern if unusable."""
        ...


class RegexMatcher:
    """Treat the identifier as a case-insensitive regular expression (searched, not anchored)."""

    def compile(self, identifier: str) -> Callable[[str], bool]:
        try:
            pattern = re.compile(identifier, re.IGNORECASE)
        except re.error as e:
            raise InvalidIdentifierPattern(identifier, str(e)) from e
        return lambda name: name is not None and pattern.search(name) is not None


class SubstringMatcher:
    def compile(self, identifier: str) -> Callable[[str], bool]:
        needle = identifier.casefold()
        return lambda name: name is not None and needle in name.casefold()


def lexical_version_key(record: ModelRecord):
    return record.version or ""


def natural_version_key(record: ModelRecord):
    """Digit runs compare as integers: v2 < v10, 1.9 < 1.10."""
    parts = re.split(r"(\d+)", record.version or "")
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part.lower())
        for part in parts if part
    )


class ModelResolver:
    def __init__(self, catalog: ModelCatalog, matcher: Optional[Matcher] = None, version_key=lexical_version_key):
        self.catalog = catalog
        self.matcher = matcher or RegexMatcher()
        self.version_key = version_key

    def resolve(self, identifier: str) -> Optional[ModelRecord]:
        models = self.catalog.list()

        for record in models:
            if record.name == identifier:
                return record
        for record in models:
            if record.id == identifier:
                return record
        return self.find_by_partial_name(models, identifier)

    def find_by_partial_name(self, models: Iterable[ModelRecord], identifier: str) -> Optional[ModelRecord]:
        matches = self.matcher.compile(identifier)
        candidates = [record for record in models if matches(record.name)]
        if not candidates:
            return None
        return max(candidates, key=self.version_key)

    def resolve_or_fail(self, identifier: str) -> ModelRecord:
        record = self.resolve(identifier)
        if record is None:
            raise ModelNotFoundError(identifier)
        return record
