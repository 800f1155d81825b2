# opensearch_sugar/catalog.py

import logging
import threading

from dataclasses import dataclass
from typing import List, Tuple


logger = logging.getLogger(__name__)

# Only chunk 0 of a model carries its name/version; later chunks are binary parts
ROOT_CHUNK_QUERY = {"term": {"chunk_number": 0}}


@dataclass(frozen=True)
class ModelRecord:
    """Name / version / internal id of a model registered with ML Commons."""

    name: str
    version: str
    id: str


def parse_model_records(response: dict) -> List[ModelRecord]:
    """
    Turn a `models/_search` response into ModelRecords.
    Duplicates (same name, version and id) are dropped, first occurrence order is kept.
    """
    hits = (response or {}).get("hits", {}).get("hits") or []

    records = []
    seen = set()
    for hit in hits:
        source = hit.get("_source") or {}
        record = ModelRecord(
            name=source.get("name"),
            version=source.get("model_version"),
            id=source.get("model_id"),
        )
        if record in seen:
            continue
        seen.add(record)
        records.append(record)
    return records


class ModelCatalog:
    """
    Last fetched list of models.

    Either unpopulated, or holding the result of one complete fetch: the
    tuple is swapped in under the lock, never mutated in place.
    """

    def __init__(self, http):
        self.http = http
        self._records: Tuple[ModelRecord, ...] = ()
        self._populated = False
        self._lock = threading.Lock()

    @property
    def populated(self) -> bool:
        return self._populated

    def raw_list(self) -> dict:
        return self.http.search_models(ROOT_CHUNK_QUERY)

    def list(self, refresh: bool = False) -> Tuple[ModelRecord, ...]:
        with self._lock:
            if refresh or not self._populated:
                records = tuple(parse_model_records(self.raw_list()))
                self._records = records
                self._populated = True
                logger.debug(f"Model catalog refreshed: {len(records)} models")
            return self._records

    def invalidate(self):
        with self._lock:
            self._records = ()
            self._populated = False
