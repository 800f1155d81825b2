# opensearch_sugar/pipeline.py

import re

from typing import Dict, List

from opensearch_sugar.catalog import ModelRecord


TEMP_SUFFIX = "_temp"


def sanitize_pipeline_name(name: str) -> str:
    """Replace every whitespace run with a single underscore."""
    return re.sub(r"\s+", "_", name)


class PipelineBuilder:
    """
    Builds a text-embedding ingest pipeline for one model.

    The text_embedding processor writes each embedding to `<target>_temp`,
    then one copy processor per field moves `<target>_temp.knn` to `<target>`
    and drops the temp field. A target may name a field that is still an
    input elsewhere in the pipeline, so it is never written directly.
    """

    def __init__(self, model: ModelRecord, description: str, field_map: Dict[str, str]):
        self.model = model
        self.description = description
        self.field_map = field_map

    def build(self) -> dict:
        return {
            "description": self.description,
            "processors": [self.text_embedding_processor(), *self.copy_processors()],
        }

    def text_embedding_processor(self) -> dict:
        return {
            "text_embedding": {
                "model_id": self.model.id,
                "field_map": self.temp_field_map(),
            }
        }

    def copy_processors(self) -> List[dict]:
        return [self.copy_processor(target) for target in self.field_map.values()]

    @staticmethod
    def copy_processor(target_field: str) -> dict:
        return {
            "copy": {
                "source_field": f"{target_field}{TEMP_SUFFIX}.knn",
                "target_field": target_field,
                "ignore_missing": True,
                "remove_source": True,
            }
        }

    def temp_field_map(self) -> Dict[str, str]:
        return {source: f"{target}{TEMP_SUFFIX}" for source, target in self.field_map.items()}
