"""结构化抽取与出处核对。"""

from career_core.extraction.extractor import ExtractionResult, SchemaExtractor, parse_json_payload
from career_core.extraction.grounding import find_ungrounded

__all__ = ["ExtractionResult", "SchemaExtractor", "find_ungrounded", "parse_json_payload"]
