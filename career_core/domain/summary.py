"""摘要结果与本地统计指标。"""

import math
from dataclasses import dataclass

WORDS_PER_MINUTE = 200


def word_count(text: str) -> int:
    return len(text.split())


@dataclass
class SummaryResult:
    original_text: str
    summary: str
    word_count: int
    reading_time_minutes: int
    reduction_percentage: float

    @classmethod
    def build(cls, original_text: str, summary: str) -> "SummaryResult":
        src_words = word_count(original_text)
        out_words = word_count(summary)
        reduction = 0.0
        if src_words:
            reduction = round(max(0.0, (1 - out_words / src_words) * 100), 1)
        return cls(
            original_text=original_text,
            summary=summary,
            word_count=src_words,
            reading_time_minutes=math.ceil(src_words / WORDS_PER_MINUTE),
            reduction_percentage=reduction,
        )
