"""抽取结果的事后出处核对。

提示词里“禁止编造事实”只是对模型的要求，无法保证；这里对能核对的部分
（所选文本简历中的技能）做一次字面检查：技能名在原文中找不到（按词边界匹配，忽略大小写）即视为无出处。
"""

import re
from typing import Iterable, List

_WS_RE = re.compile(r"\s+")


def _normalize(text: str) -> str:
    return _WS_RE.sub(" ", text).strip().casefold()


def find_ungrounded(items: Iterable[str], source_text: str) -> List[str]:
    """返回在 source_text 中找不到的条目，保持原顺序。"""

    haystack = _normalize(source_text)
    missing: List[str] = []
    for item in items:
        needle = _normalize(item)
        if needle and not re.search(rf"(?<!\w){re.escape(needle)}(?!\w)", haystack):
            missing.append(item)
    return missing
