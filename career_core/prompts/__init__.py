"""提示词模板加载工具。

按语言(locale) 从 prompts/<locale> 目录读取 Markdown 模板，
模板中的 {name} 占位符由 render_prompt 用 str.format 填充。
"""

from functools import lru_cache
from pathlib import Path


PROMPTS_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=None)
def load_prompt(name: str, locale: str = "en") -> str:
    """根据模板名和语言加载提示词文本。"""

    fname = PROMPTS_DIR / locale / f"{name}.md"
    return fname.read_text(encoding="utf-8").strip()


def render_prompt(name: str, locale: str = "en", **values: str) -> str:
    return load_prompt(name, locale).format(**values)
