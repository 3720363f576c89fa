import json
import logging
from pathlib import Path
from datetime import datetime, timezone
from typing import Any, Dict
from career_core.config.settings import settings

# 可能携带用户输入、简历内容或模型输出的结构化字段
CONTENT_FIELDS = frozenset({"error", "message", "skills"})


def redact_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    """只保留内容字段的长度，其余字段原样返回。"""

    out = dict(payload)
    for key in CONTENT_FIELDS & out.keys():
        value = out[key]
        size = len(value) if isinstance(value, (str, list, tuple)) else 1
        out[key] = f"<redacted:{size}>"
    return out


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if settings.log_redact_content:
            msg = (msg or "")[:64]
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": msg,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            if settings.log_redact_content:
                extra = redact_fields(extra)
            payload.update(extra)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger() -> logging.Logger:
    logger = logging.getLogger("career_core")
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return logger
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(log_dir / "career.log", encoding="utf-8")
    fh.setLevel(logging.INFO)
    fh.setFormatter(JsonFormatter())
    logger.addHandler(fh)
    return logger


logger = setup_logger()
