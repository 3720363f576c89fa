from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from .models import ProviderTurn, Role, TextPart


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ConversationTurn:
    role: Role
    text: str
    created_at: datetime = field(default_factory=_utcnow)


class ConversationLog:
    """单个聊天会话的只追加消息日志。

    - 不去重、不重排、不截断，窗口/摘要策略由调用方在外部实现。
    - 一个实例只对应一个会话，且只允许一个写入方。
    - 会话结束即丢弃，不做持久化。
    """

    def __init__(self, turns: Optional[Iterable[ConversationTurn]] = None):
        self._turns: List[ConversationTurn] = list(turns or [])

    @classmethod
    def with_greeting(cls, text: str) -> "ConversationLog":
        """创建以一条模型开场白开头的会话。"""

        log = cls()
        log.append_model(text)
        return log

    def append(self, turn: ConversationTurn) -> None:
        self._turns.append(turn)

    def append_user(self, text: str) -> ConversationTurn:
        turn = ConversationTurn(role="user", text=text)
        self.append(turn)
        return turn

    def append_model(self, text: str) -> ConversationTurn:
        turn = ConversationTurn(role="model", text=text)
        self.append(turn)
        return turn

    def history_view(self) -> Tuple[ConversationTurn, ...]:
        """按插入顺序返回只读快照，供 UI 渲染。"""

        return tuple(self._turns)

    def to_provider_history(self) -> List[ProviderTurn]:
        """投影为 Provider 需要的 {role, parts} 列表，顺序一一对应。"""

        return [ProviderTurn(role=t.role, parts=[TextPart(t.text)]) for t in self._turns]

    def __len__(self) -> int:
        return len(self._turns)
