"""Career Core 顶层包。

该包提供职业助手控制台背后的请求编排层，
包括配置加载、领域模型、内容编码、会话管理、
结构化抽取、Provider 适配以及各使用场景的分发器。
"""

from career_core.content.encoder import BinaryBlob
from career_core.dispatch.dispatcher import RequestDispatcher
from career_core.domain.conversation import ConversationLog, ConversationTurn

__all__ = ["BinaryBlob", "ConversationLog", "ConversationTurn", "RequestDispatcher"]
