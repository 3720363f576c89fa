"""领域层模型与协议。

包含：
- models: TextPart / AttachmentPart / GenerateRequest / GenerateResult 等统一模型。
- conversation: 会话消息与只追加的 ConversationLog。
- schema: 声明式输出结构与校验。
- resume: 简历优化场景的输出结构。
- summary: 摘要结果与统计指标。
- exceptions: 业务异常类型定义。
"""
