"""输入内容编码（文本 / 二进制附件 -> 请求片段）。"""

from career_core.content.encoder import BinaryBlob, decode_attachment, encode, encode_all

__all__ = ["BinaryBlob", "decode_attachment", "encode", "encode_all"]
