"""内容编码：把文本或二进制附件转换为可传输的请求片段。

- 文本原样包装为 TextPart，不做长度限制。
- 二进制附件完整读取后做 base64 编码，与 MIME 类型一起组成 AttachmentPart。

本模块无副作用；读取失败统一抛出 EncodingError，绝不以空内容代替。
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional, Union

from career_core.domain.exceptions import EncodingError
from career_core.domain.models import AttachmentPart, RequestPart, TextPart


DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass
class BinaryBlob:
    """UI 侧上传的二进制文件。

    source 可以是 bytes、文件路径或可读的二进制文件对象。
    mime_type 为空时按 name（或路径后缀）猜测。
    """

    source: Union[bytes, bytearray, str, Path, BinaryIO]
    mime_type: str = ""
    name: Optional[str] = None

    @classmethod
    def from_path(cls, path: Union[str, Path], mime_type: str = "") -> "BinaryBlob":
        p = Path(path)
        return cls(source=p, mime_type=mime_type, name=p.name)

    def resolved_mime_type(self) -> str:
        if self.mime_type:
            return self.mime_type
        name = self.name
        if name is None and isinstance(self.source, (str, Path)):
            name = str(self.source)
        if name:
            guessed, _ = mimetypes.guess_type(name)
            if guessed:
                return guessed
        return DEFAULT_MIME_TYPE

    def read(self) -> bytes:
        """完整读取附件内容。"""

        src = self.source
        try:
            if isinstance(src, (bytes, bytearray)):
                return bytes(src)
            if isinstance(src, (str, Path)):
                return Path(src).expanduser().read_bytes()
            data = src.read()
        except (OSError, ValueError) as exc:
            raise EncodingError(
                code="ENCODING_ERROR",
                message=f"cannot read attachment {self.name or ''}: {exc}",
            ) from exc
        if not isinstance(data, (bytes, bytearray)):
            raise EncodingError(
                code="ENCODING_ERROR",
                message=f"attachment stream returned {type(data).__name__}, expected bytes",
            )
        return bytes(data)


Encodable = Union[str, BinaryBlob]


def encode(value: Encodable) -> RequestPart:
    """把一条输入编码为请求片段。"""

    if isinstance(value, str):
        return TextPart(value)
    if isinstance(value, BinaryBlob):
        raw = value.read()
        payload = base64.b64encode(raw).decode("ascii")
        return AttachmentPart(data=payload, mime_type=value.resolved_mime_type())
    raise EncodingError(
        code="UNSUPPORTED_INPUT",
        message=f"cannot encode input of type {type(value).__name__}",
    )


def encode_all(values: Iterable[Encodable]) -> List[RequestPart]:
    return [encode(v) for v in values]


def decode_attachment(part: AttachmentPart) -> bytes:
    """还原 AttachmentPart 中的原始字节。"""

    try:
        return base64.b64decode(part.data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise EncodingError(code="DECODING_ERROR", message=str(exc)) from exc
