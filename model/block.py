# model/block.py
from typing import Any, Final, Optional
from pydantic import TypeAdapter, ValidationError
from util.errors import MalformedPayloadError

# Blocks are opaque JSON values; the category they are stored under is their only tag.
Block = Any

_ADAPTER: Final[TypeAdapter[Any]] = TypeAdapter(Any)


def encode_block(block: Block) -> bytes:
    return _ADAPTER.dump_json(block)


def decode_block(raw: Optional[bytes], *, key: str) -> Block:
    if raw is None:
        raise MalformedPayloadError(key, raw, "missing value")
    try:
        return _ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise MalformedPayloadError(key, raw, e.errors()[0].get("msg", "")) from e
