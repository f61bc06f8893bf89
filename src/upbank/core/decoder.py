"""
Strict JSON decoding into the API models.
"""

from __future__ import annotations

from typing import Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .errors import DecodeError

__all__ = ["decode", "encode"]

ModelT = TypeVar("ModelT", bound=BaseModel)


def _location(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def decode(data: Union[bytes, str], shape: Type[ModelT]) -> ModelT:
    """
    Decode ``data`` into ``shape``.

    Unlike a plain ``json.loads`` followed by lookups, any field present in
    the payload but not declared by ``shape`` is an error. Malformed JSON and
    type mismatches are reported the same way, as :class:`DecodeError`.
    """
    try:
        return shape.model_validate_json(data)
    except ValidationError as exc:
        unknown = [
            _location(error["loc"])
            for error in exc.errors()
            if error["type"] == "extra_forbidden"
        ]
        if unknown:
            message = f"Unknown field(s) in {shape.__name__}: {', '.join(unknown)}"
        else:
            message = f"Failed to decode {shape.__name__}: {exc}"
        raise DecodeError(
            message,
            unknown_fields=unknown,
            body=data if isinstance(data, bytes) else data.encode("utf-8"),
        ) from exc


def encode(model: BaseModel) -> bytes:
    """Serialize ``model`` back to its wire form."""
    return model.model_dump_json(by_alias=True).encode("utf-8")
