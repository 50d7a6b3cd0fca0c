# Line-oriented canonical form of payment variables: "name=value\n" per pair,
# input order kept, empty values dropped. The signature covers these exact bytes.
from typing import Any, Iterable, Mapping, Tuple, Union

from ..errors import DecodeError

Params = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def coerce_value(value: Any) -> str:
    # bool before str(): True -> "1", False -> "" (dropped)
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    return str(value)


def iter_params(params: Params):
    items = params.items() if isinstance(params, Mapping) else params
    for name, value in items:
        yield str(name), coerce_value(value)


def encode_params(params: Params) -> bytes:
    try:
        out = []
        for name, value in iter_params(params):
            if value != "":
                out.append(f"{name}={value}\n")
        return "".join(out).encode("utf-8")
    except UnicodeEncodeError as e:
        raise DecodeError(f"parameter text is not encodable as UTF-8: {e.reason}") from e
    except (TypeError, ValueError) as e:
        raise DecodeError(f"parameters must be a mapping or (name, value) pairs: {e}") from e
