from collections.abc import Callable
import datetime
from decimal import Decimal
import json
from typing import Any
import uuid

from fastapi.encoders import jsonable_encoder

from src.core.cache.coder.interface import Coder

CONVERTERS: dict[str, Callable[[str], Any]] = {
    "date": datetime.date.fromisoformat,
    "datetime": datetime.datetime.fromisoformat,
    "decimal": Decimal,
    "uuid": uuid.UUID,
}


class JsonEncoder(json.JSONEncoder):
    def default(self, o: Any) -> Any:
        if isinstance(o, datetime.datetime):
            return {"val": o.isoformat(), "_type": "datetime"}
        if isinstance(o, datetime.date):
            return {"val": o.isoformat(), "_type": "date"}
        if isinstance(o, Decimal):
            return {"val": str(o), "_type": "decimal"}
        if isinstance(o, uuid.UUID):
            return {"val": str(o), "_type": "uuid"}
        return jsonable_encoder(o)


def object_hook(obj: dict[str, Any]) -> Any:
    value_type = obj.get("_type")
    if not value_type:
        return obj

    if value_type not in CONVERTERS:
        raise TypeError(f"Unknown cached value type {value_type}")
    return CONVERTERS[value_type](obj["val"])


class JsonCoder(Coder):
    @classmethod
    def encode(cls, value: Any) -> bytes:
        return json.dumps(value, cls=JsonEncoder).encode()

    @classmethod
    def decode(cls, value: bytes | str) -> Any:
        if isinstance(value, bytes):
            value = value.decode()
        return json.loads(value, object_hook=object_hook)
