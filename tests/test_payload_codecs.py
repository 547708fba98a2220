import json
from enum import Enum

import pytest
from pydantic import BaseModel

from messenger.payload import (
    FunctionPayloadDecoder,
    FunctionPayloadEncoder,
    JsonPayloadDecoder,
    JsonPayloadEncoder,
    PayloadDecodingError,
    PayloadEncodingError,
    PayloadError,
    PlainPayloadDecoder,
    PlainPayloadEncoder,
    ToStringPayloadEncoder,
)
from messenger.protocol import ContentType


class Reboot(BaseModel):
    host: str
    force: bool = False


class Color(Enum):
    RED = "red"


def test_plain_codecs_declare_plain():
    assert PlainPayloadEncoder().content_type == "Plain"
    assert ToStringPayloadEncoder().content_type == ContentType.PLAIN.value
    assert PlainPayloadDecoder().content_type == "Plain"


def test_plain_encoder_passes_text_through():
    encoder = PlainPayloadEncoder()
    assert encoder.encode("hello") == "hello"
    assert encoder.encode(None) == ""
    with pytest.raises(PayloadEncodingError, match="Could not serialize instance of type: int"):
        encoder.encode(3)


def test_to_string_encoder():
    encoder = ToStringPayloadEncoder()
    assert encoder.encode(3) == "3"
    assert encoder.encode(None) == ""
    assert encoder.encode(Color.RED) == "red"


def test_plain_decoder_is_identity():
    assert PlainPayloadDecoder().decode("") == ""
    assert PlainPayloadDecoder().decode("{not json") == "{not json"


def test_json_codecs_declare_json():
    assert JsonPayloadEncoder().content_type == "JSON"
    assert JsonPayloadDecoder().content_type == "JSON"
    assert JsonPayloadDecoder(Reboot).value_type is Reboot


def test_json_encoder_handles_models_and_plain_values():
    assert json.loads(JsonPayloadEncoder(Reboot).encode(Reboot(host="db-1"))) == {"host": "db-1", "force": False}
    assert JsonPayloadEncoder().encode([1, "two"]) == '[1,"two"]'


def test_json_encoder_rejects_unserializable_values():
    with pytest.raises(PayloadEncodingError, match="object"):
        JsonPayloadEncoder().encode(object())


def test_json_decoder_validates_into_the_bound_type():
    value = JsonPayloadDecoder(Reboot).decode('{"host": "db-1", "force": true}')
    assert value == Reboot(host="db-1", force=True)


@pytest.mark.parametrize("raw", ["", "{not json", '{"force": true}', '{"host": 42}'])
def test_json_decoder_failures(raw):
    with pytest.raises(PayloadDecodingError) as exc_info:
        JsonPayloadDecoder(Reboot).decode(raw)
    assert exc_info.value.raw == raw
    assert exc_info.value.target is Reboot
    assert isinstance(exc_info.value, PayloadError)


def test_function_codecs_wrap_callables():
    encoder = FunctionPayloadEncoder("CSV", lambda row: ",".join(row))
    decoder = FunctionPayloadDecoder(ContentType.PLAIN, int)
    assert encoder.content_type == "CSV"
    assert encoder.encode(["a", "b"]) == "a,b"
    assert decoder.content_type == "Plain"
    assert decoder.decode("42") == 42


def test_function_codecs_translate_errors():
    with pytest.raises(PayloadEncodingError):
        FunctionPayloadEncoder("CSV", lambda row: ",".join(row)).encode([1, 2])
    with pytest.raises(PayloadDecodingError, match="invalid literal"):
        FunctionPayloadDecoder("Number", int).decode("forty-two")
