import json

import pytest

from parambind.errors import BindingError, HTTPError, unsupported_media_type


def test_binding_error_message():
    internal = ValueError("internal error")
    err = BindingError("id", ["1", "nope"], "bind failed", internal)
    assert str(err) == "code=400, message=bind failed, internal=internal error, field=id"
    assert err.code == 400
    assert err.message == "bind failed"
    assert err.internal is internal
    assert err.field == "id"
    assert err.values == ["1", "nope"]


def test_binding_error_json():
    err = BindingError("id", ["1", "nope"], "bind failed", ValueError("internal error"))
    encoded = json.dumps(err.to_dict(), separators=(",", ":"))
    assert encoded == '{"field":"id","message":"bind failed"}'


def test_binding_error_without_internal():
    err = BindingError("param", [], "required field value is empty")
    assert str(err) == "code=400, message=required field value is empty, field=param"


def test_binding_error_is_http_error():
    err = BindingError("id", [], "bind failed")
    with pytest.raises(HTTPError) as info:
        raise err
    assert info.value is err
    assert err.code == 400
    assert str(err) == "code=400, message=bind failed, field=id"


def test_unsupported_media_type():
    err = unsupported_media_type()
    assert err.code == 415
    assert str(err) == "code=415, message=Unsupported Media Type"


def test_http_error_default_message_from_status():
    err = HTTPError(400)
    assert err.message == "Bad Request"


def test_with_internal_returns_same_error():
    cause = ValueError("unexpected EOF")
    err = HTTPError(400, "unexpected EOF")
    assert err.with_internal(cause) is err
    assert str(err) == "code=400, message=unexpected EOF, internal=unexpected EOF"


def test_http_error_to_dict():
    assert HTTPError(400, "bind failed").to_dict() == {"message": "bind failed"}