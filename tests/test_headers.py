import pytest

from utils.exceptions import MalformedCredential, MissingCredential
from utils.headers import get_api_key, get_bearer_token


def test_bearer_token():
    assert get_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"


def test_bearer_token_is_trimmed():
    assert get_bearer_token("Bearer    abc.def.ghi  ") == "abc.def.ghi"


@pytest.mark.parametrize("value", ["", None])
def test_missing_header(value):
    with pytest.raises(MissingCredential):
        get_bearer_token(value)


@pytest.mark.parametrize("value", ["Token xyz", "bearer abc", "Bearerabc", "abc.def.ghi"])
def test_wrong_prefix(value):
    with pytest.raises(MalformedCredential):
        get_bearer_token(value)


@pytest.mark.parametrize("value", ["Bearer ", "Bearer    "])
def test_empty_remainder(value):
    with pytest.raises(MalformedCredential):
        get_bearer_token(value)


def test_api_key():
    assert get_api_key("ApiKey f271c81ff7084ee5b99a5091b42d486e ") == "f271c81ff7084ee5b99a5091b42d486e"


def test_api_key_rejects_bearer_prefix():
    with pytest.raises(MalformedCredential):
        get_api_key("Bearer f271c81ff7084ee5b99a5091b42d486e")


def test_api_key_missing():
    with pytest.raises(MissingCredential):
        get_api_key("")
