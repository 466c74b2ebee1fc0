import pytest

from spriteatlas.core import ColorKey
from spriteatlas.core.errors import ValidationError
from spriteatlas.utils import validators


def test_parse_color_key_defaults_tolerance():
    assert validators.parse_color_key("255, 0, 255") == ColorKey(255, 0, 255, 30)
    assert validators.parse_color_key("1,2,3,0") == ColorKey(1, 2, 3, 0)


@pytest.mark.parametrize("value", ["1,2", "1,2,3,4,5", "a,b,c", "300,0,0", "0,0,0,101"])
def test_parse_color_key_rejects_bad_values(value):
    with pytest.raises(ValidationError):
        validators.parse_color_key(value)


def test_parse_cut_list():
    assert validators.parse_cut_list("0, 32,64,") == [0, 32, 64]
    with pytest.raises(ValidationError):
        validators.parse_cut_list("0")
    with pytest.raises(ValidationError):
        validators.parse_cut_list("0,x")


def test_parse_optional_int():
    assert validators.parse_optional_int("", "Rows") is None
    assert validators.parse_optional_int("4", "Rows") == 4
    with pytest.raises(ValidationError):
        validators.parse_optional_int("0", "Rows")


def test_parse_non_negative_int():
    assert validators.parse_non_negative_int("0", "Padding") == 0
    with pytest.raises(ValidationError):
        validators.parse_non_negative_int("-1", "Padding")


def test_validate_slice_mode():
    validators.validate_slice_mode(2, None, None, None)
    validators.validate_slice_mode(None, None, [0, 4], [0, 4])
    with pytest.raises(ValidationError):
        validators.validate_slice_mode(2, 2, [0, 4], [0, 4])
    with pytest.raises(ValidationError):
        validators.validate_slice_mode(None, None, [0, 4], None)
