import pytest

from lodge.errors import BadRequest
from lodge.payload import parse_int


@pytest.mark.parametrize('value, expected', [(7, 7), ('12', 12), (3.0, 3)])
def test_parse_int(value, expected):
    assert parse_int(value, 'Room') == expected


@pytest.mark.parametrize('value', [10.7, True, 'ten', '1.5', float('inf'), float('nan'), [1]])
def test_parse_int_rejects_non_integers(value):
    with pytest.raises(BadRequest) as exc:
        parse_int(value, 'Room')
    assert exc.value.message == 'Room must be a whole number'


@pytest.mark.parametrize('value', [None, ''])
def test_parse_int_missing(value):
    with pytest.raises(BadRequest) as exc:
        parse_int(value, 'Room')
    assert exc.value.message == 'Room is required'
