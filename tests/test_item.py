from datetime import datetime, timezone

import pytest

from zabbix_client import item as item_mod
from zabbix_client.errors import (
    APIError,
    ConfigurationError,
    DecodeError,
    FetchError,
    NotFoundError,
    TransportError,
)
from zabbix_client.item import (
    Item,
    build_item_params,
    decode_item,
    decode_items,
    get_items,
    item_get,
)
from zabbix_client.types import ValueType


class FakeTransport:
    def __init__(self, result=None, error=None):
        self.result = result if result is not None else []
        self.error = error
        self.calls = []

    def __call__(self, method, params):
        self.calls.append((method, params))
        if self.error is not None:
            raise self.error
        return self.result


def test_decode_item_converts_numeric_fields(make_wire):
    item = decode_item(make_wire())

    assert item == Item(
        host_id=12,
        item_id=345,
        name='cpu.load',
        description='',
        last_clock=1600000000,
        last_value='0.5',
        last_value_type=0,
    )


def test_decode_item_copies_text_verbatim(make_wire):
    item = decode_item(make_wire(name='  Free disk space on / ', description='bytes\nfree', lastvalue='n/a'))

    assert item.name == '  Free disk space on / '
    assert item.description == 'bytes\nfree'
    assert item.last_value == 'n/a'


def test_decode_item_optional_text_defaults_to_empty(make_wire):
    wire = make_wire()
    del wire['description']
    del wire['lastvalue']

    item = decode_item(wire)

    assert item.description == ''
    assert item.last_value == ''


@pytest.mark.parametrize('key, field', [
    ('hostid', 'host_id'),
    ('itemid', 'item_id'),
    ('lastclock', 'last_clock'),
    ('value_type', 'last_value_type'),
])
def test_decode_item_rejects_non_numeric(make_wire, key, field):
    with pytest.raises(DecodeError) as excinfo:
        decode_item(make_wire(**{key: 'abc'}))

    assert excinfo.value.field == field
    assert excinfo.value.index is None
    assert isinstance(excinfo.value.cause, ValueError)
    assert excinfo.value.kind == 'decode'


def test_decode_item_host_id_error_message(make_wire):
    with pytest.raises(DecodeError, match='host_id'):
        decode_item(make_wire(hostid='abc'))


def test_decode_item_empty_lastclock_fails(make_wire):
    with pytest.raises(DecodeError) as excinfo:
        decode_item(make_wire(lastclock=''))

    assert excinfo.value.field == 'last_clock'


def test_decode_item_missing_lastclock_fails(make_wire):
    wire = make_wire()
    del wire['lastclock']

    with pytest.raises(DecodeError) as excinfo:
        decode_item(wire)

    assert excinfo.value.field == 'last_clock'


def test_decode_item_reports_first_bad_field(make_wire):
    with pytest.raises(DecodeError) as excinfo:
        decode_item(make_wire(itemid='x', value_type='y'))

    assert excinfo.value.field == 'item_id'


@pytest.mark.parametrize('value', [' 12', '12 ', '1_000', '1.5', '0x10', '', '１２'])
def test_decode_item_integer_parsing_is_strict(make_wire, value):
    with pytest.raises(DecodeError):
        decode_item(make_wire(hostid=value))


def test_decode_item_accepts_signed_integers(make_wire):
    item = decode_item(make_wire(hostid='+7', itemid='-3'))

    assert item.host_id == 7
    assert item.item_id == -3


def test_decode_item_null_treated_as_absent(make_wire):
    item = decode_item(make_wire(description=None))
    assert item.description == ''

    with pytest.raises(DecodeError) as excinfo:
        decode_item(make_wire(lastclock=None))
    assert excinfo.value.field == 'last_clock'


def test_decode_item_does_not_modify_input(make_wire):
    wire = make_wire()
    before = dict(wire)

    decode_item(wire)

    assert wire == before


def test_item_value_type_and_last_check(make_wire):
    item = decode_item(make_wire(value_type='3'))

    assert item.value_type is ValueType.UNSIGNED
    assert item.last_check == datetime(2020, 9, 13, 12, 26, 40, tzinfo=timezone.utc)

    assert decode_item(make_wire(value_type='9')).value_type is None


def test_decode_items_empty():
    assert decode_items([]) == []
    assert decode_items(None) == []


def test_decode_items_preserves_order(make_wire):
    items = decode_items([make_wire(itemid='3'), make_wire(itemid='1'), make_wire(itemid='2')])

    assert [i.item_id for i in items] == [3, 1, 2]


def test_decode_items_reports_index(make_wire):
    with pytest.raises(DecodeError) as excinfo:
        decode_items([make_wire(), make_wire(), make_wire(lastclock='soon')])

    err = excinfo.value
    assert err.index == 2
    assert err.field == 'last_clock'
    assert isinstance(err.cause, DecodeError)
    assert err.cause.field == 'last_clock'


def test_build_item_params_drops_unset_values():
    params = build_item_params({
        'hostids': ['10084'],
        'itemids': None,
        'host': None,
        'monitored': True,
        'webitems': False,
        'with_triggers': None,
        'limit': 5,
    })

    assert params == {'hostids': ['10084'], 'monitored': True, 'limit': 5}


def test_build_item_params_keeps_explicit_empty_lists():
    assert build_item_params({'hostids': []}) == {'hostids': []}


def test_build_item_params_default_is_empty():
    assert build_item_params() == {}
    assert build_item_params({}) == {}


def test_get_items_sends_item_get(make_wire):
    transport = FakeTransport([make_wire()])

    items = get_items({'hostids': ['12']}, request=transport)

    assert transport.calls == [('item.get', {'hostids': ['12']})]
    assert items == [decode_item(make_wire())]


def test_get_items_never_sends_unset_fields(make_wire):
    transport = FakeTransport([make_wire()])

    get_items({'group': 'Linux servers', 'inherited': False, 'templateids': None}, request=transport)

    method, params = transport.calls[0]
    assert params == {'group': 'Linux servers'}


def test_get_items_empty_result_is_not_found():
    transport = FakeTransport([])

    with pytest.raises(NotFoundError) as excinfo:
        get_items(request=transport)

    assert excinfo.value.kind == 'not_found'
    assert isinstance(excinfo.value, FetchError)
    assert not isinstance(excinfo.value, TransportError)
    assert len(transport.calls) == 1


def test_get_items_decode_error_is_all_or_nothing(make_wire):
    transport = FakeTransport([make_wire(), make_wire(hostid='oops')])

    with pytest.raises(DecodeError) as excinfo:
        get_items(request=transport)

    assert excinfo.value.index == 1
    assert excinfo.value.field == 'host_id'


def test_get_items_propagates_transport_error_unchanged():
    error = APIError(-32602, 'Invalid params.', 'Incorrect API "item.get".')
    transport = FakeTransport(error=error)

    with pytest.raises(APIError) as excinfo:
        get_items(request=transport)

    assert excinfo.value is error
    assert excinfo.value.code == -32602


def test_get_items_wraps_foreign_transport_errors():
    cause = ConnectionResetError('peer closed')
    transport = FakeTransport(error=cause)

    with pytest.raises(TransportError) as excinfo:
        get_items(request=transport)

    assert excinfo.value.cause is cause
    assert excinfo.value.__cause__ is cause
    assert excinfo.value.kind == 'transport'


def test_get_items_rejects_non_list_result():
    transport = FakeTransport({'itemids': ['1']})

    with pytest.raises(TransportError, match='expected a list'):
        get_items(request=transport)


def test_item_get_returns_raw_objects(make_wire):
    wires = [make_wire(hostid='abc')]
    transport = FakeTransport(wires)

    assert item_get(request=transport) == wires
    assert item_get(request=FakeTransport([])) == []


def test_get_items_uses_zabbix_request_by_default(monkeypatch, make_wire):
    calls = []

    def fake_request(method, params):
        calls.append((method, params))
        return [make_wire()]

    monkeypatch.setattr(item_mod, 'zabbix_request', fake_request)

    items = get_items({'itemids': ['345']})

    assert calls == [('item.get', {'itemids': ['345']})]
    assert items[0].item_id == 345


def test_get_items_without_configuration():
    with pytest.raises(ConfigurationError):
        get_items()


@pytest.mark.parametrize('wire', ['oops', None, 42, ['12', '345']])
def test_decode_item_rejects_non_objects(wire):
    with pytest.raises(DecodeError) as excinfo:
        decode_item(wire)

    assert excinfo.value.field is None
    assert isinstance(excinfo.value.cause, TypeError)


def test_get_items_non_object_element_is_decode_error(make_wire):
    transport = FakeTransport([make_wire(), 'oops'])

    with pytest.raises(DecodeError) as excinfo:
        get_items(request=transport)

    assert excinfo.value.index == 1
    assert excinfo.value.field is None


@pytest.mark.parametrize('value', ['9223372036854775807', '-9223372036854775808'])
def test_decode_item_accepts_int64_bounds(make_wire, value):
    assert decode_item(make_wire(itemid=value)).item_id == int(value)


@pytest.mark.parametrize('value', ['9223372036854775808', '-9223372036854775809', '1' * 40])
def test_decode_item_rejects_values_beyond_int64(make_wire, value):
    with pytest.raises(DecodeError) as excinfo:
        decode_item(make_wire(lastclock=value))

    assert excinfo.value.field == 'last_clock'
    assert 'out of 64-bit range' in str(excinfo.value.cause)
