"""
Item retrieval for Zabbix (item.get)

The API sends every scalar as a string. Items are decoded into typed
``Item`` records, and a query that matches nothing raises ``NotFoundError``
rather than returning an empty list.

Example:
    from zabbix_client.item import get_items

    # All items of a host
    items = get_items({'hostids': ['10084']})

    # Monitored items used in triggers
    items = get_items({'host': 'web-01', 'monitored': True, 'with_triggers': True})
    for item in items:
        print(item.name, item.last_value)

See: https://www.zabbix.com/documentation/current/en/manual/api/reference/item/get
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, TypedDict

from .errors import DecodeError, NotFoundError, TransportError, ZabbixError
from .types import GetParameters, ValueType
from .utils import zabbix_request


Request = Callable[[str, Any], Any]

ITEM_FIELDS = ['hostid', 'itemid', 'name', 'description', 'lastclock', 'lastvalue', 'value_type']

# Zabbix turns a flag on whenever the key is present, whatever its value
FLAG_PARAMS = frozenset({'webitems', 'inherited', 'templated', 'monitored', 'with_triggers'})

_INTEGER = re.compile(r'[+-]?[0-9]+')
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


class ItemGetParams(GetParameters, total=False):
    """Parameters for item.get API method"""
    itemids: List[str]
    groupids: List[str]
    templateids: List[str]
    hostids: List[str]
    proxyids: List[str]
    interfaceids: List[str]
    graphids: List[str]
    triggerids: List[str]
    applicationids: List[str]
    webitems: bool
    inherited: bool
    templated: bool
    monitored: bool
    group: str
    host: str
    application: str
    with_triggers: bool


class ItemObject(TypedDict, total=False):
    """Item object as returned by item.get"""
    hostid: str
    itemid: str
    name: str
    description: str
    lastclock: str
    lastvalue: str
    value_type: str


@dataclass(frozen=True)
class Item:
    """A Zabbix item with typed fields"""
    host_id: int
    item_id: int
    name: str
    description: str
    last_clock: int
    last_value: str
    # 0 - float; 1 - character; 2 - log; 3 - unsigned; 4 - text
    last_value_type: int

    @property
    def value_type(self) -> Optional[ValueType]:
        """Known ValueType for last_value_type, or None"""
        try:
            return ValueType(self.last_value_type)
        except ValueError:
            return None

    @property
    def last_check(self) -> datetime:
        """Time of the last value as a UTC datetime"""
        return datetime.fromtimestamp(self.last_clock, tz=timezone.utc)


def _text(wire: ItemObject, key: str) -> str:
    value = wire.get(key)
    return '' if value is None else value


def _parse_int(wire: ItemObject, key: str, field: str) -> int:
    value = _text(wire, key)
    if not isinstance(value, str) or not _INTEGER.fullmatch(value):
        raise DecodeError(field=field, cause=ValueError(f'invalid integer for {key}: {value!r}'))
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise DecodeError(field=field, cause=ValueError(f'{key} out of 64-bit range: {value!r}'))
    return number


def decode_item(wire: ItemObject) -> Item:
    """
    Convert one item.get object into an Item

    Args:
        wire: Item object with string-typed fields

    Returns:
        Decoded Item

    Raises:
        DecodeError: If hostid, itemid, lastclock or value_type is not a 64-bit
            integer. A missing lastclock counts as an empty string and fails too.
            A wire value that is not a JSON object fails with ``field`` None.
    """
    if not isinstance(wire, dict):
        raise DecodeError(cause=TypeError(f'expected an item object, got {type(wire).__name__}'))

    host_id = _parse_int(wire, 'hostid', 'host_id')
    item_id = _parse_int(wire, 'itemid', 'item_id')
    name = _text(wire, 'name')
    description = _text(wire, 'description')
    last_clock = _parse_int(wire, 'lastclock', 'last_clock')
    last_value = _text(wire, 'lastvalue')
    last_value_type = _parse_int(wire, 'value_type', 'last_value_type')

    return Item(
        host_id=host_id,
        item_id=item_id,
        name=name,
        description=description,
        last_clock=last_clock,
        last_value=last_value,
        last_value_type=last_value_type,
    )


def decode_items(wires: Optional[Iterable[ItemObject]]) -> List[Item]:
    """
    Convert a list of item.get objects, keeping their order

    Raises:
        DecodeError: For the first object that fails, with ``index`` set.
            Nothing is returned for the objects that did decode.
    """
    if wires is None:
        return []

    items = []
    for i, wire in enumerate(wires):
        try:
            items.append(decode_item(wire))
        except DecodeError as exc:
            raise DecodeError(field=exc.field, index=i, cause=exc) from exc
    return items


def build_item_params(params: Optional[ItemGetParams] = None) -> Dict[str, Any]:
    """
    Build the item.get request payload

    Unset parameters are left out: keys set to None are dropped, and so are
    flags that are not true. Pass ``output=ITEM_FIELDS`` to fetch only what
    an Item needs; the API default ("extend") returns every field.
    """
    out: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if key in FLAG_PARAMS and not value:
            continue
        out[key] = value
    return out


def item_get(params: Optional[ItemGetParams] = None, request: Optional[Request] = None) -> List[ItemObject]:
    """
    Get raw item objects from Zabbix

    Args:
        params: Optional filtering parameters
        request: Transport to use instead of zabbix_request

    Returns:
        List of item objects as sent by the API (may be empty)

    Raises:
        TransportError: If the request fails or the result is not a list
        ConfigurationError: If the default transport has no URL or credentials
    """
    if request is None:
        request = zabbix_request

    try:
        result = request('item.get', build_item_params(params))
    except ZabbixError:
        raise
    except Exception as exc:
        raise TransportError(f'Failed to call item.get: {exc}', cause=exc) from exc

    if result is None:
        return []
    if not isinstance(result, list):
        raise TransportError(f'Unexpected item.get result: expected a list, got {type(result).__name__}')
    return result


def get_items(params: Optional[ItemGetParams] = None, request: Optional[Request] = None) -> List[Item]:
    """
    Get items from Zabbix matching the given search parameters

    Args:
        params: Optional filtering parameters
        request: Transport to use instead of zabbix_request

    Returns:
        Non-empty list of Items, in API order

    Raises:
        NotFoundError: If no item matches
        DecodeError: If any returned item is malformed
        TransportError: If the request fails (APIError for JSON-RPC errors)
        ConfigurationError: If the default transport has no URL or credentials
    """
    wires = item_get(params, request=request)
    if not wires:
        raise NotFoundError('item.get')
    return decode_items(wires)
