"""
Zabbix API - item.get client

Fetches Zabbix items and decodes the API's string-typed fields into typed
``Item`` records.

Connect directly to your Zabbix instance using an API token or
username/password (see zabbix_client.config).

Example - Basic usage:
    from zabbix_client import get_items, set_config

    set_config({
        'zabbix_url': 'https://zabbix.example.com',
        'zabbix_token': 'your-api-token'
    })

    for item in get_items({'hostids': ['10084']}):
        print(f'{item.name}: {item.last_value} at {item.last_check}')

Example - Empty results:
    from zabbix_client import get_items, NotFoundError

    try:
        items = get_items({'host': 'web-01', 'monitored': True})
    except NotFoundError:
        print('Host web-01 has no monitored items')
"""

from .types import OutputFormat, SearchCriteria, FilterCriteria, GetParameters, ValueType

from .config import get_config, set_config, reset_config

from .errors import (
    ZabbixError,
    ConfigurationError,
    FetchError,
    TransportError,
    APIError,
    AuthenticationError,
    NotFoundError,
    DecodeError,
)

from .item import (
    ITEM_FIELDS,
    Item,
    ItemObject,
    ItemGetParams,
    build_item_params,
    decode_item,
    decode_items,
    item_get,
    get_items,
)

from .utils import zabbix_request

__version__ = '0.1.0'

__all__ = [
    # Types
    'OutputFormat',
    'SearchCriteria',
    'FilterCriteria',
    'GetParameters',
    'ValueType',

    # Configuration
    'get_config',
    'set_config',
    'reset_config',

    # Errors
    'ZabbixError',
    'ConfigurationError',
    'FetchError',
    'TransportError',
    'APIError',
    'AuthenticationError',
    'NotFoundError',
    'DecodeError',

    # Items
    'ITEM_FIELDS',
    'Item',
    'ItemObject',
    'ItemGetParams',
    'build_item_params',
    'decode_item',
    'decode_items',
    'item_get',
    'get_items',

    # Transport
    'zabbix_request',
]
