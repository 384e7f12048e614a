import pytest

from zabbix_client import config


ENV_VARS = (
    'ZABBIX_URL',
    'ZABBIX_TOKEN',
    'ZABBIX_USER',
    'ZABBIX_PASSWORD',
    'ZABBIX_TIMEOUT',
    'ZABBIX_DEBUG',
    'ZABBIX_VERIFY_SSL',
)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config.reset_config()
    yield
    config.reset_config()


@pytest.fixture
def token_config():
    config.set_config({
        'zabbix_url': 'https://zabbix.example.com',
        'zabbix_token': 'secret-token',
    })


@pytest.fixture
def make_wire():
    return wire_item


def wire_item(**overrides):
    item = {
        'hostid': '12',
        'itemid': '345',
        'name': 'cpu.load',
        'description': '',
        'lastclock': '1600000000',
        'lastvalue': '0.5',
        'value_type': '0',
    }
    item.update(overrides)
    return item
