"""
Connection settings for the Zabbix client

Settings come from, in order of precedence:
1. set_config() at runtime
2. ZABBIX_* environment variables
3. config.env beside this package (never overrides the environment)

Environment Variables:
    ZABBIX_URL: Zabbix frontend URL (the /api_jsonrpc.php suffix is optional)
    ZABBIX_TOKEN: API token
    ZABBIX_USER: Username, used with ZABBIX_PASSWORD when no token is set
    ZABBIX_PASSWORD: Password
    ZABBIX_TIMEOUT: Request timeout in seconds (default: 30)
    ZABBIX_DEBUG: Enable debug output (default: false)
    ZABBIX_VERIFY_SSL: Verify TLS certificates (default: true)

Example:
    from zabbix_client import set_config

    set_config({
        'zabbix_url': 'https://zabbix.example.com',
        'zabbix_token': 'your-api-token'
    })
"""

import os
from typing import Optional, Dict, Any
from pathlib import Path

import requests

from .errors import AuthenticationError, ConfigurationError


CONFIG_KEYS = (
    'zabbix_url',
    'zabbix_token',
    'zabbix_user',
    'zabbix_password',
    'timeout',
    'debug',
    'verify_ssl',
)


def _load_config_env(config_file: Optional[Path] = None) -> None:
    """Copy KEY=VALUE lines from config_file into os.environ, skipping keys already set."""
    if config_file is None:
        config_file = Path(__file__).parent / "config.env"
    if not config_file.exists():
        return

    with config_file.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, value = line.split("=", 1)
            # Existing environment wins
            os.environ.setdefault(key.strip(), value.strip())


_load_config_env()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes')


class ZabbixConfig:
    """Settings snapshot read from the environment"""

    def __init__(self):
        self.zabbix_url: str = os.getenv('ZABBIX_URL', '')
        self.zabbix_token: Optional[str] = os.getenv('ZABBIX_TOKEN') or None
        self.zabbix_user: Optional[str] = os.getenv('ZABBIX_USER') or None
        self.zabbix_password: Optional[str] = os.getenv('ZABBIX_PASSWORD') or None
        self.timeout: int = int(os.getenv('ZABBIX_TIMEOUT', '30'))
        self.debug: bool = _env_flag('ZABBIX_DEBUG', 'false')
        self.verify_ssl: bool = _env_flag('ZABBIX_VERIFY_SSL', 'true')


_config = ZabbixConfig()

# Session token obtained through user.login
_auth_token: Optional[str] = None


def get_config() -> Dict[str, Any]:
    """Current settings as a plain dict keyed by CONFIG_KEYS"""
    return {key: getattr(_config, key) for key in CONFIG_KEYS}


def set_config(new_config: Dict[str, Any]) -> None:
    """
    Update some settings, leaving the others as they are

    Args:
        new_config: Subset of CONFIG_KEYS mapped to new values

    Raises:
        ConfigurationError: If an unknown key is given
    """
    global _auth_token

    unknown = set(new_config) - set(CONFIG_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    for key, value in new_config.items():
        setattr(_config, key, value)

    # A cached session belongs to the old credentials
    if any(k in new_config for k in ('zabbix_url', 'zabbix_user', 'zabbix_password', 'zabbix_token')):
        _auth_token = None

    debug_log(f"Settings changed ({', '.join(sorted(new_config))}): "
              f'url={_config.zabbix_url or "<unset>"}, '
              f"auth={'token' if _config.zabbix_token else 'password' if _config.zabbix_user else 'none'}")


def reset_config() -> None:
    """Drop runtime overrides and the cached session, re-reading the environment"""
    global _config, _auth_token
    _config = ZabbixConfig()
    _auth_token = None


def get_zabbix_api_url() -> str:
    """
    Endpoint for JSON-RPC calls, with /api_jsonrpc.php appended when missing

    Returns:
        URL ending in /api_jsonrpc.php

    Raises:
        ConfigurationError: If no URL is set
    """
    if not _config.zabbix_url:
        raise ConfigurationError('No Zabbix URL: set ZABBIX_URL or pass zabbix_url to set_config()')

    base_url = _config.zabbix_url.rstrip('/')
    if base_url.endswith('/api_jsonrpc.php'):
        return base_url
    return f'{base_url}/api_jsonrpc.php'


def authenticate() -> str:
    """
    Log in with username/password and cache the session token

    Returns:
        Session token returned by user.login

    Raises:
        ConfigurationError: If the user or password is missing
        AuthenticationError: If user.login fails or returns no token
    """
    global _auth_token

    if _auth_token:
        return _auth_token

    if not _config.zabbix_user or not _config.zabbix_password:
        raise ConfigurationError('user.login needs both ZABBIX_USER and ZABBIX_PASSWORD')

    url = get_zabbix_api_url()
    body = {
        'jsonrpc': '2.0',
        'method': 'user.login',
        'params': {
            'username': _config.zabbix_user,
            'password': _config.zabbix_password
        },
        'id': 1
    }

    debug_log(f'user.login as {_config.zabbix_user}')

    try:
        response = requests.post(
            url,
            json=body,
            headers={'Content-Type': 'application/json-rpc'},
            verify=_config.verify_ssl,
            timeout=_config.timeout
        )
    except requests.RequestException as exc:
        raise AuthenticationError(f'Authentication failed: {exc}', cause=exc) from exc

    if not response.ok:
        raise AuthenticationError(f'Authentication failed: {response.status_code} {response.text}')

    try:
        result = response.json()
    except ValueError as exc:
        raise AuthenticationError(f'Authentication failed: invalid JSON response: {exc}', cause=exc) from exc

    if not isinstance(result, dict):
        raise AuthenticationError('Authentication failed: expected a JSON-RPC object')

    if 'error' in result:
        error = result['error']
        if not isinstance(error, dict):
            raise AuthenticationError(f'Authentication failed: {error}')
        raise AuthenticationError(
            f"Authentication failed: {error.get('message', 'Unknown error')} "
            f"(code: {error.get('code', 'unknown')})"
        )

    token = result.get('result')
    if not isinstance(token, str) or not token:
        raise AuthenticationError('Authentication failed: missing result')

    _auth_token = token
    debug_log('Logged in, session token cached')

    return _auth_token


def get_auth() -> str:
    """
    Value for the "auth" member of a request

    Returns:
        API token, or a session token from user.login

    Raises:
        ConfigurationError: If no authentication method is configured
    """
    if _config.zabbix_token:
        return _config.zabbix_token

    if _config.zabbix_user and _config.zabbix_password:
        return authenticate()

    raise ConfigurationError('No credentials: set ZABBIX_TOKEN, or ZABBIX_USER and ZABBIX_PASSWORD')


def debug_log(message: str, *args: Any) -> None:
    """
    Print a [Zabbix API] line when debug output is on

    Args:
        message: Text after the prefix
        *args: Extra values printed after the message
    """
    if _config.debug:
        print(f'[Zabbix API] {message}', *args)


def get_timeout() -> int:
    """Request timeout in seconds"""
    return _config.timeout


def get_verify_ssl() -> bool:
    """Whether TLS certificates are verified"""
    return _config.verify_ssl
