"""
JSON-RPC transport for the Zabbix API
"""

import json
import ssl
import urllib.error
import urllib.request
from typing import Any, Dict

from .config import (
    get_auth,
    get_timeout,
    get_verify_ssl,
    get_zabbix_api_url,
    debug_log,
)
from .errors import APIError, TransportError


# Counter for generating unique request IDs
_request_id = 1


def _ssl_context(url: str):
    if not url.lower().startswith("https"):
        return None
    context = ssl.create_default_context()
    if not get_verify_ssl():
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def zabbix_request(method: str, params: Any = None) -> Any:
    """
    Make a request to the Zabbix API

    Args:
        method: Zabbix API method (e.g., 'item.get')
        params: Parameters to pass to the method

    Returns:
        The decoded ``result`` member of the JSON-RPC response

    Raises:
        ConfigurationError: If URL or credentials are missing
        APIError: If Zabbix returns a JSON-RPC error
        TransportError: If the request fails or the response is not valid JSON-RPC

    Example:
        items = zabbix_request('item.get', {'hostids': ['10084'], 'limit': 5})
    """
    global _request_id

    if params is None:
        params = {}

    url = get_zabbix_api_url()
    auth = get_auth()

    request_body: Dict[str, Any] = {
        'jsonrpc': '2.0',
        'method': method,
        'params': params,
        'id': _request_id
    }
    _request_id += 1

    if auth:
        request_body['auth'] = auth

    debug_log(f'Calling {method}', params)

    payload = json.dumps(request_body).encode("utf-8")
    headers = {
        "Content-Type": "application/json-rpc",
    }
    request = urllib.request.Request(url, data=payload, headers=headers, method="POST")

    try:
        with urllib.request.urlopen(request, timeout=get_timeout(), context=_ssl_context(url)) as response:
            resp_data = response.read()
    except urllib.error.HTTPError as exc:
        body = exc.read().decode("utf-8", errors="ignore")
        debug_log(f"{method} failed:", f"{exc.code} {body}")
        raise TransportError(f"Zabbix API request failed ({exc.code}): {body or exc.reason}", cause=exc) from exc
    except urllib.error.URLError as exc:
        debug_log(f"{method} failed:", str(exc))
        raise TransportError(f"Failed to call {method}: {exc.reason}", cause=exc) from exc
    except OSError as exc:
        debug_log(f"{method} failed:", str(exc))
        raise TransportError(f"Failed to call {method}: {exc}", cause=exc) from exc

    try:
        result = json.loads(resp_data)
    except json.JSONDecodeError as exc:
        raise TransportError(f"Invalid JSON response from {method}: {exc}", cause=exc) from exc

    if not isinstance(result, dict):
        raise TransportError(f"Invalid JSON-RPC response from {method}: expected an object")

    if "error" in result:
        error = result["error"]
        debug_log(f"{method} failed:", error)
        if not isinstance(error, dict):
            raise APIError('unknown', 'Unknown error', error)
        raise APIError(
            error.get('code', 'unknown'),
            error.get('message', 'Unknown error'),
            error.get('data'),
        )

    if "result" not in result:
        raise TransportError(f"Invalid JSON-RPC response from {method}: missing result")

    debug_log(f"{method} completed successfully")
    return result["result"]
