"""
Exception types for the Zabbix client

Every exception carries a ``kind`` tag so callers can branch on the failure
without string matching:

    from zabbix_client import get_items, NotFoundError, DecodeError

    try:
        items = get_items({'hostids': ['10084']})
    except NotFoundError:
        items = []
    except DecodeError as exc:
        print(f'Bad item at index {exc.index}: {exc.field}')
"""

from typing import Any, Optional


class ZabbixError(Exception):
    """Base class for all Zabbix client errors"""
    kind = 'zabbix'


class ConfigurationError(ZabbixError, ValueError):
    """Raised when the client is missing a URL or credentials"""
    kind = 'configuration'


class FetchError(ZabbixError):
    """Base class for errors raised while fetching objects from the API"""
    kind = 'fetch'


class TransportError(FetchError):
    """The request could not be completed or the response was unusable"""
    kind = 'transport'

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class APIError(TransportError):
    """The Zabbix API answered with a JSON-RPC error member"""
    kind = 'api'

    def __init__(self, code: Any, message: str, data: Any = None):
        self.code = code
        self.data = data
        super().__init__(
            f"Zabbix API error: {message} (code: {code}, data: {data if data is not None else 'none'})"
        )
        self.message = message


class AuthenticationError(TransportError):
    """user.login was rejected or could not be reached"""
    kind = 'auth'


class NotFoundError(FetchError):
    """The search returned no results"""
    kind = 'not_found'

    def __init__(self, method: str = ''):
        self.method = method
        super().__init__('No results were found matching the given search parameters')


class DecodeError(FetchError):
    """
    A wire object could not be converted into its typed form

    Attributes:
        field: Attribute name of the typed record that failed to decode
        index: Position of the failing object when decoding a collection
        cause: Underlying parse error (a DecodeError when ``index`` is set)
    """
    kind = 'decode'

    def __init__(self, field: Optional[str] = None, index: Optional[int] = None,
                 cause: Optional[BaseException] = None):
        self.field = field
        self.index = index
        self.cause = cause
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.index is not None:
            return f'Error decoding item {self.index}: {self.cause}'
        if self.field is None:
            return f'Error decoding item: {self.cause}'
        return f'Error parsing {self.field}: {self.cause}'
