"""
Type definitions shared by the Zabbix client
Based on the Zabbix API reference
"""

from enum import IntEnum
from typing import TypedDict, Union, List, Dict, Any


# Output format can be "extend" or a list of field names
OutputFormat = Union[str, List[str]]

# Search and filter criteria
SearchCriteria = Dict[str, str]
FilterCriteria = Dict[str, Any]


class GetParameters(TypedDict, total=False):
    """Common parameters supported by all get methods"""
    output: OutputFormat
    search: SearchCriteria
    filter: FilterCriteria
    searchByAny: bool
    searchWildcardsEnabled: bool
    startSearch: bool
    excludeSearch: bool
    selectHosts: OutputFormat
    sortfield: Union[str, List[str]]
    sortorder: Union[str, List[str]]
    limit: int
    countOutput: bool
    editable: bool
    preservekeys: bool


class ValueType(IntEnum):
    """Type of information stored by an item (value_type)"""
    FLOAT = 0
    CHARACTER = 1
    LOG = 2
    UNSIGNED = 3
    TEXT = 4
