import re
from importlib import import_module
from inspect import isawaitable
from typing import Any

from graphql import parse


def gql(value: str) -> str:
    parse(value)
    return value


# Adapted from this response in Stackoverflow
# http://stackoverflow.com/a/19053800/1072990
def to_camel_case(snake_str: str) -> str:
    components = snake_str.split("_")
    # We capitalize the first letter of each component except the first one
    # with the 'capitalize' method and join them together.
    return components[0] + "".join(x.capitalize() if x else "_" for x in components[1:])


# From this response in Stackoverflow
# http://stackoverflow.com/a/1176023/1072990
def to_snake_case(name: str) -> str:
    s1 = re.sub(r'(.)([A-Z][a-z]+)', r'\1_\2', name)
    return re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', s1).lower()


def recursive_to_snake_case(d: Any) -> Any:
    if isinstance(d, list):
        return [recursive_to_snake_case(v) for v in d]
    if not isinstance(d, dict):
        return d

    _d = {}
    for k, v in d.items():
        _d[to_snake_case(k)] = recursive_to_snake_case(v)
    return _d


async def execute_async_function(func, *args, **kwargs):
    result = func(*args, **kwargs)
    if isawaitable(result):
        result = await result
    return result


def import_string(path: str) -> Any:
    """Import ``package.module:attribute`` (or ``package.module.attribute``)."""
    if ':' in path:
        module_path, attr = path.split(':', 1)
    else:
        module_path, _, attr = path.rpartition('.')
    if not module_path or not attr:
        raise ImportError(f"'{path}' is not a valid import path, expected 'module:attribute'.")
    module = import_module(module_path)
    try:
        return getattr(module, attr)
    except AttributeError:
        raise ImportError(f"Module '{module_path}' has no attribute '{attr}'.")
