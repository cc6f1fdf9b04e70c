import json
from datetime import datetime, timezone
from math import isfinite
from numbers import Number
from typing import Any

from graphql.pyutils import inspect

from .type import GraphQLScalarType

# 32-bit signed integer range
MAX_INT = 2147483647
MIN_INT = -2147483648


def serialize_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int) or (isinstance(value, float) and isfinite(value)):
        return str(value)
    raise TypeError(f'String cannot represent value: {inspect(value)}')


def coerce_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f'String cannot represent a non string value: {inspect(value)}')
    return value


def serialize_int(value: Any) -> int:
    if isinstance(value, bool):
        return 1 if value else 0
    try:
        num = int(value)
        float_value = float(value)
    except (OverflowError, ValueError, TypeError):
        raise TypeError(f'Int cannot represent non-integer value: {inspect(value)}')
    if num != float_value:
        raise TypeError(f'Int cannot represent non-integer value: {inspect(value)}')
    if not MIN_INT <= num <= MAX_INT:
        raise TypeError(f'Int cannot represent non 32-bit signed integer value: {inspect(value)}')
    return num


def coerce_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f'Int cannot represent non-integer value: {inspect(value)}')
    if isinstance(value, float) and not isfinite(value) or int(value) != value:
        raise TypeError(f'Int cannot represent non-integer value: {inspect(value)}')
    if not MIN_INT <= value <= MAX_INT:
        raise TypeError(f'Int cannot represent non 32-bit signed integer value: {inspect(value)}')
    return int(value)


def serialize_float(value: Any) -> float:
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    try:
        num = float(value)
    except (ValueError, TypeError):
        raise TypeError(f'Float cannot represent non numeric value: {inspect(value)}')
    if not isfinite(num):
        raise TypeError(f'Float cannot represent non numeric value: {inspect(value)}')
    return num


def coerce_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not isfinite(value):
        raise TypeError(f'Float cannot represent non numeric value: {inspect(value)}')
    return float(value)


def serialize_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, Number) and isfinite(value):
        return bool(value)
    raise TypeError(f'Boolean cannot represent a non boolean value: {inspect(value)}')


def coerce_boolean(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f'Boolean cannot represent a non boolean value: {inspect(value)}')
    return value


def serialize_id(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise TypeError(f'ID cannot represent value: {inspect(value)}')


def coerce_id(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise TypeError(f'ID cannot represent value: {inspect(value)}')


GraphQLString = GraphQLScalarType(
    name='String',
    description='The `String` scalar type represents textual data.',
    serialize=serialize_string,
    parse_value=coerce_string,
)

GraphQLInt = GraphQLScalarType(
    name='Int',
    description='The `Int` scalar type represents non-fractional signed whole numeric values'
    ' between -(2^31) and 2^31 - 1.',
    serialize=serialize_int,
    parse_value=coerce_int,
)

GraphQLFloat = GraphQLScalarType(
    name='Float',
    description='The `Float` scalar type represents signed double-precision fractional values.',
    serialize=serialize_float,
    parse_value=coerce_float,
)

GraphQLBoolean = GraphQLScalarType(
    name='Boolean',
    description='The `Boolean` scalar type represents `true` or `false`.',
    serialize=serialize_boolean,
    parse_value=coerce_boolean,
)

GraphQLID = GraphQLScalarType(
    name='ID',
    description='The `ID` scalar type represents a unique identifier.',
    serialize=serialize_id,
    parse_value=coerce_id,
)


def serialize_json(value: Any) -> str:
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def coerce_json(value: Any) -> Any:
    if not isinstance(value, str):
        raise TypeError(f'JSONString cannot represent non string value: {inspect(value)}')
    return json.loads(value)


GraphQLJSONString = GraphQLScalarType(
    name='JSONString',
    description='The `JSONString` represents a json string.',
    serialize=serialize_json,
    parse_value=coerce_json,
)


def serialize_timestamp(value: Any) -> int:
    if isinstance(value, Number) and not isinstance(value, bool):
        return int(value)
    if isinstance(value, str) and value.isdigit():
        return int(value)
    if not isinstance(value, datetime):
        raise TypeError(f'Timestamp cannot represent non datetime value: {inspect(value)}')
    return int(value.timestamp() * 1000)


def coerce_timestamp(value: Any) -> datetime:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f'Timestamp cannot represent non datetime value: {inspect(value)}')
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


GraphQLTimestamp = GraphQLScalarType(
    name='Timestamp',
    description='The `Timestamp` represents a millisecond unix timestamp with time zone.',
    serialize=serialize_timestamp,
    parse_value=coerce_timestamp,
)

specified_scalar_types = (GraphQLString, GraphQLInt, GraphQLFloat, GraphQLBoolean, GraphQLID)
