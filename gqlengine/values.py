from typing import Any, Dict, Mapping, Optional

from graphql.pyutils import Undefined, inspect, is_iterable

from .exceptions import (
    GraphQLExtensionError,
    InvalidArgumentValueError,
    MissingRequiredArgumentError,
    NullArgumentError,
    UnknownArgumentError,
)
from .selection import Variable
from .type import (
    GraphQLField,
    GraphQLInputType,
    is_enum_type,
    is_list_type,
    is_non_null_type,
    is_scalar_type,
)


def coerce_argument_values(
    field_name: str,
    field_def: GraphQLField,
    arguments: Mapping[str, Any],
    variable_values: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Coerce the raw arguments of one field against its declared arguments.

    Variables are replaced by their value, or treated as omitted when the request
    did not provide one and the variable has no default. Omitted arguments take
    their declared default, which is an internal value and is not coerced again.
    """
    unknown = [name for name in arguments if name not in field_def.args]
    if unknown:
        raise UnknownArgumentError(
            f"Unknown argument '{unknown[0]}' on field '{field_name}'.", argument=unknown[0]
        )

    coerced_values: Dict[str, Any] = {}
    for name, arg_def in field_def.args.items():
        value = arguments.get(name, Undefined)
        if isinstance(value, Variable):
            value = get_variable_value(value, variable_values)

        if value is Undefined:
            if arg_def.default_value is not Undefined:
                coerced_values[name] = arg_def.default_value
            elif is_non_null_type(arg_def.type):
                raise MissingRequiredArgumentError(
                    f"Argument '{name}' of required type '{arg_def.type}' was not provided"
                    f" on field '{field_name}'.",
                    argument=name,
                )
            continue

        coerced_values[name] = coerce_input_value(value, arg_def.type, name, variable_values)
    return coerced_values


def get_variable_value(variable: Variable, variable_values: Optional[Mapping[str, Any]]) -> Any:
    if variable_values and variable.name in variable_values:
        return variable_values[variable.name]
    return variable.default_value


def coerce_input_value(
    value: Any,
    type_: GraphQLInputType,
    argument: str,
    variable_values: Optional[Mapping[str, Any]] = None,
) -> Any:
    """Coerce one argument value: scalars through ``parse_value``, enums by name,
    lists item by item (a single value becomes a one item list)."""
    if isinstance(value, Variable):
        # variables nested in list literals
        value = get_variable_value(value, variable_values)
        if value is Undefined:
            value = None

    if is_non_null_type(type_):
        if value is None:
            raise NullArgumentError(
                f"Argument '{argument}' of non-null type '{type_}' must not be null.", argument=argument
            )
        return coerce_input_value(value, type_.of_type, argument, variable_values)

    if value is None:
        return None

    if is_list_type(type_):
        item_type = type_.of_type
        if is_iterable(value):
            return [coerce_input_value(item, item_type, argument, variable_values) for item in value]
        return [coerce_input_value(value, item_type, argument, variable_values)]

    if is_enum_type(type_):
        # raises UnknownEnumValueError
        return type_.parse_value(value)

    if is_scalar_type(type_):
        try:
            parse_result = type_.parse_value(value)
        except GraphQLExtensionError:
            raise
        except (OverflowError, TypeError, ValueError) as error:
            raise InvalidArgumentValueError(
                f"Argument '{argument}' has invalid value {inspect(value)}: {error}",
                original_error=error,
                argument=argument,
            )
        if parse_result is Undefined:
            raise InvalidArgumentValueError(
                f"Argument '{argument}' has invalid value {inspect(value)}.", argument=argument
            )
        return parse_result

    raise TypeError(f"Unexpected input type: {inspect(type_)}.")
