import json
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from graphql.pyutils import Undefined

from .scalars import specified_scalar_types
from .type import (
    GraphQLArgument,
    GraphQLEnumType,
    GraphQLField,
    GraphQLInterfaceType,
    GraphQLNamedType,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLType,
    GraphQLUnionType,
    get_named_type,
    is_enum_type,
    is_list_type,
    is_non_null_type,
)

if TYPE_CHECKING:
    from .schema import Schema

# order types are printed in
KIND_ORDER = (GraphQLScalarType, GraphQLEnumType, GraphQLInterfaceType, GraphQLObjectType, GraphQLUnionType)


def print_schema(schema: 'Schema') -> str:
    types = [
        type_
        for type_ in schema.type_map.values()
        if type_ not in specified_scalar_types and type_ is not schema.query_type and type_ is not schema.mutation_type
    ]
    types.sort(key=lambda type_: next(i for i, kind in enumerate(KIND_ORDER) if isinstance(type_, kind)))
    roots = [schema.query_type] + ([schema.mutation_type] if schema.mutation_type else [])
    return '\n\n'.join(print_type(type_) for type_ in types + roots) + '\n'


def print_type(type_: GraphQLNamedType) -> str:
    if isinstance(type_, GraphQLScalarType):
        return print_description(type_.description) + f'scalar {type_.name}'
    if isinstance(type_, GraphQLEnumType):
        return print_enum(type_)
    if isinstance(type_, GraphQLObjectType):
        implements = f" implements {' & '.join(type_.interface_names)}" if type_.interfaces else ''
        return print_description(type_.description) + f'type {type_.name}{implements}' + print_fields(type_.fields)
    if isinstance(type_, GraphQLInterfaceType):
        return print_description(type_.description) + f'interface {type_.name}' + print_fields(type_.fields)
    if isinstance(type_, GraphQLUnionType):
        members = ' | '.join(type_.type_names)
        return print_description(type_.description) + f'union {type_.name} = {members}'
    raise TypeError(f'Unexpected type: {type_!r}.')


def print_enum(type_: GraphQLEnumType) -> str:
    values = [
        print_description(value.description, '  ') + f'  {name}' + print_deprecated(value.deprecation_reason)
        for name, value in type_.values.items()
    ]
    return print_description(type_.description) + f'enum {type_.name}' + print_block(values)


def print_fields(fields: Dict[str, GraphQLField]) -> str:
    lines = [
        print_description(field.description, '  ')
        + f'  {name}{print_args(field.args)}: {field.type}'
        + print_deprecated(field.deprecation_reason)
        for name, field in fields.items()
    ]
    return print_block(lines)


def print_args(args: Dict[str, GraphQLArgument]) -> str:
    if not args:
        return ''
    return '(' + ', '.join(f'{name}: {arg.type}{print_default(arg)}' for name, arg in args.items()) + ')'


def print_default(arg: GraphQLArgument) -> str:
    if arg.default_value is Undefined:
        return ''
    return f' = {print_value(arg.default_value, arg.type)}'


def print_value(value: Any, type_: GraphQLType) -> str:
    """Literal for an internal value of the given input type."""
    if value is None:
        return 'null'
    if is_non_null_type(type_):
        return print_value(value, type_.of_type)
    if is_list_type(type_):
        if isinstance(value, (list, tuple)):
            return '[' + ', '.join(print_value(item, type_.of_type) for item in value) + ']'
        return print_value(value, type_.of_type)
    named_type = get_named_type(type_)
    if is_enum_type(named_type):
        return named_type.serialize(value)
    serialized = named_type.serialize(value) if named_type else value
    if isinstance(serialized, bool):
        return 'true' if serialized else 'false'
    return json.dumps(serialized)


def print_deprecated(reason: Optional[str]) -> str:
    if reason is None:
        return ''
    return f' @deprecated(reason: {json.dumps(reason)})'


def print_description(description: Optional[str], indent: str = '') -> str:
    if not description:
        return ''
    if '\n' not in description and len(description) < 70:
        return f'{indent}{json.dumps(description)}\n'
    lines = description.replace('"""', '\\"""').splitlines()
    return f'{indent}"""\n' + ''.join(f'{indent}{line}\n' for line in lines) + f'{indent}"""\n'


def print_block(items: List[str]) -> str:
    return ' {\n' + '\n'.join(items) + '\n}' if items else ''
