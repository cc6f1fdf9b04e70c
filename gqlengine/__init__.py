from .exceptions import (  # noqa
    AbstractTypeResolutionError,
    DuplicateTypeError,
    GraphQLExtensionError,
    InvalidArgumentValueError,
    InvalidSchemaError,
    InvalidSelectionError,
    MissingRequiredArgumentError,
    NonNullViolationError,
    NullArgumentError,
    SchemaValidationError,
    SerializationError,
    UnknownArgumentError,
    UnknownEnumValueError,
    UnknownFieldError,
    UnknownTypeError,
    error_kind,
    format_error,
)
from .execute import ExecutionContext, ExecutionResult, execute, execute_sync, graphql, graphql_sync  # noqa
from .middleware import MiddlewareManager  # noqa
from .parser import parse_operation  # noqa
from .printer import print_schema, print_type  # noqa
from .registry import TypeRegistry  # noqa
from .resolver import field_resolver, mutate, query, type_resolver  # noqa
from .scalars import (  # noqa
    GraphQLBoolean,
    GraphQLFloat,
    GraphQLID,
    GraphQLInt,
    GraphQLJSONString,
    GraphQLString,
    GraphQLTimestamp,
)
from .schema import Schema, make_schema  # noqa
from .selection import Operation, Selection, Variable  # noqa
from .type import (  # noqa
    GraphQLArgument,
    GraphQLEnumType,
    GraphQLEnumValue,
    GraphQLField,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLUnionType,
    ResolveInfo,
)
from .utils import gql  # noqa

__version__ = '0.1.0'
