from typing import Any, Collection, List, Optional, Union

from graphql import GraphQLError, GraphQLSyntaxError


class GraphQLExtensionError(GraphQLError):
    code = 'GRAPHQL_ERROR'
    message = 'graphql error'

    def __init__(
        self,
        message: str = None,
        path: Optional[Collection[Union[str, int]]] = None,
        original_error: Optional[Exception] = None,
        **kwargs: Any,
    ):
        message = message or self.message
        extensions = {'code': self.code}
        if kwargs:
            extensions['exception'] = kwargs
        super().__init__(message, path=path, original_error=original_error, extensions=extensions)


class SchemaValidationError(GraphQLExtensionError):
    code = 'SCHEMA_VALIDATION_ERROR'
    message = 'invalid schema'

    def __init__(self, message: str = None, type_name: str = None, rule: str = None):
        self.type_name = type_name
        self.rule = rule
        super().__init__(message, type_name=type_name, rule=rule)


class DuplicateTypeError(SchemaValidationError):
    code = 'DUPLICATE_TYPE'

    def __init__(self, type_name: str):
        super().__init__(
            f"Schema must contain uniquely named types but contains multiple types named '{type_name}'.",
            type_name=type_name,
            rule='unique-type-names',
        )


class UnknownTypeError(GraphQLExtensionError):
    code = 'UNKNOWN_TYPE'

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Unknown type '{type_name}'.")


class InvalidSchemaError(TypeError):
    """Raised once by schema construction with every validation failure."""

    def __init__(self, errors: List[SchemaValidationError]):
        self.errors = errors
        super().__init__('\n\n'.join(error.message for error in errors))


class InvalidSelectionError(GraphQLExtensionError):
    code = 'INVALID_SELECTION'
    message = 'invalid selection'


class UnknownFieldError(GraphQLExtensionError):
    code = 'UNKNOWN_FIELD'

    def __init__(self, type_name: str, field_name: str):
        self.type_name = type_name
        self.field_name = field_name
        super().__init__(f"Cannot query field '{field_name}' on type '{type_name}'.")


class UnknownArgumentError(GraphQLExtensionError):
    code = 'UNKNOWN_ARGUMENT'


class MissingRequiredArgumentError(GraphQLExtensionError):
    code = 'MISSING_REQUIRED_ARGUMENT'


class UnknownEnumValueError(GraphQLExtensionError):
    code = 'UNKNOWN_ENUM_VALUE'


class NullArgumentError(GraphQLExtensionError):
    code = 'NULL_ARGUMENT'


class InvalidArgumentValueError(GraphQLExtensionError):
    code = 'INVALID_ARGUMENT_VALUE'


class AbstractTypeResolutionError(GraphQLExtensionError):
    code = 'ABSTRACT_TYPE_RESOLUTION_ERROR'


class NonNullViolationError(GraphQLExtensionError):
    code = 'NON_NULL_VIOLATION'


class SerializationError(GraphQLExtensionError):
    code = 'SERIALIZATION_ERROR'


RESOLVER_ERROR = 'RESOLVER_ERROR'
SYNTAX_ERROR = 'SYNTAX_ERROR'


def error_kind(error: GraphQLError) -> str:
    """Kind of a recorded error: the code of the engine error behind it, or
    RESOLVER_ERROR for anything a resolver raised on its own."""
    if isinstance(error, GraphQLSyntaxError):
        return SYNTAX_ERROR
    for candidate in (error, error.original_error):
        code = getattr(candidate, 'code', None)
        if isinstance(code, str):
            return code
    return RESOLVER_ERROR


def format_error(error: GraphQLError) -> dict:
    return {'message': error.message, 'path': error.path, 'errorKind': error_kind(error)}
