from enum import Enum
from functools import cached_property
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Sequence,
    Type,
    Union,
    cast,
)

from graphql.pyutils import Path, Undefined, inspect

from .exceptions import SerializationError, UnknownEnumValueError

Thunk = Union[Callable[[], Any], Any]


def resolve_thunk(thunk: Thunk) -> Any:
    return thunk() if callable(thunk) else thunk


class GraphQLType:
    """Base class for every type descriptor."""


class GraphQLNamedType(GraphQLType):
    name: str
    description: Optional[str]

    def __init__(self, name: str, description: Optional[str] = None):
        if not isinstance(name, str) or not name:
            raise TypeError('Must provide name.')
        self.name = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.name!r}>'


class GraphQLScalarType(GraphQLNamedType):
    """Leaf type.

    ``serialize`` turns an internal value into its result literal, ``parse_value``
    turns an argument literal into an internal value. Both raise on values outside
    the scalar's domain.
    """

    def __init__(
        self,
        name: str,
        serialize: Callable[[Any], Any] = None,
        parse_value: Callable[[Any], Any] = None,
        description: Optional[str] = None,
    ):
        super().__init__(name, description)
        if serialize is not None:
            self.serialize = serialize
        if parse_value is not None:
            self.parse_value = parse_value

    @staticmethod
    def serialize(value: Any) -> Any:
        return value

    @staticmethod
    def parse_value(value: Any) -> Any:
        return value


class GraphQLEnumValue(NamedTuple):
    value: Any = None
    description: Optional[str] = None
    deprecation_reason: Optional[str] = None


EnumValues = Union[Mapping[str, Any], Type[Enum]]


class GraphQLEnumType(GraphQLNamedType):
    """Leaf type mapping symbolic names to internal values.

    ``values`` may be a mapping of names to :class:`GraphQLEnumValue` or to raw
    internal values, or a Python ``Enum`` class whose members become the internal
    values.
    """

    values: Dict[str, GraphQLEnumValue]

    def __init__(self, name: str, values: EnumValues, description: Optional[str] = None):
        super().__init__(name, description)
        if isinstance(values, type) and issubclass(values, Enum):
            values = {member.name: member for member in values}
        if not isinstance(values, Mapping):
            raise TypeError(f'{name} values must be a mapping or an Enum class.')
        self.values = {
            key: value if isinstance(value, GraphQLEnumValue) else GraphQLEnumValue(value)
            for key, value in values.items()
        }

    @cached_property
    def _value_lookup(self) -> Dict[Any, str]:
        lookup: Dict[Any, str] = {}
        for name, enum_value in self.values.items():
            try:
                lookup.setdefault(enum_value.value, name)
            except TypeError:
                pass  # unhashable
        return lookup

    def serialize(self, value: Any) -> str:
        try:
            return self._value_lookup[value]
        except (KeyError, TypeError):
            pass
        for name, enum_value in self.values.items():
            if enum_value.value == value:
                return name
        if isinstance(value, Enum) and value.name in self.values:
            return value.name
        raise SerializationError(f"Enum '{self.name}' cannot represent value: {inspect(value)}")

    def parse_value(self, name: Any) -> Any:
        if isinstance(name, str) and name in self.values:
            return self.values[name].value
        raise UnknownEnumValueError(f"Value {inspect(name)} does not exist in '{self.name}' enum.")


class GraphQLArgument:
    def __init__(
        self,
        type_: 'GraphQLInputType',
        default_value: Any = Undefined,
        description: Optional[str] = None,
    ):
        self.type = type_
        self.default_value = default_value
        self.description = description


class GraphQLField:
    """A field of an object or interface type.

    ``resolve`` is called as ``resolve(source, info, **args)`` and may return a
    value or an awaitable. Without one, the execution's default field resolver
    looks the field name up on the source value.
    """

    def __init__(
        self,
        type_: 'GraphQLOutputType',
        args: Optional[Mapping[str, Union[GraphQLArgument, 'GraphQLInputType']]] = None,
        resolve: Optional[Callable[..., Any]] = None,
        description: Optional[str] = None,
        deprecation_reason: Optional[str] = None,
    ):
        self.type = type_
        self.args = {
            name: arg if isinstance(arg, GraphQLArgument) else GraphQLArgument(arg)
            for name, arg in (args or {}).items()
        }
        self.resolve = resolve
        self.description = description
        self.deprecation_reason = deprecation_reason

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.type}>'


FieldsThunk = Union[Callable[[], Mapping[str, Any]], Mapping[str, Any]]


def _define_fields(type_name: str, fields: FieldsThunk) -> Dict[str, GraphQLField]:
    fields = resolve_thunk(fields)
    if not isinstance(fields, Mapping):
        raise TypeError(f'{type_name} fields must be a mapping or a function which returns one.')
    return {
        name: field if isinstance(field, GraphQLField) else GraphQLField(field)
        for name, field in fields.items()
    }


class GraphQLObjectType(GraphQLNamedType):
    """Concrete composite type.

    ``fields`` and ``interfaces`` may be given as zero-argument callables so types
    can refer to each other; each is evaluated once, on first access. Interfaces
    may be given by descriptor or by name.
    """

    def __init__(
        self,
        name: str,
        fields: FieldsThunk,
        interfaces: Union[Callable[[], Sequence[Any]], Sequence[Any], None] = None,
        is_type_of: Optional[Callable[[Any, 'ResolveInfo'], bool]] = None,
        description: Optional[str] = None,
    ):
        super().__init__(name, description)
        self._fields = fields
        self._interfaces = interfaces
        self.is_type_of = is_type_of

    @cached_property
    def fields(self) -> Dict[str, GraphQLField]:
        return _define_fields(self.name, self._fields)

    @cached_property
    def interfaces(self) -> List[Union['GraphQLInterfaceType', str]]:
        return list(resolve_thunk(self._interfaces) or [])

    @property
    def interface_names(self) -> List[str]:
        return [interface if isinstance(interface, str) else interface.name for interface in self.interfaces]


class GraphQLInterfaceType(GraphQLNamedType):
    def __init__(
        self,
        name: str,
        fields: FieldsThunk,
        resolve_type: Optional[Callable[..., Any]] = None,
        description: Optional[str] = None,
    ):
        super().__init__(name, description)
        self._fields = fields
        self.resolve_type = resolve_type

    @cached_property
    def fields(self) -> Dict[str, GraphQLField]:
        return _define_fields(self.name, self._fields)


class GraphQLUnionType(GraphQLNamedType):
    def __init__(
        self,
        name: str,
        types: Union[Callable[[], Sequence[Any]], Sequence[Any]],
        resolve_type: Optional[Callable[..., Any]] = None,
        description: Optional[str] = None,
    ):
        super().__init__(name, description)
        self._types = types
        self.resolve_type = resolve_type

    @cached_property
    def types(self) -> List[Union[GraphQLObjectType, str]]:
        return list(resolve_thunk(self._types) or [])

    @property
    def type_names(self) -> List[str]:
        return [type_ if isinstance(type_, str) else type_.name for type_ in self.types]


class GraphQLWrappingType(GraphQLType):
    def __init__(self, type_: GraphQLType):
        if not isinstance(type_, GraphQLType):
            raise TypeError(f'Can only wrap a type descriptor, got {inspect(type_)}.')
        self.of_type = type_

    def __eq__(self, other: Any) -> bool:
        return self.__class__ is other.__class__ and self.of_type == other.of_type

    def __hash__(self) -> int:
        return hash((self.__class__, self.of_type))


class GraphQLList(GraphQLWrappingType):
    def __str__(self) -> str:
        return f'[{self.of_type}]'


class GraphQLNonNull(GraphQLWrappingType):
    def __init__(self, type_: GraphQLType):
        super().__init__(type_)
        if isinstance(type_, GraphQLNonNull):
            raise TypeError(f'Can only create NonNull of a nullable type, got {type_}.')

    def __str__(self) -> str:
        return f'{self.of_type}!'


GraphQLLeafType = Union[GraphQLScalarType, GraphQLEnumType]
GraphQLAbstractType = Union[GraphQLInterfaceType, GraphQLUnionType]
GraphQLCompositeType = Union[GraphQLObjectType, GraphQLInterfaceType, GraphQLUnionType]
GraphQLInputType = GraphQLType
GraphQLOutputType = GraphQLType


def is_scalar_type(type_: Any) -> bool:
    return isinstance(type_, GraphQLScalarType)


def is_enum_type(type_: Any) -> bool:
    return isinstance(type_, GraphQLEnumType)


def is_object_type(type_: Any) -> bool:
    return isinstance(type_, GraphQLObjectType)


def is_interface_type(type_: Any) -> bool:
    return isinstance(type_, GraphQLInterfaceType)


def is_union_type(type_: Any) -> bool:
    return isinstance(type_, GraphQLUnionType)


def is_list_type(type_: Any) -> bool:
    return isinstance(type_, GraphQLList)


def is_non_null_type(type_: Any) -> bool:
    return isinstance(type_, GraphQLNonNull)


def is_wrapping_type(type_: Any) -> bool:
    return isinstance(type_, GraphQLWrappingType)


def is_named_type(type_: Any) -> bool:
    return isinstance(type_, GraphQLNamedType)


def is_leaf_type(type_: Any) -> bool:
    return isinstance(type_, (GraphQLScalarType, GraphQLEnumType))


def is_abstract_type(type_: Any) -> bool:
    return isinstance(type_, (GraphQLInterfaceType, GraphQLUnionType))


def is_composite_type(type_: Any) -> bool:
    return isinstance(type_, (GraphQLObjectType, GraphQLInterfaceType, GraphQLUnionType))


def get_named_type(type_: Optional[GraphQLType]) -> Optional[GraphQLNamedType]:
    while is_wrapping_type(type_):
        type_ = cast(GraphQLWrappingType, type_).of_type
    return cast(Optional[GraphQLNamedType], type_)


def get_nullable_type(type_: GraphQLType) -> GraphQLType:
    if is_non_null_type(type_):
        return cast(GraphQLNonNull, type_).of_type
    return type_


def is_input_type(type_: Any) -> bool:
    return is_leaf_type(get_named_type(type_))


def is_output_type(type_: Any) -> bool:
    return is_named_type(get_named_type(type_))


class ResolveInfo(NamedTuple):
    """What a resolver knows about the position it is resolving."""

    field_name: str
    field_selections: List[Any]
    return_type: GraphQLOutputType
    parent_type: GraphQLObjectType
    path: Path
    schema: Any
    root_value: Any
    context: Any
    variable_values: Dict[str, Any]
