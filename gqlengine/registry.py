import re
from collections import defaultdict
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Set, Union, cast

from graphql.pyutils import Undefined, inspect

from .exceptions import DuplicateTypeError, SchemaValidationError, UnknownTypeError
from .type import (
    GraphQLArgument,
    GraphQLEnumType,
    GraphQLField,
    GraphQLInterfaceType,
    GraphQLNamedType,
    GraphQLObjectType,
    GraphQLType,
    GraphQLUnionType,
    get_named_type,
    is_abstract_type,
    is_enum_type,
    is_input_type,
    is_interface_type,
    is_list_type,
    is_named_type,
    is_non_null_type,
    is_object_type,
    is_output_type,
    is_union_type,
)

NAME_RE = re.compile(r'^[_a-zA-Z][_a-zA-Z0-9]*$')


class TypeRegistry:
    """Every named type of a schema, keyed by name.

    Types are added with :meth:`register` (strict) or :meth:`collect`, which also
    walks every type reachable from the given one. Field, interface and union
    member thunks are evaluated while collecting, so a collected registry never
    evaluates a thunk again.
    """

    def __init__(self) -> None:
        self._types: Dict[str, GraphQLNamedType] = {}
        self._implementations: Optional[Dict[str, List[GraphQLObjectType]]] = None

    @property
    def type_map(self) -> Mapping[str, GraphQLNamedType]:
        return MappingProxyType(self._types)

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def __iter__(self):
        return iter(self._types.values())

    def register(self, type_: GraphQLNamedType) -> GraphQLNamedType:
        if not is_named_type(type_):
            raise TypeError(f'Expected a named type, got {inspect(type_)}.')
        if type_.name in self._types:
            raise DuplicateTypeError(type_.name)
        self._types[type_.name] = type_
        self._implementations = None
        return type_

    def collect(self, type_: GraphQLType) -> None:
        named_type = get_named_type(type_)
        if named_type is None:
            return
        existing = self._types.get(named_type.name)
        if existing is named_type:
            return
        if existing is not None:
            raise DuplicateTypeError(named_type.name)
        self.register(named_type)

        if isinstance(named_type, (GraphQLObjectType, GraphQLInterfaceType)):
            for field in named_type.fields.values():
                self.collect(field.type)
                for arg in field.args.values():
                    self.collect(arg.type)
        if isinstance(named_type, GraphQLObjectType):
            for interface in named_type.interfaces:
                if not isinstance(interface, str):
                    self.collect(interface)
        elif isinstance(named_type, GraphQLUnionType):
            for member in named_type.types:
                if not isinstance(member, str):
                    self.collect(member)

    def resolve_named_type(self, name: str) -> GraphQLNamedType:
        try:
            return self._types[name]
        except KeyError:
            raise UnknownTypeError(name)

    def get_type(self, name: str) -> Optional[GraphQLNamedType]:
        return self._types.get(name)

    @property
    def implementations(self) -> Dict[str, List[GraphQLObjectType]]:
        """Object types by the name of each interface they declare."""
        if self._implementations is None:
            implementations: Dict[str, List[GraphQLObjectType]] = defaultdict(list)
            for type_ in self._types.values():
                if is_object_type(type_):
                    for name in cast(GraphQLObjectType, type_).interface_names:
                        implementations[name].append(cast(GraphQLObjectType, type_))
            self._implementations = dict(implementations)
        return self._implementations

    def get_possible_types(
        self, abstract_type: Union[GraphQLInterfaceType, GraphQLUnionType]
    ) -> List[GraphQLObjectType]:
        if is_union_type(abstract_type):
            members = []
            for name in cast(GraphQLUnionType, abstract_type).type_names:
                member = self._types.get(name)
                if is_object_type(member):
                    members.append(member)
            return members
        return self.implementations.get(abstract_type.name, [])

    def is_possible_type(
        self, abstract_type: Union[GraphQLInterfaceType, GraphQLUnionType], object_type: GraphQLObjectType
    ) -> bool:
        return any(type_ is object_type for type_ in self.get_possible_types(abstract_type))

    def is_sub_type(self, maybe_sub_type: GraphQLType, super_type: GraphQLType) -> bool:
        """Whether a value of ``maybe_sub_type`` is also a valid ``super_type``.

        Non-null is a subtype of nullable, lists are covariant in their item type,
        and object types are subtypes of the abstract types that include them.
        """
        if maybe_sub_type == super_type:
            return True
        if is_non_null_type(super_type):
            if is_non_null_type(maybe_sub_type):
                return self.is_sub_type(maybe_sub_type.of_type, super_type.of_type)
            return False
        if is_non_null_type(maybe_sub_type):
            return self.is_sub_type(maybe_sub_type.of_type, super_type)
        if is_list_type(super_type):
            if is_list_type(maybe_sub_type):
                return self.is_sub_type(maybe_sub_type.of_type, super_type.of_type)
            return False
        if is_list_type(maybe_sub_type):
            return False
        return (
            is_abstract_type(super_type)
            and is_object_type(maybe_sub_type)
            and self.is_possible_type(super_type, maybe_sub_type)
        )

    def validate(self) -> List[SchemaValidationError]:
        """Check the structural rules of every registered type and report all
        failures at once."""
        errors: List[SchemaValidationError] = []
        for type_ in self._types.values():
            errors.extend(self._validate_name(type_.name, type_.name))
            if is_object_type(type_) or is_interface_type(type_):
                errors.extend(self._validate_fields(type_))
            if is_object_type(type_):
                errors.extend(self._validate_interfaces(type_))
            elif is_union_type(type_):
                errors.extend(self._validate_union_members(type_))
            elif is_enum_type(type_):
                errors.extend(self._validate_enum_values(type_))
        return errors

    @staticmethod
    def _validate_name(type_name: str, name: str) -> Iterable[SchemaValidationError]:
        if name.startswith('__'):
            yield SchemaValidationError(
                f"Name '{name}' must not begin with '__', which is reserved.",
                type_name=type_name,
                rule='reserved-name',
            )
        elif not NAME_RE.match(name):
            yield SchemaValidationError(
                f"Names must match /^[_a-zA-Z][_a-zA-Z0-9]*$/ but '{name}' does not.",
                type_name=type_name,
                rule='valid-name',
            )

    def _validate_fields(
        self, type_: Union[GraphQLObjectType, GraphQLInterfaceType]
    ) -> Iterable[SchemaValidationError]:
        if not type_.fields:
            yield SchemaValidationError(
                f'Type {type_.name} must define one or more fields.',
                type_name=type_.name,
                rule='fields-defined',
            )
        for field_name, field in type_.fields.items():
            yield from self._validate_name(type_.name, field_name)
            if not is_output_type(field.type):
                yield SchemaValidationError(
                    f'The type of {type_.name}.{field_name} must be Output Type but got: {inspect(field.type)}.',
                    type_name=type_.name,
                    rule='output-field-type',
                )
            for arg_name, arg in field.args.items():
                yield from self._validate_name(type_.name, arg_name)
                yield from self._validate_argument(type_, field_name, arg_name, arg)

    def _validate_argument(
        self, type_: GraphQLNamedType, field_name: str, arg_name: str, arg: GraphQLArgument
    ) -> Iterable[SchemaValidationError]:
        if not is_input_type(arg.type):
            yield SchemaValidationError(
                f'The type of {type_.name}.{field_name}({arg_name}:) must be Input Type'
                f' but got: {inspect(arg.type)}.',
                type_name=type_.name,
                rule='input-argument-type',
            )
            return
        named_type = get_named_type(arg.type)
        if is_enum_type(named_type) and arg.default_value is not Undefined and arg.default_value is not None:
            default_value = arg.default_value
            defaults = default_value if isinstance(default_value, (list, tuple)) else [default_value]
            values = [enum_value.value for enum_value in cast(GraphQLEnumType, named_type).values.values()]
            for default in defaults:
                if default is not None and default not in values:
                    yield SchemaValidationError(
                        f'Default value {inspect(default)} of {type_.name}.{field_name}({arg_name}:)'
                        f" is not a value of enum '{named_type.name}'.",
                        type_name=type_.name,
                        rule='enum-default-value',
                    )

    def _validate_interfaces(self, type_: GraphQLObjectType) -> Iterable[SchemaValidationError]:
        seen: Set[str] = set()
        for reference in type_.interfaces:
            name = reference if isinstance(reference, str) else reference.name
            interface = self._types.get(name)
            if not is_interface_type(interface) or (not isinstance(reference, str) and interface is not reference):
                yield SchemaValidationError(
                    f'Type {type_.name} must only implement Interface types, it cannot implement {name}.',
                    type_name=type_.name,
                    rule='implements-interface',
                )
                continue
            if name in seen:
                yield SchemaValidationError(
                    f'Type {type_.name} can only implement {name} once.',
                    type_name=type_.name,
                    rule='implements-once',
                )
                continue
            seen.add(name)
            yield from self._validate_type_implements_interface(type_, interface)

    def _validate_type_implements_interface(
        self, type_: GraphQLObjectType, interface: GraphQLInterfaceType
    ) -> Iterable[SchemaValidationError]:
        for field_name, iface_field in interface.fields.items():
            type_field = type_.fields.get(field_name)
            if type_field is None:
                yield SchemaValidationError(
                    f'Interface field {interface.name}.{field_name} expected'
                    f' but {type_.name} does not provide it.',
                    type_name=type_.name,
                    rule='interface-field-provided',
                )
                continue
            if not self.is_sub_type(type_field.type, iface_field.type):
                yield SchemaValidationError(
                    f'Interface field {interface.name}.{field_name} expects type {iface_field.type}'
                    f' but {type_.name}.{field_name} is type {type_field.type}.',
                    type_name=type_.name,
                    rule='interface-field-type',
                )
            yield from self._validate_interface_arguments(type_, interface, field_name, type_field, iface_field)

    @staticmethod
    def _validate_interface_arguments(
        type_: GraphQLObjectType,
        interface: GraphQLInterfaceType,
        field_name: str,
        type_field: GraphQLField,
        iface_field: GraphQLField,
    ) -> Iterable[SchemaValidationError]:
        for arg_name, iface_arg in iface_field.args.items():
            type_arg = type_field.args.get(arg_name)
            if type_arg is None:
                yield SchemaValidationError(
                    f'Interface field argument {interface.name}.{field_name}({arg_name}:) expected'
                    f' but {type_.name}.{field_name} does not provide it.',
                    type_name=type_.name,
                    rule='interface-argument-provided',
                )
            elif type_arg.type != iface_arg.type:
                yield SchemaValidationError(
                    f'Interface field argument {interface.name}.{field_name}({arg_name}:)'
                    f' expects type {iface_arg.type} but {type_.name}.{field_name}({arg_name}:)'
                    f' is type {type_arg.type}.',
                    type_name=type_.name,
                    rule='interface-argument-type',
                )
        for arg_name, type_arg in type_field.args.items():
            if arg_name not in iface_field.args and is_required_argument(type_arg):
                yield SchemaValidationError(
                    f'Object field {type_.name}.{field_name} includes required argument {arg_name}'
                    f' that is missing from the Interface field {interface.name}.{field_name}.',
                    type_name=type_.name,
                    rule='interface-extra-argument-optional',
                )

    def _validate_union_members(self, union: GraphQLUnionType) -> Iterable[SchemaValidationError]:
        if not union.types:
            yield SchemaValidationError(
                f'Union type {union.name} must define one or more member types.',
                type_name=union.name,
                rule='union-members-defined',
            )
        seen: Set[str] = set()
        for reference in union.types:
            name = reference if isinstance(reference, str) else reference.name
            if name in seen:
                yield SchemaValidationError(
                    f'Union type {union.name} can only include type {name} once.',
                    type_name=union.name,
                    rule='union-member-once',
                )
                continue
            seen.add(name)
            member = self._types.get(name)
            if not is_object_type(member) or (not isinstance(reference, str) and member is not reference):
                yield SchemaValidationError(
                    f'Union type {union.name} can only include Object types, it cannot include {name}.',
                    type_name=union.name,
                    rule='union-member-object',
                )

    def _validate_enum_values(self, enum_type: GraphQLEnumType) -> Iterable[SchemaValidationError]:
        if not enum_type.values:
            yield SchemaValidationError(
                f'Enum type {enum_type.name} must define one or more values.',
                type_name=enum_type.name,
                rule='enum-values-defined',
            )
        for value_name in enum_type.values:
            yield from self._validate_name(enum_type.name, value_name)
            if value_name in ('true', 'false', 'null'):
                yield SchemaValidationError(
                    f'Enum type {enum_type.name} cannot include value: {value_name}.',
                    type_name=enum_type.name,
                    rule='enum-value-name',
                )


def is_required_argument(arg: GraphQLArgument) -> bool:
    return is_non_null_type(arg.type) and arg.default_value is Undefined
