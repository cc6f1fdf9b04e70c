from typing import Collection, List, Mapping, Optional, Union

from .exceptions import InvalidSchemaError, SchemaValidationError
from .printer import print_schema
from .registry import TypeRegistry
from .resolver import register_resolvers
from .type import (
    GraphQLInterfaceType,
    GraphQLNamedType,
    GraphQLObjectType,
    GraphQLType,
    GraphQLUnionType,
    is_object_type,
)


class Schema:
    """A closed set of types with a query root and an optional mutation root.

    Construction collects every type reachable from the roots and ``types`` into a
    :class:`TypeRegistry`, validates it and raises :class:`InvalidSchemaError` with
    every failure found. The schema is read-only afterwards and can be shared by
    concurrent executions.
    """

    def __init__(
        self,
        query: GraphQLObjectType,
        mutation: Optional[GraphQLObjectType] = None,
        types: Optional[Collection[GraphQLNamedType]] = None,
        assume_valid: bool = False,
    ):
        self.query_type = query
        self.mutation_type = mutation

        registry = TypeRegistry()
        for type_ in (query, mutation, *(types or ())):
            if type_ is not None:
                registry.collect(type_)
        self._registry = registry

        if not assume_valid:
            errors = self.validate()
            if errors:
                raise InvalidSchemaError(errors)

    def validate(self) -> List[SchemaValidationError]:
        errors: List[SchemaValidationError] = []
        if not is_object_type(self.query_type):
            errors.append(
                SchemaValidationError(
                    f'Query root type must be Object type, it cannot be {self.query_type}.',
                    type_name=str(self.query_type),
                    rule='query-root-type',
                )
            )
        if self.mutation_type is not None and not is_object_type(self.mutation_type):
            errors.append(
                SchemaValidationError(
                    f'Mutation root type must be Object type if provided, it cannot be {self.mutation_type}.',
                    type_name=str(self.mutation_type),
                    rule='mutation-root-type',
                )
            )
        errors.extend(self._registry.validate())
        return errors

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @property
    def type_map(self) -> Mapping[str, GraphQLNamedType]:
        return self._registry.type_map

    def get_type(self, name: str) -> Optional[GraphQLNamedType]:
        return self._registry.get_type(name)

    def resolve_named_type(self, name: str) -> GraphQLNamedType:
        return self._registry.resolve_named_type(name)

    def get_possible_types(
        self, abstract_type: Union[GraphQLInterfaceType, GraphQLUnionType]
    ) -> List[GraphQLObjectType]:
        return self._registry.get_possible_types(abstract_type)

    def is_possible_type(
        self, abstract_type: Union[GraphQLInterfaceType, GraphQLUnionType], object_type: GraphQLObjectType
    ) -> bool:
        return self._registry.is_possible_type(abstract_type, object_type)

    def is_sub_type(self, maybe_sub_type: GraphQLType, super_type: GraphQLType) -> bool:
        return self._registry.is_sub_type(maybe_sub_type, super_type)

    def __str__(self) -> str:
        return print_schema(self)


def make_schema(
    query: GraphQLObjectType,
    mutation: Optional[GraphQLObjectType] = None,
    types: Optional[Collection[GraphQLNamedType]] = None,
    assume_valid: bool = False,
) -> Schema:
    """Build a schema, binding the resolvers registered with ``field_resolver`` and
    ``type_resolver`` to the collected types before it is validated."""
    schema = Schema(query, mutation, types, assume_valid=True)
    register_resolvers(schema.registry)

    if not assume_valid:
        errors = schema.validate()
        if errors:
            raise InvalidSchemaError(errors)
    return schema
