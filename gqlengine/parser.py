from typing import Any, Dict, List, Optional, Set, Union

import graphql
from graphql.pyutils import Undefined

from .exceptions import InvalidSelectionError, UnknownFieldError, UnknownTypeError
from .schema import Schema
from .selection import Operation, Selection, Variable
from .type import (
    GraphQLNamedType,
    get_named_type,
    is_abstract_type,
    is_composite_type,
    is_leaf_type,
    is_object_type,
    is_union_type,
)

DocumentOrSource = Union[graphql.DocumentNode, graphql.Source, str]


def parse_operation(
    schema: Schema, document: DocumentOrSource, operation_name: Optional[str] = None
) -> Operation:
    """Parse request text and bind its operation against the schema.

    Every field is checked against the type it is selected on, fragments are
    flattened into the selection they are spread in, and variables are kept as
    :class:`Variable` references resolved at execution. Raises a ``GraphQLError``
    for syntax errors and binding errors.
    """
    if not isinstance(document, graphql.DocumentNode):
        document = graphql.parse(document, no_location=True)

    operation: Optional[graphql.OperationDefinitionNode] = None
    fragments: Dict[str, graphql.FragmentDefinitionNode] = {}
    for definition in document.definitions:
        if isinstance(definition, graphql.OperationDefinitionNode):
            if operation_name is None:
                if operation:
                    raise InvalidSelectionError('Must provide operation name if query contains multiple operations.')
                operation = definition
            elif definition.name and definition.name.value == operation_name:
                operation = definition
        elif isinstance(definition, graphql.FragmentDefinitionNode):
            fragments[definition.name.value] = definition

    if not operation:
        if operation_name is not None:
            raise InvalidSelectionError(f"Unknown operation named '{operation_name}'.")
        raise InvalidSelectionError('Must provide an operation.')

    operation_type = operation.operation.value
    if operation_type == 'mutation':
        root_type = schema.mutation_type
    elif operation_type == 'query':
        root_type = schema.query_type
    else:
        root_type = None
    if root_type is None:
        raise InvalidSelectionError(f'Schema is not configured to execute {operation_type} operation.')

    binder = SelectionBinder(schema, fragments, get_variable_defaults(operation))
    return Operation(
        operation_type,
        binder.bind_selection_set(root_type, operation.selection_set),
        operation.name.value if operation.name else None,
    )


def get_variable_defaults(operation: graphql.OperationDefinitionNode) -> Dict[str, Any]:
    defaults = {}
    for definition in operation.variable_definitions or ():
        name = definition.variable.name.value
        defaults[name] = value_from_ast(definition.default_value) if definition.default_value else Undefined
    return defaults


def value_from_ast(node: graphql.ValueNode, variable_defaults: Optional[Dict[str, Any]] = None) -> Any:
    """Turn an argument literal into a plain value; enum literals become their names."""
    if isinstance(node, graphql.VariableNode):
        name = node.name.value
        return Variable(name, (variable_defaults or {}).get(name, Undefined))
    if isinstance(node, graphql.NullValueNode):
        return None
    if isinstance(node, graphql.IntValueNode):
        return int(node.value)
    if isinstance(node, graphql.FloatValueNode):
        return float(node.value)
    if isinstance(node, (graphql.StringValueNode, graphql.BooleanValueNode, graphql.EnumValueNode)):
        return node.value
    if isinstance(node, graphql.ListValueNode):
        return [value_from_ast(value, variable_defaults) for value in node.values]
    if isinstance(node, graphql.ObjectValueNode):
        return {field.name.value: value_from_ast(field.value, variable_defaults) for field in node.fields}
    raise InvalidSelectionError(f'Unexpected value node: {node}.')


class SelectionBinder:
    def __init__(
        self,
        schema: Schema,
        fragments: Dict[str, graphql.FragmentDefinitionNode],
        variable_defaults: Dict[str, Any],
    ):
        self.schema = schema
        self.fragments = fragments
        self.variable_defaults = variable_defaults
        self._visiting: Set[str] = set()

    def bind_selection_set(
        self, parent_type: GraphQLNamedType, selection_set: graphql.SelectionSetNode
    ) -> List[Selection]:
        selections: List[Selection] = []
        for node in selection_set.selections:
            if isinstance(node, graphql.FieldNode):
                selections.append(self.bind_field(parent_type, node))
            elif isinstance(node, graphql.InlineFragmentNode):
                fragment_type = self.get_fragment_type(parent_type, node.type_condition)
                selections.extend(self.bind_selection_set(fragment_type, node.selection_set))
            elif isinstance(node, graphql.FragmentSpreadNode):
                selections.extend(self.bind_fragment_spread(parent_type, node.name.value))
        return selections

    def bind_fragment_spread(self, parent_type: GraphQLNamedType, name: str) -> List[Selection]:
        fragment = self.fragments.get(name)
        if fragment is None:
            raise InvalidSelectionError(f"Unknown fragment '{name}'.")
        if name in self._visiting:
            raise InvalidSelectionError(f"Cannot spread fragment '{name}' within itself.")
        self._visiting.add(name)
        try:
            fragment_type = self.get_fragment_type(parent_type, fragment.type_condition)
            return self.bind_selection_set(fragment_type, fragment.selection_set)
        finally:
            self._visiting.discard(name)

    def get_fragment_type(
        self, parent_type: GraphQLNamedType, type_condition: Optional[graphql.NamedTypeNode]
    ) -> GraphQLNamedType:
        if type_condition is None:
            return parent_type
        fragment_type = self.schema.get_type(type_condition.name.value)
        if fragment_type is None:
            raise UnknownTypeError(type_condition.name.value)
        if not is_composite_type(fragment_type):
            raise InvalidSelectionError(f"Fragment cannot condition on non composite type '{fragment_type.name}'.")
        if not self.types_overlap(parent_type, fragment_type):
            raise InvalidSelectionError(
                f"Fragment on '{fragment_type.name}' can never be spread within type '{parent_type.name}'."
            )
        return fragment_type

    def types_overlap(self, type_a: GraphQLNamedType, type_b: GraphQLNamedType) -> bool:
        if type_a is type_b:
            return True
        if is_abstract_type(type_a):
            if is_abstract_type(type_b):
                possible_b = self.schema.get_possible_types(type_b)
                return any(type_ in possible_b for type_ in self.schema.get_possible_types(type_a))
            return is_object_type(type_b) and self.schema.is_possible_type(type_a, type_b)
        return is_abstract_type(type_b) and is_object_type(type_a) and self.schema.is_possible_type(type_b, type_a)

    def bind_field(self, parent_type: GraphQLNamedType, node: graphql.FieldNode) -> Selection:
        field_name = node.name.value
        alias = node.alias.value if node.alias else None

        if field_name == '__typename':
            if node.selection_set:
                raise InvalidSelectionError("Field '__typename' must not have a selection.")
            return Selection(field_name, alias, parent_type=parent_type.name)

        field_def = None if is_union_type(parent_type) else parent_type.fields.get(field_name)
        if field_def is None:
            raise UnknownFieldError(parent_type.name, field_name)

        named_type = get_named_type(field_def.type)
        selections: List[Selection] = []
        if is_leaf_type(named_type):
            if node.selection_set:
                raise InvalidSelectionError(
                    f"Field '{field_name}' must not have a selection since type '{field_def.type}' has no subfields."
                )
        else:
            if not node.selection_set:
                raise InvalidSelectionError(
                    f"Field '{field_name}' of type '{field_def.type}' must have a selection of subfields."
                )
            selections = self.bind_selection_set(named_type, node.selection_set)

        arguments = {
            argument.name.value: value_from_ast(argument.value, self.variable_defaults)
            for argument in node.arguments or ()
        }
        return Selection(field_name, alias, arguments, selections, parent_type.name)
