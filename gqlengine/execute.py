from asyncio import CancelledError, ensure_future, gather
from inspect import iscoroutine
from typing import Any, Awaitable, Callable, Dict, Iterable, List, NamedTuple, Optional, Union, cast

from graphql import GraphQLError, Source, located_error
from graphql.pyutils import AwaitableOrValue, Path, Undefined, inspect, is_iterable
from graphql.pyutils import is_awaitable as default_is_awaitable

from .exceptions import (
    AbstractTypeResolutionError,
    GraphQLExtensionError,
    NonNullViolationError,
    SerializationError,
    UnknownFieldError,
    format_error,
)
from .middleware import MiddlewareManager
from .parser import parse_operation
from .resolver import FieldResolver, TypeResolver, default_field_resolver, default_type_resolver
from .schema import Schema
from .selection import Operation, Selection
from .type import (
    GraphQLAbstractType,
    GraphQLLeafType,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLOutputType,
    ResolveInfo,
    is_abstract_type,
    is_leaf_type,
    is_list_type,
    is_non_null_type,
    is_object_type,
)
from .values import coerce_argument_values

Middleware = Optional[Union[tuple, list, MiddlewareManager]]
FieldGroup = List[Selection]

TYPENAME_FIELD = '__typename'


class ExecutionResult(NamedTuple):
    data: Optional[Dict[str, Any]]
    errors: List[GraphQLError]

    @property
    def formatted(self) -> Dict[str, Any]:
        return {'data': self.data, 'errors': [format_error(error) for error in self.errors]}


async def gather_with_cancel(*awaitables: Awaitable[Any]) -> List[Any]:
    """Gather awaitables, cancelling the ones still pending once one of them fails."""
    tasks = [ensure_future(awaitable) for awaitable in awaitables]
    try:
        return await gather(*tasks)
    except Exception:
        for task in tasks:
            if not task.done():
                task.cancel()
        raise


def close_pending(values: Iterable[Any]) -> None:
    for value in values:
        if iscoroutine(value):
            value.close()


def collect_awaitables(pending: List[Any]) -> Callable[[Any], bool]:
    """Awaitable check that also records every awaitable it sees, so a synchronous
    execution can close them when it has to give up."""

    def is_awaitable(value: Any) -> bool:
        if default_is_awaitable(value):
            pending.append(value)
            return True
        return False

    return is_awaitable


def ensure_sync_result(result: AwaitableOrValue[ExecutionResult], pending: List[Any]) -> ExecutionResult:
    if default_is_awaitable(result):
        close_pending([result, *pending])
        raise RuntimeError("GraphQL execution failed to complete synchronously.")
    return cast(ExecutionResult, result)


class ExecutionContext:
    """State of one execution.

    Resolution is synchronous as long as every resolver returns a plain value. A
    resolver returning an awaitable only suspends its own subtree: the position
    holds the awaitable and its parent gathers it together with every other
    pending sibling, so the result keeps the requested order.
    """

    schema: Schema
    root_value: Any
    context_value: Any
    variable_values: Dict[str, Any]
    field_resolver: FieldResolver
    type_resolver: TypeResolver
    errors: List[GraphQLError]
    middleware_manager: Optional[MiddlewareManager]
    cancelled: bool

    def __init__(
        self,
        schema: Schema,
        root_value: Any = None,
        context_value: Any = None,
        variable_values: Optional[Dict[str, Any]] = None,
        field_resolver: Optional[FieldResolver] = None,
        type_resolver: Optional[TypeResolver] = None,
        middleware: Middleware = None,
        is_awaitable: Optional[Callable[[Any], bool]] = None,
    ):
        self.schema = schema
        self.root_value = root_value
        self.context_value = context_value
        self.variable_values = variable_values or {}
        self.field_resolver = field_resolver or default_field_resolver
        self.type_resolver = type_resolver or default_type_resolver
        self.errors = []
        self.cancelled = False

        if middleware is None or isinstance(middleware, MiddlewareManager):
            self.middleware_manager = middleware
        elif isinstance(middleware, (list, tuple)):
            self.middleware_manager = MiddlewareManager(*middleware)
        else:
            raise TypeError(
                "Middleware must be passed as a list or tuple of functions"
                " or objects, or as a single MiddlewareManager object."
                f" Got {inspect(middleware)} instead."
            )
        self.is_awaitable = is_awaitable or default_is_awaitable

    def execute_operation(self, operation: Operation) -> AwaitableOrValue[Optional[Dict[str, Any]]]:
        if operation.operation_type == 'mutation':
            root_type = self.schema.mutation_type
            if root_type is None:
                raise GraphQLError('Schema is not configured to execute mutation operation.')
        elif operation.operation_type == 'query':
            root_type = self.schema.query_type
        else:
            raise GraphQLError(f"Schema cannot execute {operation.operation_type} operation.")

        fields = self.collect_fields(root_type, operation.selections)
        if operation.operation_type == 'mutation':
            return self.execute_fields_serially(root_type, self.root_value, None, fields)
        return self.execute_fields(root_type, self.root_value, None, fields)

    def execute_fields_serially(
        self, parent_type: GraphQLObjectType, source: Any, path: Optional[Path], fields: Dict[str, FieldGroup]
    ) -> AwaitableOrValue[Dict[str, Any]]:
        """Resolve the fields one after another, each awaited before the next
        resolver is invoked."""
        results: Dict[str, Any] = {}
        items = iter(fields.items())
        for response_key, field_group in items:
            result = self.execute_field(parent_type, source, field_group, Path(path, response_key, parent_type.name))
            if self.is_awaitable(result):

                async def execute_remaining(response_key: str = response_key, result: Any = result):
                    results[response_key] = await result
                    for next_key, next_group in items:
                        next_result = self.execute_field(
                            parent_type, source, next_group, Path(path, next_key, parent_type.name)
                        )
                        if self.is_awaitable(next_result):
                            next_result = await next_result
                        results[next_key] = next_result
                    return results

                return execute_remaining()
            results[response_key] = result
        return results

    def execute_fields(
        self, parent_type: GraphQLObjectType, source: Any, path: Optional[Path], fields: Dict[str, FieldGroup]
    ) -> AwaitableOrValue[Dict[str, Any]]:
        """Resolve the fields of one object value.

        Siblings are independent: a field error is recorded for its own position
        only. Only a propagating non-null error leaves this object, in which case
        pending siblings are dropped.
        """
        results: Dict[str, Any] = {}
        awaitable_fields: List[str] = []
        try:
            for response_key, field_group in fields.items():
                field_path = Path(path, response_key, parent_type.name)
                result = self.execute_field(parent_type, source, field_group, field_path)
                results[response_key] = result
                if self.is_awaitable(result):
                    awaitable_fields.append(response_key)
        except Exception:
            close_pending(results[key] for key in awaitable_fields)
            raise

        if not awaitable_fields:
            return results

        async def get_results() -> Dict[str, Any]:
            awaited = await gather_with_cancel(*(results[key] for key in awaitable_fields))
            for key, value in zip(awaitable_fields, awaited):
                results[key] = value
            return results

        return get_results()

    def execute_field(
        self, parent_type: GraphQLObjectType, source: Any, field_group: FieldGroup, path: Path
    ) -> AwaitableOrValue[Any]:
        """Resolve one field on the given source value and complete its result.

        Any failure while coercing arguments, calling the resolver or completing the
        value is caught here and becomes a field error at this position.
        """
        if self.cancelled:
            raise CancelledError()

        selection = field_group[0]
        field_name = selection.field_name
        if field_name == TYPENAME_FIELD:
            return parent_type.name

        field_def = parent_type.fields.get(field_name)
        if field_def is None:
            self.handle_field_error(UnknownFieldError(parent_type.name, field_name), None, path)
            return None

        return_type = field_def.type
        resolve_fn = field_def.resolve or self.field_resolver
        if self.middleware_manager:
            resolve_fn = self.middleware_manager.get_field_resolver_by_parent(
                resolve_fn, parent_type.name, field_name
            )

        info = self.build_resolve_info(field_name, return_type, parent_type, field_group, path)

        try:
            args = coerce_argument_values(
                f'{parent_type.name}.{field_name}', field_def, selection.arguments, self.variable_values
            )
            result = resolve_fn(source, info, **args)

            if self.is_awaitable(result):

                async def await_result() -> Any:
                    try:
                        completed = self.complete_value(return_type, field_group, info, path, await result)
                        if self.is_awaitable(completed):
                            return await completed
                        return completed
                    except Exception as raw_error:
                        self.handle_field_error(raw_error, return_type, path)
                        return None

                return await_result()

            completed = self.complete_value(return_type, field_group, info, path, result)
            if self.is_awaitable(completed):

                async def await_completed() -> Any:
                    try:
                        return await completed
                    except Exception as raw_error:
                        self.handle_field_error(raw_error, return_type, path)
                        return None

                return await_completed()

            return completed
        except Exception as raw_error:
            self.handle_field_error(raw_error, return_type, path)
            return None

    def build_resolve_info(
        self,
        field_name: str,
        return_type: GraphQLOutputType,
        parent_type: GraphQLObjectType,
        field_group: FieldGroup,
        path: Path,
    ) -> ResolveInfo:
        return ResolveInfo(
            field_name,
            field_group,
            return_type,
            parent_type,
            path,
            self.schema,
            self.root_value,
            self.context_value,
            self.variable_values,
        )

    def handle_field_error(
        self, raw_error: Exception, return_type: Optional[GraphQLOutputType], path: Path
    ) -> None:
        """Record the error, or re-raise it when the position is non-null so that the
        nearest nullable ancestor is nulled instead."""
        error = located_error(raw_error, None, path.as_list())

        if is_non_null_type(return_type):
            raise error

        self.errors.append(error)

    def complete_value(
        self,
        return_type: GraphQLOutputType,
        field_group: FieldGroup,
        info: ResolveInfo,
        path: Path,
        result: Any,
    ) -> AwaitableOrValue[Any]:
        """Shape a resolved value according to the expected type.

        Non-null is unwrapped first and a null completion turns into an error,
        null short-circuits every other type, lists complete each item, leaves
        serialize, abstract types dispatch to a concrete object type and objects
        resolve their sub-selections.
        """
        if isinstance(result, Exception):
            raise result

        if is_non_null_type(return_type):
            completed = self.complete_value(
                cast(GraphQLNonNull, return_type).of_type, field_group, info, path, result
            )
            if self.is_awaitable(completed):

                async def await_non_null() -> Any:
                    value = await completed
                    if value is None:
                        raise self.non_null_violation(info, path)
                    return value

                return await_non_null()
            if completed is None:
                raise self.non_null_violation(info, path)
            return completed

        if result is None or result is Undefined:
            return None

        if is_list_type(return_type):
            return self.complete_list_value(cast(GraphQLList, return_type), field_group, info, path, result)

        if is_leaf_type(return_type):
            return self.complete_leaf_value(cast(GraphQLLeafType, return_type), result)

        if is_abstract_type(return_type):
            return self.complete_abstract_value(
                cast(GraphQLAbstractType, return_type), field_group, info, path, result
            )

        if is_object_type(return_type):
            return self.complete_object_value(
                cast(GraphQLObjectType, return_type), field_group, info, path, result
            )

        raise TypeError(f"Cannot complete value of unexpected output type: '{inspect(return_type)}'.")

    @staticmethod
    def non_null_violation(info: ResolveInfo, path: Path) -> NonNullViolationError:
        return NonNullViolationError(
            f'Cannot return null for non-nullable field {info.parent_type.name}.{info.field_name}.',
            path=path.as_list(),
        )

    def complete_list_value(
        self,
        return_type: GraphQLList,
        field_group: FieldGroup,
        info: ResolveInfo,
        path: Path,
        result: Any,
    ) -> AwaitableOrValue[List[Any]]:
        """Complete every item independently; a nullable item that fails is null at its
        own index and the rest of the list is kept."""
        if not is_iterable(result):
            raise SerializationError(
                'Expected Iterable, but did not find one for field'
                f" '{info.parent_type.name}.{info.field_name}'."
            )

        item_type = return_type.of_type
        completed_results: List[Any] = []
        awaitable_indices: List[int] = []
        try:
            for index, item in enumerate(result):
                item_path = path.add_key(index, None)
                completed_item = self.complete_list_item_value(item, item_type, field_group, info, item_path)
                if self.is_awaitable(completed_item):
                    awaitable_indices.append(index)
                completed_results.append(completed_item)
        except Exception:
            close_pending(completed_results[index] for index in awaitable_indices)
            raise

        if not awaitable_indices:
            return completed_results

        async def get_completed_results() -> List[Any]:
            awaited = await gather_with_cancel(*(completed_results[index] for index in awaitable_indices))
            for index, value in zip(awaitable_indices, awaited):
                completed_results[index] = value
            return completed_results

        return get_completed_results()

    def complete_list_item_value(
        self,
        item: Any,
        item_type: GraphQLOutputType,
        field_group: FieldGroup,
        info: ResolveInfo,
        item_path: Path,
    ) -> AwaitableOrValue[Any]:
        try:
            if self.is_awaitable(item):

                async def await_item() -> Any:
                    try:
                        completed = self.complete_value(item_type, field_group, info, item_path, await item)
                        if self.is_awaitable(completed):
                            return await completed
                        return completed
                    except Exception as raw_error:
                        self.handle_field_error(raw_error, item_type, item_path)
                        return None

                return await_item()

            completed_item = self.complete_value(item_type, field_group, info, item_path, item)
            if self.is_awaitable(completed_item):

                async def await_completed() -> Any:
                    try:
                        return await completed_item
                    except Exception as raw_error:
                        self.handle_field_error(raw_error, item_type, item_path)
                        return None

                return await_completed()

            return completed_item
        except Exception as raw_error:
            self.handle_field_error(raw_error, item_type, item_path)
            return None

    @staticmethod
    def complete_leaf_value(return_type: GraphQLLeafType, result: Any) -> Any:
        try:
            serialized_result = return_type.serialize(result)
        except GraphQLExtensionError:
            raise
        except Exception as error:
            raise SerializationError(
                f"{return_type.name} cannot represent value: {inspect(result)}", original_error=error
            )
        if serialized_result is Undefined or serialized_result is None:
            raise SerializationError(
                f"Expected `{inspect(return_type)}.serialize({inspect(result)})`"
                f" to return non-nullable value, returned: {inspect(serialized_result)}"
            )
        return serialized_result

    def complete_abstract_value(
        self,
        return_type: GraphQLAbstractType,
        field_group: FieldGroup,
        info: ResolveInfo,
        path: Path,
        result: Any,
    ) -> AwaitableOrValue[Any]:
        """Ask the abstract type which object type the value is, then complete the
        value as that object type. The type resolver's answer is final."""
        resolve_type_fn = return_type.resolve_type or self.type_resolver
        runtime_type = resolve_type_fn(result, info, return_type)

        if self.is_awaitable(runtime_type):

            async def await_complete_object_value() -> Any:
                value = self.complete_object_value(
                    self.ensure_valid_runtime_type(await runtime_type, return_type, info, result),
                    field_group,
                    info,
                    path,
                    result,
                )
                if self.is_awaitable(value):
                    return await value
                return value

            return await_complete_object_value()

        return self.complete_object_value(
            self.ensure_valid_runtime_type(runtime_type, return_type, info, result),
            field_group,
            info,
            path,
            result,
        )

    def ensure_valid_runtime_type(
        self,
        runtime_type_or_name: Any,
        return_type: GraphQLAbstractType,
        info: ResolveInfo,
        result: Any,
    ) -> GraphQLObjectType:
        if runtime_type_or_name is None:
            raise AbstractTypeResolutionError(
                f"Abstract type '{return_type.name}' must resolve to an Object type at runtime"
                f" for field '{info.parent_type.name}.{info.field_name}'."
                f" Either the '{return_type.name}' type should provide a 'resolve_type' function"
                " or each possible type should provide an 'is_type_of' function."
            )

        if is_object_type(runtime_type_or_name):
            runtime_type_name = runtime_type_or_name.name
        elif isinstance(runtime_type_or_name, str):
            runtime_type_name = runtime_type_or_name
        else:
            raise AbstractTypeResolutionError(
                f"Abstract type '{return_type.name}' must resolve to an Object type at runtime"
                f" for field '{info.parent_type.name}.{info.field_name}' with value {inspect(result)},"
                f" received '{inspect(runtime_type_or_name)}'."
            )

        runtime_type = self.schema.get_type(runtime_type_name)
        if runtime_type is None:
            raise AbstractTypeResolutionError(
                f"Abstract type '{return_type.name}' was resolved to a type '{runtime_type_name}'"
                " that does not exist inside the schema."
            )

        if not is_object_type(runtime_type):
            raise AbstractTypeResolutionError(
                f"Abstract type '{return_type.name}' was resolved to a non-object type '{runtime_type_name}'."
            )

        if not self.schema.is_possible_type(return_type, runtime_type):
            raise AbstractTypeResolutionError(
                f"Runtime Object type '{runtime_type.name}' is not a possible type for '{return_type.name}'."
            )

        return cast(GraphQLObjectType, runtime_type)

    def complete_object_value(
        self,
        return_type: GraphQLObjectType,
        field_group: FieldGroup,
        info: ResolveInfo,
        path: Path,
        result: Any,
    ) -> AwaitableOrValue[Dict[str, Any]]:
        if return_type.is_type_of:
            is_type_of = return_type.is_type_of(result, info)

            if self.is_awaitable(is_type_of):

                async def execute_subfields_async() -> Dict[str, Any]:
                    if not await is_type_of:
                        raise invalid_return_type_error(return_type, result)
                    value = self.collect_and_execute_subfields(return_type, field_group, path, result)
                    if self.is_awaitable(value):
                        return await value
                    return value

                return execute_subfields_async()

            if not is_type_of:
                raise invalid_return_type_error(return_type, result)

        return self.collect_and_execute_subfields(return_type, field_group, path, result)

    def collect_and_execute_subfields(
        self, return_type: GraphQLObjectType, field_group: FieldGroup, path: Path, result: Any
    ) -> AwaitableOrValue[Dict[str, Any]]:
        sub_selections = [sub for selection in field_group for sub in selection.selections]
        sub_fields = self.collect_fields(return_type, sub_selections)
        return self.execute_fields(return_type, result, path, sub_fields)

    def collect_fields(self, object_type: GraphQLObjectType, selections: List[Selection]) -> Dict[str, FieldGroup]:
        """Group the selections applying to ``object_type`` by response key, in
        request order. Selections bound against another type are skipped."""
        fields: Dict[str, FieldGroup] = {}
        for selection in selections:
            if not self.does_selection_apply(selection, object_type):
                continue
            fields.setdefault(selection.response_key, []).append(selection)
        return fields

    def does_selection_apply(self, selection: Selection, object_type: GraphQLObjectType) -> bool:
        if selection.parent_type is None or selection.parent_type == object_type.name:
            return True
        parent_type = self.schema.get_type(selection.parent_type)
        return is_abstract_type(parent_type) and self.schema.is_possible_type(parent_type, object_type)

    def build_response(self, data: Optional[Dict[str, Any]]) -> ExecutionResult:
        return ExecutionResult(data, self.errors)


def invalid_return_type_error(return_type: GraphQLObjectType, result: Any) -> GraphQLError:
    return SerializationError(f"Expected value of type '{return_type.name}' but got: {inspect(result)}.")


def execute(
    schema: Schema,
    operation: Union[Operation, List[Selection]],
    root_value: Any = None,
    context_value: Any = None,
    variable_values: Optional[Dict[str, Any]] = None,
    field_resolver: Optional[FieldResolver] = None,
    type_resolver: Optional[TypeResolver] = None,
    middleware: Middleware = None,
    is_awaitable: Optional[Callable[[Any], bool]] = None,
    execution_context_class: Optional[type] = None,
) -> AwaitableOrValue[ExecutionResult]:
    """Execute a bound operation, or a list of selections on the query type.

    Returns an :class:`ExecutionResult`, or an awaitable of one when a resolver
    returned an awaitable. Field errors never abort the execution; ``data`` is
    ``None`` only when a non-null error reaches the root.
    """
    if not isinstance(operation, Operation):
        operation = Operation('query', list(operation))

    context = (execution_context_class or ExecutionContext)(
        schema,
        root_value,
        context_value,
        variable_values,
        field_resolver,
        type_resolver,
        middleware,
        is_awaitable,
    )

    try:
        data = context.execute_operation(operation)
    except GraphQLError as error:
        context.errors.append(error)
        return context.build_response(None)

    if context.is_awaitable(data):

        async def await_result() -> ExecutionResult:
            try:
                return context.build_response(await data)
            except GraphQLError as error:
                context.errors.append(error)
                return context.build_response(None)
            except CancelledError:
                context.cancelled = True
                raise

        return await_result()

    return context.build_response(cast(Optional[Dict[str, Any]], data))


def execute_sync(
    schema: Schema,
    operation: Union[Operation, List[Selection]],
    root_value: Any = None,
    context_value: Any = None,
    variable_values: Optional[Dict[str, Any]] = None,
    field_resolver: Optional[FieldResolver] = None,
    type_resolver: Optional[TypeResolver] = None,
    middleware: Middleware = None,
) -> ExecutionResult:
    """Execute an operation whose resolvers are all synchronous."""
    pending: List[Any] = []
    result = execute(
        schema,
        operation,
        root_value,
        context_value,
        variable_values,
        field_resolver,
        type_resolver,
        middleware,
        collect_awaitables(pending),
    )
    return ensure_sync_result(result, pending)


def graphql(
    schema: Schema,
    source: Union[str, Source],
    root_value: Any = None,
    context_value: Any = None,
    variable_values: Optional[Dict[str, Any]] = None,
    operation_name: Optional[str] = None,
    field_resolver: Optional[FieldResolver] = None,
    type_resolver: Optional[TypeResolver] = None,
    middleware: Middleware = None,
    is_awaitable: Optional[Callable[[Any], bool]] = None,
) -> AwaitableOrValue[ExecutionResult]:
    """Parse, bind and execute request text.

    Syntax and binding errors are returned as a result without data; nothing is
    executed in that case.
    """
    try:
        operation = parse_operation(schema, source, operation_name)
    except GraphQLError as error:
        return ExecutionResult(None, [error])

    return execute(
        schema,
        operation,
        root_value,
        context_value,
        variable_values,
        field_resolver,
        type_resolver,
        middleware,
        is_awaitable,
    )


def graphql_sync(
    schema: Schema,
    source: Union[str, Source],
    root_value: Any = None,
    context_value: Any = None,
    variable_values: Optional[Dict[str, Any]] = None,
    operation_name: Optional[str] = None,
    field_resolver: Optional[FieldResolver] = None,
    type_resolver: Optional[TypeResolver] = None,
    middleware: Middleware = None,
) -> ExecutionResult:
    pending: List[Any] = []
    result = graphql(
        schema,
        source,
        root_value,
        context_value,
        variable_values,
        operation_name,
        field_resolver,
        type_resolver,
        middleware,
        collect_awaitables(pending),
    )
    return ensure_sync_result(result, pending)
