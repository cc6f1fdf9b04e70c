import traceback
from collections import defaultdict
from functools import partial, wraps
from inspect import isawaitable, iscoroutine, iscoroutinefunction, isfunction
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .type import (
    GraphQLAbstractType,
    ResolveInfo,
    is_interface_type,
    is_object_type,
    is_union_type,
)
from .utils import execute_async_function, recursive_to_snake_case, to_camel_case, to_snake_case

FieldResolver = Callable[..., Any]
TypeResolver = Callable[[Any, ResolveInfo, GraphQLAbstractType], Any]
FieldResolverMap = Dict[str, Dict[str, FieldResolver]]
TypeResolverMap = Dict[str, TypeResolver]

field_resolver_map: FieldResolverMap = defaultdict(dict)
type_resolver_map: TypeResolverMap = {}


def type_resolver(type_name: str):
    def wrap(func: TypeResolver):
        type_resolver_map[type_name] = func
        return func

    return wrap


def field_resolver(
    type_name: str,
    func_or_field: Union[FieldResolver, str] = None,
    print_exc: bool = True,
    snake_argument: bool = True,
):
    """Register a resolver for ``type_name.field``, bound by ``make_schema``.

    The field name is the given string, or the camel-cased function name. Argument
    names are passed to the function in snake case unless ``snake_argument`` is
    false. With ``print_exc`` the traceback of a failing resolver is printed before
    the error is handed back to the engine.
    """

    def wrap(func: FieldResolver):
        @wraps(func)
        def sync_resolver(*args, **kwargs):
            if snake_argument:
                kwargs = recursive_to_snake_case(kwargs)
            if not print_exc:
                return func(*args, **kwargs)

            try:
                return func(*args, **kwargs)
            except Exception as exc:
                traceback.print_exc()
                raise exc

        @wraps(func)
        async def async_resolver(*args, **kwargs):
            if snake_argument:
                kwargs = recursive_to_snake_case(kwargs)
            if not print_exc:
                return await execute_async_function(func, *args, **kwargs)

            try:
                return await execute_async_function(func, *args, **kwargs)
            except Exception as exc:
                traceback.print_exc()
                raise exc

        if isinstance(func_or_field, str):
            name = to_camel_case(func_or_field)
        else:
            name = to_camel_case(func.__name__)

        if iscoroutinefunction(func):
            field_resolver_map[type_name][name] = async_resolver
            return async_resolver

        field_resolver_map[type_name][name] = sync_resolver
        return sync_resolver

    if isfunction(func_or_field):
        return wrap(func_or_field)

    return wrap


mutate = partial(field_resolver, 'Mutation')
query = partial(field_resolver, 'Query')


def register_type_resolvers(registry, type_resolvers: Optional[TypeResolverMap] = None):
    for type_name, resolve_type in (type_resolvers or type_resolver_map).items():
        type_ = registry.get_type(type_name)
        if is_interface_type(type_) or is_union_type(type_):
            type_.resolve_type = resolve_type


def register_field_resolvers(registry, field_resolvers: Optional[FieldResolverMap] = None):
    for type_name, resolvers in (field_resolvers or field_resolver_map).items():
        type_ = registry.get_type(type_name)
        if not (is_object_type(type_) or is_interface_type(type_)):
            continue

        for name, resolve in resolvers.items():
            field = type_.fields.get(name)
            if not field:
                continue
            field.resolve = resolve


def register_resolvers(registry):
    register_field_resolvers(registry)
    register_type_resolvers(registry)


def get_field_value(source, field_name):
    return source.get(field_name) if isinstance(source, Mapping) else getattr(source, field_name, None)


def default_field_resolver(source, info: ResolveInfo, **args):
    """Default field resolver.

    If a resolve function is not given, then a default resolve behavior is used which
    takes the property of the source object of the same name as the field and returns
    it as the result, or if it's a function, returns the result of calling that function
    while passing along info and args.

    For dictionaries, the field names are used as keys, for all other objects they are
    used as attribute names. The snake case spelling of the field name is tried first.
    """
    value = get_field_value(source, to_snake_case(info.field_name))
    if value is None:
        value = get_field_value(source, info.field_name)

    if callable(value):
        return value(info, **args)
    return value


def get_typename(value: Any) -> Optional[str]:
    if isinstance(value, Mapping):
        return value.get('__typename')
    return getattr(value, '__typename', None)


def default_type_resolver(value: Any, info: ResolveInfo, abstract_type: GraphQLAbstractType):
    """Default type resolver.

    Uses the value's ``__typename`` when it has one, otherwise asks each possible
    type's ``is_type_of``. ``is_type_of`` may be asynchronous, in which case the
    first possible type whose predicate holds is returned once all are known.
    """
    typename = get_typename(value)
    if isinstance(typename, str):
        return typename

    possible_types = info.schema.get_possible_types(abstract_type)
    pending = []
    for type_ in possible_types:
        if type_.is_type_of is None:
            continue
        is_type_of = type_.is_type_of(value, info)
        if isawaitable(is_type_of):
            pending.append((type_, is_type_of))
        elif is_type_of:
            for _, awaitable in pending:
                if iscoroutine(awaitable):
                    awaitable.close()
            return type_.name

    if pending:

        async def get_type():
            name = None
            for type_, awaitable in pending:
                if await awaitable and name is None:
                    name = type_.name
            return name

        return get_type()
    return None
