from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from graphql.pyutils import Undefined


@dataclass(frozen=True)
class Variable:
    """Reference to a variable of the request, in place of an argument literal."""

    name: str
    default_value: Any = Undefined


@dataclass
class Selection:
    """One requested field.

    ``parent_type`` is the name of the type the field was bound against: the
    enclosing field's type, or the type condition of the fragment it came from.
    Against a runtime object type the field applies when ``parent_type`` is that
    type or an abstract type including it; otherwise it is skipped.
    """

    field_name: str
    alias: Optional[str] = None
    arguments: Dict[str, Any] = field(default_factory=dict)
    selections: List['Selection'] = field(default_factory=list)
    parent_type: Optional[str] = None

    @property
    def response_key(self) -> str:
        return self.alias or self.field_name


@dataclass
class Operation:
    operation_type: str
    selections: List[Selection]
    name: Optional[str] = None
