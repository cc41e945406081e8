from facet.facet_datatypes import (
    Obj, AttributeStore, ParentChain, NativeFunction, BoundFunction, native,
    FacetError, NotFoundError, UnsupportedOperation, AssertionFailure, is_missing,
)
from facet.facet_resolver import resolve, get_attr, set_attr, has_attr, find_owner, keys, type_of
from facet.facet_composer import extend, becomes
from facet.facet_dispatch import OperatorDispatcher, dispatcher, invoke
from facet.facet_core import (
    Pristine, Basic, Comparable, Number, Text, Boolean, Null, List, Function,
)
from facet.facet_printer import Printer, default_text, text_template
from facet.facet_runtime import Runtime, ExecutionResult
