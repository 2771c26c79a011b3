"""Service request: marker for one remote operation and the result it returns."""
from typing import Any, ClassVar, Generic, TypeVar

R = TypeVar("R")


class ServiceRequest(Generic[R]):
    """
    Request for one application service operation.
    Subclasses are frozen dataclasses carrying the operation's arguments;
    R binds the result type statically, result_type declares it for decoding.
    """

    result_type: ClassVar[Any] = None
