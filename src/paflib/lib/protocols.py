from typing import Protocol, Optional, Union, runtime_checkable


@runtime_checkable
class ParserInput(Protocol):
    """
    Protocol for immutable views over parser input (e.g. TextView, BytesView).

    Grammar rules only rely on these capabilities, so each rule is written once
    and runs over either representation.
    """
    @property
    def offset(self) -> int: ...
    @property
    def rest(self) -> Union[str, bytes]: ...
    def __len__(self) -> int: ...
    def first(self) -> Optional[str]: ...
    def advance(self, n: int) -> 'ParserInput': ...
    def span(self, tokens: 'TokenClass') -> int: ...
    def decode(self, n: int) -> str: ...


@runtime_checkable
class HasLocus(Protocol):
    """Protocol for objects that describe an aligned region (e.g. Locus)."""
    @property
    def name(self) -> str: ...
    @property
    def length(self) -> int: ...
    @property
    def start(self) -> int: ...
    @property
    def end(self) -> int: ...
