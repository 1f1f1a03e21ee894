"""
The common return type of every backend.

A regression fit, an influence run and a forward-stagewise run each
return ``Result[P]`` with their own payload ``P`` (LinearParams,
InfluenceParams, StagewiseParams). The solution classes wrap a Result
and expose its payload through properties.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Frozen envelope around a payload.

    Attributes:
        params: The payload (coefficients, leverage vectors, path, ...)
        info: Free-form metadata such as ``{'method': 'qr', 'rank': 4}``
            or ``{'method': 'forward_stagewise', 'rounds': 412}``
        timing: ``Timer.result()`` of the backend, or None
        backend_name: Which backend produced it ('cpu_qr', 'cpu_stagewise')
        warnings: Messages about conditions that did not stop the computation
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """True if ``substring`` occurs in one of the warnings."""
        return any(substring in message for message in self.warnings)
