"""Ordered command fallbacks for operations whose syntax varies between builds."""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .executor import ExecResult
from ..util.logging import get_logger

logger = get_logger(__name__)

# Fragments printed by toybox/busybox/toolbox when a flag is not supported.
UNSUPPORTED_MARKERS = ("Unknown option", "unknown option", "bad -", "invalid option")


def has_unsupported_marker(text: str) -> bool:
    return any(marker in text for marker in UNSUPPORTED_MARKERS)


def succeeded(result: ExecResult) -> bool:
    return result.ok


def succeeded_with(marker: str) -> Callable[[ExecResult], bool]:
    """Accept a successful, non-empty response containing ``marker``."""
    def accept(result: ExecResult) -> bool:
        output = result.output
        return result.ok and bool(output.strip()) and marker in output
    return accept


def succeeded_non_empty(result: ExecResult) -> bool:
    return result.ok and bool(result.output.strip())


def succeeded_supported(result: ExecResult) -> bool:
    return result.ok and not has_unsupported_marker(result.output)


def accept_any(result: ExecResult) -> bool:
    return True


@dataclass
class Candidate:
    """One command form of an operation and the test its response must pass."""

    args: List[str]
    accept: Callable[[ExecResult], bool] = succeeded
    name: str = ""


def run_chain(
    run: Callable[[Sequence[str]], ExecResult],
    candidates: Sequence[Candidate],
) -> Tuple[ExecResult, Optional[Candidate], bool]:
    """Try candidates in order and stop at the first accepted response.

    Returns the surfaced result, the candidate that produced it and whether
    it was accepted. When nothing is accepted the last candidate's result is
    surfaced. Responses of different candidates are never combined.
    """
    result = ExecResult()
    candidate = None
    for candidate in candidates:
        result = run(candidate.args)
        if candidate.accept(result):
            return result, candidate, True
        logger.debug(f"Fallback: '{candidate.name or ' '.join(candidate.args)}' not accepted")
    return result, candidate, False
