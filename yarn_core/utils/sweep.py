"""
Recursive threat sweep over structured request payloads.

Walks nested mappings and sequences depth-first, scanning every string leaf
with the threat scanner and stopping at the first flagged value.
"""

from dataclasses import dataclass, replace
from typing import Any, Iterator, Mapping, Optional, Tuple, Union

from werkzeug.datastructures import MultiDict

from yarn_core.utils.threat_scanner import DEFAULT_MAX_SCAN_LENGTH, ThreatReport, scan


@dataclass(frozen=True)
class Clean:
    """No string leaf in the payload carried a threat."""

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class Flagged:
    """
    The first threatening leaf: its dot-joined path and scan report.

    ``section`` names the part of the request the path belongs to
    (``body`` or ``query``) when the result comes from :func:`sweep_request`.
    """

    path: str
    report: ThreatReport
    section: Optional[str] = None

    def __bool__(self) -> bool:
        return True


SweepResult = Union[Clean, Flagged]

CLEAN = Clean()


def _children(node: Any) -> Iterator[Tuple[str, Any]]:
    if isinstance(node, Mapping):
        for key, value in node.items():
            yield str(key), value
    elif isinstance(node, (list, tuple)):
        for index, value in enumerate(node):
            yield str(index), value


def sweep(payload: Any, max_length: int = DEFAULT_MAX_SCAN_LENGTH, prefix: str = '') -> SweepResult:
    """
    Scan every string leaf of ``payload`` depth-first.

    Paths join mapping keys and list indexes with dots, e.g. ``tags.0`` or
    ``meta.author.name``. Numbers, booleans and null leaves are skipped.
    Returns as soon as one leaf is flagged; later leaves are never scanned.

    Raises:
        ScanError: If a leaf exceeds ``max_length``.
    """
    stack = [(prefix, payload)]
    while stack:
        path, node = stack.pop()
        if isinstance(node, str):
            if not path:
                continue
            report = scan(node, max_length)
            if report:
                return Flagged(path, report)
            continue
        # reversed so children come off the stack in document order
        children = [
            (f"{path}.{key}" if path else key, value)
            for key, value in _children(node)
        ]
        stack.extend(reversed(children))
    return CLEAN


def sweep_request(
    body: Any,
    query: Optional[Mapping[str, Any]] = None,
    max_length: int = DEFAULT_MAX_SCAN_LENGTH
) -> SweepResult:
    """Sweep the request body first, then the query parameters."""
    for section, payload in (('body', body), ('query', query)):
        if payload is None:
            continue
        result = sweep(payload, max_length)
        if result:
            return replace(result, section=section)
    return CLEAN


def collapse_query_params(args: MultiDict) -> dict:
    """
    Reduce repeated query parameters to their last value.

    ``?tag=a&tag=b`` becomes ``{'tag': 'b'}`` so handlers never receive a
    list where they expect a single value.
    """
    return {key: values[-1] for key, values in args.lists() if values}
