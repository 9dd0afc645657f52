"""Layered detection of blocking signatures in a source artifact.

Each layer is independent and a file may trigger several of them:

1. import statements matched by exact FQN;
2. wildcard imports rooted at a blocking package (conservatively blocking);
3. annotations whose resolved type is a blocking annotation;
4. identifiers and field accesses whose resolved type is blocking;
5. syntactic fallback when no type is known: the dotted name rebuilt from
   the expression segments, then the raw text.

Layers 3 to 5 run as an ordered chain of strategies per expression. A
strategy returns a signature, ``None`` to let the next strategy try, or
``NEUTRAL`` to end the chain without a match. Only a resolved FQN can be
neutral; the textual strategies never see neutral-shim references.
"""

import logging
import re
from typing import Callable

from retention_analyzer.models import ImportRef, Reference, SourceArtifact
from retention_analyzer.signatures import SignatureCatalog

logger = logging.getLogger(__name__)

# Sentinel ending a strategy chain without a match
NEUTRAL = object()

Strategy = Callable[[Reference, SignatureCatalog], object]


def match_import(imp: ImportRef, catalog: SignatureCatalog) -> str | None:
    """Exact FQN import of a blocking type or annotation."""
    if imp.is_wildcard:
        # import static jakarta.ejb.TimerService.*
        owner = imp.name[:-2]
        if imp.is_static and catalog.is_blocking(owner):
            return owner
        return None
    if catalog.is_blocking(imp.name):
        return imp.name
    # import static jakarta.ejb.TimerService.member
    if imp.is_static and "." in imp.name:
        owner = imp.name.rsplit(".", 1)[0]
        if catalog.is_blocking(owner):
            return owner
    return None


def match_wildcard_import(imp: ImportRef, catalog: SignatureCatalog) -> str | None:
    """On-demand import from a blocking package."""
    if imp.is_static or not imp.is_wildcard:
        return None
    if catalog.is_blocking_wildcard(imp.name):
        return imp.name
    return None


def match_resolved_annotation(ref: Reference, catalog: SignatureCatalog) -> object:
    """Annotation with a resolved blocking annotation type."""
    if ref.resolved_type is None:
        return None
    if catalog.is_neutral_shim(ref.resolved_type):
        return NEUTRAL
    if catalog.is_blocking_annotation(ref.resolved_type):
        return ref.resolved_type
    return None


def match_resolved_type(ref: Reference, catalog: SignatureCatalog) -> object:
    """Identifier or field access with a resolved blocking type."""
    if ref.resolved_type is None:
        return None
    if catalog.is_neutral_shim(ref.resolved_type):
        return NEUTRAL
    if catalog.is_blocking(ref.resolved_type):
        return ref.resolved_type
    return None


def match_dotted_segments(ref: Reference, catalog: SignatureCatalog) -> str | None:
    """Dotted name rebuilt from the expression shape.

    Every prefix of the chain is a field access of its own, so
    ``jakarta.ejb.Timer.class`` still yields ``jakarta.ejb.Timer``.
    """
    segments = [s for s in ref.segments if s]
    for end in range(len(segments), 1, -1):
        candidate = ".".join(segments[:end])
        if catalog.is_blocking(candidate):
            return candidate
    return None


def match_raw_text(ref: Reference, catalog: SignatureCatalog) -> str | None:
    """Raw textual rendering of the expression."""
    rendered = re.sub(r"\s+", "", ref.text)
    if catalog.is_blocking(rendered):
        return rendered
    return None


ANNOTATION_STRATEGIES: tuple[Strategy, ...] = (
    match_resolved_annotation,
    match_dotted_segments,
    match_raw_text,
)

REFERENCE_STRATEGIES: tuple[Strategy, ...] = (
    match_resolved_type,
    match_dotted_segments,
    match_raw_text,
)


def run_chain(
    ref: Reference,
    catalog: SignatureCatalog,
    strategies: tuple[Strategy, ...],
) -> str | None:
    """Run strategies in order, stopping at the first decisive answer.

    Args:
        ref: Expression to classify
        catalog: Signature catalog
        strategies: Ordered strategy functions

    Returns:
        Blocking signature or None
    """
    for strategy in strategies:
        result = strategy(ref, catalog)
        if result is NEUTRAL:
            return None
        if result is not None:
            return result  # type: ignore[return-value]
    return None


def extract_facts(artifact: SourceArtifact, catalog: SignatureCatalog) -> set[str]:
    """Find all blocking signatures referenced by an artifact.

    Args:
        artifact: Source artifact
        catalog: Signature catalog

    Returns:
        Set of blocking signatures (wildcard imports appear as ``pkg.*``)
    """
    found: set[str] = set()

    for imp in artifact.imports:
        for matcher in (match_import, match_wildcard_import):
            signature = matcher(imp, catalog)
            if signature:
                found.add(signature)

    for annotation in artifact.annotations:
        signature = run_chain(annotation, catalog, ANNOTATION_STRATEGIES)
        if signature:
            found.add(signature)

    for ref in artifact.references:
        signature = run_chain(ref, catalog, REFERENCE_STRATEGIES)
        if signature:
            found.add(signature)

    if found:
        logger.debug(f"Blocking signatures in {artifact.path}: {sorted(found)}")

    return found
