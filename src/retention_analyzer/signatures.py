"""Closed sets of blocking and neutral-shim signatures."""

from dataclasses import dataclass, field
from typing import Iterable

# EJB timer types that still need the EJB API on the classpath
EJB_TIMER_TYPES = frozenset({
    "jakarta.ejb.Timer",
    "jakarta.ejb.TimerService",
    "jakarta.ejb.TimerConfig",
    "jakarta.ejb.TimerHandle",
    "jakarta.ejb.ScheduleExpression",
    "jakarta.ejb.TimedObject",
    "javax.ejb.Timer",
    "javax.ejb.TimerService",
    "javax.ejb.TimerConfig",
    "javax.ejb.TimerHandle",
    "javax.ejb.ScheduleExpression",
    "javax.ejb.TimedObject",
})

EJB_TIMER_ANNOTATIONS = frozenset({
    "jakarta.ejb.Timeout",
    "jakarta.ejb.Schedule",
    "jakarta.ejb.Schedules",
    "javax.ejb.Timeout",
    "javax.ejb.Schedule",
    "javax.ejb.Schedules",
})

# Stubs shipped by the migration-annotations artifact
MIGRATION_STUB_TYPES = frozenset({
    "com.github.migration.timer.Timer",
    "com.github.migration.timer.TimerService",
    "com.github.migration.timer.TimerConfig",
    "com.github.migration.timer.TimerHandle",
    "com.github.migration.timer.ScheduleExpression",
})


def _package_of(fqn: str) -> str:
    return fqn.rsplit(".", 1)[0] if "." in fqn else ""


@dataclass(frozen=True)
class SignatureCatalog:
    """Blocking types, blocking annotations and neutral shims.

    The sets are fixed once the catalog is built. ``blocking_packages`` are
    the packages that own at least one blocking signature; a wildcard import
    from one of them (or a sub-package) counts as blocking.
    """

    blocking_types: frozenset[str] = EJB_TIMER_TYPES
    blocking_annotations: frozenset[str] = EJB_TIMER_ANNOTATIONS
    neutral_shims: frozenset[str] = MIGRATION_STUB_TYPES
    blocking_packages: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        overlap = self.neutral_shims & (self.blocking_types | self.blocking_annotations)
        if overlap:
            raise ValueError(f"Signatures cannot be both blocking and neutral: {sorted(overlap)}")

        packages = {
            _package_of(fqn)
            for fqn in self.blocking_types | self.blocking_annotations
        }
        packages.discard("")
        object.__setattr__(self, "blocking_packages", frozenset(packages))

    @classmethod
    def with_extras(
        cls,
        types: Iterable[str] = (),
        annotations: Iterable[str] = (),
        neutral_shims: Iterable[str] = (),
    ) -> "SignatureCatalog":
        """Build the default catalog extended with additional signatures."""
        return cls(
            blocking_types=EJB_TIMER_TYPES | frozenset(types),
            blocking_annotations=EJB_TIMER_ANNOTATIONS | frozenset(annotations),
            neutral_shims=MIGRATION_STUB_TYPES | frozenset(neutral_shims),
        )

    def is_blocking(self, fqn: str) -> bool:
        """Check if an FQN is a blocking type or annotation."""
        return fqn in self.blocking_types or fqn in self.blocking_annotations

    def is_blocking_annotation(self, fqn: str) -> bool:
        return fqn in self.blocking_annotations

    def is_neutral_shim(self, fqn: str) -> bool:
        return fqn in self.neutral_shims

    def is_blocking_wildcard(self, import_name: str) -> bool:
        """Check if ``a.b.*`` is rooted at a blocking package."""
        if not import_name.endswith(".*"):
            return False
        package = import_name[:-2]
        return any(
            package == root or package.startswith(root + ".")
            for root in self.blocking_packages
        )

    def strip_neutral(self, signatures: Iterable[str]) -> set[str]:
        """Drop neutral-shim signatures from a collection."""
        return {s for s in signatures if s not in self.neutral_shims}
