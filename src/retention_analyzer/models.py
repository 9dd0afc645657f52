"""Core data models for the Dependency Retention Analyzer."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DependencyCoordinate:
    """A group/artifact identity inside a build descriptor."""

    group_id: str
    artifact_id: str

    @classmethod
    def parse(cls, value: str) -> "DependencyCoordinate":
        """Parse a ``group:artifact`` string."""
        group_id, sep, artifact_id = value.strip().partition(":")
        if not sep or not group_id or not artifact_id:
            raise ValueError(f"Invalid dependency coordinate: {value!r}")
        return cls(group_id.strip(), artifact_id.strip())

    def __str__(self) -> str:
        """String representation."""
        return f"{self.group_id}:{self.artifact_id}"


@dataclass(frozen=True)
class ImportRef:
    """One import statement of a source artifact."""

    name: str  # e.g. "jakarta.ejb.Timer" or "jakarta.ejb.*"
    is_static: bool = False
    alias: str | None = None
    line: int = 0

    @property
    def is_wildcard(self) -> bool:
        """Check if this is an on-demand import."""
        return self.name.endswith(".*")

    @property
    def local_name(self) -> str:
        """Name under which the import is visible in the file."""
        return self.alias or self.name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class Reference:
    """An identifier, field-access or annotation expression."""

    text: str
    segments: tuple[str, ...] = ()
    resolved_type: str | None = None
    line: int = 0


@dataclass
class SourceArtifact:
    """One source unit as seen by the fact extractor."""

    path: str
    package: str | None = None
    imports: list[ImportRef] = field(default_factory=list)
    annotations: list[Reference] = field(default_factory=list)
    references: list[Reference] = field(default_factory=list)


@dataclass(frozen=True)
class Fact:
    """An observed (artifact, blocking signature) pairing."""

    artifact_path: str
    signature: str


@dataclass
class ModuleDecision:
    """Retain/remove decision for one module descriptor."""

    module_path: str
    descriptor_path: str
    retain: bool
    signatures: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    removed: list[DependencyCoordinate] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        """Module path for humans."""
        return self.module_path or "(root)"

    @property
    def changed(self) -> bool:
        """Check if the descriptor was modified."""
        return bool(self.removed)


@dataclass
class RetentionReport:
    """Result of one analysis run over a project tree."""

    project_root: str
    decisions: list[ModuleDecision] = field(default_factory=list)
    updated_descriptors: dict[str, str] = field(default_factory=dict)
    scanned_files: int = 0

    @property
    def retained(self) -> list[ModuleDecision]:
        """Decisions that keep the dependency."""
        return [d for d in self.decisions if d.retain]

    @property
    def removable(self) -> list[ModuleDecision]:
        """Decisions that drop the dependency."""
        return [d for d in self.decisions if not d.retain]
