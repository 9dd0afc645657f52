"""Removal of dependency entries from Maven ``pom.xml`` descriptors.

The document is parsed only to locate matching ``<dependency>`` elements;
the edit itself cuts their spans out of the original text, so everything
else (header comments, DOCTYPE, formatting, attribute quoting) is kept
byte for byte.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable
from xml.parsers import expat

from retention_analyzer.models import DependencyCoordinate

logger = logging.getLogger(__name__)


def _local(name: str) -> str:
    return name.rsplit(":", 1)[-1]


@dataclass
class _Element:
    """An element with its byte span in the encoded document."""

    name: str
    start: int
    end: int = -1
    children: list["_Element"] = field(default_factory=list)
    text: list[str] = field(default_factory=list)

    def children_named(self, name: str) -> list["_Element"]:
        return [c for c in self.children if c.name == name]

    def child_text(self, name: str) -> str:
        for child in self.children_named(name):
            return "".join(child.text).strip()
        return ""


def _parse(data: bytes) -> _Element:
    """Parse a UTF-8 document into an element tree with byte spans.

    Raises:
        expat.ExpatError: If the document is not well-formed
    """
    parser = expat.ParserCreate(encoding="utf-8")
    stack: list[_Element] = []
    roots: list[_Element] = []

    def start(name: str, attrs: dict) -> None:
        element = _Element(_local(name), parser.CurrentByteIndex)
        if stack:
            stack[-1].children.append(element)
        else:
            roots.append(element)
        stack.append(element)

    def end(name: str) -> None:
        element = stack.pop()
        # The index points at the end tag, or at the start tag of <a/>
        element.end = data.index(b">", parser.CurrentByteIndex) + 1

    def characters(text: str) -> None:
        if stack:
            stack[-1].text.append(text)

    parser.StartElementHandler = start
    parser.EndElementHandler = end
    parser.CharacterDataHandler = characters
    parser.Parse(data, True)
    return roots[0]


def _line_span(data: bytes, start: int, end: int) -> tuple[int, int]:
    """Widen a span to whole lines when nothing else shares them."""
    line_start = data.rfind(b"\n", 0, start) + 1
    if data[line_start:start].strip():
        return start, end

    newline = data.find(b"\n", end)
    line_end = len(data) if newline == -1 else newline + 1
    if data[end:line_end].strip():
        return start, end
    return line_start, line_end


def _dependency_sections(root: _Element) -> list[_Element]:
    """Project-level and profile ``<dependencies>`` elements."""
    sections = root.children_named("dependencies")
    for profiles in root.children_named("profiles"):
        for profile in profiles.children_named("profile"):
            sections.extend(profile.children_named("dependencies"))
    return sections


class PomDescriptorMutator:
    """Removes dependency entries from a POM document.

    Only ``<dependencies>`` sections of the project itself and of its
    profiles are edited; ``dependencyManagement`` and plugin dependencies
    are left alone. A ``<dependencies>`` element emptied by the removal is
    dropped too. When nothing matches the input text is returned unchanged.
    """

    def remove_dependencies(
        self,
        content: str,
        coordinates: Iterable[DependencyCoordinate],
    ) -> tuple[str, list[DependencyCoordinate]]:
        """Remove all entries matching the given coordinates.

        Args:
            content: POM document text
            coordinates: group/artifact identities to remove

        Returns:
            Tuple of (new document text, coordinates actually removed)
        """
        wanted = set(coordinates)
        if not wanted:
            return content, []

        data = content.encode("utf-8")
        try:
            root = _parse(data)
        except (expat.ExpatError, IndexError, ValueError) as e:
            logger.warning(f"Cannot parse descriptor, leaving it untouched: {e}")
            return content, []

        removed: list[DependencyCoordinate] = []
        spans: list[tuple[int, int]] = []
        for section in _dependency_sections(root):
            matched = []
            for dependency in section.children_named("dependency"):
                coordinate = DependencyCoordinate(
                    dependency.child_text("groupId"),
                    dependency.child_text("artifactId"),
                )
                if coordinate in wanted:
                    matched.append(dependency)
                    if coordinate not in removed:
                        removed.append(coordinate)

            if not matched:
                continue
            if len(matched) == len(section.children):
                spans.append(_line_span(data, section.start, section.end))
            else:
                spans.extend(_line_span(data, d.start, d.end) for d in matched)

        if not removed:
            return content, []

        for start, end in sorted(spans, reverse=True):
            data = data[:start] + data[end:]
        return data.decode("utf-8"), removed
