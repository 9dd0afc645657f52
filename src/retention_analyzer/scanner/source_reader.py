"""Lightweight reader turning JVM source text into a SourceArtifact.

Java, Kotlin and Scala files are read textually: comments and literals are
blanked out, then imports, annotations and dotted references are collected
with regular expressions. Type attribution is limited to what the file's own
explicit imports reveal, plus whatever the caller passes in
``resolved_types``. References the reader cannot attribute keep
``resolved_type=None`` so the fact extractor falls back to textual matching.
"""

import bisect
import logging
import re

from retention_analyzer.models import ImportRef, Reference, SourceArtifact

logger = logging.getLogger(__name__)

_IDENT = r"[A-Za-z_$][\w$]*"

PACKAGE_RE = re.compile(rf"^[ \t]*package[ \t]+({_IDENT}(?:[ \t]*\.[ \t]*{_IDENT})*)", re.M)

IMPORT_RE = re.compile(
    rf"^import[ \t]+(static[ \t]+)?"
    rf"({_IDENT}(?:[ \t]*\.[ \t]*(?:{_IDENT}|\*))*)"
    rf"(?:[ \t]+as[ \t]+({_IDENT}))?[ \t]*$"
)

# Java: one statement up to its semicolon, possibly spanning lines
JAVA_IMPORT_RE = re.compile(r"(?<![\w$.])import\s[^;]*;")

# Scala: import a.b.{C, D => E, _}
SCALA_SELECTOR_IMPORT_RE = re.compile(
    rf"^import[ \t]+({_IDENT}(?:[ \t]*\.[ \t]*{_IDENT})*)[ \t]*\.[ \t]*\{{([^}}]*)\}}[ \t]*$"
)

# Kotlin use-site targets such as @field:Timeout
ANNOTATION_RE = re.compile(
    rf"@[ \t]*(?:(?:field|get|set|param|property|receiver|setparam|delegate|file)[ \t]*:[ \t]*)?"
    rf"({_IDENT}(?:\s*\.\s*{_IDENT})*)"
)

REFERENCE_RE = re.compile(rf"(?<![\w$.@])({_IDENT}(?:\s*\.\s*{_IDENT})*)")

_CHAR_LITERAL_RE = re.compile(r"'(?:\\.|[^'\\\n]){1,6}'")


class JavaSourceReader:
    """Reads one JVM source file into a SourceArtifact."""

    def __init__(self, resolved_types: dict[str, str] | None = None) -> None:
        """Initialize reader.

        Args:
            resolved_types: Optional external type attribution, mapping the
                raw text of an expression (whitespace removed) to its FQN
        """
        self.resolved_types = dict(resolved_types or {})

    def read(self, path: str, content: str) -> SourceArtifact:
        """Parse source text.

        Args:
            path: Artifact path relative to the project root
            content: Source text

        Returns:
            SourceArtifact for the file
        """
        code = blank_comments_and_literals(content)
        line_starts = _line_starts(code)

        package = None
        package_match = PACKAGE_RE.search(code)
        if package_match:
            package = _compact(package_match.group(1))

        if path.endswith(".java"):
            imports, statement_spans = self._extract_java_imports(code, line_starts)
        else:
            imports, statement_spans = self._extract_imports(code, line_starts)

        # Import and package statements are not references
        body = _blank_spans(code, statement_spans)
        if package_match:
            body = _blank_spans(body, [package_match.span()])

        local_names = {
            imp.local_name: imp.name
            for imp in imports
            if not imp.is_wildcard and not imp.is_static
        }

        annotations: list[Reference] = []
        annotation_spans: list[tuple[int, int]] = []
        for match in ANNOTATION_RE.finditer(body):
            name = _compact(match.group(1))
            if name == "interface":
                continue
            annotations.append(
                self._reference(match.group(1), _line_of(line_starts, match.start()), local_names)
            )
            annotation_spans.append(match.span())

        body = _blank_spans(body, annotation_spans)

        references: list[Reference] = []
        for match in REFERENCE_RE.finditer(body):
            ref = self._reference(match.group(1), _line_of(line_starts, match.start()), local_names)
            # A lone identifier tells nothing unless something attributes it
            if len(ref.segments) < 2 and ref.resolved_type is None:
                continue
            references.append(ref)

        logger.debug(
            f"Read {path}: {len(imports)} imports, {len(annotations)} annotations, "
            f"{len(references)} references"
        )

        return SourceArtifact(
            path=path,
            package=package,
            imports=imports,
            annotations=annotations,
            references=references,
        )

    def _extract_imports(
        self,
        code: str,
        line_starts: list[int],
    ) -> tuple[list[ImportRef], list[tuple[int, int]]]:
        imports: list[ImportRef] = []
        spans: list[tuple[int, int]] = []

        offset = 0
        for raw_line in code.splitlines(keepends=True):
            line_number = _line_of(line_starts, offset)
            position = offset
            for statement in raw_line.split(";"):
                stripped = statement.strip()
                if stripped.startswith("import"):
                    parsed = _parse_import(stripped, line_number)
                    if parsed:
                        imports.extend(parsed)
                        spans.append((position, position + len(statement)))
                position += len(statement) + 1
            offset += len(raw_line)

        return imports, spans

    def _extract_java_imports(
        self,
        code: str,
        line_starts: list[int],
    ) -> tuple[list[ImportRef], list[tuple[int, int]]]:
        imports: list[ImportRef] = []
        spans: list[tuple[int, int]] = []

        for match in JAVA_IMPORT_RE.finditer(code):
            statement = re.sub(r"\s+", " ", match.group(0)[:-1]).strip()
            parsed = _parse_import(statement, _line_of(line_starts, match.start()))
            if parsed:
                imports.extend(parsed)
                spans.append(match.span())

        return imports, spans

    def _reference(
        self,
        raw: str,
        line: int,
        local_names: dict[str, str],
    ) -> Reference:
        text = _compact(raw)
        segments = tuple(text.split("."))

        resolved = self.resolved_types.get(text)
        if resolved is None and segments[0] in local_names:
            resolved = local_names[segments[0]]

        return Reference(text=raw, segments=segments, resolved_type=resolved, line=line)


def _parse_import(statement: str, line: int) -> list[ImportRef]:
    selector = SCALA_SELECTOR_IMPORT_RE.match(statement)
    if selector:
        base = _compact(selector.group(1))
        result = []
        for member in selector.group(2).split(","):
            member = member.strip()
            if not member:
                continue
            name, _, alias = (part.strip() for part in member.partition("=>"))
            if name == "_":
                result.append(ImportRef(name=f"{base}.*", line=line))
            elif alias == "_":
                # Hidden member
                continue
            else:
                result.append(ImportRef(name=f"{base}.{name}", alias=alias or None, line=line))
        return result

    match = IMPORT_RE.match(statement)
    if not match:
        return []

    name = _compact(match.group(2))
    if name.endswith("._"):
        name = name[:-1] + "*"

    return [
        ImportRef(
            name=name,
            is_static=bool(match.group(1)),
            alias=match.group(3),
            line=line,
        )
    ]


def blank_comments_and_literals(content: str) -> str:
    """Replace comments and string/char literals with spaces.

    Newlines are kept so offsets map to the same line numbers.
    """
    out: list[str] = []
    i = 0
    n = len(content)

    while i < n:
        ch = content[i]
        nxt = content[i + 1] if i + 1 < n else ""

        if ch == "/" and nxt == "/":
            end = content.find("\n", i)
            end = n if end == -1 else end
            out.append(" " * (end - i))
            i = end
        elif ch == "/" and nxt == "*":
            end = content.find("*/", i + 2)
            end = n if end == -1 else end + 2
            out.append(_blank(content[i:end]))
            i = end
        elif content.startswith('"""', i):
            end = content.find('"""', i + 3)
            end = n if end == -1 else end + 3
            out.append(_blank(content[i:end]))
            i = end
        elif ch == '"':
            j = i + 1
            while j < n and content[j] != '"' and content[j] != "\n":
                j += 2 if content[j] == "\\" else 1
            end = min(j + 1, n)
            out.append(_blank(content[i:end]))
            i = end
        elif ch == "'":
            match = _CHAR_LITERAL_RE.match(content, i)
            if match:
                out.append(" " * (match.end() - i))
                i = match.end()
            else:
                out.append(ch)
                i += 1
        else:
            out.append(ch)
            i += 1

    return "".join(out)


def _blank(text: str) -> str:
    return "".join("\n" if c == "\n" else " " for c in text)


def _blank_spans(text: str, spans: list[tuple[int, int]]) -> str:
    if not spans:
        return text
    chars = list(text)
    for start, end in spans:
        for k in range(start, min(end, len(chars))):
            if chars[k] != "\n":
                chars[k] = " "
    return "".join(chars)


def _compact(text: str) -> str:
    return re.sub(r"\s+", "", text)


def _line_starts(text: str) -> list[int]:
    starts = [0]
    for match in re.finditer("\n", text):
        starts.append(match.end())
    return starts


def _line_of(line_starts: list[int], offset: int) -> int:
    return bisect.bisect_right(line_starts, offset)
