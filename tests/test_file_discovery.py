"""Tests for file discovery."""

from pathlib import Path

from conftest import PLAIN_SERVICE, make_pom
from retention_analyzer.scanner.file_discovery import FileDiscovery


class TestFileDiscovery:
    """Test discovery of sources and descriptors in one walk."""

    def test_iter_files_yields_sources_and_descriptors(self, write_project):
        """Test one walk yields both sources and descriptors."""
        root = write_project({
            "pom.xml": make_pom(),
            "src/main/java/A.java": PLAIN_SERVICE,
            "src/main/kotlin/B.kt": "class B\n",
            "README.md": "# readme\n",
        })
        discovery = FileDiscovery(root)

        found = sorted(discovery.relative(p) for p in discovery.iter_files())

        assert found == ["pom.xml", "src/main/java/A.java", "src/main/kotlin/B.kt"]

    def test_excluded_directories(self, write_project):
        """Test files under excluded directories are skipped."""
        root = write_project({
            "pom.xml": make_pom(),
            "target/generated/A.java": PLAIN_SERVICE,
            "module-a/target/pom.xml": make_pom("copy"),
        })
        discovery = FileDiscovery(root, exclude_patterns=["**/target/**"])

        assert [discovery.relative(p) for p in discovery.iter_files()] == ["pom.xml"]

    def test_classifies_paths(self, tmp_path: Path):
        """Test source and descriptor classification."""
        discovery = FileDiscovery(tmp_path, marker_files=frozenset({"pom.xml", "build.xml"}))

        assert discovery.is_source(tmp_path / "A.scala")
        assert not discovery.is_source(tmp_path / "A.groovy")
        assert discovery.is_descriptor(tmp_path / "sub/build.xml")
        assert not discovery.is_descriptor(tmp_path / "pom.xml.bak")

    def test_relative_outside_project(self, tmp_path: Path):
        """Test paths outside the project are returned as-is."""
        discovery = FileDiscovery(tmp_path / "project")

        assert discovery.relative(tmp_path / "elsewhere/A.java") == (
            (tmp_path / "elsewhere/A.java").as_posix()
        )
