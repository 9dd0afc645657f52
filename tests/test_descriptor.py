"""Tests for POM dependency removal."""

import xml.etree.ElementTree as ET

import pytest

from conftest import make_pom
from retention_analyzer.descriptor import PomDescriptorMutator
from retention_analyzer.models import DependencyCoordinate

JAKARTA = DependencyCoordinate("jakarta.ejb", "jakarta.ejb-api")
JAVAX = DependencyCoordinate("javax.ejb", "javax.ejb-api")

NS = "{http://maven.apache.org/POM/4.0.0}"


@pytest.fixture
def mutator():
    return PomDescriptorMutator()


def artifact_ids(content: str) -> list[str]:
    root = ET.fromstring(content)
    return [
        dep.findtext(f"{NS}artifactId")
        for dep in root.iter(f"{NS}dependency")
    ]


class TestRemoveDependencies:
    """Test dependency entry removal."""

    def test_removes_only_dependency_and_empty_section(self, mutator):
        """Test removing the last entry drops the whole section."""
        content = make_pom(dependencies=[("jakarta.ejb", "jakarta.ejb-api")])

        updated, removed = mutator.remove_dependencies(content, [JAKARTA, JAVAX])

        assert removed == [JAKARTA]
        assert updated == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<project xmlns="http://maven.apache.org/POM/4.0.0">\n'
            "    <modelVersion>4.0.0</modelVersion>\n"
            "    <groupId>com.example</groupId>\n"
            "    <artifactId>test-app</artifactId>\n"
            "    <version>1.0.0</version>\n"
            "</project>\n"
        )

    def test_removes_both_namespaces_and_keeps_others(self, mutator):
        """Test jakarta and javax entries go while others stay."""
        content = make_pom(dependencies=[
            ("jakarta.ejb", "jakarta.ejb-api"),
            ("org.springframework", "spring-context"),
            ("javax.ejb", "javax.ejb-api"),
        ])

        updated, removed = mutator.remove_dependencies(content, [JAKARTA, JAVAX])

        assert set(removed) == {JAKARTA, JAVAX}
        assert artifact_ids(updated) == ["spring-context"]
        assert "    <dependencies>\n        <dependency>\n            <groupId>org.springframework</groupId>" in updated
        assert "        </dependency>\n    </dependencies>\n</project>" in updated

    def test_absent_entry_is_a_no_op(self, mutator):
        """Test nothing changes when no entry matches."""
        content = make_pom(dependencies=[("org.springframework", "spring-context")])

        updated, removed = mutator.remove_dependencies(content, [JAKARTA, JAVAX])

        assert removed == []
        assert updated is content

    def test_running_twice_is_idempotent(self, mutator):
        """Test a second removal leaves the document as it is."""
        content = make_pom()

        once, _ = mutator.remove_dependencies(content, [JAKARTA, JAVAX])
        twice, removed = mutator.remove_dependencies(once, [JAKARTA, JAVAX])

        assert twice == once
        assert removed == []

    def test_dependency_management_is_untouched(self, mutator):
        """Test managed dependencies are not edited."""
        content = (
            '<project xmlns="http://maven.apache.org/POM/4.0.0">\n'
            "    <dependencyManagement>\n"
            "        <dependencies>\n"
            "            <dependency>\n"
            "                <groupId>jakarta.ejb</groupId>\n"
            "                <artifactId>jakarta.ejb-api</artifactId>\n"
            "            </dependency>\n"
            "        </dependencies>\n"
            "    </dependencyManagement>\n"
            "</project>\n"
        )

        updated, removed = mutator.remove_dependencies(content, [JAKARTA])

        assert removed == []
        assert updated == content

    def test_profile_dependencies_are_edited(self, mutator):
        """Test entries inside a profile are removed."""
        content = (
            '<project xmlns="http://maven.apache.org/POM/4.0.0">\n'
            "    <profiles>\n"
            "        <profile>\n"
            "            <id>legacy</id>\n"
            "            <dependencies>\n"
            "                <dependency>\n"
            "                    <groupId>javax.ejb</groupId>\n"
            "                    <artifactId>javax.ejb-api</artifactId>\n"
            "                </dependency>\n"
            "            </dependencies>\n"
            "        </profile>\n"
            "    </profiles>\n"
            "</project>\n"
        )

        updated, removed = mutator.remove_dependencies(content, [JAVAX])

        assert removed == [JAVAX]
        assert updated == (
            '<project xmlns="http://maven.apache.org/POM/4.0.0">\n'
            "    <profiles>\n"
            "        <profile>\n"
            "            <id>legacy</id>\n"
            "        </profile>\n"
            "    </profiles>\n"
            "</project>\n"
        )

    def test_comments_survive(self, mutator):
        """Test comments inside the project are kept."""
        content = make_pom().replace(
            "    <modelVersion>", "    <!-- keep me -->\n    <modelVersion>"
        )

        updated, _ = mutator.remove_dependencies(content, [JAKARTA, JAVAX])

        assert "<!-- keep me -->" in updated

    def test_text_outside_the_root_element_is_kept(self, mutator):
        """Test header comments and processing instructions survive removal."""
        content = make_pom().replace(
            "<project ",
            "<!-- Licensed under Apache 2.0 -->\n<?m2e ignore?>\n<project ",
        )

        updated, removed = mutator.remove_dependencies(content, [JAKARTA])

        assert removed == [JAKARTA]
        assert updated.startswith(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            "<!-- Licensed under Apache 2.0 -->\n"
            "<?m2e ignore?>\n"
            "<project "
        )

    def test_formatting_elsewhere_is_kept(self, mutator):
        """Test quoting and empty elements outside the removed entry are untouched."""
        content = (
            "<project xmlns='http://maven.apache.org/POM/4.0.0'>\n"
            "    <properties><skip/></properties>\n"
            "    <dependencies>\n"
            "        <dependency><groupId>jakarta.ejb</groupId><artifactId>jakarta.ejb-api</artifactId></dependency>\n"
            "        <dependency><groupId>org.example</groupId><artifactId>kept</artifactId></dependency>\n"
            "    </dependencies>\n"
            "</project>"
        )

        updated, _ = mutator.remove_dependencies(content, [JAKARTA])

        assert updated == (
            "<project xmlns='http://maven.apache.org/POM/4.0.0'>\n"
            "    <properties><skip/></properties>\n"
            "    <dependencies>\n"
            "        <dependency><groupId>org.example</groupId><artifactId>kept</artifactId></dependency>\n"
            "    </dependencies>\n"
            "</project>"
        )

    def test_entry_sharing_a_line(self, mutator):
        """Test only the entry itself is cut when other elements share its line."""
        content = (
            "<project><dependencies>"
            "<dependency><groupId>javax.ejb</groupId><artifactId>javax.ejb-api</artifactId></dependency>"
            "<dependency><groupId>org.example</groupId><artifactId>kept</artifactId></dependency>"
            "</dependencies></project>"
        )

        updated, removed = mutator.remove_dependencies(content, [JAVAX])

        assert removed == [JAVAX]
        assert updated == (
            "<project><dependencies>"
            "<dependency><groupId>org.example</groupId><artifactId>kept</artifactId></dependency>"
            "</dependencies></project>"
        )

    def test_non_ascii_content(self, mutator):
        """Test multi-byte characters before the entry do not shift the cut."""
        content = make_pom().replace("<version>1.0.0</version>", "<name>Zürich Größe</name>")

        updated, removed = mutator.remove_dependencies(content, [JAKARTA, JAVAX])

        assert len(removed) == 2
        assert "<name>Zürich Größe</name>\n</project>" in updated

    def test_pom_without_namespace(self, mutator):
        """Test POMs without the Maven namespace."""
        content = (
            "<project>\n"
            "    <dependencies>\n"
            "        <dependency>\n"
            "            <groupId>jakarta.ejb</groupId>\n"
            "            <artifactId>jakarta.ejb-api</artifactId>\n"
            "        </dependency>\n"
            "    </dependencies>\n"
            "</project>"
        )

        updated, removed = mutator.remove_dependencies(content, [JAKARTA])

        assert removed == [JAKARTA]
        assert updated == "<project>\n</project>"

    def test_schema_location_is_preserved(self, mutator):
        """Test root attributes are kept verbatim."""
        header = (
            '<project xmlns="http://maven.apache.org/POM/4.0.0" '
            'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
            'xsi:schemaLocation="http://maven.apache.org/POM/4.0.0 '
            'https://maven.apache.org/xsd/maven-4.0.0.xsd">'
        )
        content = make_pom().replace('<project xmlns="http://maven.apache.org/POM/4.0.0">', header)

        updated, removed = mutator.remove_dependencies(content, [JAKARTA, JAVAX])

        assert len(removed) == 2
        assert header in updated

    def test_malformed_descriptor_is_left_untouched(self, mutator):
        """Test a broken document is returned unchanged."""
        content = "<project><dependencies>"

        updated, removed = mutator.remove_dependencies(content, [JAKARTA])

        assert updated == content
        assert removed == []


class TestDependencyCoordinate:
    """Test coordinate parsing."""

    def test_parse(self):
        """Test parsing group:artifact strings."""
        assert DependencyCoordinate.parse("jakarta.ejb:jakarta.ejb-api") == JAKARTA
        assert str(JAVAX) == "javax.ejb:javax.ejb-api"

    def test_parse_rejects_invalid(self):
        """Test strings without a separator are rejected."""
        with pytest.raises(ValueError):
            DependencyCoordinate.parse("jakarta.ejb")
