"""Test configuration."""

from pathlib import Path

import pytest


POM_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <groupId>com.example</groupId>
    <artifactId>{artifact}</artifactId>
    <version>1.0.0</version>
{dependencies}</project>
"""

DEPENDENCY_TEMPLATE = """        <dependency>
            <groupId>{group}</groupId>
            <artifactId>{artifact}</artifactId>
            <version>4.0.0</version>
        </dependency>
"""

EJB_COORDINATES = [
    ("jakarta.ejb", "jakarta.ejb-api"),
    ("javax.ejb", "javax.ejb-api"),
]


def make_pom(artifact: str = "test-app", dependencies=EJB_COORDINATES) -> str:
    """Build a POM declaring the given (group, artifact) dependencies."""
    if not dependencies:
        return POM_TEMPLATE.format(artifact=artifact, dependencies="")

    entries = "".join(
        DEPENDENCY_TEMPLATE.format(group=group, artifact=art)
        for group, art in dependencies
    )
    block = f"    <dependencies>\n{entries}    </dependencies>\n"
    return POM_TEMPLATE.format(artifact=artifact, dependencies=block)


TIMER_BEAN = """package com.example;

import jakarta.ejb.Schedule;
import jakarta.ejb.Singleton;

@Singleton
public class TimerBean {
    @Schedule(hour = "*", minute = "*/5")
    public void tick() {
    }
}
"""

PLAIN_SERVICE = """package com.example;

import org.springframework.stereotype.Service;

@Service
public class SimpleService {
    public void doWork() {
        // No timer usage
    }
}
"""


@pytest.fixture
def pom_xml():
    """POM factory."""
    return make_pom


@pytest.fixture
def write_project(tmp_path):
    """Write a dict of relative path -> content under tmp_path."""

    def _write(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return tmp_path

    return _write
