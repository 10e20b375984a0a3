"""Tests for project.py — pom.xml parsing and expression resolution."""

import pytest

from herald.errors import ProjectError
from herald.project import parse_project, resolve_expressions

from .conftest import POM


class TestParseProject:
    def test_namespaced_pom(self, write_file):
        project = parse_project(write_file("pom.xml", POM))

        assert project.group_id == "org.example"
        assert project.artifact_id == "widget"
        assert project.version == "1.1-SNAPSHOT"
        assert project.packaging == "jar"
        assert project.name == "Widget"
        assert project.url == "https://example.org/widget"
        assert project.source_encoding == "UTF-8"
        assert project.final_name == "widget-1.1-SNAPSHOT"

    def test_issue_management(self, write_file):
        project = parse_project(write_file("pom.xml", POM))

        assert project.issue_management.system == "JIRA"
        assert project.issue_management.url == "https://issues.example.org/jira/browse/WDG"

    def test_no_issue_management(self, write_file):
        project = parse_project(write_file("pom.xml", """\
            <project>
                <groupId>g</groupId>
                <artifactId>a</artifactId>
                <version>1</version>
            </project>
        """))
        assert project.issue_management is None

    def test_basedir_is_pom_directory(self, write_file, tmp_path):
        project = parse_project(write_file("sub/pom.xml", POM))
        assert project.basedir == (tmp_path / "sub").resolve()

    def test_parent_inheritance(self, write_file):
        project = parse_project(write_file("pom.xml", """\
            <project>
                <parent>
                    <groupId>org.example</groupId>
                    <artifactId>parent</artifactId>
                    <version>3.0</version>
                </parent>
                <artifactId>child</artifactId>
                <packaging>pom</packaging>
            </project>
        """))
        assert project.group_id == "org.example"
        assert project.version == "3.0"
        assert project.packaging == "pom"

    def test_build_section(self, write_file):
        project = parse_project(write_file("pom.xml", """\
            <project>
                <groupId>g</groupId>
                <artifactId>a</artifactId>
                <version>${revision}</version>
                <properties>
                    <revision>2.5</revision>
                </properties>
                <build>
                    <finalName>${project.artifactId}-final</finalName>
                    <filters>
                        <filter>src/main/filters/dev.properties</filter>
                    </filters>
                    <resources>
                        <resource>
                            <directory>src/main/config</directory>
                            <targetPath>conf</targetPath>
                            <filtering>true</filtering>
                            <includes><include>**/*.properties</include></includes>
                            <excludes><exclude>secret/**</exclude></excludes>
                        </resource>
                    </resources>
                </build>
            </project>
        """))
        assert project.version == "2.5"
        assert project.final_name == "a-final"
        assert project.filters == ["src/main/filters/dev.properties"]
        resource = project.resources[0]
        assert resource.directory == "src/main/config"
        assert resource.target_path == "conf"
        assert resource.filtering is True
        assert resource.includes == ["**/*.properties"]
        assert resource.excludes == ["secret/**"]

    def test_default_resource(self, write_file):
        project = parse_project(write_file("pom.xml", POM))
        assert [r.directory for r in project.resources] == ["src/main/resources"]
        assert project.resources[0].filtering is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProjectError):
            parse_project(tmp_path / "pom.xml")

    def test_malformed_file(self, write_file):
        with pytest.raises(ProjectError):
            parse_project(write_file("pom.xml", "<project>"))


class TestResolveExpressions:
    def test_simple(self):
        assert resolve_expressions("v${a}", {"a": "1"}) == "v1"

    def test_unknown_kept(self):
        assert resolve_expressions("${missing}", {}) == "${missing}"

    def test_chained(self):
        assert resolve_expressions("${a}", {"a": "${b}", "b": "x"}) == "x"

    def test_circular_terminates(self):
        assert "${" in resolve_expressions("${a}", {"a": "${b}", "b": "${a}"})

    def test_legacy_spellings(self):
        values = {"project.version": "1.0"}
        assert resolve_expressions("${pom.version}/${version}", values) == "1.0/1.0"

    def test_none(self):
        assert resolve_expressions(None, {}) is None
