"""Unit tests for yamlunit.generator."""

from pathlib import Path

import pytest

from yamlunit.errors import ActionCompileError, GenerationError
from yamlunit.generator import ModuleEmitter, validate_code
from yamlunit.loader import parse_spec_string
from yamlunit.models import SpecBlock, SpecDocument
from yamlunit.skip import SkipPolicy
from yamlunit.templates import Templates, load_templates


def _emitter(output_root: Path, rules: dict | None = None, **kwargs) -> ModuleEmitter:
    return ModuleEmitter(
        templates=load_templates(),
        output_root=output_root,
        suite="Free",
        minor_version="8.12",
        skip_policy=SkipPolicy(rules or {}),
        **kwargs,
    )


def _doc(*blocks: tuple[str, object]) -> SpecDocument:
    return SpecDocument(
        path=Path("spec.yml"),
        blocks=tuple(SpecBlock(name, actions) for name, actions in blocks),
    )


class TestRenderModule:
    def test_valid_python(self, tmp_path: Path, basic_spec: str) -> None:
        doc = parse_spec_string(basic_spec, Path("search/10_basic.yml"))
        rendered = _emitter(tmp_path).render_module(doc, "search/10_basic.yml")
        compile(rendered.code, "<test>", "exec")

    def test_names_and_counts(self, tmp_path: Path, basic_spec: str) -> None:
        doc = parse_spec_string(basic_spec, Path("x.yml"))
        rendered = _emitter(tmp_path).render_module(doc, "search/10_basic.yml")
        assert rendered.namespace == "Search"
        assert rendered.module_name == "_BasicTest"
        assert rendered.tests == 2
        assert not rendered.skipped
        assert "class _BasicTest(YamlTestCase):" in rendered.code
        assert "def testBasicSearch(self):" in rendered.code
        assert "def testSearchWithSize(self):" in rendered.code

    def test_setup_rendered(self, tmp_path: Path, basic_spec: str) -> None:
        doc = parse_spec_string(basic_spec, Path("x.yml"))
        code = _emitter(tmp_path).render_module(doc, "search/10_basic.yml").code
        assert "self.do('indices.create', {'index': 'test_1', 'body': {'settings': {}}})" in code

    def test_provenance_and_group(self, tmp_path: Path) -> None:
        code = _emitter(tmp_path).render_module(_doc(("A", [])), "search/10_basic.yml").code
        assert (
            "https://github.com/elastic/elasticsearch/tree/8.12/rest-api-spec/src/main"
            "/resources/rest-api-spec/test/search/10_basic.yml"
        ) in code
        assert "pytestmark = pytest.mark.yaml_group('free')" in code
        assert "    group = 'free'\n" in code
        assert "# Namespace: Free.Search\n" in code

    def test_custom_source_url(self, tmp_path: Path) -> None:
        emitter = _emitter(tmp_path, source_url="https://example.com/{version}/{path}")
        code = emitter.render_module(_doc(("A", [])), "a/b.yml").code
        assert "https://example.com/8.12/a/b.yml" in code

    def test_colliding_case_names(self, tmp_path: Path) -> None:
        doc = _doc(("Basic!", []), ("Basic?", []), ("Basic", []))
        rendered = _emitter(tmp_path).render_module(doc, "a/b.yml")
        assert "def testBasic(self):" in rendered.code
        assert "def testBasic_(self):" in rendered.code
        assert "def testBasic__(self):" in rendered.code
        assert rendered.tests == 3
        compile(rendered.code, "<test>", "exec")

    def test_no_cases(self, tmp_path: Path) -> None:
        rendered = _emitter(tmp_path).render_module(_doc(("setup", [])), "a/b.yml")
        assert rendered.tests == 0
        assert not rendered.skipped
        compile(rendered.code, "<test>", "exec")

    def test_deprecated_interpolation_rewritten(self, tmp_path: Path) -> None:
        doc = _doc(("A", [{"match": {"token": "Bearer ${token}"}}]))
        code = _emitter(tmp_path).render_module(doc, "a/b.yml").code
        assert "${token}" not in code
        assert "Bearer {$token}" in code

    def test_action_error_names_case(self, tmp_path: Path) -> None:
        doc = _doc(("Broken case", [{"explode": 1}]))
        with pytest.raises(ActionCompileError) as exc_info:
            _emitter(tmp_path).render_module(doc, "a/b.yml")
        assert "Broken case" in str(exc_info.value)
        assert "spec.yml" in str(exc_info.value)


class TestSkipping:
    def test_single_case_skipped(self, tmp_path: Path) -> None:
        doc = _doc(("First", []), ("Second", []))
        rules = {"A::_BTest::First": "Broken on CI"}
        rendered = _emitter(tmp_path, rules).render_module(doc, "a/b.yml")
        assert not rendered.skipped
        assert "@unittest.skip('Broken on CI')" in rendered.code
        assert "def testSecond(self):" in rendered.code
        assert rendered.tests == 2

    def test_module_wildcard(self, tmp_path: Path) -> None:
        doc = _doc(("setup", [{"do": {"ping": {}}}]), ("First", []), ("Second", []))
        rendered = _emitter(tmp_path, {"A::_BTest::*": "Not supported"}).render_module(doc, "a/b.yml")
        assert rendered.skipped
        assert rendered.tests == 2
        assert rendered.code.count("@unittest.skip('Not supported')") == 3
        assert "def setUp" not in rendered.code
        compile(rendered.code, "<test>", "exec")

    def test_namespace_wildcard(self, tmp_path: Path) -> None:
        rendered = _emitter(tmp_path, {"A::*": "Namespace off"}).render_module(
            _doc(("First", [])), "a/b.yml"
        )
        assert rendered.skipped
        assert "Namespace off" in rendered.code

    def test_every_case_skipped_individually(self, tmp_path: Path) -> None:
        rules = {"A::_BTest::First": "one", "A::_BTest::Second": "two"}
        rendered = _emitter(tmp_path, rules).render_module(
            _doc(("First", []), ("Second", [])), "a/b.yml"
        )
        assert rendered.skipped
        assert "@unittest.skip('one')\nclass _BTest" in rendered.code

    def test_exact_reason_beats_module_reason(self, tmp_path: Path) -> None:
        rules = {"A::_BTest::*": "module", "A::_BTest::First": "exact"}
        code = _emitter(tmp_path, rules).render_module(
            _doc(("First", []), ("Second", [])), "a/b.yml"
        ).code
        assert "@unittest.skip('exact')\n    def testFirst" in code
        assert "@unittest.skip('module')\n    def testSecond" in code

    def test_reason_with_quotes(self, tmp_path: Path) -> None:
        rules = {"A::_BTest::First": "can't \"run\""}
        code = _emitter(tmp_path, rules).render_module(
            _doc(("First", []), ("Second", [])), "a/b.yml"
        ).code
        compile(code, "<test>", "exec")


class TestGroupTag:
    @pytest.mark.parametrize(
        ("suite", "group"),
        [
            ("Class", "class"),
            ("My suite", "my suite"),
            ("Xpack.free", "xpack.free"),
            ("It's", "it's"),
        ],
    )
    def test_any_suite_name_renders_valid_code(
        self, tmp_path: Path, suite: str, group: str
    ) -> None:
        for rules in ({}, {"A::_BTest::*": "off"}):
            emitter = ModuleEmitter(load_templates(), tmp_path, suite, "8.12", SkipPolicy(rules))
            code = emitter.render_module(_doc(("First", [])), "a/b.yml").code
            compile(code, "<test>", "exec")
            assert f"pytest.mark.yaml_group({group!r})" in code
            assert f"    group = {group!r}\n" in code


class TestEmit:
    def test_writes_module(self, tmp_path: Path, basic_spec: str) -> None:
        doc = parse_spec_string(basic_spec, Path("x.yml"))
        emitted = _emitter(tmp_path).emit(doc, "cat.aliases/10_basic.yml")
        assert emitted.path == tmp_path / "Cat" / "Aliases" / "_BasicTest.py"
        assert emitted.path.read_text().startswith("# Generated from")
        assert emitted.tests == 2

    def test_package_markers(self, tmp_path: Path) -> None:
        _emitter(tmp_path).emit(_doc(("A", [])), "cat.aliases/10_basic.yml")
        assert (tmp_path / "__init__.py").exists()
        assert (tmp_path / "Cat" / "__init__.py").exists()
        assert (tmp_path / "Cat" / "Aliases" / "__init__.py").exists()

    def test_without_package_markers(self, tmp_path: Path) -> None:
        _emitter(tmp_path, package_markers=False).emit(_doc(("A", [])), "a/b.yml")
        assert not (tmp_path / "A" / "__init__.py").exists()

    def test_module_name_collision(self, tmp_path: Path) -> None:
        emitter = _emitter(tmp_path)
        first = emitter.emit(_doc(("A", [])), "search/10_basic.yml")
        second = emitter.emit(_doc(("B", [])), "search/20_basic.yml")
        assert first.path.name == "_BasicTest.py"
        assert second.path.name == "_Basic_Test.py"
        assert "class _Basic_Test(" in second.path.read_text()

    def test_invalid_output_raises(self, tmp_path: Path) -> None:
        broken = Templates(
            unit_test_class="class :test-name(:\n",
            unit_test_skipped="",
            function_test="",
            function_skipped="",
        )
        emitter = ModuleEmitter(broken, tmp_path, "Free", "8.12")
        with pytest.raises(GenerationError) as exc_info:
            emitter.emit(_doc(("A", [])), "a/b.yml")
        expected = tmp_path / "A" / "_BTest.py"
        assert str(expected) in str(exc_info.value)
        assert exc_info.value.path == str(expected)
        assert expected.exists()


class TestValidateCode:
    def test_valid(self, tmp_path: Path) -> None:
        validate_code("x = 1\n", tmp_path / "x.py")

    def test_invalid(self, tmp_path: Path) -> None:
        with pytest.raises(GenerationError, match="not valid"):
            validate_code("def (:\n", tmp_path / "x.py")

    def test_does_not_execute(self, tmp_path: Path) -> None:
        validate_code("raise RuntimeError('executed')\n", tmp_path / "x.py")
