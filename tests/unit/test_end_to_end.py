"""End-to-end tests: declare, compile and run module blocks."""

import pytest

from modscope import (
    ConfigurationError,
    DeclarationSyntaxError,
    ParseError,
    compile_source,
    install,
    run_source,
)


class TestScenarios:
    def test_named_and_versioned(self, compile_module) -> None:
        compiled = compile_module("module Foo::Bar 1.23 { sub_count }")
        assert compiled.run() == "Foo::Bar"
        assert compiled.namespaces.version_of("Foo::Bar") == "1.23"

    def test_named_without_version(self, compile_module) -> None:
        compiled = compile_module("module Foo::NoV { 23 }")
        assert compiled.run() == "Foo::NoV"
        assert compiled.namespaces.version_of("Foo::NoV") is None

    def test_anonymous_in_enclosing_package(self, compile_module) -> None:
        compiled = compile_module("module { 1 }", package="TestA")
        assert compiled.run() == "TestA"

    def test_anonymous_after_package_statement(self) -> None:
        assert run_source("package TestA; use module; module { 1 }") == "TestA"

    def test_terminator_instead_of_block(self, compile_module) -> None:
        with pytest.raises(DeclarationSyntaxError) as exc_info:
            compile_module("module Foo::Bar 1.23;")
        assert exc_info.value.stage == "version"

    def test_invalid_install_options(self, make_parser) -> None:
        parser = make_parser("module Foo { 1 }")
        with pytest.raises(ConfigurationError):
            install("main", "not-a-mapping-or-list", host=parser)
        with pytest.raises(ParseError):
            parser.parse()


class TestBlockBehaviour:
    def test_block_runs_in_declared_package(self) -> None:
        code = """
        use module;
        module Foo::Bar {
            sub baz { 45 }
        };
        Foo::Bar::baz()
        """
        assert run_source(code) == 45

    def test_package_inside_block(self, compile_module) -> None:
        compiled = compile_module("module Foo { __PACKAGE__ }")
        assert compiled.run() == "Foo"

    def test_package_restored_after_block(self, compile_module) -> None:
        compiled = compile_module("module Foo { 1 }; __PACKAGE__")
        assert compiled.run() == "main"

    def test_version_string_literal_kept(self, compile_module) -> None:
        compiled = compile_module("module Foo 2_0.0 { 1 }")
        compiled.run()
        assert compiled.namespaces.version_of("Foo") == "2_0.0"

    def test_multiline_declaration(self, compile_module) -> None:
        code = "module Multi::Line\n    0.01\n{\n    # body\n    1;\n}\n"
        compiled = compile_module(code)
        assert compiled.run() == "Multi::Line"
        assert compiled.namespaces.version_of("Multi::Line") == "0.01"

    def test_declarations_in_sequence(self, compile_module) -> None:
        compiled = compile_module("module A 1 { 1 }; module B 2 { 2 }; __PACKAGE__")
        assert compiled.run() == "main"
        assert compiled.namespaces.version_of("A") == "1"
        assert compiled.namespaces.version_of("B") == "2"

    def test_declaration_as_value(self, compile_module) -> None:
        compiled = compile_module('["x", module Foo { 1 }]')
        assert compiled.run() == ["x", "Foo"]


class TestNesting:
    def test_keyword_propagates_into_block(self, compile_module) -> None:
        code = """
        module Outer 1 {
            module Inner 2 { __PACKAGE__ };
            __PACKAGE__
        }
        """
        compiled = compile_module(code)
        assert compiled.run() == "Outer"
        assert compiled.namespaces.version_of("Outer") == "1"
        assert compiled.namespaces.version_of("Inner") == "2"

    def test_anonymous_nested_uses_outer_package(self, compile_module) -> None:
        compiled = compile_module("module Outer { module { 1 } }")
        source = compiled.source
        assert source.count('("Outer", do') == 2

    def test_alias_propagates(self, compile_module) -> None:
        compiled = compile_module(
            "namespace Outer { namespace Inner { 1 } }", {"as": "namespace"}
        )
        assert compiled.run() == "Outer"
        assert "Inner" in compiled.namespaces

    def test_inner_features_installed(self, compile_module) -> None:
        compiled = compile_module(
            "module Foo { namespace Bar { 1 } }",
            {"inner": [["module", {"as": "namespace"}]]},
        )
        assert compiled.run() == "Foo"
        assert "Bar" in compiled.namespaces
        assert 'namespace ("Bar", do' in compiled.source
        assert 'use syntax "module", {"as" => "namespace"}' in compiled.source

    def test_inner_features_only_inside_block(self, compile_module) -> None:
        with pytest.raises(ParseError):
            compile_module(
                "namespace Bar { 1 }", {"inner": [["module", {"as": "namespace"}]]}
            )


class TestPreambleOption:
    def test_extra_statements_run_in_block(self, compile_module) -> None:
        compiled = compile_module("module Foo { 1 }", {"preamble": ["version 9"]})
        compiled.run()
        assert compiled.namespaces.version_of("Foo") == "9"

    def test_extra_statements_follow_declared_version(self, compile_module) -> None:
        compiled = compile_module("module Foo 1.5 { 1 }", {"preamble": ["version 9"]})
        compiled.run()
        assert compiled.namespaces.version_of("Foo") == "9"

    def test_extra_statements_propagate(self, compile_module) -> None:
        compiled = compile_module(
            "module Outer { module Inner { 1 } }", {"preamble": ["version 3"]}
        )
        compiled.run()
        assert compiled.namespaces.version_of("Inner") == "3"


class TestKeywordScope:
    def test_not_available_in_other_package(self) -> None:
        with pytest.raises(ParseError):
            run_source("use module; package Other; module Foo { 1 }")

    def test_removed_when_installing_block_ends(self) -> None:
        with pytest.raises(ParseError):
            run_source("sub setup { use module; 1 }; module Foo { 1 }")

    def test_available_inside_installing_block(self) -> None:
        assert run_source("do { use module; module Foo { 1 } }") == "Foo"

    def test_not_a_keyword_after_qualifier(self, compile_module) -> None:
        compiled = compile_module('sub module { "plain" }; main::module()')
        assert compiled.run() == "plain"

    def test_anonymous_declaration_keeps_keyword(self) -> None:
        assert run_source("use module; module { 1 }; module Foo { 2 }") == "Foo"

    def test_nested_anonymous_keeps_keyword(self) -> None:
        compiled = compile_source(
            "use module; module Outer { module { 1 }; module Z { 2 } }"
        )
        assert compiled.run() == "Outer"
        assert "Z" in compiled.namespaces

    def test_reinstall_restores_outer_options(self) -> None:
        code = """
        use module;
        do { use module {"preamble" => ["version 7"]}; module A { 1 } };
        module B { 1 }
        """
        compiled = compile_source(code)
        assert compiled.run() == "B"
        assert compiled.namespaces.version_of("A") == "7"
        assert compiled.namespaces.version_of("B") is None

    def test_reinstall_restores_plain_function(self) -> None:
        code = 'sub module { "plain" }; do { use module; module Foo { 1 } }; module()'
        assert run_source(code) == "plain"
