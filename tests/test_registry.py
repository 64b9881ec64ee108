import dataclasses
import logging

import pytest

from iskra_cli.core.errors import RegistrationError
from iskra_cli.core.parser import ParsedInput
from iskra_cli.core.registry import CommandSpec, Registry, build_registry, describe


class Owner:
    def hello(self, params, flags, args):
        """Say hello.

        Longer text that never shows up in help.
        """
        return "hello"

    not_callable = "nope"


def _static(params, flags, args):
    return "static"


def test_string_handlers_bind_to_owner() -> None:
    owner = Owner()
    registry = build_registry([CommandSpec("Hello", "hello")], owner)

    descriptor = registry.match("hello")
    assert descriptor is not None
    assert descriptor.name == "hello"
    assert descriptor.summary == "Say hello."
    assert descriptor.invoke([], None, {}) == "hello"


def test_unresolvable_specs_are_skipped(caplog: pytest.LogCaptureFixture) -> None:
    specs = [
        CommandSpec("missing", "no_such_method"),
        CommandSpec("broken", "not_callable"),
        CommandSpec("", _static),
        CommandSpec("two words", _static),
        CommandSpec("negative", _static, required_params=-1),
        CommandSpec("hello", "hello"),
        CommandSpec("static", _static),
    ]

    with caplog.at_level(logging.WARNING, logger="iskra_cli.core.registry"):
        registry = build_registry(specs, Owner())

    assert registry.names() == ["hello", "static"]
    assert "E_HANDLER_UNRESOLVED" in caplog.text
    assert "no_such_method" in caplog.text


def test_string_handler_without_owner_is_skipped() -> None:
    registry = build_registry([CommandSpec("hello", "hello"), CommandSpec("static", _static)])

    assert registry.names() == ["static"]


def test_describe_raises_for_a_single_bad_spec() -> None:
    with pytest.raises(RegistrationError):
        describe(CommandSpec("missing", "no_such_method"), Owner())


def test_first_registration_wins(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="iskra_cli.core.registry"):
        registry = build_registry(
            [
                CommandSpec("foo", lambda p, f, a: "first"),
                CommandSpec("FOO", lambda p, f, a: "second"),
            ]
        )

    assert len(registry) == 2
    assert registry.match("foo").invoke([], None, {}) == "first"
    assert "first one wins" in caplog.text


def test_descriptors_are_immutable() -> None:
    descriptor = describe(CommandSpec("static", _static))

    with pytest.raises(dataclasses.FrozenInstanceError):
        descriptor.name = "other"  # type: ignore[misc]


def test_metadata_is_lower_cased() -> None:
    descriptor = describe(
        CommandSpec(
            "Static",
            _static,
            required_args=frozenset({"Mode"}),
            required_flags=frozenset({"Fast"}),
            aliases=frozenset({"S"}),
        )
    )

    assert descriptor.required_args == frozenset({"mode"})
    assert descriptor.required_flags == frozenset({"fast"})
    assert descriptor.aliases == frozenset({"s"})
    assert descriptor.summary == "Run command"


def test_aliases_match_only_on_request() -> None:
    registry = build_registry([CommandSpec("static", _static, aliases=frozenset({"st"}))])

    assert registry.match("st") is None
    assert registry.match("st", aliases=True) is not None
    assert registry.match("static", aliases=True) is not None


def test_missing_reports_shape_problems() -> None:
    descriptor = describe(
        CommandSpec(
            "greet",
            _static,
            required_params=1,
            required_args=frozenset({"loud"}),
            required_flags=frozenset({"twice"}),
        )
    )

    problems = descriptor.missing(ParsedInput("greet"))
    assert problems == [
        "expected 1 parameter(s), got 0",
        "missing argument --loud=...",
        "missing flag --twice",
    ]
    assert descriptor.missing(
        ParsedInput("greet", ["bob"], frozenset({"twice"}), {"loud": "true"})
    ) == []
    assert descriptor.usage() == "greet <param1> --loud=<value> --twice"


def test_extend_leaves_the_original_untouched() -> None:
    base = build_registry([CommandSpec("static", _static)])
    extended = base.extend(build_registry([CommandSpec("hello", "hello")], Owner()))

    assert base.names() == ["static"]
    assert extended.names() == ["static", "hello"]
    assert list(Registry()) == []


def test_malformed_records_are_skipped(caplog: pytest.LogCaptureFixture) -> None:
    specs = [
        CommandSpec("count_text", _static, required_params="1"),  # type: ignore[arg-type]
        CommandSpec("count_bool", _static, required_params=True),
        CommandSpec(3, _static),  # type: ignore[arg-type]
        CommandSpec("alias_text", _static, aliases="st"),  # type: ignore[arg-type]
        CommandSpec("alias_int", _static, aliases=frozenset({1})),  # type: ignore[arg-type]
        CommandSpec("args_int", _static, required_args=5),  # type: ignore[arg-type]
        CommandSpec("summary_int", _static, summary=7),  # type: ignore[arg-type]
        CommandSpec("static", _static),
    ]

    with caplog.at_level(logging.WARNING, logger="iskra_cli.core.registry"):
        registry = build_registry(specs)

    assert registry.names() == ["static"]
    assert caplog.text.count("E_HANDLER_UNRESOLVED") == 7


def test_metadata_may_be_any_collection_of_strings() -> None:
    descriptor = describe(
        CommandSpec(
            "static",
            _static,
            required_args=["Mode"],  # type: ignore[arg-type]
            aliases=(a for a in ["S", "St"]),  # type: ignore[arg-type]
        )
    )

    assert descriptor.required_args == frozenset({"mode"})
    assert descriptor.aliases == frozenset({"s", "st"})


def test_no_such_method_message_prefixes_the_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="iskra_cli.core.registry"):
        build_registry([CommandSpec("missing", "gone")], Owner())
        build_registry(
            [CommandSpec("missing", "gone")], Owner(), no_such_method_message="No handler"
        )

    messages = [r.getMessage() for r in caplog.records]
    assert messages[0].startswith("Internal exception: no such method (E_HANDLER_UNRESOLVED)")
    assert messages[1].startswith("No handler (E_HANDLER_UNRESOLVED)")
