# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

from typing import Any

import dataclasses
import unittest

import gencall
from gencall import (
    BindingScope,
    NoMatchingMethodError,
    Wrapped,
    invoke,
    invoke_generic_method,
    resolve_method,
    unwrap,
)

from tests.generic_fixtures import Box, Echoer, Formatter, Widget


@dataclasses.dataclass
class ShellValue:
    base: Any

    def __gencall_unwrap__(self) -> Any:
        return self.base


class TestUnwrap(unittest.TestCase):
    def test_plain_values_unchanged(self) -> None:
        value = [1, 2]
        self.assertIs(unwrap(value), value)
        self.assertIsNone(unwrap(None))

    def test_nested_layers(self) -> None:
        self.assertEqual(unwrap(Wrapped(Wrapped(5))), 5)
        self.assertEqual(unwrap(ShellValue(Wrapped("x"))), "x")

    def test_wrapper_class_is_not_unwrapped(self) -> None:
        self.assertIs(unwrap(Wrapped), Wrapped)


class TestInvoke(unittest.TestCase):
    def test_wrapped_arguments_reach_method_unwrapped(self) -> None:
        echoer = Echoer()
        binding = resolve_method(
            echoer,
            BindingScope.PUBLIC_INSTANCE,
            "set_value",
            [object],
            [Wrapped([1, 2])],
        )
        assert binding is not None
        self.assertIsInstance(binding.arguments[0], Wrapped)

        invoke(binding.method, echoer, binding.arguments)
        self.assertEqual(echoer.last, [1, 2])

    def test_wrapped_argument_is_matched_as_the_wrapper(self) -> None:
        self.assertIsNone(
            resolve_method(
                Echoer(), BindingScope.PUBLIC_INSTANCE, "echo", [int],
                [Wrapped(5)],
            )
        )

    def test_unwrapped_for_constructed_generic_parameter(self) -> None:
        echoer = Echoer()
        rows = [{"a": 1}, {"b": 2}]
        binding = resolve_method(
            echoer, BindingScope.PUBLIC_INSTANCE, "count_rows", [int], [rows]
        )
        assert binding is not None
        self.assertEqual(
            invoke(binding.method, echoer, [Wrapped(ShellValue(rows))]), 2
        )

    def test_static_method_ignores_target(self) -> None:
        binding = resolve_method(
            Echoer, BindingScope.PUBLIC_STATIC, "repeat", [int], [3]
        )
        assert binding is not None
        self.assertEqual(invoke(binding.method, None, binding.arguments), [3, 3])

    def test_class_method_receives_class(self) -> None:
        binding = resolve_method(
            Echoer, BindingScope.PUBLIC_STATIC, "describe", [int], [3]
        )
        assert binding is not None
        self.assertEqual(
            invoke(binding.method, Echoer, binding.arguments), "Echoer:3"
        )
        self.assertEqual(
            invoke(binding.method, Echoer(), binding.arguments), "Echoer:3"
        )

    def test_instance_method_requires_instance(self) -> None:
        binding = resolve_method(
            Echoer(), BindingScope.PUBLIC_INSTANCE, "echo", [int], [3]
        )
        assert binding is not None
        with self.assertRaises(TypeError):
            invoke(binding.method, Echoer, binding.arguments)
        with self.assertRaises(TypeError):
            invoke(binding.method, None, binding.arguments)


class TestInvokeGenericMethod(unittest.TestCase):
    def test_instance_target(self) -> None:
        self.assertEqual(invoke_generic_method(Echoer(), "echo", [int], ["5"]), 5)

    def test_class_target(self) -> None:
        self.assertEqual(
            invoke_generic_method(Echoer, "repeat", [str], ["a", 3]),
            ["a", "a", "a"],
        )

    def test_defaults(self) -> None:
        w = Widget()
        self.assertEqual(
            invoke_generic_method(Echoer(), "combine", [Widget], [w, w]),
            (w, w, True),
        )
        self.assertEqual(
            invoke_generic_method(Echoer(), "with_options", [int], [1, "x"]),
            (1, "x", None),
        )

    def test_keyword_only_default_left_to_python(self) -> None:
        self.assertEqual(
            invoke_generic_method(Echoer(), "relaxed_kw", [int], [1]),
            "1:fast",
        )

    def test_overloads(self) -> None:
        self.assertEqual(
            invoke_generic_method(Formatter(), "format", [str], [5, "x"]),
            "int:5:x",
        )
        self.assertEqual(
            invoke_generic_method(
                Formatter(), "format", [str, int], [5, "x", "9"]
            ),
            "int:5:x:9",
        )

    def test_generic_owner(self) -> None:
        self.assertEqual(
            invoke_generic_method(Box[int](0), "replace", [str], ["1", 2]),
            (1, "2"),
        )

    def test_explicit_scope(self) -> None:
        self.assertEqual(
            invoke_generic_method(
                Echoer(),
                "_hidden",
                [int],
                [1],
                scope=BindingScope.ALL,
            ),
            1,
        )

    def test_no_match(self) -> None:
        with self.assertRaises(NoMatchingMethodError) as cm:
            invoke_generic_method(Echoer(), "echo", [int], ["five"])

        err = cm.exception
        self.assertIsInstance(err, gencall.GenericCallError)
        self.assertIsInstance(err, LookupError)
        self.assertEqual(err.method_name, "echo")
        self.assertEqual(err.type_args, (int,))
        self.assertEqual(err.arguments, ("five",))
        self.assertIn("echo[int]", str(err))

    def test_no_match_without_coercion(self) -> None:
        with self.assertRaises(NoMatchingMethodError):
            invoke_generic_method(
                Echoer(), "echo", [int], ["5"], allow_coercion=False
            )


if __name__ == "__main__":
    unittest.main()
