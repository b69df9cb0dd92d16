# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.

from typing import Any

import dataclasses
import unittest

from gencall._internal._conversion import try_convert

from tests.generic_fixtures import Greeter, Point, SubWidget, Widget


@dataclasses.dataclass
class Span:
    start: int
    end: int


class TestTryConvert(unittest.TestCase):
    def test_scalars(self) -> None:
        self.assertEqual(try_convert("5", int), (True, 5))
        self.assertEqual(try_convert("2.5", float), (True, 2.5))
        self.assertEqual(try_convert(5, str), (True, "5"))
        self.assertEqual(try_convert("true", bool), (True, True))

    def test_failure(self) -> None:
        self.assertEqual(try_convert("five", int), (False, None))
        self.assertEqual(try_convert(2.5, int), (False, None))
        self.assertEqual(try_convert(Widget(), int), (False, None))

    def test_containers(self) -> None:
        self.assertEqual(
            try_convert(["1", "2"], list[int]), (True, [1, 2])
        )
        self.assertEqual(
            try_convert({"a": ["1"]}, dict[str, list[int]]),
            (True, {"a": [1]}),
        )
        self.assertEqual(try_convert(["1", "x"], list[int]), (False, None))

    def test_arbitrary_classes(self) -> None:
        w = SubWidget()
        ok, value = try_convert(w, Widget)
        self.assertTrue(ok)
        self.assertIs(value, w)
        self.assertEqual(try_convert(object(), Widget), (False, None))

    def test_models_and_dataclasses(self) -> None:
        self.assertEqual(
            try_convert({"x": "1", "y": 2}, Point), (True, Point(x=1, y=2))
        )
        self.assertEqual(
            try_convert({"start": "1", "end": 3}, Span),
            (True, Span(start=1, end=3)),
        )
        self.assertEqual(try_convert({"x": 1}, Point), (False, None))

    def test_any_and_object(self) -> None:
        value = Widget()
        self.assertEqual(try_convert(value, Any), (True, value))
        self.assertEqual(try_convert(value, object), (True, value))

    def test_types_without_validator(self) -> None:
        # Static-only protocols cannot back an isinstance() validator.
        self.assertEqual(try_convert(5, Greeter), (False, None))


if __name__ == "__main__":
    unittest.main()
