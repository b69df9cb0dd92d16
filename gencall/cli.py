# SPDX-PackageName: gencall
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright Gel Data Inc. and the contributors.


import argparse
import builtins
import importlib
import json
import logging
import sys
import typing

import gencall
from gencall._internal import _catalog
from gencall._internal import _config
from gencall._internal import _typing_eval


class C:
    BOLD = "\033[1m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"


class ColoredArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.exit(2, _format_error(message))


def _format_error(message):
    if sys.stderr.isatty():
        return f"{C.BOLD}{C.FAIL}error:{C.ENDC} {C.BOLD}{message:s}{C.ENDC}\n"
    else:
        return f"error: {message:s}\n"


parser = ColoredArgumentParser(
    prog="gencall",
    description="Call a generic Python method with runtime type arguments.",
)
parser.add_argument(
    "target",
    metavar="TARGET",
    help="The object or class to call the method on, as `module:attr` "
    "(the attribute may be a dotted path).",
)
parser.add_argument("method", metavar="METHOD", help="Method name.")
parser.add_argument(
    "args",
    metavar="ARG",
    nargs="*",
    help="Positional arguments, parsed as JSON when possible and passed "
    "as strings otherwise.",
)
parser.add_argument(
    "-T",
    "--type-arg",
    dest="type_args",
    action="append",
    default=[],
    metavar="TYPE",
    help="A type argument, e.g. `int` or `dict[str, list[int]]`. "
    "Repeat for every type parameter of the method.",
)
kind = parser.add_mutually_exclusive_group()
kind.add_argument(
    "--static",
    dest="static",
    action="store_true",
    default=None,
    help="Search static and class methods (default for classes).",
)
kind.add_argument(
    "--instance",
    dest="static",
    action="store_false",
    help="Search instance methods (default for non-class targets).",
)
parser.add_argument(
    "--non-public",
    action="store_true",
    help="Also search methods whose names start with an underscore.",
)
parser.add_argument(
    "--no-coercion",
    action="store_true",
    help="Only accept arguments whose types match exactly.",
)
parser.add_argument(
    "--list",
    action="store_true",
    help="List the generic methods of the target instead of calling one.",
)
parser.add_argument("-v", "--verbose", action="store_true")


def load_target(spec):
    modname, sep, attrpath = spec.partition(":")
    if not sep or not modname or not attrpath:
        raise ValueError(f"target must be `module:attr`, got {spec!r}")
    module = importlib.import_module(modname)
    obj = module
    for attr in attrpath.split("."):
        obj = getattr(obj, attr)
    return module, obj


def parse_type_arg(expr, module):
    ns = {**vars(typing), **vars(builtins), **vars(module)}
    return _typing_eval.resolve_type(expr, globals=ns)


def parse_arg(text):
    try:
        return json.loads(text)
    except ValueError:
        return text


def _scope(args, target):
    if args.static is None:
        scope = _catalog.default_scope(target)
    elif args.static:
        scope = gencall.BindingScope.PUBLIC_STATIC
    else:
        scope = gencall.BindingScope.PUBLIC_INSTANCE
    if args.non_public:
        scope |= gencall.BindingScope.NON_PUBLIC
    return scope


def _print_result(result):
    try:
        print(json.dumps(result))
    except (TypeError, ValueError):
        print(repr(result))


def main(argv=None):
    args = parser.parse_args(argv)
    settings = _config.Settings.from_env()
    if args.verbose or settings.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="[%(name)s] %(message)s",
            stream=sys.stderr,
        )

    try:
        module, target = load_target(args.target)
    except (ImportError, AttributeError, ValueError) as e:
        parser.error(str(e))

    scope = _scope(args, target)

    if args.list:
        for candidate in _catalog.iter_generic_methods(target, scope):
            print(candidate)
        return 0

    try:
        type_args = [parse_type_arg(t, module) for t in args.type_args]
    except (NameError, SyntaxError, TypeError) as e:
        parser.error(f"invalid type argument: {e}")

    call_args = [parse_arg(a) for a in args.args]

    try:
        result = gencall.invoke_generic_method(
            target,
            args.method,
            type_args,
            call_args,
            scope=scope,
            allow_coercion=False if args.no_coercion else None,
        )
    except gencall.NoMatchingMethodError as e:
        sys.stderr.write(_format_error(str(e)))
        return 1

    _print_result(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
