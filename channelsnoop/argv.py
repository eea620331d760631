"""Minimal command-line option scanner producing a flat key/value mapping."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence


def _split_key_value(option: str) -> tuple[str, str]:
    """Split ``key=value`` at the first ``=`` that is not the first character."""
    eq = option.find("=", 1)
    if eq == -1:
        return option, ""
    return option[:eq], option[eq + 1 :]


def args_to_map(args: Sequence[str]) -> dict[str, str]:
    """Collect ``-k``/``--key`` options, with ``=value`` or next-argument values.

    An option's value is the text after ``=`` if present and non-empty,
    otherwise the following argument when that argument is not itself an
    option, otherwise the empty string.
    """
    options: dict[str, str] = {}
    arguments = list(args)
    for position, arg in enumerate(arguments):
        if len(arg) <= 1 or not arg.startswith("-"):
            continue
        body = arg[2:] if arg[1] == "-" else arg[1:]
        if not body or body[0] in "-=":
            continue
        key, value = _split_key_value(body)
        following = arguments[position + 1 : position + 2]
        if not value and following and not following[0].startswith("-"):
            value = following[0]
        options[key] = value
    return options


def args_value(margs: Mapping[str, str], default: str, *args: str) -> str:
    """Return the first non-empty value among the given option names, else ``default``."""
    keys: Iterable[str] = args
    return next((margs[key] for key in keys if margs.get(key)), default)