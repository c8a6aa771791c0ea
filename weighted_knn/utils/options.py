# weighted_knn/utils/options.py
"""Helpers for flat option vectors such as ``["-K", "3", "-G", "-S", "0.5"]``.

Parsing functions consume what they read by blanking the matching entries in
place, so that whatever is left non-empty at the end can be reported as an
unrecognised option.
"""
import shlex
from typing import Callable, Dict, List, NamedTuple, Sequence, TypeVar

from ..errors import ConfigurationError

T = TypeVar("T")


class Option(NamedTuple):
    description: str
    name: str
    num_arguments: int
    synopsis: str


def get_flag(name: str, options: List[str]) -> bool:
    flag = "-" + name
    for i, token in enumerate(options):
        if token == flag:
            options[i] = ""
            return True
    return False


def get_option(name: str, options: List[str]) -> str:
    """Return the value following ``-name`` (empty string when absent)."""
    flag = "-" + name
    for i, token in enumerate(options):
        if token != flag:
            continue
        if i + 1 >= len(options):
            raise ConfigurationError(f"No value given for {flag} option.")
        value = options[i + 1]
        options[i] = ""
        options[i + 1] = ""
        return value
    return ""


def parse_number(name: str, value: str, kind: Callable[[str], T]) -> T:
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid value for -{name}: {value!r}") from None


def check_for_remaining_options(options: Sequence[str]) -> None:
    leftover = [token for token in options if token]
    if leftover:
        raise ConfigurationError("Illegal options: " + " ".join(leftover))


def split_options(spec: str) -> List[str]:
    """Split a quoted option string, the inverse of :func:`join_options`."""
    try:
        return shlex.split(spec)
    except ValueError as e:
        raise ConfigurationError(f"Cannot parse option string {spec!r}: {e}") from None


def _quote(token: str) -> str:
    if token and not any(c.isspace() or c in "\"'\\" for c in token):
        return token
    return '"' + token.replace("\\", "\\\\").replace('"', '\\"') + '"'


def join_options(options: Sequence[str]) -> str:
    return " ".join(_quote(token) for token in options if token is not None)


def for_name(registry: Dict[str, Callable[[], T]], spec: str, kind: str) -> T:
    """Instantiate ``"ClassName -opt value ..."`` from ``registry``.

    Dotted names are accepted and resolved by their last component, so
    ``weka.core.neighboursearch.LinearNNSearch`` maps to ``LinearNNSearch``.
    """
    tokens = split_options(spec)
    if not tokens:
        raise ConfigurationError(f"Invalid {kind} specification string.")
    class_name = tokens[0].rsplit(".", 1)[-1]
    if class_name not in registry:
        raise ConfigurationError(
            f"Unknown {kind} '{tokens[0]}'. Try one of: {', '.join(sorted(registry))}"
        )
    obj = registry[class_name]()
    obj.set_options(tokens[1:])
    return obj


def parse_range(spec: str, num_attributes: int) -> List[int]:
    """Resolve a 1-based attribute range such as ``"first-last"`` or ``"1,3-5"``.

    Returns sorted 0-based indices. Indices beyond ``num_attributes`` are
    rejected.
    """

    def _index(token: str) -> int:
        token = token.strip().lower()
        if token == "first":
            return 1
        if token == "last":
            return num_attributes
        try:
            value = int(token)
        except ValueError:
            raise ConfigurationError(f"Invalid attribute range {spec!r}") from None
        if value < 1 or value > num_attributes:
            raise ConfigurationError(
                f"Attribute index {value} out of range 1-{num_attributes} in {spec!r}"
            )
        return value

    selected = set()
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            lo, hi = part.split("-", 1)
            start, stop = _index(lo), _index(hi)
            selected.update(range(start - 1, stop))
        else:
            selected.add(_index(part) - 1)
    return sorted(selected)


def describe_options(options: Sequence[Option]) -> str:
    lines: List[str] = []
    for option in options:
        lines.append(option.synopsis)
        lines.append(option.description)
        lines.append("")
    return "\n".join(lines)
