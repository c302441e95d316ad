"""Textual router patching.

``lib/core/routing/app_router.dart`` is patched with three independent
insertions, each located by an anchor:

* ``import``: after the last ``import '...';`` statement,
* ``route_name``: before the closing brace of ``class RouteNames { ... }``,
* ``route_case``: before the last ``default:`` of the route switch.

The whole patch is guarded by a marker (``<Feature>Page`` as a whole word,
see :func:`has_route`): when the marker is already present the text is
returned unchanged, which makes patching idempotent.  A missing anchor skips
that insertion only and adds a warning.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, Field

from blueprint.utils import to_camel_case, to_pascal_case

ANCHOR_IMPORT = "import"
ANCHOR_ROUTE_NAME = "route_name"
ANCHOR_ROUTE_CASE = "route_case"

_LAST_IMPORT_RE = re.compile(r"^[ \t]*import\s+['\"][^'\"]+['\"][^;\n]*;", re.MULTILINE)
_ROUTE_NAMES_RE = re.compile(r"class\s+RouteNames\s*\{[^}]*\}")
_DEFAULT = "default:"


class RouterUpdate(str, Enum):
    """Overall outcome of a router update."""

    PATCHED = "patched"
    ALREADY_PRESENT = "already_present"
    ANCHOR_NOT_FOUND = "anchor_not_found"
    ROUTER_MISSING = "router_missing"
    ROUTER_ERROR = "router_error"
    SKIPPED = "skipped"


class AnchorState(str, Enum):
    INSERTED = "inserted"
    SKIPPED_WITH_WARNING = "skipped_with_warning"


class RouterPatchResult(BaseModel):
    """Outcome of patching the router for one feature."""

    outcome: RouterUpdate
    anchors: dict[str, AnchorState] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return AnchorState.INSERTED in self.anchors.values()


def route_marker(feature_name: str) -> str:
    """The identifier whose presence means the feature is already routed."""
    return f"{to_pascal_case(feature_name)}Page"


def has_route(text: str, feature_name: str) -> bool:
    """True if any insertion for *feature_name* is already in *text*.

    The page class is the primary marker; the import path and the route
    constant also count so that a run which could only insert some of the
    three lines is not repeated.
    """
    patterns = (
        rf"\b{re.escape(route_marker(feature_name))}\b",
        rf"/{re.escape(feature_name)}_page\.dart['\"]",
        rf"static\s+const\s+String\s+{re.escape(to_camel_case(feature_name))}\s*=",
    )
    return any(re.search(pattern, text) for pattern in patterns)


def import_line(feature_name: str) -> str:
    return (
        f"import '../../features/{feature_name}/presentation/pages/"
        f"{feature_name}_page.dart';"
    )


def route_constant(feature_name: str) -> str:
    return f"  static const String {to_camel_case(feature_name)} = '/{feature_name}';"


def route_case(feature_name: str, indent: str) -> str:
    lines = [
        f"case RouteNames.{to_camel_case(feature_name)}:",
        "  return MaterialPageRoute(",
        f"    builder: (_) => const {route_marker(feature_name)}(),",
        "    settings: settings,",
        "  );",
    ]
    return "".join(f"{indent}{line}\n" for line in lines)


# ---------------------------------------------------------------------------
# Anchors
# ---------------------------------------------------------------------------


def _insert_import(text: str, feature_name: str) -> str | None:
    last = None
    for last in _LAST_IMPORT_RE.finditer(text):
        pass
    if last is None:
        return None
    end = last.end()
    return f"{text[:end]}\n{import_line(feature_name)}{text[end:]}"


def _insert_route_name(text: str, feature_name: str) -> str | None:
    match = _ROUTE_NAMES_RE.search(text)
    if match is None:
        return None
    brace = match.end() - 1
    # Insert on its own line, keeping the closing brace's indentation.
    line_start = text.rfind("\n", 0, brace) + 1
    if text[line_start:brace].strip():
        return f"{text[:brace]}\n{route_constant(feature_name)}\n{text[brace:]}"
    return f"{text[:line_start]}{route_constant(feature_name)}\n{text[line_start:]}"


def _insert_route_case(text: str, feature_name: str) -> str | None:
    index = text.rfind(_DEFAULT)
    if index == -1:
        return None
    line_start = text.rfind("\n", 0, index) + 1
    indent = text[line_start:index]
    if indent.strip():
        # ``default:`` shares its line with other code; insert inline.
        case = route_case(feature_name, "").replace("\n", " ")
        return f"{text[:index]}{case}{text[index:]}"
    return f"{text[:line_start]}{route_case(feature_name, indent)}{text[line_start:]}"


_ANCHORS = (
    (ANCHOR_IMPORT, _insert_import, "no import statement found"),
    (ANCHOR_ROUTE_NAME, _insert_route_name, "class RouteNames { ... } not found"),
    (ANCHOR_ROUTE_CASE, _insert_route_case, "no 'default:' branch found in the route switch"),
)


def patch_router(text: str, feature_name: str) -> tuple[str, RouterPatchResult]:
    """Return *text* with the route for *feature_name* wired in.

    Pure function: it never touches the file system.  Applying it twice
    gives the same text as applying it once.
    """
    if has_route(text, feature_name):
        return text, RouterPatchResult(outcome=RouterUpdate.ALREADY_PRESENT)

    result = RouterPatchResult(outcome=RouterUpdate.PATCHED)
    for anchor, insert, reason in _ANCHORS:
        updated = insert(text, feature_name)
        if updated is None:
            result.anchors[anchor] = AnchorState.SKIPPED_WITH_WARNING
            result.warnings.append(f"{anchor}: {reason}; add it for '{feature_name}' manually")
            continue
        text = updated
        result.anchors[anchor] = AnchorState.INSERTED

    if AnchorState.SKIPPED_WITH_WARNING in result.anchors.values():
        result.outcome = RouterUpdate.ANCHOR_NOT_FOUND
    return text, result
