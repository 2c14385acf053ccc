"""
Template rendering and template Tasks.

Templates are real source files (``.tsx.tmpl``, ``.css.tmpl``...) that stay
readable in an editor. Two mechanisms:

  1. Conditional blocks, written as comments in the host language:

        // __IF_with_styles__
        import "./styles.css";
        // __ENDIF__

        {/* __IF_NOT_with_styles__ */}
        ...
        {/* __ENDIF__ */}

     Any comment syntax works: the whole marker line is removed. Blocks nest
     and are resolved innermost first. The condition is the truthiness of the
     named variable.

  2. Placeholders: ``{{ name }}`` or ``{{ name | kebab }}``.

An unknown variable or filter raises TemplateRenderError. Rendering is the
pure boundary ``render_file(path, vars) -> str``; the Tasks in this module
wrap it in read/write Effects.
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Final, Iterable, Mapping

from summon.combinators import sequence_
from summon.errors import TEMPLATE_RENDER_FAILED
from summon.primitives import glob, mkdir, read_file, write_file
from summon.task import Task, bind, fail_with


class TemplateRenderError(ValueError):
    """A template refers to a variable or filter that does not exist."""


# =============================================================================
# Case helpers
# =============================================================================

_WORD_BOUNDARY = re.compile(r"[A-Z]+(?=[A-Z][a-z]|\d|\b)|[A-Z]?[a-z]+|[A-Z]+|\d+")


def split_words(value: str) -> list[str]:
    """Split ``value`` on case changes and separators: "myButton-v2" -> my, Button, v, 2."""
    return _WORD_BOUNDARY.findall(value)


def pascal_case(value: str) -> str:
    return "".join(word.capitalize() for word in split_words(value))


def camel_case(value: str) -> str:
    pascal = pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def kebab_case(value: str) -> str:
    return "-".join(word.lower() for word in split_words(value))


def snake_case(value: str) -> str:
    return "_".join(word.lower() for word in split_words(value))


def constant_case(value: str) -> str:
    return "_".join(word.upper() for word in split_words(value))


FILTERS: Final[Mapping[str, Callable[[str], str]]] = {
    "pascal": pascal_case,
    "camel": camel_case,
    "kebab": kebab_case,
    "snake": snake_case,
    "constant": constant_case,
    "upper": str.upper,
    "lower": str.lower,
}


# =============================================================================
# Rendering
# =============================================================================

_CONDITIONAL = re.compile(
    r"^[^\n]*__IF_(NOT_)?(\w+?)__[^\n]*\n"
    r"((?:(?!__IF_)[\s\S])*?)"
    r"^[^\n]*__ENDIF__[^\n]*(?:\n|\Z)",
    re.MULTILINE,
)

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*(?:\|\s*(\w+)\s*)?\}\}")


def _lookup(variables: Mapping[str, object], name: str) -> object:
    if name not in variables:
        raise TemplateRenderError(f"Unknown template variable: {name}")
    return variables[name]


def render_string(template: str, variables: Mapping[str, object]) -> str:
    """Render ``template`` with ``variables``.

    Raises:
        TemplateRenderError: If a placeholder, condition or filter is unknown.
    """

    def _replace_block(match: re.Match[str]) -> str:
        negate, name, body = match.group(1), match.group(2), match.group(3)
        enabled = bool(_lookup(variables, name))
        return body if enabled != bool(negate) else ""

    content = template
    while True:
        content, count = _CONDITIONAL.subn(_replace_block, content)
        if count == 0:
            break

    def _replace_placeholder(match: re.Match[str]) -> str:
        value = str(_lookup(variables, match.group(1)))
        filter_name = match.group(2)
        if filter_name is None:
            return value
        if filter_name not in FILTERS:
            raise TemplateRenderError(f"Unknown template filter: {filter_name}")
        return FILTERS[filter_name](value)

    content = _PLACEHOLDER.sub(_replace_placeholder, content)
    return re.sub(r"\n{3,}", "\n\n", content)


def render_file(path: str | Path, variables: Mapping[str, object]) -> str:
    """Read a UTF-8 template from disk and render it."""
    return render_string(Path(path).read_text(encoding="utf-8"), variables)


# =============================================================================
# Generated-file stamps
# =============================================================================


@dataclass(frozen=True)
class StampOptions:
    generator: str
    version: str


@dataclass(frozen=True)
class CommentStyle:
    single: str | None = None
    block_start: str | None = None
    block_end: str | None = None
    prefer_block: bool = False


_SLASHES = CommentStyle(single="//", block_start="/*", block_end="*/")
_HASH = CommentStyle(single="#")
_MARKUP = CommentStyle(block_start="<!--", block_end="-->")

COMMENT_STYLES: Final[Mapping[str, CommentStyle]] = {
    ".ts": _SLASHES,
    ".tsx": _SLASHES,
    ".js": _SLASHES,
    ".jsx": _SLASHES,
    ".mjs": _SLASHES,
    ".cjs": _SLASHES,
    ".scss": _SLASHES,
    ".less": _SLASHES,
    ".css": CommentStyle(block_start="/*", block_end="*/", prefer_block=True),
    ".html": _MARKUP,
    ".svelte": _MARKUP,
    ".vue": _MARKUP,
    ".md": _MARKUP,
    ".mdx": CommentStyle(block_start="{/*", block_end="*/}"),
    ".yaml": _HASH,
    ".yml": _HASH,
    ".toml": _HASH,
    ".sh": _HASH,
    ".py": _HASH,
    ".json": CommentStyle(),
}


def generate_stamp(file_path: str, options: StampOptions) -> str | None:
    """A "Generated by" comment for ``file_path``; None when the type has no comments."""
    style = COMMENT_STYLES.get(posixpath.splitext(file_path)[1].lower())
    if style is None or (style.single is None and style.block_start is None):
        return None
    text = f"Generated by {options.generator} v{options.version}"
    if style.prefer_block or style.single is None:
        return f"{style.block_start} {text} {style.block_end}"
    return f"{style.single} {text}"


def prepend_stamp(content: str, stamp: str) -> str:
    """Put ``stamp`` on the first line, after a shebang if there is one."""
    if content.startswith("#!") and "\n" in content:
        shebang, rest = content.split("\n", 1)
        return f"{shebang}\n{stamp}\n{rest}"
    return f"{stamp}\n{content}"


# =============================================================================
# Template Tasks
# =============================================================================

TEMPLATE_SUFFIX: Final[str] = ".tmpl"


def _render_task(
    content: str,
    variables: Mapping[str, object],
    dest: str,
    source: str,
    stamp: StampOptions | None,
) -> Task[None]:
    try:
        rendered = render_string(content, variables)
    except TemplateRenderError as exc:
        return fail_with(TEMPLATE_RENDER_FAILED, str(exc), source=source, dest=dest)
    marker = generate_stamp(dest, stamp) if stamp is not None else None
    return write_file(dest, rendered if marker is None else prepend_stamp(rendered, marker))


def template(
    source: str,
    dest: str,
    variables: Mapping[str, object],
    *,
    stamp: StampOptions | None = None,
) -> Task[None]:
    """Render the template at ``source`` into ``dest``.

    Effects, in order: MakeDir(parent of dest), ReadFile(source), WriteFile(dest).
    ``dest`` itself may contain placeholders.
    """
    try:
        dest_path = render_string(dest, variables)
    except TemplateRenderError as exc:
        return fail_with(TEMPLATE_RENDER_FAILED, str(exc), source=source, dest=dest)
    parent = posixpath.dirname(dest_path) or "."
    return bind(
        mkdir(parent),
        lambda _: bind(
            read_file(source),
            lambda content: _render_task(content, variables, dest_path, source, stamp),
        ),
    )


def template_dir(
    source: str,
    dest: str,
    variables: Mapping[str, object],
    *,
    rename: Mapping[str, str] | None = None,
    ignore: Iterable[str] = (),
    stamp: StampOptions | None = None,
) -> Task[None]:
    """Render every file under ``source`` into ``dest``, keeping relative paths.

    A trailing ``.tmpl`` is dropped from file names, then ``rename`` applies,
    then the name is rendered as a template.
    """
    mapping = dict(rename or {})

    def _render_all(files: list[str]) -> Task[None]:
        tasks = []
        for relative in files:
            name = relative.removesuffix(TEMPLATE_SUFFIX)
            name = mapping.get(name, name)
            tasks.append(
                template(
                    posixpath.join(source, relative),
                    posixpath.join(dest, name),
                    variables,
                    stamp=stamp,
                )
            )
        return sequence_(tasks)

    return bind(glob("**/*", cwd=source, ignore=ignore), _render_all)


__all__ = [
    "TemplateRenderError",
    "FILTERS",
    "split_words",
    "pascal_case",
    "camel_case",
    "kebab_case",
    "snake_case",
    "constant_case",
    "render_string",
    "render_file",
    "StampOptions",
    "CommentStyle",
    "COMMENT_STYLES",
    "generate_stamp",
    "prepend_stamp",
    "TEMPLATE_SUFFIX",
    "template",
    "template_dir",
]
