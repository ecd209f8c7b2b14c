"""Script and stylesheet minification."""

from pathlib import Path

import csscompressor
import tinycss2
from calmjs.parse import es5
from calmjs.parse.exceptions import ECMASyntaxError
from calmjs.parse.unparsers.es5 import minify_printer
from pydantic import BaseModel, ConfigDict

from wikibundle.domain.models import AssetKind
from wikibundle.errors import MinifyError


class MinifyOptions(BaseModel):
    """Options shared by every minification in a run."""

    model_config = ConfigDict(frozen=True)

    charset: str = "utf-8"
    munge: bool = False  # Rename local identifiers in scripts
    line_break: int = 80  # Break lines after ';' or '}' past this column (0 = never)


DEFAULT_OPTIONS = MinifyOptions()


def _wrap_chunks(chunks, line_break: int) -> str:
    """Join printer chunks, breaking after ';' or '}' once a line is long enough."""
    parts: list[str] = []
    line_length = 0
    for chunk in chunks:
        text = chunk[0]
        parts.append(text)
        line_length += len(text)
        if line_break and text in (";", "}") and line_length > line_break:
            parts.append("\n")
            line_length = 0
    return "".join(parts)


def minify_script(source: str, options: MinifyOptions = DEFAULT_OPTIONS) -> str:
    """Minify ES5 source.

    Raises:
        MinifyError: If the source does not parse
    """
    try:
        program = es5(source)
    except ECMASyntaxError as e:
        raise MinifyError("<script>", f"syntax error: {e}") from e

    printer = minify_printer(obfuscate=options.munge, obfuscate_globals=False)
    return _wrap_chunks(printer(program), options.line_break)


def _stylesheet_errors(source: str) -> list[str]:
    """Return the parse errors found in a stylesheet."""
    errors = []
    rules = tinycss2.parse_stylesheet(source, skip_comments=True, skip_whitespace=True)
    for rule in rules:
        if rule.type == "error":
            errors.append(f"line {rule.source_line}: {rule.message}")
        elif rule.type == "qualified-rule":
            declarations = tinycss2.parse_declaration_list(
                rule.content, skip_comments=True, skip_whitespace=True
            )
            errors.extend(
                f"line {decl.source_line}: {decl.message}"
                for decl in declarations
                if decl.type == "error"
            )
    return errors


def minify_style(source: str, options: MinifyOptions = DEFAULT_OPTIONS) -> str:
    """Minify a stylesheet.

    The compressor itself accepts almost anything, so the source is checked
    with a CSS parser first and rejected if it reports errors.

    Raises:
        MinifyError: If the stylesheet is malformed
    """
    errors = _stylesheet_errors(source)
    if errors:
        raise MinifyError("<stylesheet>", "; ".join(errors))
    return csscompressor.compress(source, max_linelen=options.line_break)


_MINIFIERS = {
    AssetKind.SCRIPT: minify_script,
    AssetKind.STYLE: minify_style,
}


def minify_file(path: Path, kind: AssetKind, options: MinifyOptions = DEFAULT_OPTIONS) -> str:
    """Read and minify one script or stylesheet.

    Returns:
        The minified text

    Raises:
        MinifyError: If the file cannot be decoded or minified, or minifies to nothing
    """
    minifier = _MINIFIERS.get(kind)
    if minifier is None:
        raise MinifyError(path, f"no minifier for {kind.value} files")

    try:
        source = path.read_bytes().decode(options.charset)
    except UnicodeDecodeError as e:
        raise MinifyError(path, f"not valid {options.charset}: {e}") from e
    except OSError as e:
        raise MinifyError(path, f"cannot read: {e}") from e

    try:
        minified = minifier(source, options)
    except MinifyError as e:
        raise MinifyError(path, e.reason) from e
    except Exception as e:
        raise MinifyError(path, f"minifier failed: {e}") from e

    if not minified.strip():
        raise MinifyError(path, "empty data after compression")
    return minified
