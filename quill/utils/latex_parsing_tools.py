"""
Markup Parsing Tools

Fundamental utilities for reading the résumé markup dialect: balanced argument
groups, environment bodies, inline macro unwrapping and markup → text conversion.

Self-contained module with no context dependencies.
All markup patterns are defined as constants below for visibility and maintainability.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from quill.utils.text_processing import collapse_whitespace, extract_balanced_delimiters


@dataclass(frozen=True)
class MarkupPatterns:
    """
    Pattern templates for parsing and stripping markup.

    Templates containing {command} or {env} are used with .format().
    """

    BEGIN_ENV: str = r"\\begin\{{{env}\}}"
    END_ENV: str = r"\\end\{{{env}\}}"

    ANY_BEGIN_ENV: str = r"\\begin\{(?P<env>[^}]*)\}"
    ANY_END_ENV: str = r"\\end\{[^}]*\}"

    # % starts a comment unless escaped as \%
    COMMENT: str = r"(?<!\\)%.*$"

    # Optional parameters like [leftmargin=0.15in, label={}]
    KEY_VALUE_OPTIONS: str = r"\[[^\]]*=[^\]]*\]"
    SPACING_COMMANDS: str = r"\\[vh]space\*?\{[^}]*\}"
    # $|$, $\cdot$ and similar inline-math separators
    PIPE_SEPARATOR: str = r"\$\s*(?:\||\\cdot|\\bullet|\\diamond)\s*\$"

    ANY_COMMAND_NAME: str = r"\\[A-Za-z]+\*?"
    ANY_CONTROL_SYMBOL: str = r"\\[,;:! ]"


# Wrappers whose single argument is kept verbatim
INLINE_WRAPPERS = [
    "textbf",
    "textit",
    "emph",
    "underline",
    "texttt",
    "textsc",
    "textnormal",
    "textrm",
    "textsf",
    "mbox",
]

# Environments whose trailing argument groups are layout specs, not content
SPEC_ENVIRONMENTS = ("tabular", "tabular*", "tabularx", "minipage", "multicols")

SYMBOL_COMMANDS = [
    (r"\textasciitilde{}", "~"),
    (r"\textasciicircum{}", "^"),
    (r"\textbar{}", "|"),
    (r"\textbullet{}", "•"),
    (r"\texttimes{}", "×"),
    (r"\textasciitilde", "~"),
    (r"\textasciicircum", "^"),
    (r"\textbar", "|"),
    (r"\textbullet", "•"),
    (r"\texttimes", "×"),
    (r"\ldots", "…"),
    (r"\LaTeX{}", "LaTeX"),
    (r"\LaTeX", "LaTeX"),
]

LINE_BREAK_PLACEHOLDER = "\x00BREAK\x00"

# Escapes resolved through placeholders so later stripping cannot touch them
PROTECTED_ESCAPES = [
    (r"\textbackslash{}", "\x00BACKSLASH\x00", "\\"),
    (r"\textbackslash", "\x00BACKSLASH\x00", "\\"),
    (r"\{", "\x00LBRACE\x00", "{"),
    (r"\}", "\x00RBRACE\x00", "}"),
    (r"\$", "\x00DOLLAR\x00", "$"),
    (r"\&", "\x00AMP\x00", "&"),
    (r"\%", "\x00PERCENT\x00", "%"),
    (r"\#", "\x00HASH\x00", "#"),
    (r"\_", "\x00UNDERSCORE\x00", "_"),
]

MARKUP_ESCAPES = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


def strip_comments(text: str) -> str:
    """
    Remove % comments (to end of line), leaving escaped \\% untouched.

    Example:
        >>> strip_comments("Saved 40\\\\% % internal note")
        'Saved 40\\\\% '
    """
    return re.sub(MarkupPatterns.COMMENT, "", text, flags=re.MULTILINE)


def read_argument_groups(text: str, pos: int, count: int) -> Tuple[List[str], int]:
    """
    Read `count` consecutive {...} groups starting at pos, handling nested braces.

    Whitespace (including newlines) between groups is allowed, so macros written
    one argument per line are read correctly.

    Args:
        text: Markup source
        pos: Position right after the macro name
        count: Number of mandatory argument groups to read

    Returns:
        (arguments, end_pos) where end_pos is right after the last closing brace

    Raises:
        ValueError: If fewer than `count` groups follow, or a group is unbalanced

    Example:
        >>> read_argument_groups("{Engineer}{2020 -- 2022} rest", 0, 2)
        (['Engineer', '2020 -- 2022'], 24)
    """
    args = []
    for _ in range(count):
        match = re.compile(r"\s*\{").match(text, pos)
        if not match:
            raise ValueError(f"Expected {count} argument groups, found {len(args)}")
        content, pos = extract_balanced_delimiters(text, match.end())
        args.append(content)
    return args, pos


def skip_argument_groups(text: str, pos: int, optional_only: bool = False) -> int:
    """
    Skip the [...] and {...} groups that immediately follow pos.

    Used to drop layout specs after \\begin{tabular*}{...}[t]{...}. Unbalanced
    groups stop the skipping rather than raising.

    Args:
        text: Markup source
        pos: Position right after an environment marker
        optional_only: Only skip [...] groups (default: False)

    Returns:
        Position after the last skipped group
    """
    while True:
        match = re.compile(r"[ \t]*([\[{])").match(text, pos)
        if not match:
            return pos
        opener = match.group(1)
        if opener == "{" and optional_only:
            return pos
        closer = "]" if opener == "[" else "}"
        try:
            _, pos = extract_balanced_delimiters(text, match.end(), opener, closer)
        except ValueError:
            return pos


def extract_environment_content(text: str, env_name: str, start_pos: int = 0) -> Tuple[str, int, int]:
    """
    Extract content from an environment, handling nested environments of the same name.

    Args:
        text: Markup text
        env_name: Environment name (e.g., 'center', 'itemize')
        start_pos: Position to start searching (default: 0)

    Returns:
        (content, begin_pos, end_pos) where:
        - content: Text between \\begin{env} and \\end{env}
        - begin_pos: Position of the \\begin command
        - end_pos: Position right after the matching \\end{env}

    Raises:
        ValueError: If the environment is not found or unmatched

    Example:
        >>> text = r"\\begin{center} Jane \\end{center} rest"
        >>> extract_environment_content(text, "center")
        (' Jane ', 0, 32)
    """
    env_name_escaped = re.escape(env_name)
    begin_pattern = re.compile(MarkupPatterns.BEGIN_ENV.format(env=env_name_escaped))
    end_pattern = re.compile(MarkupPatterns.END_ENV.format(env=env_name_escaped))

    begin_match = begin_pattern.search(text, start_pos)
    if not begin_match:
        raise ValueError(f"No \\begin{{{env_name}}} found")

    pos = begin_match.end()
    depth = 1

    while depth > 0:
        end_nested = end_pattern.search(text, pos)
        if not end_nested:
            break
        begin_nested = begin_pattern.search(text, pos)

        if begin_nested and begin_nested.start() < end_nested.start():
            depth += 1
            pos = begin_nested.end()
        else:
            depth -= 1
            if depth == 0:
                content = text[begin_match.end() : end_nested.start()]
                return content, begin_match.start(), end_nested.end()
            pos = end_nested.end()

    raise ValueError(f"Unmatched \\begin{{{env_name}}}")


def replace_command(text: str, command: str, prefix: str = "", suffix: str = "") -> str:
    """
    Replace \\command{content} with prefix + content + suffix, handling nested braces.

    Examples:
        >>> replace_command("\\\\textbf{bold text}", "textbf")
        'bold text'
        >>> replace_command("Led \\\\textbf{2} teams", "textbf", "*", "*")
        'Led *2* teams'
        >>> replace_command("\\\\textbf{text \\\\texttt{nested} more}", "textbf")
        'text \\\\texttt{nested} more'
    """
    result = text
    pattern = re.compile(r"\\" + re.escape(command) + r"\s*\{")
    search_from = 0

    while True:
        match = pattern.search(result, search_from)
        if not match:
            break

        try:
            content, end_pos = extract_balanced_delimiters(result, match.end())
        except ValueError:
            # Unmatched braces, leave the rest untouched
            break

        result = result[: match.start()] + prefix + content + suffix + result[end_pos:]
        search_from = match.start()

    return result


def replace_links(text: str, mode: str = "text_url", url_store: Optional[List[str]] = None) -> str:
    """
    Convert \\href{url}{text} and \\url{url} to plain text.

    Args:
        text: Markup containing link macros
        mode: "text_url" renders links as "text (url)"; "text" keeps the label only
        url_store: When given, URLs are appended here and replaced by placeholders
                   so later stripping cannot mangle them (see restore_urls())

    Returns:
        Text with link macros replaced. Malformed links are left for later stripping.

    Example:
        >>> replace_links(r"\\href{https://x.dev}{Portfolio}")
        'Portfolio (https://x.dev)'
        >>> replace_links(r"\\href{mailto:jo@x.dev}{\\underline{jo@x.dev}}", mode="text")
        '\\\\underline{jo@x.dev}'
    """
    if mode not in ("text_url", "text"):
        raise ValueError(f"mode must be 'text_url' or 'text', got: {mode}")

    def _shown(url: str) -> str:
        if url_store is None:
            return url
        url_store.append(url)
        return f"\x00URL{len(url_store) - 1}\x00"

    result = text
    url_pattern = re.compile(r"\\url(?![A-Za-z])")
    search_from = 0
    while True:
        match = url_pattern.search(result, search_from)
        if not match:
            break
        try:
            (url,), end_pos = read_argument_groups(result, match.end(), 1)
        except ValueError:
            search_from = match.end()
            continue
        replacement = _shown(url.strip())
        result = result[: match.start()] + replacement + result[end_pos:]
        search_from = match.start() + len(replacement)

    pattern = re.compile(r"\\href(?![A-Za-z])")
    search_from = 0

    while True:
        match = pattern.search(result, search_from)
        if not match:
            break
        try:
            (url, label), end_pos = read_argument_groups(result, match.end(), 2)
        except ValueError:
            search_from = match.end()
            continue

        url = url.strip()
        shown_url = url[len("mailto:") :] if url.startswith("mailto:") else url
        label_text = label.strip()
        if mode == "text" or _plain_label(label_text) in (url, shown_url):
            replacement = label_text
        else:
            replacement = f"{label_text} ({_shown(shown_url)})"

        result = result[: match.start()] + replacement + result[end_pos:]
        search_from = match.start() + len(replacement)

    return result


def _plain_label(label: str) -> str:
    """Label text with wrapper macros removed, for comparing against the URL."""
    for wrapper in INLINE_WRAPPERS:
        label = replace_command(label, wrapper)
    return label.strip()


def restore_urls(text: str, url_store: List[str]) -> str:
    """Put back the URLs that replace_links() swapped for placeholders."""
    for index, url in enumerate(url_store):
        text = text.replace(f"\x00URL{index}\x00", url)
    return text


def drop_environment_markers(text: str) -> str:
    """
    Remove \\begin{env}/\\end{env} markers and their option or layout-spec groups.

    Tabular-like environments lose every group that follows \\begin (column
    specs such as {0.97\\textwidth}[t]{l@{\\extracolsep{\\fill}}r}); other
    environments only lose [...] options.

    Example:
        >>> drop_environment_markers(r"\\begin{itemize}[leftmargin=0pt] A\\end{itemize}")
        ' A '
    """
    pieces = []
    pos = 0
    begin_pattern = re.compile(MarkupPatterns.ANY_BEGIN_ENV)

    for match in begin_pattern.finditer(text):
        if match.start() < pos:
            continue
        pieces.append(text[pos : match.start()])
        env = match.group("env").strip()
        pos = skip_argument_groups(text, match.end(), optional_only=env not in SPEC_ENVIRONMENTS)

    pieces.append(text[pos:])
    return re.sub(MarkupPatterns.ANY_END_ENV, " ", "".join(pieces))


def markup_to_text(latex_str: str, links: str = "text_url", line_breaks: str = " ") -> str:
    """
    Convert a markup fragment to display text.

    Handles:
    - Inline wrappers (\\textbf, \\textit, \\emph, \\underline, ...) → inner text
    - Links → "text (url)" (or the label only with links="text")
    - $|$ separators → " | "
    - Environment markers and tabular column specs → removed
    - Spacing commands (\\vspace, \\hspace) → removed
    - \\\\ line breaks → line_breaks
    - Escaped specials (\\%, \\&, \\$, \\#, \\_, \\{, \\}) → literal characters
    - -- and --- → en and em dashes, ~ → space
    - Unknown macros → name dropped, argument text kept
    - Literal grouping braces → removed

    Args:
        latex_str: Markup fragment
        links: Link mode passed to replace_links()
        line_breaks: Replacement for \\\\ (default: a space)

    Returns:
        Single-line display text with whitespace collapsed

    Example:
        >>> markup_to_text(r"\\textbf{Languages}{: Python, Go}")
        'Languages: Python, Go'
        >>> markup_to_text(r"Cut costs 40\\% \\& shipped \\href{https://x.dev}{demo}")
        'Cut costs 40% & shipped demo (https://x.dev)'
        >>> markup_to_text(r"\\customMacro{Kept text}")
        'Kept text'
    """
    if not latex_str:
        return ""

    result = strip_comments(latex_str)
    result = result.replace("\\\\", LINE_BREAK_PLACEHOLDER)
    # \\[4pt] and \\* carry spacing, not content
    result = re.sub(LINE_BREAK_PLACEHOLDER + r"\*?(?:\s*\[[^\]]*\])?", LINE_BREAK_PLACEHOLDER, result)
    result = re.sub(MarkupPatterns.PIPE_SEPARATOR, " | ", result)

    for escaped, placeholder, _ in PROTECTED_ESCAPES:
        result = result.replace(escaped, placeholder)

    url_store: List[str] = []
    result = replace_links(result, mode=links, url_store=url_store)
    result = drop_environment_markers(result)

    for wrapper in INLINE_WRAPPERS:
        result = replace_command(result, wrapper)

    result = re.sub(MarkupPatterns.SPACING_COMMANDS, "", result)

    # Math mode delimiters, tabular column separators, ties and dashes
    result = result.replace("$", "")
    result = result.replace("&", " ")
    result = result.replace("~", " ")
    result = result.replace("---", "\u2014").replace("--", "\u2013")

    for latex_cmd, replacement in SYMBOL_COMMANDS:
        result = result.replace(latex_cmd, replacement)

    result = re.sub(MarkupPatterns.ANY_CONTROL_SYMBOL, " ", result)
    result = re.sub(MarkupPatterns.ANY_COMMAND_NAME, " ", result)
    result = re.sub(MarkupPatterns.KEY_VALUE_OPTIONS, "", result)

    # Keep adjacent argument groups apart, then drop the grouping braces
    result = result.replace("}{", "} {")
    result = result.replace("{", "").replace("}", "")

    result = result.replace(LINE_BREAK_PLACEHOLDER, line_breaks)
    result = restore_urls(result, url_store)
    for _, placeholder, literal in PROTECTED_ESCAPES:
        result = result.replace(placeholder, literal)

    result = collapse_whitespace(result)
    result = re.sub(r"\s+([,.;:!?)])", r"\1", result)
    result = re.sub(r"\(\s+", "(", result)
    return result.strip()


def escape_markup(plaintext_str: str) -> str:
    """
    Escape markup special characters in user-supplied text.

    Repeated newlines are squashed to one before escaping.

    Example:
        >>> escape_markup("R&D at 87% on-time")
        'R\\\\&D at 87\\\\% on-time'
        >>> escape_markup("C:\\\\path")
        'C:\\\\textbackslash{}path'
    """
    if not plaintext_str:
        return ""

    text = re.sub(r"\n+", "\n", plaintext_str)
    return "".join(MARKUP_ESCAPES.get(char, char) for char in text).strip()
