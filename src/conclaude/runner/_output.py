from __future__ import annotations


def truncate_output(output: str, max_lines: int) -> tuple[str, bool, int]:
    """Keep the first max_lines lines: (text, truncated, omitted_count)."""
    lines = output.splitlines()
    if len(lines) <= max_lines:
        return output, False, 0
    return "\n".join(lines[:max_lines]), True, len(lines) - max_lines


def limit_output(output: str, max_lines: int | None) -> str:
    """Apply truncation and append the "... (N lines omitted)" marker when needed."""
    if max_lines is None:
        return output
    text, truncated, omitted = truncate_output(output, max_lines)
    if truncated:
        return f"{text}\n... ({omitted} lines omitted)"
    return text


def indent(text: str, prefix: str = "    ") -> str:
    return "\n".join(prefix + line for line in text.splitlines())
