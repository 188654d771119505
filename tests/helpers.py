"""SKILL.md builders shared across test packages."""

from __future__ import annotations

CLEAN_BODY = (
    "# PDF Tools\n\n"
    "Extract text and tables from PDF files.\n\n"
    "1. Ask the user for the PDF path.\n"
    "2. Run `pdftotext input.pdf output.txt`.\n"
)


def skill_markdown(
    name: str = "pdf-tools",
    description: str = "Extract text and tables from PDF files.",
    body: str = CLEAN_BODY,
    extra: str = "",
) -> str:
    """Render a SKILL.md document with frontmatter."""
    return (
        "---\n"
        f"name: {name}\n"
        f"description: {description}\n"
        f"{extra}"
        "---\n"
        f"{body}"
    )
