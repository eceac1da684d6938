"""Filesafe filename conversion for downloaded page names.

This module converts ClickUp page names to names that are valid on every
common file system while keeping them as readable as possible.
"""

import re

MARKDOWN_EXTENSION = ".md"

# Characters that are invalid or problematic on various file systems
_FORBIDDEN_CHARS = re.compile(r'[\\/:*?"<>|]')
_WHITESPACE_RUN = re.compile(r'\s+')


class FilesafeConverter:
    """Converts ClickUp page names to filesafe names.

    Conversion rules:
    - Forbidden characters (\\ / : * ? " < > |) → dash (-)
    - Runs of whitespace → a single space
    - Leading/trailing whitespace → trimmed
    - Case is preserved

    Examples:
        - "Q3: Plan" → "Q3- Plan"
        - "a/b  c" → "a-b c"
    """

    @staticmethod
    def sanitize(name: str) -> str:
        """Sanitize a page name for use as a file or folder name.

        Args:
            name: The ClickUp page name

        Returns:
            The sanitized name without extension

        Examples:
            >>> FilesafeConverter.sanitize('What? Why: "Now"')
            'What- Why- -Now-'
        """
        sanitized = _FORBIDDEN_CHARS.sub('-', name)
        sanitized = _WHITESPACE_RUN.sub(' ', sanitized)
        return sanitized.strip()

    @staticmethod
    def to_filename(name: str) -> str:
        """Append the markdown extension unless it is already present."""
        if name.endswith(MARKDOWN_EXTENSION):
            return name
        return f"{name}{MARKDOWN_EXTENSION}"

    @staticmethod
    def strip_extension(filename: str) -> str:
        if filename.endswith(MARKDOWN_EXTENSION):
            return filename[:-len(MARKDOWN_EXTENSION)]
        return filename
