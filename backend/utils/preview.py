"""
Derived field computation for Moments
"""

PREVIEW_LENGTH = 300


def derive_preview(content: str) -> str:
    """
    Preview text for a Moment: the first 300 characters of its content.

    Shorter content is returned whole; empty or missing content gives "".
    """
    if not content:
        return ""
    return content[:PREVIEW_LENGTH]
