"""Content exceptions."""


class ContentError(Exception):
    """Base exception for blog, page and media errors."""


class MediaValidationError(ContentError):
    """An upload was rejected for its size, type or image dimensions."""


class InvalidSectionTypeError(ContentError):
    """A page section was given an unknown type."""

    def __init__(self, section_type):
        self.section_type = section_type
        super().__init__(f"Invalid section type: {section_type}")
