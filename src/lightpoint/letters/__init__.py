"""Three-stage letter generation."""

from lightpoint.letters.generator import ThreeStageLetterGenerator, format_letter_date

__all__ = ["ThreeStageLetterGenerator", "format_letter_date"]
