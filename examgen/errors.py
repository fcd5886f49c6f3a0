"""Exception types raised by the question generation pipeline."""


class ExamGenError(Exception):
    """Base class for all examgen errors."""


class InvalidInput(ExamGenError, ValueError):
    """Material content or options that cannot be processed."""


class InvalidRequest(InvalidInput):
    """A generation request that cannot be served (zero questions, missing credentials)."""


class ParseError(ExamGenError, ValueError):
    """A backend response that could not be read as the expected JSON shape."""


class GenerationFailed(ExamGenError, RuntimeError):
    """No usable questions after every chunk and retry was exhausted."""
