"""Classification of traced invocations into compilation entries."""

from .classifier import Classifier
from .dialects import FlagDialect, GccDialect, LinkerDialect, MsvcDialect, ParsedArguments, program_name
from .models import CompilationEntry, CompilerPhase
from .options import DEFAULT_SOURCE_SUFFIXES, ClassifierOptions

__all__ = [
    "DEFAULT_SOURCE_SUFFIXES",
    "Classifier",
    "ClassifierOptions",
    "CompilationEntry",
    "CompilerPhase",
    "FlagDialect",
    "GccDialect",
    "LinkerDialect",
    "MsvcDialect",
    "ParsedArguments",
    "program_name",
]
