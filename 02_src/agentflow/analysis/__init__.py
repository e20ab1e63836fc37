"""Result assembly module."""

from .analysts import (
    DescriptiveAnalyst,
    DiagnosticAnalyst,
    IAnalyst,
    PrescriptiveAnalyst,
)
from .assembler import IResultAssembler, ResultAssembler

__all__ = [
    "IAnalyst",
    "DescriptiveAnalyst",
    "DiagnosticAnalyst",
    "PrescriptiveAnalyst",
    "IResultAssembler",
    "ResultAssembler",
]
