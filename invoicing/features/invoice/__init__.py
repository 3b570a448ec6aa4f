from .number_formatter import FormatContext, InvalidContext, format_number, referenced_counters
from .number_generator import ConfigurableNumberGenerator

__all__ = [
    'FormatContext',
    'InvalidContext',
    'format_number',
    'referenced_counters',
    'ConfigurableNumberGenerator'
]
