"""Tokenization and prompt measurement.

Standalone Usage:
    >>> from promptfit.tokens import MeasurementOracle, TiktokenTokenizer
    >>> from promptfit.templates import Jinja2ChatTemplate
    >>> oracle = MeasurementOracle(Jinja2ChatTemplate(), TiktokenTokenizer("cl100k_base"))
    >>> tokens = await oracle.measure(messages)
"""

from promptfit.tokens.oracle import MeasurementOracle
from promptfit.tokens.tokenizer import FunctionTokenizer, TiktokenTokenizer, Tokenizer

__all__ = ["FunctionTokenizer", "MeasurementOracle", "TiktokenTokenizer", "Tokenizer"]
