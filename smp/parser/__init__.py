"""
SMP Parser Package

This package turns expression strings into RPN token sequences.
It includes the token model, tokenization and shunting-yard conversion.
"""

from .tokens import SYMBOLS, Constant, Operator, Parenthesis, Token, Value, Variable
from .tokenizer import Tokenizer, ValueAccumulator
from .shunting_yard import to_rpn

__all__ = [
    "SYMBOLS",
    "Constant",
    "Operator",
    "Parenthesis",
    "Token",
    "Value",
    "Variable",
    "Tokenizer",
    "ValueAccumulator",
    "to_rpn",
]
