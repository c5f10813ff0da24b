"""kial: a small expression-oriented scripting language.

The core is used through two entry points: parse turns source text into a statement, and evaluate runs a statement
against an Environment. The same Environment can be reused across calls, so bindings persist between inputs.
"""

from kial.core.env import Environment
from kial.core.evaluator import evaluate
from kial.core.grammar import parse, parse_program

__all__ = ["Environment", "evaluate", "parse", "parse_program"]
