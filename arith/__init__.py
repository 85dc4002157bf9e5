# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
arith parses arithmetic expressions into immutable trees, and evaluates those trees against variable bindings.

  >>> from arith import parse
  >>> f = parse('5*sin(x) + y^2')
  >>> f.calculate({'x': 0.0, 'y': 3.0})
  9.0
'''

from typing import Any, Callable

from .__about__ import __version__
from .builder import (build, build_str, BuildError, Call, Complex, Completed, DepthLimitExceeded, Empty, finalize,
  finalize_leaf, IncompleteExpression, Leaf, Parenthesized, Pending, process, UnexpectedToken, UnknownFunction, Value,
  wants)
from .functions import ArityError, default_registry, FnFunction, Function, operator_functions, Registry
from .lex import Close, Comma, Ident, lex, Op, Open, Token
from .ops import Operator, operators, Tier
from .tree import Ast, Constant, Node, Operation, UnboundVariable, Variable


def parse(text:str, registry:Registry|None=None, *, num:Callable[[str],Any]=float, max_depth:int|None=128,
 dbg=False) -> Ast:
  '''
  Parse `text` into a tree.
  `registry` supplies the named functions (defaults to `default_registry`);
  `num` converts numeric literals (e.g. `float`, `Decimal`, `Fraction`).
  Raises a BuildError subclass on failure.
  '''
  value = build(lex(text), max_depth=max_depth, dbg=dbg)
  return finalize(value, registry=(default_registry if registry is None else registry), num=num)


def parse_or_fail(text:str, registry:Registry|None=None, *, num:Callable[[str],Any]=float,
 max_depth:int|None=128, dbg=False) -> Ast:
  'Parse `text` into a tree, or exit with a diagnostic.'
  try: return parse(text, registry, num=num, max_depth=max_depth, dbg=dbg)
  except BuildError as e: e.fail()
