# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
An incremental, single-pass expression builder.

The builder folds a token stream into a single value, one token at a time, without lookahead or backtracking.
Each builder value is an immutable partial tree; `process` consumes a value and a token and returns a new value.
At every step there is exactly one open slot in the value where the next token applies:
the right side of the rightmost `Pending` or `Complex` in the chain, the last argument of an open `Call`,
the inner value of an open `Parenthesized` group, or the value itself if it is `Empty` or a `Leaf`.

Precedence and associativity are resolved locally, by the `wants` predicate and a single rotation:
when an operator arrives at `Complex(a, op, b)`, it descends into `b` if `b` still wants it
or if it binds strictly tighter than `op`; otherwise the whole node becomes the left operand of the new operator.
Equal tiers therefore always rotate (left associativity), and higher tiers always descend (precedence nesting).
Groups and call arguments are nested instances of the same machine.

`process` and `wants` only ever descend along the open slot, so their recursion is bounded by group nesting.
The left spine grows with the length of the expression; `finalize` and `str` walk it with an explicit stack.

Once the stream is exhausted, `finalize` converts the value into an immutable tree (see `arith.tree`).
'''

from dataclasses import dataclass
from typing import Any, Callable, Iterable, NoReturn

from pithy.io import errL, tee_to_err

from .functions import default_registry, Function, operator_functions, Registry
from .lex import Close, Comma, Ident, lex, Op, Open, Token
from .ops import Operator
from .tree import Ast, Constant, Operation, Variable


class BuildError(Exception):
  '''
  Base class for builder errors.
  `state` is the innermost builder value at the point of failure;
  `root` is the top-level partial value, attached by `build` as the error propagates out of the fold.
  '''
  error_prefix = 'build'

  def __init__(self, msg:str, state:'Value|None'=None):
    self.msg = msg
    self.state = state
    self.root:Value|None = None
    super().__init__(msg)

  def __str__(self) -> str:
    if self.state is None: return self.msg
    return f'{self.msg} (state: {self.state})'

  def fail(self) -> NoReturn:
    lines = [f'{self.error_prefix} error: {self}']
    if self.root is not None and self.root is not self.state:
      lines.append(f'  note: in expression: {self.root}')
    exit('\n'.join(lines))


class UnexpectedToken(BuildError):
  'Raised by `process` when a token has no defined transition from the current value.'

  def __init__(self, token:Token, state:'Value'):
    self.token = token
    super().__init__(f'unexpected token: {token}', state)


class IncompleteExpression(BuildError):
  'Raised by `finalize` when the expression, a group, or a call was never completed.'


class UnknownFunction(BuildError):
  'Raised by `finalize` when a called function is not present in the registry.'

  def __init__(self, name:str, state:'Value|None'=None):
    self.name = name
    super().__init__(f'function not found: {name!r}', state)


class DepthLimitExceeded(BuildError):
  'Raised by `build` when groups and calls nest more deeply than the configured limit.'



class BuilderValue:
  'Base class for builder values. `str_parts` describes the compact form as a mix of strings and child values.'

  def str_parts(self) -> list[Any]: raise NotImplementedError(self)

  def __str__(self) -> str:
    parts:list[str] = []
    stack:list[Any] = [self]
    while stack:
      item = stack.pop()
      if isinstance(item, str): parts.append(item)
      else: stack.extend(reversed(item.str_parts()))
    return ''.join(parts)


@dataclass(frozen=True)
class Empty(BuilderValue):
  'Nothing parsed yet: the initial value, and the initial content of every group and call argument.'

  def str_parts(self) -> list[Any]: return ['_']


@dataclass(frozen=True)
class Leaf(BuilderValue):
  'A literal or name, which may yet turn out to be a function name if followed by `(`.'
  token:Ident

  def str_parts(self) -> list[Any]: return [self.token.text]


@dataclass(frozen=True)
class Pending(BuilderValue):
  'A complete left operand and an operator awaiting its right operand.'
  left:'Value'
  op:Operator

  def str_parts(self) -> list[Any]: return ['Pending(', self.left, f', {self.op})']


@dataclass(frozen=True)
class Complex(BuilderValue):
  'A binary node; `right` remains open to further tokens.'
  left:'Value'
  op:Operator
  right:'Value'

  def str_parts(self) -> list[Any]: return [f'Complex({self.op}, ', self.left, ', ', self.right, ')']


@dataclass(frozen=True)
class Parenthesized(BuilderValue):
  'An open group, awaiting its matching `)`.'
  inner:'Value'

  def str_parts(self) -> list[Any]: return ['(', self.inner]


@dataclass(frozen=True)
class Completed(BuilderValue):
  'A closed group or call. Behaves like a leaf operand, but can never be reinterpreted as a function name.'
  inner:'Value'

  def str_parts(self) -> list[Any]:
    if isinstance(self.inner, Call): return [self.inner, ')']
    return ['(', self.inner, ')']


@dataclass(frozen=True)
class Call(BuilderValue):
  'An open function call. The last argument is always the open one.'
  name:str
  args:tuple['Value',...]

  def str_parts(self) -> list[Any]:
    parts:list[Any] = [f'{self.name}(']
    for i, arg in enumerate(self.args):
      if i: parts.append(', ')
      parts.append(arg)
    return parts


Value = Empty|Leaf|Pending|Complex|Parenthesized|Completed|Call


def wants(value:Value, token:Token) -> bool:
  '''
  Whether `token` belongs inside the open slot of `value`,
  as opposed to closing `value` so that it can be absorbed as an operand of something new.
  Pure; does not modify `value`.
  '''
  if isinstance(value, (Empty, Pending, Parenthesized, Call)): return True
  if isinstance(value, Leaf): return isinstance(token, Open)
  if isinstance(value, Complex):
    return wants(value.right, token) or (isinstance(token, Op) and token.op.more(value.op))
  assert isinstance(value, Completed), value
  return False


def process(value:Value, token:Token) -> Value:
  'Apply `token` to the open slot of `value`, returning the new value. Raises UnexpectedToken.'

  if isinstance(value, Empty):
    if isinstance(token, Ident): return Leaf(token)
    if isinstance(token, Open): return Parenthesized(Empty())

  elif isinstance(value, Leaf):
    if isinstance(token, Op): return Pending(value, token.op)
    if isinstance(token, Open): return Call(value.token.text, (Empty(),)) # The leaf names a function.

  elif isinstance(value, Completed):
    if isinstance(token, Op): return Pending(value, token.op)

  elif isinstance(value, Pending):
    return Complex(value.left, value.op, process(Empty(), token))

  elif isinstance(value, Complex):
    if isinstance(token, Op) and not (wants(value.right, token) or token.op.more(value.op)):
      return Pending(value, token.op) # Rotate: the whole node becomes the left operand.
    return Complex(value.left, value.op, process(value.right, token))

  elif isinstance(value, Parenthesized):
    if isinstance(token, Close) and not wants(value.inner, token):
      return Completed(value.inner)
    return Parenthesized(process(value.inner, token))

  elif isinstance(value, Call):
    *head, last = value.args
    if isinstance(token, Close) and not wants(last, token):
      return Completed(value)
    if isinstance(token, Comma) and not wants(last, token):
      return Call(value.name, (*value.args, Empty()))
    return Call(value.name, (*head, process(last, token)))

  else: raise TypeError(f'not a builder value: {value!r}')

  raise UnexpectedToken(token, value)


def build(tokens:Iterable[Token], *, max_depth:int|None=128, dbg=False) -> Value:
  '''
  Fold `tokens` into a builder value, starting from `Empty()`.
  `max_depth` limits the nesting of groups and calls, which bounds recursion in `process`;
  pass None to disable the limit.
  If `dbg` is set, each token and resulting value is written to std err.
  '''
  if dbg: tokens = tee_to_err(tokens, label='build dbg', transform=str)
  value:Value = Empty()
  depth = 0
  for token in tokens:
    try:
      if isinstance(token, Open):
        depth += 1
        if max_depth is not None and depth > max_depth:
          raise DepthLimitExceeded(f'nesting exceeds maximum depth of {max_depth}', value)
      elif isinstance(token, Close):
        depth -= 1
      value = process(value, token)
    except BuildError as e:
      e.root = value # The value before the failing token.
      raise
    if dbg: errL('  -> ', value)
  return value


def build_str(text:str, *, max_depth:int|None=128, dbg=False) -> Value:
  return build(lex(text), max_depth=max_depth, dbg=dbg)


def finalize_leaf(leaf:Leaf, num:Callable[[str],Any]=float) -> Constant|Variable:
  '''
  Parse the leaf text with `num`; if that fails (e.g. '3.4.5' or 'x'), the leaf becomes a variable.
  Whatever `num` accepts is a literal: with `float`, this includes '1e5' and 'inf'.
  '''
  text = leaf.token.text
  try: return Constant(num(text))
  except (ValueError, ArithmeticError): return Variable(text)


def finalize(value:Value, registry:Registry=default_registry, num:Callable[[str],Any]=float) -> Ast:
  '''
  Convert a completed builder value into an immutable tree.
  Operands are finalized left to right; the first incomplete group or unknown function raises.
  '''
  results:list[Ast] = []
  stack:list[Any] = [value] # Builder values, and (function, operand count) pairs awaiting their finalized operands.
  while stack:
    item = stack.pop()

    if isinstance(item, tuple):
      fn, count = item
      split = len(results) - count
      args = tuple(results[split:])
      del results[split:]
      results.append(Operation(fn, args))

    elif isinstance(item, Leaf):
      results.append(finalize_leaf(item, num))

    elif isinstance(item, Complex):
      stack.append((operator_functions[item.op.sym], 2))
      stack.append(item.right)
      stack.append(item.left)

    elif isinstance(item, Completed):
      inner = item.inner
      if isinstance(inner, Call):
        f:Function|None = registry.lookup(inner.name)
        if f is None: raise UnknownFunction(inner.name, item)
        stack.append((f, len(inner.args)))
        stack.extend(reversed(inner.args))
      else:
        stack.append(inner)

    elif isinstance(item, (Empty, Pending)):
      raise IncompleteExpression('expression not complete', item)

    elif isinstance(item, (Parenthesized, Call)):
      raise IncompleteExpression("expected ')'", item)

    else: raise TypeError(f'not a builder value: {item!r}')

  assert len(results) == 1, results
  return results[0]
