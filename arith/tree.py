# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
Finalized expression trees.
A tree is immutable once built, and can be evaluated any number of times against different variable bindings.
Same-tier operators associate to the left, so a long flat expression such as `x+x+...+x` is a deep left spine;
all traversals here use an explicit stack rather than recursion.
'''

from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from .functions import Function


class UnboundVariable(KeyError):
  'Raised by `evaluate` when a variable is missing from the bindings.'

  def __init__(self, name:str):
    self.name = name
    super().__init__(name)


class Node:
  'Base class for tree nodes.'

  def evaluate(self, bindings:Mapping[str,Any]) -> Any:
    '''
    Evaluate the tree; raises UnboundVariable if a variable is missing from `bindings`.
    Arguments are evaluated left to right and the first failure propagates. Arity is checked by the function.
    '''
    vals:list[Any] = []
    stack:list[Any] = [self] # Nodes, and (function, arg count) pairs awaiting their evaluated arguments.
    while stack:
      item = stack.pop()
      if isinstance(item, Constant):
        vals.append(item.val)
      elif isinstance(item, Variable):
        try: vals.append(bindings[item.name])
        except KeyError: raise UnboundVariable(item.name) from None
      elif isinstance(item, Operation):
        stack.append((item.fn, len(item.args)))
        stack.extend(reversed(item.args))
      else:
        fn, count = item
        split = len(vals) - count
        args = vals[split:]
        del vals[split:]
        vals.append(fn.call(args))
    assert len(vals) == 1, vals
    return vals[0]


  def calculate(self, bindings:Mapping[str,Any]) -> Any|None:
    '''
    Evaluate the tree against `bindings`.
    Returns None if any variable is unbound; this is an expected condition for the caller to check.
    Errors raised by the functions themselves (e.g. ZeroDivisionError) propagate.
    '''
    try: return self.evaluate(bindings)
    except UnboundVariable: return None


  def variables(self) -> Iterator[str]:
    'Generate the distinct variable names in the tree, in order of first occurrence.'
    seen:set[str] = set()
    stack:list[Node] = [self]
    while stack:
      node = stack.pop()
      if isinstance(node, Variable):
        if node.name not in seen:
          seen.add(node.name)
          yield node.name
      elif isinstance(node, Operation):
        stack.extend(reversed(node.args))


  def __str__(self) -> str:
    'Render the tree fully parenthesized: infix for symbolic binary operators, call syntax otherwise.'
    parts:list[str] = []
    stack:list[Any] = [self] # Nodes and literal strings.
    while stack:
      item = stack.pop()
      if isinstance(item, str): parts.append(item)
      elif isinstance(item, Constant): parts.append(str(item.val))
      elif isinstance(item, Variable): parts.append(item.name)
      else:
        assert isinstance(item, Operation), item
        name = item.fn.name
        if len(item.args) == 2 and not name.isalnum(): # Infix operator.
          l, r = item.args
          seq:list[Any] = ['(', l, f' {name} ', r, ')']
        else:
          seq = [f'{name}(']
          for i, arg in enumerate(item.args):
            if i: seq.append(', ')
            seq.append(arg)
          seq.append(')')
        stack.extend(reversed(seq))
    return ''.join(parts)



@dataclass(frozen=True)
class Constant(Node):
  val:Any


@dataclass(frozen=True)
class Variable(Node):
  name:str


@dataclass(frozen=True)
class Operation(Node):
  fn:Function
  args:tuple[Node,...]



Ast = Constant|Variable|Operation
