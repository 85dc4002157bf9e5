# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
Named, fixed-arity numeric functions, and the registry that maps names to them.
Arity is enforced here, at call time; the builder and evaluator never count arguments.
'''

import math
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Sequence

from .ops import operators


class ArityError(TypeError):
  'Raised when a function is called with the wrong number of arguments.'

  def __init__(self, name:str, arity:int, received:int):
    self.name = name
    self.arity = arity
    self.received = received
    super().__init__(f'{name!r} expects {arity} argument{"" if arity == 1 else "s"}; received {received}.')


class Function:
  'Abstract base class for callables that can appear in an expression tree.'
  name:str
  arity:int

  def __init__(self, *args:Any, **kwargs:Any): raise Exception(f'abstract base class: {self}')

  def __repr__(self) -> str: return f'{type(self).__name__}({self.name!r}, arity={self.arity})'

  def __str__(self) -> str: return self.name

  def call(self, args:Sequence[Any]) -> Any:
    if len(args) != self.arity: raise ArityError(self.name, self.arity, len(args))
    return self.apply(args)

  def apply(self, args:Sequence[Any]) -> Any:
    'Apply the function to an argument list of the correct length.'
    raise NotImplementedError(self)


@dataclass(frozen=True, repr=False)
class FnFunction(Function):
  'A Function backed by a plain Python callable taking positional arguments.'
  name:str
  arity:int
  fn:Callable[...,Any]

  def apply(self, args:Sequence[Any]) -> Any: return self.fn(*args)


class Registry:
  '''
  A mapping of names to Function objects.
  The default registry is shared; call `copy` to derive a registry with additional functions.
  '''

  def __init__(self, functions:dict[str,Function]|None=None) -> None:
    self.functions:dict[str,Function] = dict(functions or {})

  def __repr__(self) -> str: return f'{type(self).__name__}({sorted(self.functions)})'

  def __contains__(self, name:str) -> bool: return name in self.functions

  def __iter__(self) -> Iterator[str]: return iter(self.functions)

  def __len__(self) -> int: return len(self.functions)

  def lookup(self, name:str) -> Function|None:
    return self.functions.get(name)

  def register(self, function:Function) -> Function:
    'Add `function` under its own name, replacing any existing entry. Returns the function, so it can be used inline.'
    self.functions[function.name] = function
    return function

  def add(self, name:str, arity:int, fn:Callable[...,Any]) -> Function:
    if arity < 0: raise ValueError(f'arity must be >= 0; received {arity!r}')
    return self.register(FnFunction(name, arity, fn))

  def copy(self) -> 'Registry':
    return Registry(self.functions)


def _min(a:Any, b:Any) -> Any: return min(a, b)

def _max(a:Any, b:Any) -> Any: return max(a, b)


# Binary operators, used by the builder for infix nodes regardless of the registry passed to `finalize`.
operator_functions:dict[str,Function] = { sym: FnFunction(sym, 2, op.fn) for sym, op in operators.items() }

default_registry = Registry(operator_functions)

for _name, _fn in [
  ('sin', math.sin),
  ('cos', math.cos),
  ('tan', math.tan),
  ('exp', math.exp),
  ('log', math.log),
  ('sqrt', math.sqrt),
  ('abs', abs)]:
  default_registry.add(_name, 1, _fn)

for _name, _fn in [
  ('pow', math.pow),
  ('min', _min),
  ('max', _max),
  ('atan2', math.atan2)]:
  default_registry.add(_name, 2, _fn)
