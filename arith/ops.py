# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
Binary operators and their precedence tiers.
'''

from dataclasses import dataclass
from enum import IntEnum
from operator import add, mul, sub, truediv
from typing import Any, Callable


class Tier(IntEnum):
  'Operator precedence tier. Operators within a tier associate to the left.'
  LOW = 1
  HIGH = 2
  HIGHEST = 3


def power(base:Any, exp:Any) -> Any:
  res = base ** exp
  if isinstance(res, complex): raise ValueError(f'math domain error: {base!r} ^ {exp!r}')
  return res


@dataclass(frozen=True)
class Operator:
  sym:str
  tier:Tier
  fn:Callable[[Any,Any],Any]

  def __str__(self) -> str: return self.sym

  def more(self, other:'Operator') -> bool:
    'True if this operator binds strictly tighter than `other`.'
    return self.tier > other.tier


operators:dict[str,Operator] = {op.sym: op for op in [
  Operator('+', Tier.LOW, add),
  Operator('-', Tier.LOW, sub),
  Operator('*', Tier.HIGH, mul),
  Operator('/', Tier.HIGH, truediv),
  Operator('^', Tier.HIGHEST, power),
]}
