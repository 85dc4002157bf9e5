# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

'''
Expression lexing.
The lexer is a two-state scanner: it is either accumulating an identifier run, or it has just emitted a structural token.
Any other character (e.g. whitespace) is skipped entirely; it does not terminate the current run,
so `1 2` lexes as the single identifier `12`.
'''

from dataclasses import dataclass
from typing import Iterator

from .ops import Operator, operators


@dataclass(frozen=True)
class Ident:
  'An identifier run: either a numeric literal or a name. The distinction is made when the tree is finalized.'
  text:str

  def __str__(self) -> str: return self.text


@dataclass(frozen=True)
class Op:
  op:Operator

  def __str__(self) -> str: return self.op.sym


@dataclass(frozen=True)
class Open:
  def __str__(self) -> str: return '('


@dataclass(frozen=True)
class Close:
  def __str__(self) -> str: return ')'


@dataclass(frozen=True)
class Comma:
  def __str__(self) -> str: return ','


Token = Ident|Op|Open|Close|Comma


ident_chars = frozenset('0123456789.abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ')

structural_tokens:dict[str,Token] = {
  '(': Open(),
  ')': Close(),
  ',': Comma(),
  **{sym: Op(op) for sym, op in operators.items()},
}


def lex(text:str) -> Iterator[Token]:
  'Generate the tokens of `text`. Never raises.'
  run:list[str] = []
  for char in text:
    if char in ident_chars:
      run.append(char)
      continue
    token = structural_tokens.get(char)
    if token is None: continue # Ignored character.
    if run:
      yield Ident(''.join(run))
      run.clear()
    yield token
  if run:
    yield Ident(''.join(run))
