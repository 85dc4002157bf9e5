#!/usr/bin/env python3
# Dedicated to the public domain under CC0: https://creativecommons.org/publicdomain/zero/1.0/.

import math
from decimal import Decimal
from fractions import Fraction
from typing import Any

from arith import (ArityError, default_registry, DepthLimitExceeded, IncompleteExpression, parse, parse_or_fail,
  UnexpectedToken, UnknownFunction)
from utest import utest, utest_call, utest_exc, utest_val


def calc(text:str, **bindings:Any) -> Any:
  return parse(text).calculate(bindings)


def utest_close(exp:float, text:str, **bindings:Any) -> None:
  utest_val(True, math.isclose(exp, calc(text, **bindings), abs_tol=1e-12), f'{text} ~= {exp}')


# Reuse of one expression with different bindings; 2 + 10 is 12.
utest(15.0, calc, 'x + 10', x=5.0)
utest(12.0, calc, 'x + 10', x=2.0)

# Precedence.
utest(0.0, calc, 'x-10*x+9', x=1.0)
utest(15.0, calc, '1+2*3^2-4')
utest(18.0, calc, '2*3^2')
utest(16.0, calc, '2^3*2')

# Left associativity.
utest(-1.0, calc, 'x-10-x+9', x=1.0)
utest(0.0, calc, 'x - 10+9', x=1.0)
utest(2.0, calc, '8-4-2')
utest(1.0, calc, '8/4/2')
utest(64.0, calc, '2^3^2')

# Parentheses.
utest(4.0, calc, 'x -3*(x-2)', x=1.0)
utest(1.0, calc, 'x -3^(x-2)', x=2.0)
utest(9.0, calc, '(1+2)*3')
utest(70.0, calc, '2*(3+4)*5')
utest(512.0, calc, '2^(3^2)')
utest(5.0, calc, '((((5))))')

# Functions.
utest(5 * math.sin(0.3), calc, '5*sin(x)', x=0.3)
for v in [0.0, 0.3, 1.0, -2.5, 100.0]:
  utest_close(1.0, 'sin(x)^2 +cos(x)^2', x=v)
utest(3.0, calc, 'sqrt(abs(x-10))', x=1.0)
utest(5.0, calc, 'max(1, 2) + min(3, 4)')
utest(6.0, calc, 'max(x, y)*2', x=1.0, y=3.0)
utest(1024.0, calc, 'pow(2, 10)')
utest_close(math.pi/4, 'atan2(1, 1)')
utest_close(math.e, 'exp(1)')
utest(0.0, calc, 'log(1)')
utest(27.0, calc, 'max(min(a, b), c)^3', a=2.0, b=4.0, c=3.0)
utest_exc(ArityError('cos', 1, 2), calc, 'cos(1, 2)')
utest_exc(ZeroDivisionError, calc, '1/(x-x)', x=3.0)
utest_exc(ValueError, calc, 'sqrt(x)', x=-1.0)

# Long flat expressions.
utest(2500.0, calc, '+'.join(['x'] * 2500), x=1.0)
utest(None, calc, '+'.join(['x'] * 2500) + '+y', x=1.0)
utest(0.0, calc, ' + '.join(['x'] * 1200) + ' - 1200*x', x=7.0)

# Unbound variables.
utest(None, calc, 'x+y', x=1.0)
utest(None, calc, 'sin(z)')
utest(3.0, calc, 'x+y', x=1.0, y=2.0)

# Permissive literal classification: malformed numbers are names.
utest(None, calc, '3.4.5 + 1')
utest(2.0, lambda: parse('3.4.5 + 1').calculate({'3.4.5': 1.0}))
utest(10.0, calc, '1 0') # Ignored characters do not split literals.
utest(100000.0, calc, '1e5')
utest(23.0, lambda: parse('25e-2').calculate({'25e': 25.0})) # `-` is an operator, so '25e' is a name.
utest(float('inf'), calc, 'inf + 1')

# Failures.
utest_exc(IncompleteExpression("expected ')'"), parse, '(x+1')
utest_exc(IncompleteExpression('expression not complete'), parse, '')
utest_exc(IncompleteExpression('expression not complete'), parse, 'x*')
utest_exc(UnknownFunction('foo'), parse, 'foo(x)')
utest_exc(UnexpectedToken, parse, 'x*/y')
utest_exc(UnexpectedToken, parse, 'x,y')
utest_exc(UnexpectedToken, parse, 'x+1)')
utest_exc(DepthLimitExceeded, parse, '(((x)))', max_depth=2)


@utest_call
def test_reuse() -> None:
  f = parse('x^2 - 2*x*y + y^2')
  utest(1.0, f.calculate, {'x': 3.0, 'y': 2.0})
  utest(9.0, f.calculate, {'x': -1.0, 'y': 2.0})
  utest(1.0, f.calculate, {'x': 3.0, 'y': 2.0})
  utest_val(f.calculate({'x': 0.25, 'y': 7.5}), f.calculate({'x': 0.25, 'y': 7.5}), 'idempotent')
  utest_val(['x', 'y'], list(f.variables()))


@utest_call
def test_custom_registry() -> None:
  reg = default_registry.copy()
  reg.add('double', 1, lambda a: a * 2)
  reg.add('clamp', 3, lambda v, lo, hi: max(lo, min(v, hi)))
  utest(5.0, lambda: parse('double(x)+1', reg).calculate({'x': 2.0}))
  utest(1.0, lambda: parse('clamp(x*10, 0, 1)', reg).calculate({'x': 0.5}))
  utest_exc(UnknownFunction('double'), parse, 'double(x)')


@utest_call
def test_numeric_types() -> None:
  utest(Decimal('0.3'), lambda: parse('0.1+0.2', num=Decimal).calculate({}))
  utest(Fraction(1), lambda: parse('1/3+x', num=Fraction).calculate({'x': Fraction(2, 3)}))
  utest(Fraction(1, 8), lambda: parse('0.5^3', num=Fraction).calculate({}))


@utest_call
def test_parse_or_fail() -> None:
  utest(7.0, lambda: parse_or_fail('x+5').calculate({'x': 2.0}))
  utest_exc(SystemExit('build error: expression not complete (state: Pending(x, +))'), parse_or_fail, 'x+')
  utest_exc(SystemExit('build error: unexpected token: * (state: _)\n  note: in expression: Pending(x, +)'), parse_or_fail, 'x+*')
  utest_exc(SystemExit("build error: function not found: 'foo' (state: foo(1))"), parse_or_fail, 'foo(1)')


# Tracing is written to std err.
utest(2.0, lambda: parse('x+1', dbg=True).calculate({'x': 1.0}))
