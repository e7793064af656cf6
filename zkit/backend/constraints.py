"""
zkit.backend.constraints
========================

Circuit description API: columns, selectors, gate expressions and the
assignment machinery a circuit's `synthesize` writes into.

A circuit is any object providing

    without_witnesses() -> circuit       # same layout, no witness data
    configure(meta: ConstraintSystem)    # declare columns/selectors/gates, return config
    synthesize(config, layouter)         # enable selectors, assign advice

Gates are polynomial expressions over the current row that must evaluate to
zero on every row. Only the current row is addressable (no rotations).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple, Union

from .errors import ConstraintSystemError, SynthesisError
from .field import Fr, R


@dataclass(frozen=True)
class Column:
    index: int


@dataclass(frozen=True)
class Selector:
    index: int


# ---------------------------
# Expressions
# ---------------------------

class Expression:
    """Gate polynomial over the current row. Combine with +, -, * and unary -."""

    def degree(self) -> int:
        raise NotImplementedError

    def evaluate(
        self,
        advice: Callable[[Column], Any],
        selector: Callable[[Selector], Any],
        constant: Callable[[int], Any],
        add: Callable[[Any, Any], Any],
        mul: Callable[[Any, Any], Any],
        neg: Callable[[Any], Any],
    ) -> Any:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def __add__(self, other: "ExprLike") -> "Expression":
        return Sum(self, as_expression(other))

    def __radd__(self, other: "ExprLike") -> "Expression":
        return Sum(as_expression(other), self)

    def __sub__(self, other: "ExprLike") -> "Expression":
        return Sum(self, Negated(as_expression(other)))

    def __rsub__(self, other: "ExprLike") -> "Expression":
        return Sum(as_expression(other), Negated(self))

    def __mul__(self, other: "ExprLike") -> "Expression":
        return Product(self, as_expression(other))

    def __rmul__(self, other: "ExprLike") -> "Expression":
        return Product(as_expression(other), self)

    def __neg__(self) -> "Expression":
        return Negated(self)

    def __repr__(self) -> str:
        return f"Expression({self.describe()})"


ExprLike = Union[Expression, int, Fr]


@dataclass(frozen=True, repr=False)
class Constant(Expression):
    value: int

    def degree(self) -> int:
        return 0

    def evaluate(self, advice, selector, constant, add, mul, neg):
        return constant(self.value)

    def describe(self) -> str:
        return str(self.value % R)


@dataclass(frozen=True, repr=False)
class AdviceQuery(Expression):
    column: Column

    def degree(self) -> int:
        return 1

    def evaluate(self, advice, selector, constant, add, mul, neg):
        return advice(self.column)

    def describe(self) -> str:
        return f"advice[{self.column.index}]"


@dataclass(frozen=True, repr=False)
class SelectorQuery(Expression):
    selector: Selector

    def degree(self) -> int:
        return 1

    def evaluate(self, advice, selector, constant, add, mul, neg):
        return selector(self.selector)

    def describe(self) -> str:
        return f"selector[{self.selector.index}]"


@dataclass(frozen=True, repr=False)
class Sum(Expression):
    a: Expression
    b: Expression

    def degree(self) -> int:
        return max(self.a.degree(), self.b.degree())

    def evaluate(self, advice, selector, constant, add, mul, neg):
        args = (advice, selector, constant, add, mul, neg)
        return add(self.a.evaluate(*args), self.b.evaluate(*args))

    def describe(self) -> str:
        return f"({self.a.describe()} + {self.b.describe()})"


@dataclass(frozen=True, repr=False)
class Product(Expression):
    a: Expression
    b: Expression

    def degree(self) -> int:
        return self.a.degree() + self.b.degree()

    def evaluate(self, advice, selector, constant, add, mul, neg):
        args = (advice, selector, constant, add, mul, neg)
        return mul(self.a.evaluate(*args), self.b.evaluate(*args))

    def describe(self) -> str:
        return f"({self.a.describe()} * {self.b.describe()})"


@dataclass(frozen=True, repr=False)
class Negated(Expression):
    a: Expression

    def degree(self) -> int:
        return self.a.degree()

    def evaluate(self, advice, selector, constant, add, mul, neg):
        return neg(self.a.evaluate(advice, selector, constant, add, mul, neg))

    def describe(self) -> str:
        return f"-{self.a.describe()}"


def as_expression(x: ExprLike) -> Expression:
    if isinstance(x, Expression):
        return x
    if isinstance(x, (int, Fr)):
        return Constant(int(x) % R)
    raise ConstraintSystemError(f"cannot use {type(x).__name__} in a gate expression")


# ---------------------------
# Constraint system
# ---------------------------

@dataclass(frozen=True)
class Gate:
    name: str
    polys: Tuple[Expression, ...]


class VirtualCells:
    """Handed to gate closures; records which columns a gate touches."""

    def __init__(self, meta: "ConstraintSystem") -> None:
        self._meta = meta

    def query_advice(self, column: Column) -> Expression:
        if not isinstance(column, Column) or column.index >= self._meta.num_advice:
            raise ConstraintSystemError(f"query of undeclared advice column {column!r}")
        return AdviceQuery(column)

    def query_selector(self, selector: Selector) -> Expression:
        if not isinstance(selector, Selector) or selector.index >= self._meta.num_selectors:
            raise ConstraintSystemError(f"query of undeclared selector {selector!r}")
        return SelectorQuery(selector)


class ConstraintSystem:
    def __init__(self) -> None:
        self.num_advice = 0
        self.num_selectors = 0
        self.gates: List[Gate] = []

    def advice_column(self) -> Column:
        col = Column(self.num_advice)
        self.num_advice += 1
        return col

    def selector(self) -> Selector:
        sel = Selector(self.num_selectors)
        self.num_selectors += 1
        return sel

    def create_gate(self, name: str, fn: Callable[[VirtualCells], Sequence[ExprLike]]) -> None:
        polys = fn(VirtualCells(self))
        if isinstance(polys, Expression):
            polys = [polys]
        exprs = tuple(as_expression(p) for p in polys)
        if not exprs:
            raise ConstraintSystemError(f"gate '{name}' declares no constraints")
        self.gates.append(Gate(name=name, polys=exprs))

    def degree(self) -> int:
        return max((p.degree() for g in self.gates for p in g.polys), default=1)

    def describe(self) -> Dict[str, Any]:
        return {
            "num_advice": self.num_advice,
            "num_selectors": self.num_selectors,
            "gates": [{"name": g.name, "polys": [p.describe() for p in g.polys]} for g in self.gates],
        }


# ---------------------------
# Assignment
# ---------------------------

@dataclass
class Assignment:
    """Row-major record of what `synthesize` wrote; `witness=False` drops advice values."""

    n: int
    num_advice: int
    num_selectors: int
    witness: bool = True
    advice: List[List[int]] = field(default_factory=list)
    selectors: List[List[bool]] = field(default_factory=list)
    used_rows: int = 0

    def __post_init__(self) -> None:
        self.advice = [[0] * self.n for _ in range(self.num_advice)]
        self.selectors = [[False] * self.n for _ in range(self.num_selectors)]

    def _check_row(self, row: int) -> None:
        if not 0 <= row < self.n:
            raise SynthesisError(f"not enough rows available: row {row} outside domain of {self.n}")
        self.used_rows = max(self.used_rows, row + 1)


class Region:
    def __init__(self, assignment: Assignment, offset: int) -> None:
        self._a = assignment
        self._offset = offset
        self.rows = 0

    def enable_selector(self, selector: Selector, offset: int) -> None:
        if selector.index >= self._a.num_selectors:
            raise SynthesisError(f"unknown selector {selector!r}")
        row = self._offset + offset
        self._a._check_row(row)
        self._a.selectors[selector.index][row] = True
        self.rows = max(self.rows, offset + 1)

    def assign_advice(self, annotation: str, column: Column, offset: int, value: Union[int, Fr]) -> None:
        if column.index >= self._a.num_advice:
            raise SynthesisError(f"unknown advice column {column!r} ({annotation})")
        row = self._offset + offset
        self._a._check_row(row)
        if self._a.witness:
            self._a.advice[column.index][row] = int(value) % R
        self.rows = max(self.rows, offset + 1)


class Layouter:
    """Stacks regions one after another starting at row 0."""

    def __init__(self, assignment: Assignment) -> None:
        self._a = assignment
        self._next_row = 0
        self.regions: List[Tuple[str, int, int]] = []

    def assign_region(self, name: str, fn: Callable[[Region], Any]) -> Any:
        region = Region(self._a, self._next_row)
        out = fn(region)
        self.regions.append((name, self._next_row, region.rows))
        self._next_row += region.rows
        return out


class Circuit(Protocol):
    def without_witnesses(self) -> "Circuit": ...
    def configure(self, meta: ConstraintSystem) -> Any: ...
    def synthesize(self, config: Any, layouter: Layouter) -> None: ...


def synthesize(circuit: Circuit, n: int, *, witness: bool) -> Tuple[ConstraintSystem, Assignment]:
    meta = ConstraintSystem()
    config = circuit.configure(meta)
    assignment = Assignment(n=n, num_advice=meta.num_advice, num_selectors=meta.num_selectors, witness=witness)
    circuit.synthesize(config, Layouter(assignment))
    return meta, assignment


def first_unsatisfied(meta: ConstraintSystem, assignment: Assignment) -> Optional[Tuple[str, int, int]]:
    """(gate, poly index, row) of the first violated constraint, or None."""
    for row in range(assignment.n):
        for gate in meta.gates:
            for idx, expr in enumerate(gate.polys):
                v = expr.evaluate(
                    lambda c: assignment.advice[c.index][row],
                    lambda s: 1 if assignment.selectors[s.index][row] else 0,
                    lambda k: k,
                    lambda a, b: (a + b) % R,
                    lambda a, b: (a * b) % R,
                    lambda a: (-a) % R,
                )
                if v % R:
                    return gate.name, idx, row
    return None


__all__ = [
    "Column",
    "Selector",
    "Expression",
    "Constant",
    "AdviceQuery",
    "SelectorQuery",
    "Gate",
    "VirtualCells",
    "ConstraintSystem",
    "Assignment",
    "Region",
    "Layouter",
    "Circuit",
    "synthesize",
    "first_unsatisfied",
]
