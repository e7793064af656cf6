"""
zkit.circuit
============

The data circuit: one advice column `input`, one selector `s`, and the gate

    "data processing":   s * input == 0

on every row. Wherever the selector is enabled the witness must be zero; rows
without the selector are unconstrained. The relation is a placeholder and says
nothing about ledger contents.

`CircuitShape` is the witness-independent part (what keys are derived from);
`CircuitInstance` adds the witness and is what gets proven. Both satisfy the
backend's circuit protocol (without_witnesses / configure / synthesize).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple, Union

from .backend.constraints import Column, ConstraintSystem, Layouter, Region, Selector, VirtualCells
from .backend.field import BN254_FR, Fr

WitnessValue = Union[int, Fr]


@dataclass(frozen=True)
class DataConfig:
    input: Column
    s: Selector


def _configure(meta: ConstraintSystem) -> DataConfig:
    input_col = meta.advice_column()
    s = meta.selector()

    def gate(cells: VirtualCells):
        value = cells.query_advice(input_col)
        sel = cells.query_selector(s)
        return [sel * value]

    meta.create_gate("data processing", gate)
    return DataConfig(input=input_col, s=s)


@dataclass(frozen=True)
class CircuitShape:
    """Relation plus layout: the selector is on for rows [0, enabled_rows)."""

    enabled_rows: int = 1
    name: str = "data processing"

    def __post_init__(self) -> None:
        if self.enabled_rows < 0:
            raise ValueError("enabled_rows must be >= 0")

    def without_witnesses(self) -> "CircuitInstance":
        return CircuitInstance(shape=self, witness=())

    def instantiate(self, witness: Iterable[WitnessValue]) -> "CircuitInstance":
        values = tuple(v if isinstance(v, Fr) else BN254_FR.from_int(v) for v in witness)
        return CircuitInstance(shape=self, witness=values)

    def configure(self, meta: ConstraintSystem) -> DataConfig:
        return _configure(meta)

    def synthesize(self, config: DataConfig, layouter: Layouter) -> None:
        self.without_witnesses().synthesize(config, layouter)


@dataclass(frozen=True)
class CircuitInstance:
    shape: CircuitShape
    witness: Tuple[Fr, ...]

    def without_witnesses(self) -> "CircuitInstance":
        return self.shape.without_witnesses()

    def configure(self, meta: ConstraintSystem) -> DataConfig:
        return _configure(meta)

    def synthesize(self, config: DataConfig, layouter: Layouter) -> None:
        def assign(region: Region) -> None:
            for row in range(self.shape.enabled_rows):
                region.enable_selector(config.s, row)
            for idx, value in enumerate(self.witness):
                region.assign_advice("input", config.input, idx, value)

        layouter.assign_region(self.shape.name, assign)


__all__ = ["DataConfig", "CircuitShape", "CircuitInstance", "WitnessValue"]
