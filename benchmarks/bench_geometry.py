#!/usr/bin/env python3
"""
Benchmark script comparing 2D coordinate generation between RDKit and chemstruct.

Usage:
    python benchmarks/bench_geometry.py [--extended]

Options:
    --extended    Also time recomputation, validation, ring perception and descriptors
"""

import sys
import os
import time
from dataclasses import dataclass
from typing import Callable, Optional

# Ensure local chemstruct is used (not installed version)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Template skeletons with matching SMILES for the RDKit side
TEST_MOLECULES = {
    "butane": ("alkane-chain", {"chain_length": 4}, "CCCC"),
    "benzene": ("aromatic-ring", None, "c1ccccc1"),
    "cyclooctane": ("cycloalkane", {"ring_size": 8}, "C1CCCCCCC1"),
    "eicosane": ("alkane-chain", {"chain_length": 20}, "C" * 20),
    "stearic_acid": ("fatty-acid", {"chain_length": 17}, "OC(=O)" + "C" * 17),
}

ITERATIONS = 500
EXTENDED_ITERATIONS = 200


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""
    name: str
    time_seconds: float
    iterations: int
    num_atoms: int
    num_bonds: int

    @property
    def time_per_call_ms(self) -> float:
        return (self.time_seconds / self.iterations) * 1000

    @property
    def time_per_atom_us(self) -> float:
        """Microseconds per atom per call."""
        return (self.time_seconds / self.iterations / self.num_atoms) * 1_000_000


def _time(func: Callable[[], object], iterations: int) -> float:
    func()  # Warmup
    start = time.perf_counter()
    for _ in range(iterations):
        func()
    return time.perf_counter() - start


def benchmark_rdkit(name: str, smiles: str, iterations: int) -> BenchmarkResult:
    """Benchmark RDKit 2D coordinate generation."""
    from rdkit import Chem
    from rdkit.Chem import rdDepictor

    mol = Chem.MolFromSmiles(smiles)
    if mol is None:
        raise ValueError(f"RDKit failed to parse SMILES: {smiles}")

    elapsed = _time(lambda: rdDepictor.Compute2DCoords(mol), iterations)
    return BenchmarkResult(name, elapsed, iterations, mol.GetNumAtoms(), mol.GetNumBonds())


def benchmark_chemstruct(name: str, iterations: int) -> BenchmarkResult:
    """Benchmark chemstruct geometry resolution."""
    from chemstruct import apply_template, resolve_geometry

    kind, params, _ = TEST_MOLECULES[name]
    graph = apply_template(kind, params)
    elapsed = _time(lambda: resolve_geometry(graph, dimensions=2), iterations)
    return BenchmarkResult(name, elapsed, iterations, graph.num_atoms, graph.num_bonds)


def run_single_benchmark(iterations: int = ITERATIONS):
    """Compare coordinate generation on every test molecule."""
    print("=" * 70)
    print("2D Coordinate Benchmark: RDKit vs chemstruct")
    print("=" * 70)
    print(f"\nIterations: {iterations}")
    print("-" * 70)

    print(f"{'Molecule':<14} {'Atoms':>6} {'RDKit ms':>10} {'chemstruct ms':>14} {'Ratio':>8}")
    for name, (_, _, smiles) in TEST_MOLECULES.items():
        rdkit_result: Optional[BenchmarkResult] = None
        try:
            rdkit_result = benchmark_rdkit(name, smiles, iterations)
        except ImportError:
            pass
        ours = benchmark_chemstruct(name, iterations)

        if rdkit_result:
            ratio = f"{ours.time_seconds / rdkit_result.time_seconds:.2f}x"
            rdkit_ms = f"{rdkit_result.time_per_call_ms:.4f}"
        else:
            ratio = rdkit_ms = "N/A"
        print(f"{name:<14} {ours.num_atoms:>6} {rdkit_ms:>10} {ours.time_per_call_ms:>14.4f} {ratio:>8}")


def run_extended_benchmark(iterations: int = EXTENDED_ITERATIONS):
    """Time each stage of the graph engine separately."""
    from chemstruct import apply_template, describe_molecule, recompute_graph, validate_molecule
    from chemstruct.rings import find_sssr

    print("=" * 90)
    print("EXTENDED chemstruct Stage Benchmark")
    print("=" * 90)
    print(f"\nIterations per molecule: {iterations}")
    print("-" * 90)

    stages = {
        "recompute": recompute_graph,
        "validate": validate_molecule,
        "sssr": find_sssr,
        "describe": describe_molecule,
    }
    header = f"{'Molecule':<14} {'Atoms':>6} " + " ".join(f"{stage + ' ms':>14}" for stage in stages)
    print(header)
    print("-" * 90)

    per_atom: list[float] = []
    for name, (kind, params, _) in TEST_MOLECULES.items():
        graph = apply_template(kind, params)
        timings = []
        for func in stages.values():
            elapsed = _time(lambda: func(graph), iterations)
            timings.append(elapsed / iterations * 1000)
        per_atom.append(sum(timings) * 1000 / graph.num_atoms)
        print(f"{name:<14} {graph.num_atoms:>6} " + " ".join(f"{t:>14.4f}" for t in timings))

    print("\n" + "-" * 90)
    print(f"Average time per atom (all stages): {sum(per_atom) / len(per_atom):.2f} µs")
    print("\nThis helps identify if performance scales linearly with molecule size.")


def main():
    if "--extended" in sys.argv or "-e" in sys.argv:
        run_extended_benchmark()
    else:
        run_single_benchmark()
        print("\n" + "-" * 70)
        print("TIP: Run with --extended for per-stage timings")


if __name__ == "__main__":
    main()
