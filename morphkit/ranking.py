"""Tuning class weights and inflexion ranking factors on a labelled dataset."""

from __future__ import annotations

import errno
import math
import re
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

Metric = Callable[[Sequence[float]], float]

_LINE = re.compile(
    r"cls:(\d+)\s+psp:(\d+)\s+stm:(\d+)\s+flx:(\d+)\s+occ:(\d+)\s+(\S)"
)
_IDENT_CHARS = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_0123456789")

_ABOUT = (
    "tune-ranking - create class weight distribution and dump to stdout\n"
    "Usage: {prog} [options] dataset\n"
    "options are:\n"
    "\t-ns[pace]=namespace-name, default is no namespace;\n"
    "\t-va[name]=variable-name, default is 'ClassRanks';\n"
    "\t-verbose - print optimization progress.\n"
    "dataset format:\n"
    "\tcls:%u\\tpsp:%u\\tstm:%u\\tflx:%u\\tocc:%u\\t[-/+]\n"
    "keys:\n"
    "\tcls - class identifier;\n"
    "\tpsp - part-of-speach (not used now, because is descendant of class);\n"
    "\tstm - the length of word stem;\n"
    "\tflx - the length of scanned inflexion, >= 2;\n"
    "\tocc - the occurence count in sample texts;\n"
    "\t-/+ - positivite or negative sample.\n"
)


@dataclass
class Sample:
    """One labelled observation of a word matched to a class."""

    uclass: int
    part_sp: int
    ccstem: int
    ccflex: int
    uoccur: int
    bmatch: bool


@dataclass(frozen=True)
class Limits:
    """Allowed range of a tuned value."""

    low: float
    high: float


def get_rank(sample: Sample, cranks: Sequence[float], k_flex: Sequence[float]) -> float:
    """Rank of a sample from its class weight and its inflexion length."""
    return cranks[sample.uclass] * (
        k_flex[0] + (1.0 - k_flex[0]) * math.sin(math.atan(k_flex[1] * (sample.ccflex - k_flex[2])))
    )


def measure(samples: Iterable[Sample], cranks: Sequence[float], k_flex: Sequence[float]) -> float:
    """Loss over the dataset: distance of ranks from 1 for matches and from 0 otherwise."""
    loss = 0.0
    for sample in samples:
        rank = get_rank(sample, cranks, k_flex)
        if sample.bmatch:
            loss += sample.uoccur * (1.0 - rank)
        else:
            loss += sample.uoccur * rank
    return loss


def gradient(rank: Sequence[float], cvalue: float, step: float, metric: Metric) -> List[float]:
    """Forward-difference gradient of ``metric`` at ``rank``."""
    grad = []
    probe = list(rank)
    for index, value in enumerate(rank):
        probe[index] = value + step
        grad.append((metric(probe) - cvalue) / step)
        probe[index] = value
    return grad


def _improved(new: float, old: float) -> bool:
    if not new < old:
        return False
    if old == 0:
        return True
    return (old - new) / old > 0.001


def tune(
    ranks: Sequence[float],
    limits: Sequence[Limits],
    cvalue: float,
    step: float,
    metric: Metric,
    verbose: bool = False,
) -> List[float]:
    """Gradient descent with step halving; returns the tuned values."""
    ranks = list(ranks)
    step_limit = step / 100
    iteration = 0
    while step > step_limit:
        grad = gradient(ranks, cvalue, step, metric)
        iteration += 1
        if verbose:
            print(f"{iteration}\tloss = {cvalue:f}, step = {step:f}")
        grdif = max(0.0, *grad) - min(0.0, *grad)
        if grdif < 0.01:
            step = 0.0
            continue
        candidate = [
            min(max(value - g / grdif * step, lim.low), lim.high)
            for value, g, lim in zip(ranks, grad, limits)
        ]
        new_value = metric(candidate)
        if _improved(new_value, cvalue):
            ranks = candidate
            cvalue = new_value
        else:
            step /= 2
    return ranks


def tune_by_class_ranks(
    cranks: Sequence[float],
    k_flex: Sequence[float],
    samples: Sequence[Sample],
    verbose: bool = False,
) -> List[float]:
    """Tune the class weights with the inflexion factors fixed."""
    limits = [Limits(0.01, 1.0)] * len(cranks)
    return tune(
        cranks,
        limits,
        measure(samples, cranks, k_flex),
        0.5,
        lambda candidate: measure(samples, candidate, k_flex),
        verbose,
    )


def tune_by_flex_powers(
    cranks: Sequence[float],
    k_flex: Sequence[float],
    samples: Sequence[Sample],
    verbose: bool = False,
) -> List[float]:
    """Tune the three inflexion factors with the class weights fixed."""
    limits = [Limits(0.01, 0.99), Limits(0.01, 3.00), Limits(0.10, 5.00)]
    return tune(
        k_flex,
        limits,
        measure(samples, cranks, k_flex),
        0.1,
        lambda candidate: measure(samples, cranks, candidate),
        verbose,
    )


def read_dataset(lines: Iterable[str]) -> List[Sample]:
    """Parse dataset lines; trailing samples with no occurrences are dropped."""
    samples: List[Sample] = []
    for number, line in enumerate(lines, 1):
        if not line.strip():
            continue
        found = _LINE.match(line.strip())
        if found is None:
            raise ValueError(f"invalid dataset line {number}: {line.rstrip()!r}")
        uclass, part_sp, ccstem, ccflex, uoccur = (int(v) for v in found.groups()[:5])
        samples.append(Sample(uclass, part_sp, ccstem, ccflex, uoccur, found.group(6) == "+"))
    while samples and samples[-1].uoccur == 0:
        samples.pop()
    return samples


def is_valid_identifier(name: str) -> bool:
    """True if ``name`` may be used as a C++ identifier."""
    return all(ch in _IDENT_CHARS for ch in name) and not (name[:1].isdigit())


def _format_array(name: str, values: Sequence[float], indent: str) -> str:
    out = [f"{indent}double  {name}[{len(values)}] =\n{indent}{{\n"]
    prefix = "  "
    for index, value in enumerate(values):
        if index % 12 == 0:
            out.append(indent)
        out.append(f"{prefix}{value:6.4f}")
        prefix = ",\n  " if index % 12 == 11 else ", "
    out.append("\n};\n")
    return "".join(out)


def format_tables(
    cranks: Sequence[float],
    k_flex: Sequence[float],
    namespace: Optional[str] = None,
    name: str = "ClassRanks",
) -> str:
    """Render the tuned values as C++ array definitions."""
    indent = ""
    out = []
    if namespace is not None:
        out.append(f"namespace {namespace} {{\n")
        indent = "  "
    out.append(_format_array(name, cranks, indent))
    out.append(_format_array("FlexRanker", k_flex, indent))
    if namespace is not None:
        out.append("}\n")
    return "".join(out)


def _option_value(arg: str, keys: Tuple[str, ...]) -> Optional[str]:
    body = arg[1:]
    for key in keys:
        for sep in "=:":
            if body.startswith(key + sep):
                return body[len(key) + 1:]
    return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Tune ranking on a dataset file and print the tables to standard output."""
    args = list(sys.argv[1:] if argv is None else argv)
    source: Optional[str] = None
    namespace: Optional[str] = None
    name = "ClassRanks"
    verbose = False

    for arg in args:
        if arg.startswith("-"):
            value = _option_value(arg, ("ns", "nspace"))
            if value is not None:
                namespace = value
                continue
            value = _option_value(arg, ("va", "vaname"))
            if value is not None:
                name = value
                continue
            if arg[1:] == "verbose":
                verbose = True
                continue
            sys.stderr.write(f"invalid switch '{arg}'\n")
            return errno.EINVAL
        if source is None:
            source = arg
        else:
            sys.stderr.write(f"unexpected argument '{arg}'\n")
            return errno.EINVAL

    if source is None:
        sys.stderr.write(_ABOUT.format(prog="tune-ranking"))
        return 0

    if namespace is not None and not is_valid_identifier(namespace):
        sys.stderr.write(f"invalid namespace name '{namespace}'\n")
        return errno.EINVAL
    if not is_valid_identifier(name):
        sys.stderr.write(f"invalid variable name '{name}'\n")
        return errno.EINVAL

    try:
        with open(source, "r", encoding="utf-8") as stream:
            samples = read_dataset(stream)
    except OSError:
        sys.stderr.write(f"could not open file '{source}'\n")
        return errno.ENOENT
    except ValueError as exc:
        sys.stderr.write(f"{exc}\n")
        return errno.EINVAL

    if not samples:
        sys.stderr.write("empty dataset\n")
        return errno.EINVAL

    cranks = [0.5] * (max(s.uclass for s in samples) + 1)
    k_flex = [0.1, 0.3, 2.0]

    k_flex = tune_by_flex_powers(cranks, k_flex, samples, verbose)
    sys.stdout.write("====================================\n")
    cranks = tune_by_class_ranks(cranks, k_flex, samples, verbose)
    sys.stdout.write(format_tables(cranks, k_flex, namespace, name))
    return 0


if __name__ == "__main__":
    sys.exit(main())