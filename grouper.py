"""Partition parsed benchmark records into comparison groups."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from bench_errors import ConfigurationError
from bench_record import BenchmarkRecord, Source
from name_matcher import NameMatcher

MODULE_SEPARATOR = "::"


class CompareBy(Enum):
    """Axis along which records are grouped."""

    MODULE = "module"
    FILE = "file"


@dataclass
class Group:
    """Records forming one side of a comparison."""

    label: str
    kind: CompareBy
    records: List[BenchmarkRecord] = field(default_factory=list)


@dataclass(frozen=True)
class MatchedPair:
    """Two records identified as the same test. ``name`` is the matched key."""

    name: str
    first: BenchmarkRecord
    second: BenchmarkRecord


@dataclass
class BenchAssociation:
    """Every group's record for a single test, in group order."""

    name: str
    entries: List[Tuple[str, BenchmarkRecord]] = field(default_factory=list)


def warn_ignored(label: str, names: Sequence[str]) -> None:
    """Report tests that had no counterpart and were left out."""
    if names:
        logging.warning(
            f"Ignoring test(s) {list(names)} that were only found in '{label}'"
        )


def group_by_module(sources: Sequence[Source], labels: Sequence[str]) -> List[Group]:
    """Split all records into two groups by module label.

    A record belongs to a label when its name starts with ``label::``. The
    label prefix is removed from the record name so both sides can be paired.
    A record matching both labels goes to the longer one. Records matching
    neither label are dropped.
    """
    if len(labels) != 2:
        raise ConfigurationError(
            f"--by-module takes exactly two module names, got {len(labels)}"
        )
    if any(not label for label in labels):
        raise ConfigurationError("Module names must not be empty")
    if labels[0] == labels[1]:
        raise ConfigurationError(f"Module names must differ, got '{labels[0]}' twice")

    groups = [Group(label=label, kind=CompareBy.MODULE) for label in labels]
    prefixes = [label + MODULE_SEPARATOR for label in labels]
    dropped = 0

    for source in sources:
        for record in source.records:
            candidates = [
                i for i, prefix in enumerate(prefixes) if record.name.startswith(prefix)
            ]
            if not candidates:
                dropped += 1
                continue
            idx = max(candidates, key=lambda i: len(prefixes[i]))
            test_name = record.name[len(prefixes[idx]):]
            groups[idx].records.append(record.renamed(test_name))

    if dropped:
        logging.debug(f"Dropped {dropped} record(s) outside modules {list(labels)}")
    return groups


def group_by_module_all(sources: Sequence[Source]) -> List[Group]:
    """Group every record by the module before its first ``::``.

    Records without a module go to the module ``""``. Groups are ordered by
    first appearance.
    """
    groups: Dict[str, Group] = {}
    for source in sources:
        for record in source.records:
            module, sep, test_name = record.name.partition(MODULE_SEPARATOR)
            if not sep:
                module, test_name = "", record.name
            group = groups.setdefault(module, Group(label=module, kind=CompareBy.MODULE))
            group.records.append(record.renamed(test_name))
    return list(groups.values())


def group_by_file(sources: Sequence[Source], table_mode: bool) -> List[Group]:
    """Turn each source into its own group, in source order.

    Table mode compares exactly two sources; plot mode needs at least two.
    """
    if table_mode and len(sources) != 2:
        raise ConfigurationError(
            f"Comparing by file needs exactly two inputs, got {len(sources)}"
        )
    if not table_mode and len(sources) < 2:
        raise ConfigurationError(
            f"Plotting by file needs at least two inputs, got {len(sources)}"
        )
    return [
        Group(label=source.label, kind=CompareBy.FILE, records=list(source.records))
        for source in sources
    ]


def pair_groups(first: Group, second: Group, matcher: NameMatcher) -> List[MatchedPair]:
    """Pair records of two groups by stripped name.

    Pairs follow the order of ``first``. Only the first occurrence of a name
    in each group takes part; unmatched names are reported and dropped.
    """
    second_index: Dict[str, BenchmarkRecord] = {}
    for record in second.records:
        second_index.setdefault(matcher.strip_second(record.name), record)

    pairs = []
    seen = set()
    only_first = []
    for record in first.records:
        key = matcher.strip_first(record.name)
        if key in seen:
            logging.debug(f"Duplicate test '{key}' in '{first.label}', keeping first")
            continue
        seen.add(key)
        other = second_index.get(key)
        if other is None:
            only_first.append(key)
            continue
        pairs.append(MatchedPair(name=key, first=record, second=other))

    only_second = [key for key in second_index if key not in seen]
    warn_ignored(first.label, only_first)
    warn_ignored(second.label, only_second)
    return pairs


def collect_by_test(groups: Sequence[Group]) -> List[BenchAssociation]:
    """Gather each test's record from every group containing it.

    Tests are ordered by first appearance; within a group only the first
    record of a test is used.
    """
    by_name: Dict[str, BenchAssociation] = {}
    for group in groups:
        seen = set()
        for record in group.records:
            if record.name in seen:
                continue
            seen.add(record.name)
            assoc = by_name.setdefault(record.name, BenchAssociation(name=record.name))
            assoc.entries.append((group.label, record))
    return list(by_name.values())
