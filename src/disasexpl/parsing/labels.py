"""
Label Usage Resolver.

Liveness of a label can depend on a later line (forward references), so
usage is collected over the whole document before anything is emitted.

A label is used *strongly* when an opcode, an export or a function
definition refers to it. It is used *weakly* when only the data hanging
off another label refers to it:

    .foo: .string "moo"
    .baz: .quad .foo
          mov eax, .baz

`.baz` is strongly used by the `mov`; `.foo` is weakly used by `.baz` and
becomes live only because `.baz` is.
"""
from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Set

from .asm_types import OutputLine
from .classifier import LineKind, classify, defines_function, exported_name, inside_cuda_body
from .patterns import DEFAULT_DIALECT, NVCC_DIALECT, RE_DATA_DEFN, custom_block_depth, label_finder_for

# Bounds pathological cyclic weak-reference chains; not a semantic limit.
MAX_LABEL_ITERATIONS = 10


def find_used_labels(lines: List[str], directives_stripped: bool) -> Set[str]:
    label_find = label_finder_for(lines)
    used: Set[str] = set()
    weak_usages: Dict[str, List[str]] = defaultdict(list)

    # All labels pointing at the current code:
    #   foo:
    #   bar:
    #       add r0, r0, #1
    # gives [foo, bar] for the add.
    current_label_set: List[str] = []
    in_label_group = False
    depth = 0
    dialect = DEFAULT_DIALECT
    in_cuda = False

    # Labels heading the first instruction, used only when nothing in the
    # document is exported or declared as a function.
    declared = False
    heading: List[str] = []
    entry_labels: Optional[List[str]] = None

    for raw in lines:
        depth = custom_block_depth(raw, depth)
        info = classify(raw, dialect, in_custom_block=depth > 0 or in_cuda)
        line = info.text
        if info.kind == LineKind.CUDA_BEGIN:
            dialect = NVCC_DIALECT
        in_cuda = inside_cuda_body(info, in_cuda)

        if info.kind == LineKind.LABEL:
            if in_label_group:
                current_label_set.append(info.label)
            else:
                current_label_set = [info.label]
            in_label_group = True
        else:
            in_label_group = False

        name = exported_name(line)
        if name:
            used.add(name)
            declared = True

        is_function = defines_function(line)
        declared = declared or is_function

        if entry_labels is None and info.kind != LineKind.BLANK:
            if info.kind == LineKind.LABEL and not info.body.strip():
                heading.append(info.label)
            elif info.has_opcode:
                entry_labels = heading + ([info.label] if info.kind == LineKind.LABEL else [])
            elif info.kind != LineKind.DIRECTIVE and not dialect.is_comment_only(line):
                heading = []

        body = info.body
        if not is_function:
            if not body.strip():
                continue
            if info.kind != LineKind.LABEL and line.startswith("."):
                continue

        found = label_find.findall(body)
        if not found:
            continue

        if not directives_stripped or info.has_opcode or is_function:
            used.update(found)
        elif RE_DATA_DEFN.match(body):
            for label in current_label_set:
                weak_usages[label].extend(found)

    if not declared and entry_labels:
        used.update(entry_labels)

    return close_over_weak_uses(used, weak_usages)


def close_over_weak_uses(used: Iterable[str], weak_usages: Dict[str, List[str]],
                         max_iterations: int = MAX_LABEL_ITERATIONS) -> Set[str]:
    """Follow weak edges out of live labels until nothing new turns up."""
    live = set(used)
    for _ in range(max_iterations):
        to_add = {
            target
            for label in live
            for target in weak_usages.get(label, ())
            if target not in live
        }
        if not to_add:
            break
        live |= to_add
    return live


def remove_undefined_references(lines: List[OutputLine], label_definitions: Dict[str, int]) -> List[OutputLine]:
    """
    Post-pass over the finished buffer: drop references to labels that were
    filtered out but still appear as operands.
    """
    cleaned: List[OutputLine] = []
    for line in lines:
        kept = [ref for ref in line.label_references if ref.name in label_definitions]
        if len(kept) != len(line.label_references):
            line = replace(line, label_references=kept)
        cleaned.append(line)
    return cleaned
