"""
Graph utilities: traversal order, fan-in/fan-out statistics and printable
summaries of an expression DAG.
"""

import logging
from collections import Counter
from typing import Callable, Dict, List, Optional

import numpy as np

from .node import Node, Operation, Variable


def topological_order(root: Node) -> List[Node]:
    """
    Return every node reachable from `root`, children before parents.

    Iterative post-order DFS keyed by node identity, so each shared node
    appears exactly once and graph depth is not limited by the recursion
    limit.
    """
    order: List[Node] = []
    done = set()
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if node in done:
            continue
        if expanded or not isinstance(node, Operation):
            done.add(node)
            order.append(node)
            continue
        stack.append((node, True))
        for child in reversed(node.inputs):
            if child not in done:
                stack.append((child, False))
    return order


def fan_in_counts(root: Node, order: Optional[List[Node]] = None) -> Dict[Node, int]:
    """
    Number of parent edges into each node (root counts one virtual parent).

    An operation that lists the same child twice, e.g. mult(x, x),
    contributes two edges.
    """
    if order is None:
        order = topological_order(root)
    counts: Dict[Node, int] = {node: 0 for node in order}
    counts[root] = 1
    for node in order:
        if isinstance(node, Operation):
            for child in node.inputs:
                counts[child] += 1
    return counts


def get_graph_stats(root: Node) -> Dict:
    """Graph statistics without printing."""
    order = topological_order(root)
    n_nodes = len(order)
    ops = [node for node in order if isinstance(node, Operation)]
    n_edges = sum(len(node.inputs) for node in ops)

    # arity: how many inputs a node reads
    arities = [len(node.inputs) for node in ops] or [0]
    # fan-in: how many parents read a node (excluding the virtual root edge)
    fan_in = fan_in_counts(root, order)
    fan_in[root] -= 1
    parents = list(fan_in.values())

    op_counter = Counter(_op_tag(node) for node in ops)
    variables = {node.name for node in order if isinstance(node, Variable)}

    return {
        'nodes': n_nodes,
        'edges': n_edges,
        'variables': sorted(variables),
        'leaves': n_nodes - len(ops),
        'max_arity': max(arities),
        'avg_arity': float(np.mean(arities)),
        'max_fan_in': max(parents),
        'avg_fan_in': float(np.mean(parents)),
        'shared_nodes': sum(1 for p in parents if p > 1),
        'operations': dict(op_counter),
    }


def print_graph_summary(root: Node, detailed: bool = False) -> Dict:
    """Print a summary of the graph and return the stats dict."""
    stats = get_graph_stats(root)

    print("\n" + "=" * 70)
    print("EXPRESSION GRAPH SUMMARY")
    print("=" * 70)
    print(f"Total nodes:        {stats['nodes']:,}")
    print(f"Total edges:        {stats['edges']:,}")
    print(f"Leaf variables:     {stats['leaves']:,} ({len(stats['variables'])} names)")
    print(f"Max arity:          {stats['max_arity']}")
    print(f"Max fan-in:         {stats['max_fan_in']}")
    print(f"Avg fan-in:         {stats['avg_fan_in']:.2f}")
    print(f"Shared nodes:       {stats['shared_nodes']:,}")
    print()
    print("Operation breakdown:")
    n_ops = max(1, sum(stats['operations'].values()))
    for op_tag, count in Counter(stats['operations']).most_common(10):
        pct = 100.0 * count / n_ops
        print(f"  {op_tag:12s}: {count:6,} ({pct:5.1f}%)")

    if detailed and stats['nodes'] <= 100:
        order = topological_order(root)
        handle = {node: i for i, node in enumerate(order)}
        print()
        print("=" * 70)
        print("DETAILED NODE LIST")
        print("=" * 70)
        for i, node in enumerate(order):
            if isinstance(node, Operation):
                inputs = ", ".join(f"Node{handle[c]}" for c in node.inputs)
                print(f"Node {i:3d}: {_op_tag(node):12s} <- [{inputs}]")
            else:
                print(f"Node {i:3d}: {node.name:12s} [leaf]")

    print("=" * 70 + "\n")
    return stats


def analyze_graph_complexity(root: Node) -> str:
    """Short text report of graph size and sharing."""
    stats = get_graph_stats(root)

    report = ["Graph Complexity Analysis:"]
    report.append(f"  Total nodes: {stats['nodes']:,}")
    report.append(f"  Total connections: {stats['edges']:,}")
    report.append(f"  Shared subexpressions: {stats['shared_nodes']:,}")

    if stats['nodes'] < 1000:
        complexity = "Low"
    elif stats['nodes'] < 10000:
        complexity = "Medium"
    else:
        complexity = "High"
    report.append(f"  Complexity level: {complexity}")

    if stats['operations']:
        total = sum(stats['operations'].values())
        top_ops = sorted(stats['operations'].items(), key=lambda x: x[1], reverse=True)[:3]
        report.append("  Top operations:")
        for op, count in top_ops:
            report.append(f"    - {op}: {100.0 * count / total:.1f}%")

    return "\n".join(report)


def logging_observer(logger: Optional[logging.Logger] = None,
                     level: int = logging.DEBUG) -> Callable[[str, Node, float], None]:
    """
    Build an evaluation observer that logs every node visit.

        reverse(f, env, observer=logging_observer())
    """
    log = logger or logging.getLogger("dagdiff.trace")

    def observe(phase: str, node: Node, value: float) -> None:
        if log.isEnabledFor(level):
            log.log(level, "%-7s %-30s %r", phase, node.name, value)

    return observe


def _op_tag(node: Operation) -> str:
    return node.op_tag or "op"
