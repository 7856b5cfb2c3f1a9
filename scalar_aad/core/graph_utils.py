"""
Computation-graph utilities.

Summaries of the structure recorded on a tape: node and edge counts,
fan-in/fan-out and the per-operation breakdown.
"""

import logging
import numpy as np
from typing import Dict
from collections import Counter

logger = logging.getLogger(__name__)


def get_graph_stats(tape) -> Dict:
    """
    Collect computation-graph statistics (no output).

    Returns:
        dict with nodes, leaves, edges, fan-in/fan-out and per-op counts
    """
    if len(tape) == 0:
        return {
            'nodes': 0,
            'leaves': 0,
            'edges': 0,
            'max_fan_in': 0,
            'avg_fan_in': 0.0,
            'max_fan_out': 0,
            'avg_fan_out': 0.0,
            'operations': {}
        }

    n_nodes = len(tape)
    fan_ins = [0 if rec is None else len(rec.operands) for rec in tape.records]
    fan_outs = [0] * n_nodes
    for rec in tape.records:
        if rec is not None:
            for operand in rec.operands:
                fan_outs[operand] += 1

    op_counter = Counter(rec.op_tag.value for rec in tape.records if rec is not None)

    return {
        'nodes': n_nodes,
        'leaves': fan_ins.count(0),
        'edges': sum(fan_ins),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        'operations': dict(op_counter)
    }


def format_graph(tape, max_nodes: int = 20) -> str:
    """
    Render the tape as one line per node:

        Node    2: mul   (    6.000000) <- [Node0, Node1]
        Node    0: leaf  (    2.000000)
    """
    if len(tape) == 0:
        return "Empty graph"

    lines = []
    n_show = min(len(tape), max_nodes)
    for i in range(n_show):
        rec = tape.records[i]
        val = tape.values[i]
        if rec is None:
            lines.append(f"Node {i:4d}: {'leaf':5s} ({val:12.6f})")
            continue
        operands = ", ".join(f"Node{j}" for j in rec.operands)
        if rec.exponent is not None:
            operands += f", n={rec.exponent}"
        lines.append(f"Node {i:4d}: {rec.op_tag.value:5s} ({val:12.6f}) <- [{operands}]")

    if len(tape) > max_nodes:
        lines.append(f"... ({len(tape) - max_nodes} more nodes)")
    return "\n".join(lines)


def log_graph_summary(tape, level: int = logging.INFO) -> Dict:
    """
    Log the graph summary through the package logger and return the stats.
    """
    stats = get_graph_stats(tape)
    if stats['nodes'] == 0:
        logger.log(level, "Empty computation graph")
        return stats

    logger.log(
        level,
        "graph: %d nodes (%d leaves), %d edges, fan-in max %d avg %.2f, "
        "fan-out max %d avg %.2f",
        stats['nodes'], stats['leaves'], stats['edges'],
        stats['max_fan_in'], stats['avg_fan_in'],
        stats['max_fan_out'], stats['avg_fan_out'],
    )
    for op, count in Counter(stats['operations']).most_common():
        pct = 100.0 * count / stats['nodes']
        logger.log(level, "  %-5s: %6d (%5.1f%%)", op, count, pct)
    return stats
