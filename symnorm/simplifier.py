"""
Simplification engine for SYMNORM.

The engine applies an ordered list of rewrite passes to an expression until
nothing changes. One sweep runs every enabled pass in order. Each pass walks
the whole tree bottom-up: children first, then the rebuilt parent. Sweeps
repeat until a full sweep performs zero rewrites.

    from symnorm import Simplifier, tokenize, parse_expressions

    expr = parse_expressions(tokenize("2*(3+4)"))[0]
    Simplifier()(expr)          # => (+ (* 2 3) (* 2 4))

Distribution duplicates subtrees, so pathological inputs can grow quickly.
The engine therefore has a budget: a maximum number of sweeps and a maximum
tree size. Exceeding either raises ConvergenceError.

Tracing:
    Use Simplifier.simplify(expr, trace=True) to see which passes fired.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from .errors import ConvergenceError
from .expression import Expression, count_nodes, to_sexpr
from .passes import DEFAULT_PASSES, RewritePass

DEFAULT_MAX_SWEEPS = 1000
DEFAULT_MAX_NODES = 100_000


class SimplifyStep:
    """A single local rewrite performed during simplification."""

    def __init__(self, sweep: int, pass_name: str, before: str, after: str):
        self.sweep = sweep
        self.pass_name = pass_name
        self.before = before
        self.after = after

    def __repr__(self) -> str:
        return f"{self.pass_name}: {self.before} -> {self.after}"

    def to_dict(self) -> Dict:
        """Convert step to dictionary for serialization."""
        return {
            "sweep": self.sweep,
            "pass": self.pass_name,
            "before": self.before,
            "after": self.after,
        }


class SimplifyTrace:
    """
    A trace of all rewrites applied by one simplify() call.

    Provides multiple formatting options:
        - Default repr: verbose multi-line format
        - format("compact"): single line showing the pass chain
        - format("passes"): just the pass names applied
        - format("chain"): each rewrite as a transformation step
        - to_dict(): JSON-serializable dictionary
    """

    def __init__(self):
        self.steps: List[SimplifyStep] = []
        self.initial: Optional[str] = None
        self.final: Optional[str] = None
        self.sweeps: int = 0

    def add_step(self, step: SimplifyStep):
        self.steps.append(step)

    def format(self, style: str = "verbose") -> str:
        """
        Format the trace in different styles.

        Args:
            style: One of "verbose", "compact", "passes", "chain"

        Returns:
            Formatted string representation of the trace.
        """
        if style == "compact":
            names = [s.pass_name for s in self.steps]
            return f"{self.initial} --[{', '.join(names)}]--> {self.final}"

        elif style == "passes":
            names = [s.pass_name for s in self.steps]
            return " -> ".join(names) if names else "(no passes applied)"

        elif style == "chain":
            if not self.steps:
                return self.initial or ""
            parts = []
            for step in self.steps:
                parts.append(step.before)
                parts.append(f"  --({step.pass_name})-->")
                parts.append(step.after)
            return "\n".join(parts)

        else:
            return repr(self)

    def __repr__(self) -> str:
        lines = [f"Initial: {self.initial}"]
        for i, step in enumerate(self.steps, 1):
            lines.append(f"  {i}. [sweep {step.sweep}] {step}")
        lines.append(f"Final: {self.final}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    def __bool__(self) -> bool:
        """True if any rewriting was done."""
        return len(self.steps) > 0

    def to_dict(self) -> Dict:
        """Convert trace to dictionary for JSON serialization."""
        return {
            "initial": self.initial,
            "final": self.final,
            "sweeps": self.sweeps,
            "steps": [step.to_dict() for step in self.steps],
            "step_count": len(self.steps),
        }

    def pass_counts(self) -> Dict[str, int]:
        """Count how many times each pass rewrote a node."""
        counts: Dict[str, int] = {}
        for step in self.steps:
            counts[step.pass_name] = counts.get(step.pass_name, 0) + 1
        return counts

    def summary(self) -> str:
        """Get a brief summary of the rewriting."""
        if not self.steps:
            return "No rewriting performed"
        counts = self.pass_counts()
        most_used = max(counts.items(), key=lambda x: x[1])
        return (f"{len(self.steps)} rewrites in {self.sweeps} sweeps using "
                f"{len(counts)} passes. Most used: {most_used[0]} ({most_used[1]}x)")


class Simplifier:
    """
    Runs rewrite passes over an expression to a fixed point.

    Example:
        from symnorm import Simplifier

        simplify = Simplifier()
        result = simplify(expr)

        # Keep singleton sums and products as they are
        raw = Simplifier().disable_pass("collapse-trivial")

        # Tight budget
        quick = Simplifier(max_sweeps=10, max_nodes=500)
    """

    def __init__(self, passes: Optional[Sequence[RewritePass]] = None,
                 max_sweeps: int = DEFAULT_MAX_SWEEPS,
                 max_nodes: Optional[int] = DEFAULT_MAX_NODES):
        """
        Initialize a Simplifier.

        Args:
            passes: Ordered passes to run each sweep. Default: DEFAULT_PASSES.
            max_sweeps: Give up after this many sweeps without reaching a
                fixed point.
            max_nodes: Give up when the tree grows beyond this many nodes.
                None disables the size check.
        """
        if max_sweeps < 1:
            raise ValueError("max_sweeps must be at least 1")
        self._passes: List[RewritePass] = list(passes if passes is not None else DEFAULT_PASSES)
        self._disabled: set = set()
        self.max_sweeps = max_sweeps
        self.max_nodes = max_nodes

    # ============================================================
    # Pass Management
    # ============================================================

    def pass_names(self) -> List[str]:
        """Names of every configured pass, enabled or not, in sweep order."""
        return [p.name for p in self._passes]

    def disable_pass(self, name: str) -> 'Simplifier':
        """Skip a pass by name."""
        if name not in self.pass_names():
            raise KeyError(f"No pass named '{name}'")
        self._disabled.add(name)
        return self

    def enable_pass(self, name: str) -> 'Simplifier':
        """Re-enable a disabled pass."""
        if name not in self.pass_names():
            raise KeyError(f"No pass named '{name}'")
        self._disabled.discard(name)
        return self

    @property
    def passes(self) -> List[RewritePass]:
        """Enabled passes, in sweep order."""
        return [p for p in self._passes if p.name not in self._disabled]

    def list_passes(self) -> List[str]:
        """Describe every configured pass, marking disabled ones."""
        lines = []
        for i, p in enumerate(self._passes, 1):
            status = " (disabled)" if p.name in self._disabled else ""
            lines.append(f"{i}. {p!r}{status}")
        return lines

    # ============================================================
    # Simplification
    # ============================================================

    def simplify(self, expr: Expression, trace: bool = False):
        """
        Rewrite an expression until no pass changes it.

        The input tree is consumed: the result may reuse its unchanged
        subtrees.

        Args:
            expr: Expression to simplify
            trace: If True, return (result, trace) tuple

        Returns:
            Simplified expression, or (expression, trace) if trace=True

        Raises:
            ConvergenceError: If the budget runs out first
        """
        trace_obj = SimplifyTrace() if trace else None
        if trace_obj is not None:
            trace_obj.initial = to_sexpr(expr)

        current = expr
        passes = self.passes
        for sweep in range(1, self.max_sweeps + 1):
            changed = False
            for rewrite_pass in passes:
                current, pass_changed = self._walk(current, rewrite_pass, sweep, trace_obj)
                changed = changed or pass_changed

            if trace_obj is not None:
                trace_obj.sweeps = sweep

            if not changed:
                if trace_obj is not None:
                    trace_obj.final = to_sexpr(current)
                    return current, trace_obj
                return current

            if self.max_nodes is not None:
                size = count_nodes(current)
                if size > self.max_nodes:
                    raise ConvergenceError(
                        f"Expression grew to {size} nodes (limit {self.max_nodes})",
                        expression=current, sweeps=sweep, reason="max_nodes",
                    )

        raise ConvergenceError(
            f"No fixed point after {self.max_sweeps} sweeps",
            expression=current, sweeps=self.max_sweeps, reason="max_sweeps",
        )

    def _walk(self, node: Expression, rewrite_pass: RewritePass, sweep: int,
              trace_obj: Optional[SimplifyTrace]) -> Tuple[Expression, bool]:
        """Single bottom-up pass: rewrite children, then apply the pass to the parent."""
        changed = False
        children = node.children()
        if children:
            new_children = []
            for child in children:
                new_child, child_changed = self._walk(child, rewrite_pass, sweep, trace_obj)
                new_children.append(new_child)
                changed = changed or child_changed
            if changed:
                node = node.with_children(new_children)

        result, local_changed = rewrite_pass.apply(node)
        if local_changed and trace_obj is not None:
            trace_obj.add_step(SimplifyStep(
                sweep=sweep,
                pass_name=rewrite_pass.name,
                before=to_sexpr(node),
                after=to_sexpr(result),
            ))
        return result, changed or local_changed

    def __call__(self, expr: Expression, **kwargs):
        """Shorthand for simplify()."""
        return self.simplify(expr, **kwargs)

    def __repr__(self) -> str:
        return f"Simplifier({len(self.passes)} passes, max_sweeps={self.max_sweeps})"


def simplify_expression(expr: Expression, **kwargs) -> Expression:
    """Simplify with the default passes and budget."""
    return Simplifier().simplify(expr, **kwargs)
