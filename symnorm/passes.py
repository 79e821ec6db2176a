"""
Rewrite passes for the SYMNORM simplifier.

A pass is a node-local rule: given one node whose children are already
rewritten, it returns (new_node, changed). The simplifier's walker handles
recursion and sweeping, so a pass only ever looks at one level.

Built-in passes, in default order:

    coalesce-multiplication   (* a (* b c)) => (* a b c)
    coalesce-addition         (+ a (+ b c)) => (+ a b c)
    distribute-multiplication (* a (+ b c)) => (+ (* a b) (* a c))
    collapse-trivial          (+ a) => a, (*) => 1, (+) => 0
"""

from typing import List, Tuple, Type

from .expression import (
    Expression, Addition, Multiplication, Number, deep_copy,
)

PassResult = Tuple[Expression, bool]


class RewritePass:
    """
    Base class for rewrite passes.

    Subclasses set name and description and implement apply().
    """

    name: str = ""
    description: str = ""

    def apply(self, node: Expression) -> PassResult:
        """Rewrite a single node. Returns (node, changed)."""
        raise NotImplementedError

    def __call__(self, node: Expression) -> PassResult:
        return self.apply(node)

    def __repr__(self) -> str:
        if self.description:
            return f"@{self.name} \"{self.description}\""
        return f"@{self.name}"


class _Coalesce(RewritePass):
    """Splice directly nested nodes of the same n-ary kind into the parent."""

    kind: Type[Expression] = Expression

    def apply(self, node):
        if not isinstance(node, self.kind):
            return node, False

        changed = False
        terms: List[Expression] = []
        for term in node.terms:
            if isinstance(term, self.kind):
                terms.extend(term.terms)
                changed = True
            else:
                terms.append(term)

        if not changed:
            return node, False
        return self.kind(terms), True


class CoalesceMultiplication(_Coalesce):
    name = "coalesce-multiplication"
    description = "Flatten a nested product into its parent"
    kind = Multiplication


class CoalesceAddition(_Coalesce):
    name = "coalesce-addition"
    description = "Flatten a nested sum into its parent"
    kind = Addition


class DistributeMultiplication(RewritePass):
    """
    Distribute a product over its first sum factor.

    a * b * (c + d) => (a * b * c) + (a * b * d)

    The remaining factors are deep-copied for every addend. Only the first
    sum is distributed per application; later sums are handled when the
    result is revisited on the next sweep.
    """

    name = "distribute-multiplication"
    description = "Rewrite a product containing a sum as a sum of products"

    def apply(self, node):
        if not isinstance(node, Multiplication):
            return node, False

        index = next(
            (i for i, term in enumerate(node.terms) if isinstance(term, Addition)),
            None,
        )
        if index is None:
            return node, False

        rest = node.terms[:index] + node.terms[index + 1:]
        addition = node.terms[index]
        products = [
            Multiplication([deep_copy(factor) for factor in rest] + [addend])
            for addend in addition.terms
        ]
        return Addition(products), True


class CollapseTrivial(RewritePass):
    """
    Replace degenerate sums and products.

    A single-term Addition or Multiplication becomes its term. An empty
    Addition becomes 0 and an empty Multiplication becomes 1.
    """

    name = "collapse-trivial"
    description = "Replace one-term and empty sums and products"

    def apply(self, node):
        if not isinstance(node, (Addition, Multiplication)):
            return node, False
        if len(node.terms) == 1:
            return node.terms[0], True
        if not node.terms:
            identity = 0.0 if isinstance(node, Addition) else 1.0
            return Number(identity), True
        return node, False


coalesce_multiplication = CoalesceMultiplication()
coalesce_addition = CoalesceAddition()
distribute_multiplication = DistributeMultiplication()
collapse_trivial = CollapseTrivial()

DEFAULT_PASSES: List[RewritePass] = [
    coalesce_multiplication,
    coalesce_addition,
    distribute_multiplication,
    collapse_trivial,
]
