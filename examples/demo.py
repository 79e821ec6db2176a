#!/usr/bin/env python3
"""
SYMNORM Feature Demonstration

This script walks through the pipeline: parsing, simplification,
evaluation, LaTeX output and tracing.
"""

from symnorm import (
    tokenize, parse, parse_expressions, process,
    Simplifier, RewritePass, Multiplication, Number,
    evaluate, try_evaluate, to_latex, to_sexpr, format_tree,
    SymnormError, ConvergenceError,
)


def section(title: str):
    """Print a section header."""
    print(f"\n{'='*60}")
    print(f" {title}")
    print('='*60)


def demo_parsing():
    """Show tokens, ASTs and the converted expression."""
    section("Parsing")

    text = "-2*sin(pi/4)^2"
    print(f"  Input:  {text}")
    print(f"  Tokens: {tokenize(text)}")
    print(f"  AST:    {parse(tokenize(text))[0]!r}")
    [expr] = parse_expressions(tokenize(text))
    print(f"  IR:     {to_sexpr(expr)}")


def demo_simplification():
    """Show the normalized forms the default passes produce."""
    section("Simplification")

    examples = [
        "1*2*3",
        "2*(3+x)",
        "(a+b)*(c+d)",
        "x*(y-z)",
        "sqrt(x*(1+y))",
    ]

    for text in examples:
        [result] = process(text)
        print(f"  {text:16} => {to_sexpr(result)}")


def demo_evaluation():
    """Show numeric results and evaluation faults."""
    section("Evaluation")

    examples = ["2*(3+4)", "sin(pi/2)+sqrt(16)", "arccot(1)*4", "5/0", "sqrt(-1)", "x+1"]

    for text in examples:
        [result] = process(text)
        value = try_evaluate(result)
        shown = value if value is not None else "no value"
        print(f"  {text:20} = {shown}")


def demo_latex():
    """Show LaTeX rendering of simplified expressions."""
    section("LaTeX Output")

    for text in ["2*(3+x)", "(x+1)^2/y", "-(a+b)", "sec(x)^-1"]:
        [result] = process(text)
        print(f"  {text:12} => {to_latex(result)}")


def demo_equations():
    """Show '='-separated input."""
    section("Equations")

    for text in ["2+2=4", "2*(3+4)=2*3+2*4", "1=2"]:
        values = [evaluate(expr) for expr in process(text)]
        print(f"  {text:20} values={values} equal={len(set(values)) == 1}")


def demo_tracing():
    """Show which passes fired."""
    section("Tracing")

    [expr] = parse_expressions(tokenize("(1+2)*(3+4)"))
    result, trace = Simplifier().simplify(expr, trace=True)
    print(trace)
    print(f"\n  Passes: {trace.format('passes')}")
    print(f"  Summary: {trace.summary()}")

    print("\n  Tree:")
    for line in format_tree(result).splitlines():
        print(f"    {line}")


class FoldNumericProducts(RewritePass):
    """Multiply together the numeric factors of a product."""

    name = "fold-numeric-products"
    description = "Combine constant factors of a product"

    def apply(self, node):
        if not isinstance(node, Multiplication):
            return node, False
        numbers = [t for t in node.terms if isinstance(t, Number)]
        if len(numbers) < 2:
            return node, False
        product = 1.0
        for n in numbers:
            product *= n.value
        others = [t for t in node.terms if not isinstance(t, Number)]
        return Multiplication([Number(product)] + others), True


def demo_custom_passes():
    """Show a user-defined pass and budgets."""
    section("Custom Passes and Budgets")

    simplifier = Simplifier(Simplifier().passes + [FoldNumericProducts()])
    for line in simplifier.list_passes():
        print(f"  {line}")

    [result] = process("2*(3*x+4)", simplifier)
    print(f"\n  2*(3*x+4) => {to_latex(result)}")

    try:
        process("(a+b)*(c+d)*(e+f)*(g+h)", Simplifier(max_nodes=50))
    except ConvergenceError as e:
        print(f"  Budget exceeded ({e.reason}): {e}")

    try:
        process("2 $ 3")
    except SymnormError as e:
        print(f"  Rejected input: {e}")


def main():
    """Run all demonstrations."""
    print("SYMNORM - Symbolic Normalization")
    print("Feature Demonstration")

    demo_parsing()
    demo_simplification()
    demo_evaluation()
    demo_latex()
    demo_equations()
    demo_tracing()
    demo_custom_passes()

    print("\n" + "="*60)
    print(" Demo complete!")
    print("="*60)


if __name__ == "__main__":
    main()
