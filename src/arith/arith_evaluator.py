"""Tree-walking evaluator for arith ASTs.

Reduces AST statements directly to a value without compiling to bytecode.  It
follows the same contract as compiling and running on the VM: the result of a
program is the value of its last statement, and an empty program yields Int(0).
"""

from typing import List, Sequence

from arith.arith_ast import ArithASTNode, ArithASTLiteral, ArithASTUnary, ArithASTBinary, ArithOperator
from arith.arith_error import ArithError
from arith.arith_value import ArithValue, ArithInteger, ADD, SUB, MUL, DIV, apply_binary, negate


_BINARY_OPERATIONS = {
    ArithOperator.PLUS: ADD,
    ArithOperator.MINUS: SUB,
    ArithOperator.MULTIPLY: MUL,
    ArithOperator.DIVIDE: DIV,
}


class ArithEvaluator:
    """Evaluates arith ASTs."""

    def evaluate(self, statements: Sequence[ArithASTNode]) -> ArithValue:
        """
        Evaluate statements in order and return the value of the last one.

        Args:
            statements: Top-level AST roots

        Returns:
            The last statement's value, or Int(0) if there are no statements

        Raises:
            ArithRuntimeError: If evaluation fails
        """
        result: ArithValue = ArithInteger(0)
        for statement in statements:
            result = self.evaluate_node(statement)

        return result

    def evaluate_node(self, root: ArithASTNode) -> ArithValue:
        """
        Evaluate a single tree.

        Children are reduced before their parents, left operand first, so errors
        surface in the same order as on the VM.
        """
        values: List[ArithValue] = []
        for node in root.iter_postorder():
            if isinstance(node, ArithASTLiteral):
                values.append(node.to_runtime_value())

            elif isinstance(node, ArithASTUnary):
                operand = values.pop()
                values.append(negate(operand) if node.op == ArithOperator.MINUS else operand)

            elif isinstance(node, ArithASTBinary):
                rhs = values.pop()
                lhs = values.pop()
                values.append(apply_binary(_BINARY_OPERATIONS[node.op], lhs, rhs))

            else:
                raise ArithError(
                    message=f"Cannot evaluate node type: {type(node).__name__}",
                    position=node.position,
                    suggestion="This is an internal error - please report this issue"
                )

        return values[0]
