"""
AST schema for parsed calculator expressions.
One node model covers every construct; unused fields stay None.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class NodeType(str, Enum):
    """AST node types."""

    LITERAL = "literal"  # 3.5
    BINARY_OP = "binary_op"  # +, -, *, /, ^
    UNARY_NEGATE = "unary_negate"  # -x
    FUNCTION_CALL = "function_call"  # sin(x), sqrt(x), ...
    FACTORIAL = "factorial"  # x!


class ASTNode(BaseModel):
    """
    Unified AST node for calculator expressions.
    The tree is owned exclusively by the parse result.
    """

    node_type: NodeType

    # Literal
    value: Optional[float] = None

    # Binary operation fields
    operator: Optional[str] = None
    left: Optional["ASTNode"] = None
    right: Optional["ASTNode"] = None

    # Unary / function / factorial operand
    operand: Optional["ASTNode"] = None
    function_name: Optional[str] = None

    model_config = ConfigDict(
        use_enum_values=True,
        extra="forbid",
        json_schema_extra={
            "examples": [
                {"node_type": "literal", "value": 2.5},
                {
                    "node_type": "binary_op",
                    "operator": "+",
                    "left": {"node_type": "literal", "value": 1},
                    "right": {"node_type": "literal", "value": 2},
                },
                {
                    "node_type": "function_call",
                    "function_name": "sqrt",
                    "operand": {"node_type": "literal", "value": 16},
                },
            ]
        },
    )

    @classmethod
    def literal(cls, value: float) -> "ASTNode":
        return cls(node_type=NodeType.LITERAL, value=value)

    @classmethod
    def binary(cls, operator: str, left: "ASTNode", right: "ASTNode") -> "ASTNode":
        return cls(
            node_type=NodeType.BINARY_OP, operator=operator, left=left, right=right
        )

    @classmethod
    def negate(cls, operand: "ASTNode") -> "ASTNode":
        return cls(node_type=NodeType.UNARY_NEGATE, operand=operand)

    @classmethod
    def call(cls, function_name: str, operand: "ASTNode") -> "ASTNode":
        return cls(
            node_type=NodeType.FUNCTION_CALL,
            function_name=function_name,
            operand=operand,
        )

    @classmethod
    def factorial(cls, operand: "ASTNode") -> "ASTNode":
        return cls(node_type=NodeType.FACTORIAL, operand=operand)

    def children(self) -> List["ASTNode"]:
        return [
            child for child in (self.left, self.right, self.operand) if child is not None
        ]


class EvaluationResult(BaseModel):
    """Result of running an expression through the pipeline."""

    success: bool
    expression: str

    # Success case
    value: Optional[float] = None
    display: str = "Invalid"

    # Error case
    error_kind: Optional[str] = None  # "token", "unbalanced_parens", "domain", ...
    error_message: Optional[str] = None

    # Metadata
    tokens_count: int = 0
    ast_nodes_count: int = 0


class ASTValidator:
    """Validator for AST structure integrity."""

    @staticmethod
    def validate_node(node: ASTNode) -> List[str]:
        """Validate AST node structure and return any errors."""
        errors = []

        if node.node_type == NodeType.BINARY_OP:
            if not (node.operator and node.left and node.right):
                errors.append("Binary node missing operator or operands")

        elif node.node_type == NodeType.LITERAL:
            if node.value is None:
                errors.append("Literal node missing value")

        elif node.node_type == NodeType.FUNCTION_CALL:
            if not (node.function_name and node.operand):
                errors.append("Function node missing function_name or operand")

        elif node.node_type in (NodeType.UNARY_NEGATE, NodeType.FACTORIAL):
            if not node.operand:
                errors.append(f"{node.node_type} node missing operand")

        return errors

    @staticmethod
    def validate_ast(root: ASTNode) -> List[str]:
        """Recursively validate entire AST."""
        errors = []

        def visit(node: ASTNode):
            errors.extend(ASTValidator.validate_node(node))
            for child in node.children():
                visit(child)

        visit(root)
        return errors

    @staticmethod
    def count_nodes(root: ASTNode) -> int:
        return 1 + sum(ASTValidator.count_nodes(child) for child in root.children())


# Forward reference resolution
ASTNode.model_rebuild()


# Export main classes
__all__ = [
    "NodeType",
    "ASTNode",
    "EvaluationResult",
    "ASTValidator",
]
