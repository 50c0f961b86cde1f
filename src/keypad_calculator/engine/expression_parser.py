"""
Calculator Expression Parser - Convert keypad expression text to AST.
Handles textual rewrites, tokenization, and shunting-yard parsing.
"""

import re
import logging
from typing import List, Optional

from ..exceptions import ParseError, ParseErrorKind, TokenError
from ..models.ast_schema import ASTNode
from ..models.token_models import (
    TokenType,
    Token,
    FunctionRegistry,
    OperatorRegistry,
    SupportedOperator,
    create_default_function_registry,
    create_default_operator_registry,
)

logger = logging.getLogger(__name__)


class ExpressionLexer:
    """Tokenizer for calculator expressions."""

    # Token patterns (order matters!)
    TOKEN_PATTERNS = [
        # Numbers: "12", "12.5", "12." and ".5"
        (r"\d+(?:\.\d*)?|\.\d+", TokenType.NUMBER),
        # Function keywords (case insensitive)
        (
            r"(?:sin|cos|tan|log|ln|sqrt|square|factorial)(?![a-z])",
            TokenType.FUNCTION,
        ),
        # Operators, display glyphs and ASCII aliases
        (r"\+", TokenType.PLUS),
        (r"[-−]", TokenType.MINUS),
        (r"[×*]", TokenType.MULTIPLY),
        (r"[÷/]", TokenType.DIVIDE),
        (r"\^", TokenType.POWER),
        (r"%", TokenType.PERCENT),
        (r"!", TokenType.FACTORIAL),
        # Punctuation
        (r"\(", TokenType.LEFT_PAREN),
        (r"\)", TokenType.RIGHT_PAREN),
    ]

    # Canonical token values for operator glyphs
    CANONICAL = {
        TokenType.PLUS: "+",
        TokenType.MINUS: "-",
        TokenType.MULTIPLY: "*",
        TokenType.DIVIDE: "/",
        TokenType.POWER: "^",
        TokenType.PERCENT: "%",
        TokenType.FACTORIAL: "!",
    }

    # ".5" -> "0.5"
    LEADING_POINT_RX = re.compile(r"(?<![\d.])\.(?=\d)")
    # "20%" -> "(20*0.01)", only for a whole literal
    PERCENT_LITERAL_RX = re.compile(r"(?<![\d.])(\d+(?:\.\d*)?)%")

    def __init__(self):
        # Compile patterns for performance
        self.compiled_patterns = [
            (re.compile(pattern, re.IGNORECASE), token_type)
            for pattern, token_type in self.TOKEN_PATTERNS
        ]

    def rewrite(self, expression: str) -> str:
        """Apply the textual rewrites that run before tokenizing."""
        rewritten = self.LEADING_POINT_RX.sub("0.", expression)
        rewritten = self.PERCENT_LITERAL_RX.sub(r"(\1*0.01)", rewritten)
        return rewritten

    def tokenize(self, expression: str) -> List[Token]:
        """Tokenize an expression string.

        Positions refer to the rewritten text.

        Raises:
            TokenError: On an unrecognized character
        """
        text = self.rewrite(expression)
        tokens = []
        position = 0

        while position < len(text):
            # Skip whitespace
            if text[position].isspace():
                position += 1
                continue

            # Try to match a token
            matched = False
            for pattern, token_type in self.compiled_patterns:
                match = pattern.match(text, position)
                if match:
                    value = match.group(0)
                    if token_type == TokenType.FUNCTION:
                        value = value.lower()
                    else:
                        value = self.CANONICAL.get(token_type, value)

                    tokens.append(Token(type=token_type, value=value, position=position))
                    position = match.end()
                    matched = True
                    break

            if not matched:
                raise TokenError(
                    f"Unrecognized character {text[position]!r} at {position}",
                    position=position,
                )

        # Add EOF token
        tokens.append(Token(type=TokenType.EOF, value="", position=position))

        return tokens


class PrecedenceParser:
    """Shunting-yard parser building an AST from calculator tokens.

    Precedence, high to low: postfix factorial/percent, prefix function
    application and unary minus, power, multiply/divide, add/subtract.
    """

    BINARY_TYPES = {
        TokenType.PLUS,
        TokenType.MINUS,
        TokenType.MULTIPLY,
        TokenType.DIVIDE,
        TokenType.POWER,
    }
    POSTFIX_TYPES = {TokenType.FACTORIAL, TokenType.PERCENT}

    def __init__(
        self,
        function_registry: Optional[FunctionRegistry] = None,
        operator_registry: Optional[OperatorRegistry] = None,
    ):
        # Use provided registries or create defaults
        self.function_registry = function_registry or create_default_function_registry()
        self.operator_registry = operator_registry or create_default_operator_registry()

        self.output: List[ASTNode] = []
        self.operators: List[Token] = []

    def parse(self, tokens: List[Token]) -> ASTNode:
        """Parse a token sequence into an AST.

        Raises:
            ParseError: On empty input, unbalanced parentheses or a
                malformed token sequence
        """
        tokens = [token for token in tokens if token.type != TokenType.EOF]
        if not tokens:
            raise ParseError(ParseErrorKind.EMPTY_INPUT, "Empty expression")

        # Reset state
        self.output = []
        self.operators = []
        expect_operand = True

        for index, token in enumerate(tokens):
            if expect_operand:
                expect_operand = self._handle_operand_position(tokens, index)
            else:
                expect_operand = self._handle_operator_position(token)

        if expect_operand:
            raise ParseError(
                ParseErrorKind.UNEXPECTED_TOKEN,
                "Unexpected end of expression",
                position=tokens[-1].position,
            )

        while self.operators:
            top = self.operators.pop()
            if top.type == TokenType.LEFT_PAREN:
                raise ParseError(
                    ParseErrorKind.UNBALANCED_PARENS,
                    "Missing ')'",
                    position=top.position,
                )
            self._apply(top)

        if len(self.output) != 1:
            raise ParseError(
                ParseErrorKind.UNEXPECTED_TOKEN, f"Bad operand stack: {self.output}"
            )

        return self.output[0]

    def _handle_operand_position(self, tokens: List[Token], index: int) -> bool:
        """Handle a token where an operand is expected.

        Returns:
            bool: Whether an operand is still expected afterwards
        """
        token = tokens[index]

        if token.type == TokenType.NUMBER:
            self.output.append(ASTNode.literal(float(token.value)))
            return False

        if token.type == TokenType.MINUS:
            self.operators.append(
                Token(type=TokenType.UNARY_MINUS, value="neg", position=token.position)
            )
            return True

        if token.type == TokenType.FUNCTION:
            if not self.function_registry.is_supported(token.value):
                raise ParseError(
                    ParseErrorKind.UNEXPECTED_TOKEN,
                    f"Unsupported function: {token.value}",
                    position=token.position,
                )
            following = tokens[index + 1] if index + 1 < len(tokens) else None
            if following is None or following.type != TokenType.LEFT_PAREN:
                raise ParseError(
                    ParseErrorKind.UNEXPECTED_TOKEN,
                    f"Expected '(' after function name {token.value}",
                    position=token.position,
                )
            self.operators.append(token)
            return True

        if token.type == TokenType.LEFT_PAREN:
            self.operators.append(token)
            return True

        if token.type == TokenType.RIGHT_PAREN and not self._has_open_paren():
            raise ParseError(
                ParseErrorKind.UNBALANCED_PARENS,
                "Unmatched ')'",
                position=token.position,
            )

        raise ParseError(
            ParseErrorKind.UNEXPECTED_TOKEN,
            f"Unexpected token: {token.value}",
            position=token.position,
        )

    def _handle_operator_position(self, token: Token) -> bool:
        """Handle a token where an operator is expected."""
        if token.type in self.BINARY_TYPES:
            incoming = self.operator_registry.get_operator(token.value)
            while self.operators and self._should_pop(self.operators[-1], incoming):
                self._apply(self.operators.pop())
            self.operators.append(token)
            return True

        if token.type in self.POSTFIX_TYPES:
            # Binds tighter than anything on the stack
            self._apply(token)
            return False

        if token.type == TokenType.RIGHT_PAREN:
            self._close_paren(token)
            return False

        raise ParseError(
            ParseErrorKind.UNEXPECTED_TOKEN,
            f"Expected operator, got {token.value}",
            position=token.position,
        )

    def _close_paren(self, token: Token) -> None:
        while True:
            if not self.operators:
                raise ParseError(
                    ParseErrorKind.UNBALANCED_PARENS,
                    "Unmatched ')'",
                    position=token.position,
                )
            top = self.operators.pop()
            if top.type == TokenType.LEFT_PAREN:
                break
            self._apply(top)

        if self.operators and self.operators[-1].type == TokenType.FUNCTION:
            self._apply(self.operators.pop())

    def _should_pop(self, top: Token, incoming: SupportedOperator) -> bool:
        if top.type == TokenType.LEFT_PAREN:
            return False
        top_precedence = self._precedence(top)
        if top_precedence > incoming.precedence:
            return True
        return top_precedence == incoming.precedence and incoming.associativity == "left"

    def _precedence(self, token: Token) -> int:
        if token.type in (TokenType.FUNCTION, TokenType.UNARY_MINUS):
            return self.operator_registry.get_precedence("neg")
        return self.operator_registry.get_precedence(token.value)

    def _has_open_paren(self) -> bool:
        return any(op.type == TokenType.LEFT_PAREN for op in self.operators)

    def _pop_operand(self, token: Token) -> ASTNode:
        if not self.output:
            raise ParseError(
                ParseErrorKind.UNEXPECTED_TOKEN,
                f"Missing operand for {token.value}",
                position=token.position,
            )
        return self.output.pop()

    def _apply(self, token: Token) -> None:
        """Pop operands for an operator token and push the resulting node."""
        if token.type == TokenType.UNARY_MINUS:
            self.output.append(ASTNode.negate(self._pop_operand(token)))
        elif token.type == TokenType.FUNCTION:
            self.output.append(ASTNode.call(token.value, self._pop_operand(token)))
        elif token.type == TokenType.FACTORIAL:
            self.output.append(ASTNode.factorial(self._pop_operand(token)))
        elif token.type == TokenType.PERCENT:
            operand = self._pop_operand(token)
            self.output.append(ASTNode.binary("*", operand, ASTNode.literal(0.01)))
        else:
            right = self._pop_operand(token)
            left = self._pop_operand(token)
            self.output.append(ASTNode.binary(token.value, left, right))
