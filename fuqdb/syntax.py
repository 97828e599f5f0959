"""Syntax tree built from a tokenized line."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .parser import get
from .script import TokenType, is_operator, precedence


def is_string(tokens: Sequence[str]) -> bool:
    """Return True if the first token starts with a quote."""
    return bool(tokens) and tokens[0][:1] in ('"', "'")


def is_expression(tokens: Sequence[str]) -> bool:
    """Return True if there is more than one token and any is an operator."""
    if len(tokens) <= 1:
        return False
    return any(is_operator(token) for token in tokens)


@dataclass
class Node:
    """A value, a function call with its arguments, or an operator expression.

    An expression's children are the operator leaf, the left and the right
    operand, in that order.
    """

    kind: TokenType
    value: str = ""
    children: list[Node] = field(default_factory=list)

    @classmethod
    def leaf(cls, value: str) -> Node:
        """Return a value node."""
        return cls(TokenType.VALUE, value)

    @classmethod
    def from_tokens(cls, tokens: Sequence[str]) -> Node:
        """Build the tree for a list of tokens."""
        if get(tokens, 1) == "(":
            node = cls(TokenType.FUNCTION_CALL, tokens[0])
            pending: list[str] = []
            depth = 1
            for token in tokens[2:]:
                if token == "(":
                    depth += 1
                elif token == ")":
                    depth -= 1
                if (token == "," and depth == 1) or (token == ")" and depth == 0):
                    node.children.append(cls.from_tokens(pending))
                    pending = []
                    continue
                pending.append(token)
            return node

        if is_expression(tokens) and not is_string(tokens):
            node = cls(TokenType.EXPRESSION)
            split = -1
            loosest = 0
            for position, token in enumerate(tokens):
                if is_operator(token) and precedence(token) >= loosest:
                    loosest = precedence(token)
                    split = position
            if split >= 0:
                node.children = [
                    cls.leaf(tokens[split]),
                    cls.from_tokens(tokens[:split]),
                    cls.from_tokens(tokens[split + 1 :]),
                ]
            return node

        return cls.leaf("".join(tokens))

    def dump(self, depth: int = 0) -> str:
        """Return an indented outline of the tree."""
        text = "    " * depth + f"[{self.kind.name}] {self.value}\n"
        return text + "".join(child.dump(depth + 1) for child in self.children)