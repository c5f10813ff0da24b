"""Abstract syntax tree of the kial language.

```
<statement>   ::= <binding> | <assignment> | <expr>
<binding>     ::= "let" <ident> ";"                  ; Declaration
                | "let" <ident> "=" <expr> ";"       ; Initialization
<assignment>  ::= <ident> "=" <expr> ";"             ; name must already be bound
<expr>        ::= <literal> | <ident> | <block> | <operation>
<operation>   ::= <expr> <op> <expr>                 ; op is one of + - * /
<block>       ::= "{" <statement>* "}"
```

Nodes are immutable and own their children: a tree is built once by the parser and never modified.
"""

import enum
from dataclasses import dataclass, fields
from typing import Tuple, Union

from kial.core.lexer import TokenKind


class Op(enum.Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @classmethod
    def from_token(cls, token):
        """Returns the Op for an operator token, or None if the token isn't a supported operator."""
        return {
            TokenKind.PLUS: cls.ADD,
            TokenKind.MINUS: cls.SUB,
            TokenKind.STAR: cls.MUL,
            TokenKind.SLASH: cls.DIV,
        }.get(token.kind)

    def __str__(self):
        return self.value


class Node:
    """Superclass of every AST node."""

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(<field>=<value>, <field>=[
            <Node>(...),
            ...
        ])
        """
        pad = "    " * indents
        parts = []
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, Node):
                parts.append(f"{field.name}=\n{value.display(indents + 1)}")
            elif isinstance(value, tuple):
                if value:
                    children = ",\n".join(child.display(indents + 1) for child in value)
                    parts.append(f"{field.name}=[\n{children}\n{pad}]")
                else:
                    parts.append(f"{field.name}=[]")
            else:
                parts.append(f"{field.name}={value!r}" if not isinstance(value, Op) else f"{field.name}={value}")
        return f"{pad}{type(self).__name__}(" + ", ".join(parts) + ")"


@dataclass(frozen=True)
class StringLiteral(Node):
    text: str

    def __str__(self):
        return f"\"{self.text}\""


@dataclass(frozen=True)
class NumberLiteral(Node):
    value: int

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class BindingUsage(Node):
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Operation(Node):
    left: "Expr"
    right: "Expr"
    op: Op

    def __str__(self):
        return f"({self.left} {self.op} {self.right})"


@dataclass(frozen=True)
class Block(Node):
    stmts: Tuple["Statement", ...] = ()

    def __str__(self):
        if not self.stmts:
            return "{}"
        return "{ " + " ".join(str(stmt) for stmt in self.stmts) + " }"


@dataclass(frozen=True)
class Declaration(Node):
    name: str

    def __str__(self):
        return f"let {self.name};"


@dataclass(frozen=True)
class Initialization(Node):
    name: str
    value: "Expr"

    def __str__(self):
        return f"let {self.name} = {self.value};"


@dataclass(frozen=True)
class Assignment(Node):
    name: str
    value: "Expr"

    def __str__(self):
        return f"{self.name} = {self.value};"


Literal = Union[StringLiteral, NumberLiteral]
Expr = Union[StringLiteral, NumberLiteral, BindingUsage, Operation, Block]
Binding = Union[Declaration, Initialization]
Statement = Union[Declaration, Initialization, Assignment, StringLiteral, NumberLiteral, BindingUsage, Operation,
                  Block]

LITERALS = (StringLiteral, NumberLiteral)
EXPRS = (StringLiteral, NumberLiteral, BindingUsage, Operation, Block)
BINDINGS = (Declaration, Initialization)
