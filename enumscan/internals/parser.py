"""Lark parser setup and AST construction."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from lark import Lark, Token, Tree, UnexpectedCharacters, UnexpectedInput

from enumscan.internals.errors import raise_internal_error
from enumscan.internals.report import span_of
from enumscan.semantics.ast import Attribute, EnumDecl, MemberDecl, MemberRef, Program

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"


@lru_cache(maxsize=1)
def get_parser() -> Lark:
    return Lark.open(
        str(GRAMMAR_PATH),
        parser="lalr",
        propagate_positions=True,
        maybe_placeholders=False,
    )


def improve_parse_error(e: UnexpectedInput) -> str:
    """Improve parsing error messages for common cases."""
    error_text = str(e)
    first_line = error_text.split('\n', 1)[0]

    token = getattr(e, "token", None)
    expected = getattr(e, "expected", None) or getattr(e, "allowed", None) or set()

    if token is not None and token.type == "$END" and "RBRACE" in expected:
        return f"{first_line}\nHint: enum body is missing its closing '}}'"

    if "SEMICOLON" in expected or "COMMA" in expected:
        if isinstance(token, Token) and token.type == "NAME":
            return f"{first_line}\nHint: separate members with ','"

    if isinstance(e, UnexpectedCharacters):
        return f"{first_line}\nHint: only enum declarations, '//' and '/* */' comments are allowed"

    return error_text


def parse_int(text: str) -> int:
    """Integer literal: decimal, 0x, 0b or 0o, optionally signed."""
    body = text.lstrip("+-")
    if body[:2].lower() in ("0x", "0b", "0o"):
        return int(text, 0)
    return int(text, 10)


class DeclBuilder:
    """Build a ``Program`` from the Lark parse tree."""

    def build(self, tree: Tree) -> Program:
        return Program(enums=[self._enum(t) for t in tree.children
                              if isinstance(t, Tree)])

    def _enum(self, t: Tree) -> EnumDecl:
        if t.data != "enum_decl":
            raise_internal_error("CE0001", node=t.data)

        decl = EnumDecl(name="", loc=span_of(t))
        for child in t.children:
            if isinstance(child, Token) and child.type == "NAME":
                decl.name = str(child)
                decl.name_span = span_of(child)
            elif isinstance(child, Tree) and child.data == "attribute":
                decl.attributes.append(self._attribute(child))
            elif isinstance(child, Tree) and child.data == "underlying":
                tok = child.children[0]
                decl.underlying = str(tok)
                decl.underlying_span = span_of(tok)
            elif isinstance(child, Tree) and child.data == "member_list":
                decl.members = [self._member(m) for m in child.children
                                if isinstance(m, Tree)]
            else:
                raise_internal_error("CE0001", node=getattr(child, "data", child))
        return decl

    def _attribute(self, t: Tree) -> Attribute:
        name_tok, *args = t.children
        return Attribute(
            name=str(name_tok),
            args=tuple(parse_int(str(a)) for a in args),
            loc=span_of(t),
        )

    def _member(self, t: Tree) -> MemberDecl:
        name_tok = t.children[0]
        member = MemberDecl(name=str(name_tok), loc=span_of(name_tok))
        if len(t.children) > 1:
            value = t.children[1]
            tok = value.children[0]
            if value.data == "int_value":
                member.value = parse_int(str(tok))
            elif value.data == "ref_value":
                member.value = MemberRef(str(tok), loc=span_of(tok))
            else:
                raise_internal_error("CE0001", node=value.data)
        return member


def parse_to_ast(src: str, dump_parse: bool = False):
    """Parse declaration source into an AST.

    Returns:
        Tuple of (ast, parse_tree).
    """
    tree = get_parser().parse(src)
    if dump_parse:
        print(tree.pretty())
    return DeclBuilder().build(tree), tree
