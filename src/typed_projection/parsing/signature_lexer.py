"""Lexer for host type signatures."""

import ply.lex as lex


class SignatureLexer:
    """Lexer for tokenizing C#-style type signatures."""

    # Token list
    tokens = [
        "IDENTIFIER",
        "DOT",
        "COMMA",
        "LT",
        "GT",
        "LBRACKET",
        "RBRACKET",
        "QUESTION",
    ]

    # Simple tokens
    t_DOT = r"\."
    t_COMMA = r","
    t_LT = r"<"
    t_GT = r">"
    t_LBRACKET = r"\["
    t_RBRACKET = r"\]"
    t_QUESTION = r"\?"

    # Ignored characters
    t_ignore = " \t\r\n"

    def __init__(self) -> None:
        # Set by build()
        self.lexer: lex.Lexer = None  # type: ignore

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*(`\d+)?"
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Compile the token rules into a ply lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Start lexing a new signature."""
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next signature token, or None at the end."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Split a whole signature into tokens, mostly for tests and debugging."""
        self.input(data)
        return list(self.lexer)
