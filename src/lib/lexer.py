"""
Pygments lexer for unit artifacts

Highlights the parts of an artifact that are not plain Python, and hands
everything else to the Python lexer line by line.

Token types:
- Keyword.Namespace: Envelope keywords (module ... end)
- Name.Namespace: Unit name
- Keyword.Declaration: export
- Generic.Error: Lines still carrying the corruption marker
- Name.Variable: Published names in the trailer
"""

from pygments import highlight
from pygments.formatter import Formatter
from pygments.formatters import TerminalFormatter
from pygments.lexer import RegexLexer, bygroups, using
from pygments.lexers.python import PythonLexer
from pygments.token import (
    Text,
    Punctuation,
    Name,
    Keyword,
    Operator,
    Generic,
)
from typing import Optional


class UnitLexer(RegexLexer):
    """
    Lexer for asinclude unit artifacts

    Example:
        module m1
        class A: pass
        export A
        end
        A = m1.A

    Tokens:
        module → Keyword.Namespace
        m1 → Name.Namespace
        export → Keyword.Declaration
        A = m1.A → Name.Variable, Operator, Name.Namespace, Punctuation, Name
    """

    name = 'asinclude unit'
    aliases = ['asinclude', 'pyunit']
    filenames = ['*.pyunit']

    tokens = {
        'root': [
            # Opening declaration
            (r'^(module)([ \t]+)([A-Za-z_]\w*)([ \t]*\n)',
             bygroups(Keyword.Namespace, Text, Name.Namespace, Text)),

            # Terminator
            (r'^(end)([ \t]*\n)', bygroups(Keyword.Namespace, Text)),

            # Export declarations
            (r'^([ \t]*)(export)([ \t]+)([^\n]*\n)',
             bygroups(Text, Keyword.Declaration, Text, Name)),

            # Unrepaired special forms
            (r'^([ \t]*)(\$[^\n]*\n)', bygroups(Text, Generic.Error)),

            # Publishing trailer
            (r'^([A-Za-z_]\w*)([ \t]*=[ \t]*)([A-Za-z_]\w*)(\.)([A-Za-z_]\w*)([ \t]*\n)',
             bygroups(Name.Variable, Operator, Name.Namespace, Punctuation, Name, Text)),

            # Everything else is Python
            (r'[^\n]*\n', using(PythonLexer)),
            (r'[^\n]+', using(PythonLexer)),
        ],
    }


def artifact_highlight(text: str, formatter: Optional[Formatter] = None) -> str:
    """
    Highlight artifact text

    Args:
        text: Artifact contents
        formatter: Pygments formatter (default: TerminalFormatter)

    Returns:
        Highlighted text
    """
    return highlight(text, UnitLexer(), formatter or TerminalFormatter())
