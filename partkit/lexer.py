import re
from typing import List, Tuple

Token = Tuple[str, str, int, int]  # (type, value, line, col)

SYMBOLS = {
    '{': 'LBRACE',
    '}': 'RBRACE',
}

WS = ' \t\r\ufeff'

# a bare word runs until an assignment, a brace or a comment
_word_re = re.compile(r'[^=\{\}]+?(?=\s*(?:=|\{|\}|//|$))')
_value_re = re.compile(r'[^\{\}]*?(?=\s*(?:\}|//|$))')


class ConfigSyntaxError(SyntaxError):
    pass


def tokenize_line(s: str, line_no: int) -> List[Token]:
    """Split one line of config text into ``NAME``, ``KEY``/``VALUE`` and brace tokens."""

    tokens: List[Token] = []
    i = 0
    n = len(s)
    while i < n:
        ch = s[i]
        col = i + 1
        if s.startswith('//', i):
            break
        if ch in WS:
            i += 1
            continue
        if ch in SYMBOLS:
            tokens.append((SYMBOLS[ch], ch, line_no, col))
            i += 1
            continue
        if ch == '=':
            raise ConfigSyntaxError(f'[line {line_no}, col {col}] assignment without a key')
        m = _word_re.match(s, i)
        if not m or not m.group(0).strip():
            raise ConfigSyntaxError(f'[line {line_no}, col {col}] unexpected character: {ch!r}')
        word = m.group(0).strip()
        i = m.end()
        while i < n and s[i] in WS:
            i += 1
        if i < n and s[i] == '=':
            tokens.append(('KEY', word, line_no, col))
            i += 1
            while i < n and s[i] in WS:
                i += 1
            vm = _value_re.match(s, i)
            value = vm.group(0).strip() if vm else ''
            tokens.append(('VALUE', value, line_no, i + 1))
            i = vm.end() if vm else i
            continue
        tokens.append(('NAME', word, line_no, col))
    return tokens


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        tokens.extend(tokenize_line(line, line_no))
    return tokens
