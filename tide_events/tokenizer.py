"""Single pass JSON tokenizer.

Bytes go in a chunk at a time and tokens come out as soon as they are
complete. Only the key or value currently being read is buffered, so memory
use does not grow with the length of the document.
"""
import codecs
import enum
import logging
import re
from typing import BinaryIO, Iterable, Iterator, NamedTuple

from tide_events.consts import MAX_DEPTH
from tide_events.errors import ParseError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 512

WHITESPACE = " \t\r\n"
NUMBER_CHARS = "0123456789+-.eE"
NUMBER_RE = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
LITERALS = ("true", "false", "null")
HEX_DIGITS = "0123456789abcdefABCDEF"
ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


class TokenType(enum.Enum):
    DOCUMENT_START = "document_start"
    ARRAY_START = "array_start"
    OBJECT_START = "object_start"
    KEY = "key"
    VALUE = "value"
    OBJECT_END = "object_end"
    ARRAY_END = "array_end"
    DOCUMENT_END = "document_end"


class Token(NamedTuple):
    type: TokenType
    text: str | None = None


class _State(enum.Enum):
    START = enum.auto()
    VALUE = enum.auto()
    VALUE_OR_END = enum.auto()
    KEY = enum.auto()
    KEY_OR_END = enum.auto()
    COLON = enum.auto()
    COMMA_OR_END = enum.auto()
    STRING = enum.auto()
    ESCAPE = enum.auto()
    UNICODE = enum.auto()
    NUMBER = enum.auto()
    LITERAL = enum.auto()
    DONE = enum.auto()


_ARRAY = "array"
_OBJECT = "object"


class Tokenizer:
    """Push tokenizer for one JSON document.

    Call ``feed`` with each chunk of bytes and ``close`` once the input is
    exhausted. Both return the tokens completed by that call.
    """

    def __init__(self, max_depth: int = MAX_DEPTH):
        self.max_depth = max_depth
        self._decoder = codecs.getincrementaldecoder("utf-8-sig")()
        self._state = _State.START
        self._stack: list[str] = []
        self._buffer: list[str] = []
        self._unicode: list[str] = []
        self._string_is_key = False
        self._tokens: list[Token] = []
        self._offset = 0

    def feed(self, chunk: bytes) -> list[Token]:
        self._feed_text(self._decode(chunk))
        return self.take_tokens()

    def close(self) -> list[Token]:
        self._feed_text(self._decode(b"", final=True))

        if self._state is _State.NUMBER:
            self._end_number()
        elif self._state is _State.LITERAL:
            self._end_literal()

        if self._state is _State.START:
            raise ParseError("Empty document", self._offset)
        if self._state is not _State.DONE:
            raise ParseError("Unexpected end of input", self._offset)
        return self.take_tokens()

    def take_tokens(self) -> list[Token]:
        """Tokens completed since the last call, including any before an error."""
        tokens, self._tokens = self._tokens, []
        return tokens

    def _decode(self, chunk: bytes, final: bool = False) -> str:
        try:
            return self._decoder.decode(chunk, final)
        except UnicodeDecodeError as e:
            raise ParseError(f"Invalid UTF-8 ({e.reason})", self._offset) from e

    def _emit(self, token_type: TokenType, text: str | None = None):
        self._tokens.append(Token(token_type, text))

    def _feed_text(self, text: str):
        for c in text:
            self._feed_char(c)
            self._offset += 1

    def _feed_char(self, c: str):
        state = self._state

        if state is _State.STRING:
            if c == '"':
                self._end_string()
            elif c == "\\":
                self._state = _State.ESCAPE
            elif c < " ":
                raise ParseError("Control character in string", self._offset)
            else:
                self._buffer.append(c)
            return

        if state is _State.ESCAPE:
            if c == "u":
                self._unicode = []
                self._state = _State.UNICODE
            elif c in ESCAPES:
                self._buffer.append(ESCAPES[c])
                self._state = _State.STRING
            else:
                raise ParseError(f"Invalid escape '\\{c}'", self._offset)
            return

        if state is _State.UNICODE:
            if c not in HEX_DIGITS:
                raise ParseError(f"Invalid unicode escape digit {c!r}", self._offset)
            self._unicode.append(c)
            if len(self._unicode) == 4:
                self._buffer.append(chr(int("".join(self._unicode), 16)))
                self._state = _State.STRING
            return

        if state is _State.NUMBER:
            if c in NUMBER_CHARS:
                self._buffer.append(c)
                return
            self._end_number()
            state = self._state
        elif state is _State.LITERAL:
            if c.isascii() and c.isalpha():
                self._buffer.append(c)
                return
            self._end_literal()
            state = self._state

        if c in WHITESPACE:
            return

        if state is _State.START:
            self._emit(TokenType.DOCUMENT_START)
            self._start_value(c)
        elif state is _State.VALUE:
            self._start_value(c)
        elif state is _State.VALUE_OR_END:
            if c == "]":
                self._close(_ARRAY)
            else:
                self._start_value(c)
        elif state is _State.KEY_OR_END and c == "}":
            self._close(_OBJECT)
        elif state in (_State.KEY, _State.KEY_OR_END):
            if c != '"':
                raise ParseError(f"Expected object key, got {c!r}", self._offset)
            self._start_string(is_key=True)
        elif state is _State.COLON:
            if c != ":":
                raise ParseError(f"Expected ':', got {c!r}", self._offset)
            self._state = _State.VALUE
        elif state is _State.COMMA_OR_END:
            container = self._stack[-1]
            if c == ",":
                self._state = _State.KEY if container == _OBJECT else _State.VALUE
            elif c == "}" and container == _OBJECT:
                self._close(_OBJECT)
            elif c == "]" and container == _ARRAY:
                self._close(_ARRAY)
            else:
                raise ParseError(f"Unexpected {c!r} in {container}", self._offset)
        elif state is _State.DONE:
            raise ParseError(f"Unexpected {c!r} after end of document", self._offset)

    def _start_value(self, c: str):
        if c == "{":
            self._open(_OBJECT)
        elif c == "[":
            self._open(_ARRAY)
        elif c == '"':
            self._start_string(is_key=False)
        elif c == "-" or c.isascii() and c.isdigit():
            self._buffer = [c]
            self._state = _State.NUMBER
        elif c in "tfn":
            self._buffer = [c]
            self._state = _State.LITERAL
        else:
            raise ParseError(f"Unexpected {c!r}, expected a value", self._offset)

    def _start_string(self, is_key: bool):
        self._buffer = []
        self._string_is_key = is_key
        self._state = _State.STRING

    def _end_string(self):
        text = "".join(self._buffer)
        self._buffer = []
        if any("\ud800" <= ch <= "\udfff" for ch in text):
            # Join \uXXXX surrogate pairs; a lone surrogate is an error
            try:
                text = text.encode("utf-16", "surrogatepass").decode("utf-16")
            except UnicodeDecodeError as e:
                raise ParseError("Unpaired surrogate in string", self._offset) from e

        if self._string_is_key:
            self._emit(TokenType.KEY, text)
            self._state = _State.COLON
        else:
            self._emit(TokenType.VALUE, text)
            self._end_value()

    def _end_number(self):
        text = "".join(self._buffer)
        self._buffer = []
        if not NUMBER_RE.fullmatch(text):
            raise ParseError(f"Invalid number {text!r}", self._offset)
        self._emit(TokenType.VALUE, text)
        self._end_value()

    def _end_literal(self):
        text = "".join(self._buffer)
        self._buffer = []
        if text not in LITERALS:
            raise ParseError(f"Invalid literal {text!r}", self._offset)
        self._emit(TokenType.VALUE, text)
        self._end_value()

    def _open(self, container: str):
        if len(self._stack) >= self.max_depth:
            raise ParseError(
                f"Nesting deeper than {self.max_depth} levels", self._offset
            )
        self._stack.append(container)
        if container == _OBJECT:
            self._emit(TokenType.OBJECT_START)
            self._state = _State.KEY_OR_END
        else:
            self._emit(TokenType.ARRAY_START)
            self._state = _State.VALUE_OR_END

    def _close(self, container: str):
        self._stack.pop()
        self._emit(
            TokenType.OBJECT_END if container == _OBJECT else TokenType.ARRAY_END
        )
        self._end_value()

    def _end_value(self):
        if self._stack:
            self._state = _State.COMMA_OR_END
        else:
            self._emit(TokenType.DOCUMENT_END)
            self._state = _State.DONE


def iter_chunks(
    stream: bytes | BinaryIO | Iterable[bytes], chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[bytes]:
    """Yield byte chunks from bytes, a binary file object or an iterable of chunks."""
    if isinstance(stream, (bytes, bytearray, memoryview)):
        data = bytes(stream)
        for i in range(0, len(data), chunk_size):
            yield data[i : i + chunk_size]
    elif hasattr(stream, "read"):
        while chunk := stream.read(chunk_size):
            yield chunk
    else:
        for chunk in stream:
            if chunk:
                yield chunk


def iter_tokens(
    stream: bytes | BinaryIO | Iterable[bytes],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_depth: int = MAX_DEPTH,
) -> Iterator[Token]:
    """Lazily tokenize one JSON document.

    Tokens are yielded as soon as they are complete, so a ParseError is only
    raised after every token before the fault has been consumed.
    """
    tokenizer = Tokenizer(max_depth=max_depth)
    try:
        for chunk in iter_chunks(stream, chunk_size):
            yield from tokenizer.feed(chunk)
        yield from tokenizer.close()
    except ParseError as e:
        logger.debug("Parse error after %d characters: %s", e.offset, e)
        yield from tokenizer.take_tokens()
        raise
