"""
Strict JSON validating decoder with schema-bound deserialization.

Documents are tokenized under strict lexical rules, parsed within resource
limits, and bound to a statically declared schema. Any violation aborts the
whole decode with a structured error; no partial result is ever returned.
"""

from ._binder import Binder
from ._binder import BoundObject
from ._config import DecodeConfig
from ._config import EnvironmentProfile
from ._config import Limits
from ._config import UnknownFieldPolicy
from ._decoder import Decoder
from ._decoder import decode
from ._errors import ArrayTooLarge
from ._errors import BindError
from ._errors import Cancelled
from ._errors import DuplicateField
from ._errors import ErrorKind
from ._errors import InvalidDateFormat
from ._errors import JSONDecodeError
from ._errors import JSONError
from ._errors import JSONSyntaxError
from ._errors import LexError
from ._errors import LimitExceeded
from ._errors import MissingRequiredField
from ._errors import NestingTooDeep
from ._errors import PayloadTooLarge
from ._errors import SchemaError
from ._errors import StringTooLong
from ._errors import TypeMismatch
from ._errors import UnexpectedNull
from ._errors import UnknownField
from ._guard import Deadline
from ._guard import LimitGuard
from ._lexer import JsonLexer
from ._lexer import Token
from ._lexer import TokenKind
from ._location import FieldPath
from ._location import Position
from ._parser import JsonParser
from ._parser import parse
from ._profile import HotPathStats
from ._profile import clear_hot_path_stats
from ._profile import get_hot_path_stats
from ._registry import CompiledSchema
from ._registry import SchemaRegistry
from ._schema import BOOLEAN
from ._schema import FLOAT64
from ._schema import INTEGER32
from ._schema import INTEGER64
from ._schema import STRING
from ._schema import TIMESTAMP
from ._schema import FieldSpec
from ._schema import ListOf
from ._schema import ObjectOf
from ._schema import Ref
from ._schema import Scalar
from ._schema import ScalarKind
from ._schema import SchemaType
from ._schema import SetOf
from ._schema import field
from ._values import MISSING
from ._values import ParseValue
from ._values import ValueKind

__version__ = "0.1.0"

__all__ = [
    "BOOLEAN",
    "FLOAT64",
    "INTEGER32",
    "INTEGER64",
    "MISSING",
    "STRING",
    "TIMESTAMP",
    "ArrayTooLarge",
    "BindError",
    "Binder",
    "BoundObject",
    "Cancelled",
    "CompiledSchema",
    "Deadline",
    "DecodeConfig",
    "Decoder",
    "DuplicateField",
    "EnvironmentProfile",
    "ErrorKind",
    "FieldPath",
    "FieldSpec",
    "HotPathStats",
    "InvalidDateFormat",
    "JSONDecodeError",
    "JSONError",
    "JSONSyntaxError",
    "JsonLexer",
    "JsonParser",
    "LexError",
    "LimitExceeded",
    "LimitGuard",
    "Limits",
    "ListOf",
    "MissingRequiredField",
    "NestingTooDeep",
    "ObjectOf",
    "ParseValue",
    "PayloadTooLarge",
    "Position",
    "Ref",
    "Scalar",
    "ScalarKind",
    "SchemaError",
    "SchemaRegistry",
    "SchemaType",
    "SetOf",
    "StringTooLong",
    "Token",
    "TokenKind",
    "TypeMismatch",
    "UnexpectedNull",
    "UnknownField",
    "UnknownFieldPolicy",
    "ValueKind",
    "clear_hot_path_stats",
    "decode",
    "field",
    "get_hot_path_stats",
    "parse",
]
