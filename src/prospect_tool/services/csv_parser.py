"""CSV decoding and parsing for prospect uploads"""
import re
from typing import Dict, List, NamedTuple

from src.prospect_tool.exceptions import CSVDecodeError, UploadRejected

CSVRow = Dict[str, str]

LINE_BREAK = re.compile(r"\r?\n")


class ParsedCSV(NamedTuple):
    headers: List[str]
    rows: List[CSVRow]


def decode_csv_content(content: bytes) -> str:
    encodings = ["utf-8-sig", "cp1252"]
    for encoding in encodings:
        try:
            return content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
    raise CSVDecodeError("Unable to decode CSV file. Supported encodings: UTF-8, Windows-1252")


def validate_upload(filename: str, size: int, max_bytes: int) -> None:
    if not filename or not filename.lower().endswith(".csv"):
        raise UploadRejected("Invalid file type: please upload a CSV file")
    if size > max_bytes:
        raise UploadRejected(f"File is too large (limit: {max_bytes // (1024 * 1024)}MB)")


def split_row(line: str) -> List[str]:
    """
    Tokenize one line. Any double quote toggles quoted mode, wherever it
    sits in the field; "" inside quotes is a literal quote. Commas only
    separate outside quoted mode. Tokens are trimmed.
    """
    tokens = []
    current = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and line[i + 1:i + 2] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            tokens.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    # An unbalanced quote runs to the end of the line, never into the next row.
    tokens.append("".join(current).strip())
    return tokens


def parse_csv(text: str) -> ParsedCSV:
    lines = [line for line in LINE_BREAK.split(text) if line.strip()]
    if not lines:
        return ParsedCSV(headers=[], rows=[])
    
    headers = split_row(lines[0])
    rows = []
    for line in lines[1:]:
        values = split_row(line)
        row: CSVRow = {}
        for index, header in enumerate(headers):
            row[header] = values[index] if index < len(values) else ""
        rows.append(row)
    
    return ParsedCSV(headers=headers, rows=rows)
