"""Deterministic YAML codec and atomic file writes for metadata documents.

Provides:
    - encode_yaml(): document → YAML text (byte-for-byte reproducible)
    - decode_yaml(): YAML text → document (raises ParseError on bad input)
    - format_filename(): canonical ``{date}_{subject}_metadata.yml`` name
    - Atomic writes: tmp file → fsync → rename (prevents partial reads)
    - load_yaml()/atomic_yaml_dump() path helpers built on the codec

Encoding guarantees:
    - Keys keep the document's insertion order (never alphabetized)
    - Block style, UTF-8, Unix line endings
    - PyYAML's default scalar quoting, applied uniformly

Decoding follows YAML 1.2 for timestamps: ``2023-06-22T14:30:00`` stays a
string, as the conversion pipeline and the JSON schema expect.

Usage:
    from nwb_metadata.utils import fs
    doc = fs.decode_yaml(text)
    fs.atomic_write_text(out_dir / fs.format_filename(doc), fs.encode_yaml(doc))

Note: named ``fs`` rather than ``io`` to avoid shadowing stdlib ``io``.
"""

import os
from pathlib import Path
from typing import Any, Dict, Union

import yaml

FILENAME_DATE_FIELD = 'EXPERIMENT_DATE_in_format_mmddYYYY'
FILENAME_DATE_PLACEHOLDER = '{EXPERIMENT_DATE_in_format_mmddYYYY}'


class ParseError(Exception):
    """Raised when YAML text cannot be decoded into a metadata document.

    ``parser_message`` carries the underlying parser's message unchanged.
    """

    def __init__(self, parser_message: str):
        super().__init__(f"Invalid YAML: {parser_message}")
        self.parser_message = parser_message


class _MetadataLoader(yaml.SafeLoader):
    """SafeLoader without the YAML 1.1 timestamp resolver; duplicate keys are errors."""

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            seen = set()
            for key_node, _ in node.value:
                if key_node.tag == 'tag:yaml.org,2002:merge':
                    continue
                key = self.construct_object(key_node, deep=deep)
                try:
                    marker = (type(key), key)
                    duplicate = marker in seen
                except TypeError:
                    # unhashable keys are rejected by the base constructor
                    continue
                if duplicate:
                    raise yaml.constructor.ConstructorError(
                        "while constructing a mapping", node.start_mark,
                        f"found duplicate key {key!r}", key_node.start_mark,
                    )
                seen.add(marker)
        return super().construct_mapping(node, deep=deep)


_MetadataLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != 'tag:yaml.org,2002:timestamp']
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def encode_yaml(doc: Dict[str, Any]) -> str:
    """Serialize a metadata document to deterministic YAML.

    Parameters
    ----------
    doc : Dict[str, Any]
        Metadata document; None encodes as an empty mapping

    Returns
    -------
    str
        YAML text ending in a newline

    Notes
    -----
    ``sort_keys=False`` keeps the order the document builder produced;
    downstream diffing depends on that order being stable.
    """
    return yaml.safe_dump(
        doc if doc is not None else {},
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        line_break='\n',
    )


def decode_yaml(text: str) -> Dict[str, Any]:
    """Parse YAML text into a metadata document.

    Parameters
    ----------
    text : str
        YAML text (UTF-8 decoded)

    Returns
    -------
    Dict[str, Any]
        Parsed document; empty text yields ``{}``

    Raises
    ------
    ParseError
        If the text is not valid YAML or its root is not a mapping
    """
    try:
        data = yaml.load(text, Loader=_MetadataLoader)
    except yaml.YAMLError as e:
        raise ParseError(str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError(f"document root must be a mapping, got {type(data).__name__}")
    return data


def format_filename(doc: Dict[str, Any]) -> str:
    """Canonical export filename: ``{date}_{subject_id lowercased}_metadata.yml``.

    A missing or empty experiment date is replaced by the literal
    ``{EXPERIMENT_DATE_in_format_mmddYYYY}`` token rather than failing.

    Examples
    --------
    >>> format_filename({'EXPERIMENT_DATE_in_format_mmddYYYY': '06222023',
    ...                  'subject': {'subject_id': 'Rat01'}})
    '06222023_rat01_metadata.yml'
    """
    experiment_date = doc.get(FILENAME_DATE_FIELD) or FILENAME_DATE_PLACEHOLDER
    subject = doc.get('subject')
    subject_id = subject.get('subject_id') if isinstance(subject, dict) else None
    return f"{experiment_date}_{str(subject_id or '').lower()}_metadata.yml"


def ensure_dir(p: Union[str, Path]) -> Path:
    """Create directory (and parents) if missing; return it as a Path."""
    p = Path(p)
    p.mkdir(parents=True, exist_ok=True)
    return p


def atomic_write_bytes(
    path: Union[str, Path],
    data: bytes,
    tmp_suffix: str = ".tmp"
) -> None:
    """Write bytes to file atomically (tmp → fsync → rename).

    Parameters
    ----------
    path : Union[str, Path]
        Target file path
    data : bytes
        Data to write
    tmp_suffix : str
        Temporary file suffix, default ".tmp"

    Raises
    ------
    RuntimeError
        If the write or rename fails; the tmp file is removed first
    """
    path = Path(path)
    ensure_dir(path.parent)

    tmp_path = path.with_suffix(path.suffix + tmp_suffix)

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        tmp_path.replace(path)
    except OSError as e:
        if tmp_path.exists():
            tmp_path.unlink()
        raise RuntimeError(f"Failed to write {path} atomically: {e}") from e


def atomic_write_text(path: Union[str, Path], text: str) -> None:
    """UTF-8 text variant of atomic_write_bytes()."""
    atomic_write_bytes(path, text.encode('utf-8'))


def atomic_yaml_dump(doc: Dict[str, Any], path: Union[str, Path]) -> None:
    """Encode a document with encode_yaml() and write it atomically."""
    atomic_write_text(path, encode_yaml(doc))


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Read and decode a YAML metadata file.

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    ParseError
        If the content is not a valid metadata document
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    return decode_yaml(path.read_text(encoding='utf-8'))
