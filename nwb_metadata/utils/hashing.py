"""SHA-256 hashing for schema provenance.

Provides:
    - sha256_file(): Hash file contents (schema file, exported YAML)
    - sha256_text(): Hash a UTF-8 string (encoded documents)

The packaged JSON schema must stay byte-identical to the copy shipped with
the conversion pipeline; comparing fingerprints detects drift:

    from nwb_metadata.validation.schema_validation import schema_fingerprint
    assert schema_fingerprint() == pipeline_schema_sha256

Results are lowercase hex strings (64 chars).

Note: named ``hashing`` rather than ``hash`` to avoid shadowing builtin ``hash()``.
"""

import hashlib
from pathlib import Path
from typing import Union


def sha256_file(path: Union[str, Path], chunk_size: int = 1 << 20) -> str:
    """Compute SHA-256 hash of file contents.

    Parameters
    ----------
    path : Union[str, Path]
        File path
    chunk_size : int
        Read chunk size in bytes, default 1 MB

    Returns
    -------
    str
        SHA-256 hex digest (64 characters)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    sha256 = hashlib.sha256()

    with open(path, 'rb') as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            sha256.update(chunk)

    return sha256.hexdigest()


def sha256_text(text: str) -> str:
    """SHA-256 hex digest of ``text`` encoded as UTF-8."""
    return hashlib.sha256(text.encode('utf-8')).hexdigest()
