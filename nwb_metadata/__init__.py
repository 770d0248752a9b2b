"""NWB metadata: validation and serialization for electrophysiology sessions.

This package validates the session metadata document (subject, cameras,
tasks, electrode groups, optogenetics hardware) consumed by the
trodes-to-NWB conversion pipeline, generates ntrode channel maps from
electrode-group device types, and reads/writes the document as
deterministic YAML.

Architecture layers (strict one-way dependency):
    scripts/ → nwb_metadata/features/ → nwb_metadata/{validation,ntrode}/ → nwb_metadata/utils/

Key invariants:
    - Issues are always sorted by (path, code)
    - Channel maps: one ntrode per shank, identity wiring, ntrode ids from 1
    - No operation mutates the document it is given
    - YAML output preserves document key order, byte-for-byte reproducible
"""

__version__ = "1.0.0"
