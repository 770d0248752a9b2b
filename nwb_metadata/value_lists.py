"""Default documents and controlled vocabularies.

Every top-level field of the metadata document has a default here. Two
default sets exist:
    - empty_form_data(): blank document used to clear a form and as the
      fallback source during partial imports
    - default_yml_values(): lab defaults used to seed a new session

All accessors return fresh deep copies so callers can mutate the result
without touching module state.
"""

import copy
from typing import Any, Dict, List

_DEFAULT_YML_VALUES: Dict[str, Any] = {
    'experimenter_name': [],
    'lab': 'Loren Frank Lab',
    'institution': 'University of California, San Francisco',
    'experiment_description': '',
    'session_description': '',
    'session_id': '',
    'keywords': [],
    'subject': {
        'description': 'Long-Evans Rat',
        'genotype': '',
        'sex': 'M',
        'species': 'Rattus norvegicus',
        'subject_id': '',
        'date_of_birth': '',
        'weight': 100,
    },
    'data_acq_device': [],
    'cameras': [],
    'tasks': [],
    'associated_files': [],
    'associated_video_files': [],
    'units': {
        'analog': '',
        'behavioral_events': '',
    },
    'times_period_multiplier': 1.0,
    'raw_data_to_volts': 1.0,
    'default_header_file_path': '',
    'behavioral_events': [],
    'device': {
        'name': ['Trodes'],
    },
    'opto_excitation_source': [],
    'optical_fiber': [],
    'virus_injection': [],
    'fs_gui_yamls': [],
    'optogenetic_stimulation_software': '',
    'electrode_groups': [],
    'ntrode_electrode_group_channel_map': [],
}

_EMPTY_FORM_DATA: Dict[str, Any] = {
    'experimenter_name': [],
    'lab': '',
    'institution': '',
    'experiment_description': '',
    'session_description': '',
    'session_id': '',
    'keywords': [],
    'subject': {
        'description': '',
        'genotype': '',
        'sex': 'M',
        'species': '',
        'subject_id': '',
        'date_of_birth': '',
        'weight': 0,
    },
    'data_acq_device': [],
    'cameras': [],
    'tasks': [],
    'associated_files': [],
    'associated_video_files': [],
    'units': {
        'analog': '',
        'behavioral_events': '',
    },
    'times_period_multiplier': 0.0,
    'raw_data_to_volts': 0.0,
    'default_header_file_path': '',
    'behavioral_events': [],
    'device': {
        'name': [],
    },
    'electrode_groups': [],
    'ntrode_electrode_group_channel_map': [],
    'opto_excitation_source': [],
    'virus_injection': [],
    'optical_fiber': [],
    'fs_gui_yamls': [],
    'optogenetic_stimulation_software': '',
}

# Item templates used when a new entry is appended to an array field
_ARRAY_DEFAULT_VALUES: Dict[str, Any] = {
    'data_acq_device': {
        'name': 'SpikeGadgets',
        'system': 'SpikeGadgets',
        'amplifier': 'Intan',
        'adc_circuit': 'Intan',
    },
    'associated_files': {
        'name': '',
        'description': '',
        'path': '',
        'task_epochs': '',
    },
    'cameras': {
        'id': 0,
        'meters_per_pixel': 0,
        'manufacturer': '',
        'model': '',
        'lens': '',
        'camera_name': '',
    },
    'tasks': {
        'task_name': '',
        'task_description': '',
        'task_environment': '',
        'camera_id': [],
        'task_epochs': [],
    },
    'associated_video_files': {
        'name': '',
        'camera_id': '',
        'task_epochs': '',
    },
    'behavioral_events': {
        'description': 'Din1',
        'name': '',
    },
    'electrode_groups': {
        'id': 0,
        'location': '',
        'device_type': '',
        'description': '',
        'targeted_location': '',
        'targeted_x': '',
        'targeted_y': '',
        'targeted_z': '',
        'units': 'μm',
    },
    'ntrode_electrode_group_channel_map': {
        'ntrode_id': 1,
        'electrode_group_id': '',
        'bad_channels': [],
        'map': {},
    },
    'opto_excitation_source': {
        'name': 'Omicron LuxX+ Blue',
        'model_name': 'Omicron LuxX+ 488-100',
        'description': 'Laser for optogenetic stimulation',
        'wavelength_in_nm': 488.0,
        'power_in_W': 0.077,
        'intensity_in_W_per_m2': 1e10,
    },
    'optical_fiber': {
        'name': 'Optical fiber 1',
        'hardware_name': '',
        'implanted_fiber_description': '',
        'location': '',
        'hemisphere': '',
        'ap_in_mm': 0.0,
        'ml_in_mm': 0.0,
        'dv_in_mm': 0.0,
        'roll_in_deg': 0.0,
        'pitch_in_deg': 0.0,
        'yaw_in_deg': 0.0,
        'reference': 'Bregma at the cortical surface',
        'excitation_source': '',
    },
    'virus_injection': {
        'name': 'Injection 1',
        'description': 'Viral injection for optogenetic stimulation',
        'hemisphere': '',
        'location': '',
        'ap_in_mm': 0.0,
        'ml_in_mm': 0.0,
        'dv_in_mm': 0.0,
        'roll_in_deg': 0.0,
        'pitch_in_deg': 0.0,
        'yaw_in_deg': 0.0,
        'reference': 'Bregma at the cortical surface',
        'virus_name': '',
        'titer_in_vg_per_ml': 1e12,
        'volume_in_uL': 0.45,
    },
    'fs_gui_yamls': {
        'name': '/path/to/fs_gui.yaml',
        'epochs': [],
        'power_in_mW': 0.0,
        'dio_output_name': '',
        'state_script_parameters': False,
        'pulseLength': 0,
    },
}

UNKNOWN_SEX_CODE = 'U'


def default_yml_values() -> Dict[str, Any]:
    """Lab defaults used to seed a new session document."""
    return copy.deepcopy(_DEFAULT_YML_VALUES)


def empty_form_data() -> Dict[str, Any]:
    """Blank document; fallback source for partial imports."""
    return copy.deepcopy(_EMPTY_FORM_DATA)


def array_default_values() -> Dict[str, Any]:
    """Templates for new entries of each array field."""
    return copy.deepcopy(_ARRAY_DEFAULT_VALUES)


def gender_codes() -> List[str]:
    """Valid ``subject.sex`` codes (male, female, unspecified, other)."""
    return ['M', 'F', UNKNOWN_SEX_CODE, 'O']


def device_names() -> List[str]:
    return ['Trodes', 'Tetrode', 'Blackrock']


def units() -> List[str]:
    return ['pm', 'nm', 'μm', 'mm', 'cm', 'in', 'yd', 'ft']
