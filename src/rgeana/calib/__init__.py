"""Calibration inputs, loaded once before a run starts."""

from .sampling_fraction import CalibrationParams, sf_params_path
