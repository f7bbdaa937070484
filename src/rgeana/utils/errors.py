"""Typed exceptions raised by the reconstruction engine.

Every fatal condition of a run maps onto one member of :class:`ErrorKind`.
Each exception class carries that kind and a fixed explanation for the user.
Recoverable per-row conditions (missing index match, failed validity, failed
geometric cut, absent timing) are never raised.
"""

from enum import IntEnum

__all__ = [
    "ErrorKind",
    "RecoError",
    "UnknownSchema",
    "SchemaMismatch",
    "FieldNotFound",
    "IndexOutOfRange",
    "LossyConversion",
    "InvalidCalorimeterLayer",
    "InvalidDetectorId",
    "UnsupportedPid",
    "NoFMTBank",
    "InvalidFMTLayers",
    "InvalidEventCount",
    "BadFilenameFormat",
    "UnimplementedBeamEnergy",
    "NoSamplingFractionFile",
    "BadCalibrationFile",
    "AngleOutOfRange",
]


class ErrorKind(IntEnum):
    """Enumerates all fatal error kinds."""

    UNKNOWN_SCHEMA = 1
    SCHEMA_MISMATCH = 2
    FIELD_NOT_FOUND = 3
    INDEX_OUT_OF_RANGE = 4
    LOSSY_CONVERSION = 5
    INVALID_CALORIMETER_LAYER = 6
    INVALID_DETECTOR_ID = 7
    UNSUPPORTED_PID = 8
    NO_FMT_BANK = 9
    INVALID_FMT_LAYERS = 10
    INVALID_EVENT_COUNT = 11
    BAD_FILENAME_FORMAT = 12
    UNIMPLEMENTED_BEAM_ENERGY = 13
    NO_SAMPLING_FRACTION_FILE = 14
    BAD_CALIBRATION_FILE = 15
    ANGLE_OUT_OF_RANGE = 16


class RecoError(Exception):
    """Base exception for all fatal reconstruction errors.

    Attributes
    ----------
    kind : ErrorKind
        Enumerated kind of the error
    explanation : str
        Fixed human-readable explanation of the error kind
    """

    kind = None
    explanation = "Something is wrong."

    def __init__(self, detail=None):
        """Initialize the error with an optional context string.

        Parameters
        ----------
        detail : str, optional
            Context specific to this occurence (bank, field, value, etc.)
        """
        self.detail = detail
        msg = self.explanation
        if detail is not None:
            msg = f"{msg} ({detail})"

        super().__init__(msg)


class UnknownSchema(RecoError):
    """Raised when a bank is bound to a schema that is not registered."""

    kind = ErrorKind.UNKNOWN_SCHEMA
    explanation = (
        "There was an attempt to initialize a bank with an invalid bank "
        "name. Check the available names in the schema registry."
    )


class SchemaMismatch(RecoError):
    """Raised when a row source disagrees with the registered schema."""

    kind = ErrorKind.SCHEMA_MISMATCH
    explanation = (
        "The fields provided by the input do not match the registered bank "
        "schema. Check the input file format."
    )


class FieldNotFound(RecoError):
    """Raised when accessing a field which is not part of a bank schema."""

    kind = ErrorKind.FIELD_NOT_FOUND
    explanation = "An access to a field which does not exist in the bank was attempted."


class IndexOutOfRange(RecoError):
    """Raised when accessing a row beyond the row count of a bank."""

    kind = ErrorKind.INDEX_OUT_OF_RANGE
    explanation = "An invalid row access was attempted in a bank."


class LossyConversion(RecoError):
    """Raised when a read would silently truncate or wrap a value."""

    kind = ErrorKind.LOSSY_CONVERSION
    explanation = (
        "A field was read as a type which cannot represent its value "
        "without truncation."
    )


class InvalidCalorimeterLayer(RecoError):
    """Raised when the calorimeter bank contains an unknown layer ID."""

    kind = ErrorKind.INVALID_CALORIMETER_LAYER
    explanation = "Invalid layer in the calorimeter bank. Check bank integrity."


class InvalidDetectorId(RecoError):
    """Raised when the Cherenkov bank contains an unknown detector ID."""

    kind = ErrorKind.INVALID_DETECTOR_ID
    explanation = "Invalid detector ID in the cherenkov bank. Check bank integrity."


class UnsupportedPid(RecoError):
    """Raised when a PID hypothesis is missing from the hypothesis table."""

    kind = ErrorKind.UNSUPPORTED_PID
    explanation = (
        "Program tried to identify a particle with an unsupported PID. "
        "Check that all hypotheses are available in the PID table."
    )


class NoFMTBank(RecoError):
    """Raised when FMT tracks are required but absent from the input."""

    kind = ErrorKind.NO_FMT_BANK
    explanation = (
        "FMT::Tracks bank not found in input. No FMT analysis is available "
        "for this input file."
    )


class InvalidFMTLayers(RecoError):
    """Raised when the requested number of FMT layers is out of bounds."""

    kind = ErrorKind.INVALID_FMT_LAYERS
    explanation = (
        "Number of FMT layers is invalid. It should be 0, or at least "
        "FMT_MIN_LAYERS and at most FMT_NLAYERS."
    )


class InvalidEventCount(RecoError):
    """Raised when the requested number of events is invalid."""

    kind = ErrorKind.INVALID_EVENT_COUNT
    explanation = "Number of events is invalid. It should be -1 or positive."


class BadFilenameFormat(RecoError):
    """Raised when the run number cannot be extracted from a file name."""

    kind = ErrorKind.BAD_FILENAME_FORMAT
    explanation = (
        "Couldn't extract run number from filename. Expected format: "
        "<text><run_no>.root"
    )


class UnimplementedBeamEnergy(RecoError):
    """Raised when no beam energy is known for a run number."""

    kind = ErrorKind.UNIMPLEMENTED_BEAM_ENERGY
    explanation = "No beam energy available in constants for run number. Add it from RCDB."


class NoSamplingFractionFile(RecoError):
    """Raised when no sampling fraction file exists for a run."""

    kind = ErrorKind.NO_SAMPLING_FRACTION_FILE
    explanation = "No sampling fraction file is available for this run number."


class BadCalibrationFile(RecoError):
    """Raised when a sampling fraction file cannot be parsed."""

    kind = ErrorKind.BAD_CALIBRATION_FILE
    explanation = "The sampling fraction file is malformed. Check its content."


class AngleOutOfRange(RecoError):
    """Raised when a computed angle falls outside of (-pi, pi)."""

    kind = ErrorKind.ANGLE_OUT_OF_RANGE
    explanation = (
        "Invalid angle value. By convention, all angles should be between "
        "-180 (-pi) and 180 (pi)."
    )
